# backend/utils/locking.py
import threading
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.orm import Session

# Per-table locks for dialects that have no LOCK TABLE statement (SQLite)
_process_locks = {}
_process_locks_guard = threading.Lock()


def _process_lock(table_name: str) -> threading.Lock:
    with _process_locks_guard:
        return _process_locks.setdefault(table_name, threading.Lock())


@contextmanager
def exclusive_table_lock(db: Session, table_name: str):
    """
    Hold an exclusive write lock on `table_name` until the block exits.

    PostgreSQL: SHARE ROW EXCLUSIVE blocks concurrent writers (and other
    SHARE ROW EXCLUSIVE holders) but not readers; it is released by the
    caller's COMMIT/ROLLBACK, which must happen inside the block.
    Other dialects fall back to a process-wide lock held for the block.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        db.execute(text(f'LOCK TABLE "{table_name}" IN SHARE ROW EXCLUSIVE MODE'))
        yield
        return

    lock = _process_lock(table_name)
    lock.acquire()
    try:
        yield
    finally:
        lock.release()
