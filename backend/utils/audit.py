from fastapi import Request
from sqlalchemy.orm import Session
from models.log import Log


def client_ip(request: Request):
    return request.client.host if request is not None and request.client else None


def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None, commit=True):
    """Record an audit entry. Pass commit=False to join the caller's transaction."""
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    if commit:
        db.commit()
    return entry
