# backend/routes/transactions.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from models.transaction import Transaction
from schemas.transaction import TransactionCreate, TransactionUpdate, TransactionResponse
from utils.errors import NotFoundError

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _out(t: Transaction) -> dict:
    return TransactionResponse.model_validate(t).model_dump()


def _get_or_404(db: Session, transaction_id: int) -> Transaction:
    t = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not t:
        raise NotFoundError("Transaction not found")
    return t


@router.get("")
def list_transactions(db: Session = Depends(get_db)):
    items = db.query(Transaction).order_by(Transaction.id.asc()).all()
    return {"status": "success", "count": len(items), "data": [_out(t) for t in items]}


@router.get("/{transaction_id}")
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    return {"status": "success", "data": _out(_get_or_404(db, transaction_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    t = Transaction(
        order_id=payload.order_id,
        payment_method=payload.payment_method or None,
        total_amount=payload.total_amount,
        status=payload.status or "pending",
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return {"status": "success", "message": "Transaction created", "data": _out(t)}


@router.put("/{transaction_id}")
def update_transaction(transaction_id: int, payload: TransactionUpdate, db: Session = Depends(get_db)):
    t = _get_or_404(db, transaction_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(t, key, value)
    db.commit()
    db.refresh(t)
    return {"status": "success", "message": "Transaction updated", "data": _out(t)}


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    t = _get_or_404(db, transaction_id)
    db.delete(t)
    db.commit()
    return {"status": "success", "message": "Transaction deleted"}
