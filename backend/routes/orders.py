# backend/routes/orders.py
from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from models.order import Order
from schemas.order import OrderCreate, OrderUpdate, OrderResponse
from utils.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/orders", tags=["Orders"])


# Map Order model to a plain dict
def _order_to_out(order: Order) -> dict:
    return OrderResponse.model_validate(order).model_dump()


def _get_or_404(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


@router.get("")
def list_orders(db: Session = Depends(get_db)):
    orders = db.query(Order).order_by(Order.id.asc()).all()
    return {"status": "success", "data": [_order_to_out(o) for o in orders]}


# Orders placed on a calendar day (YYYY-MM-DD)
@router.get("/date/{day}")
def orders_by_date(day: str, db: Session = Depends(get_db)):
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        raise ValidationError("Date must use the YYYY-MM-DD format")

    start = datetime.combine(parsed, time.min)
    end = start + timedelta(days=1)
    orders = (
        db.query(Order)
        .filter(Order.order_date >= start, Order.order_date < end)
        .order_by(Order.id.asc())
        .all()
    )
    return {"status": "success", "total": len(orders), "data": [_order_to_out(o) for o in orders]}


@router.get("/customer/{customer_id}")
def orders_by_customer(customer_id: int, db: Session = Depends(get_db)):
    orders = (
        db.query(Order)
        .filter(Order.customer_id == customer_id)
        .order_by(Order.id.desc())
        .all()
    )
    return {"status": "success", "total": len(orders), "data": [_order_to_out(o) for o in orders]}


@router.get("/{order_id}")
def get_order(order_id: int, db: Session = Depends(get_db)):
    return {"status": "success", "data": _order_to_out(_get_or_404(db, order_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    order = Order(customer_id=payload.customer_id, status=payload.status or "pending")
    db.add(order)
    db.commit()
    db.refresh(order)
    return {"status": "success", "message": "Order created", "data": _order_to_out(order)}


@router.put("/{order_id}")
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    order = _get_or_404(db, order_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(order, key, value)
    db.commit()
    db.refresh(order)
    return {"status": "success", "message": "Order updated", "data": _order_to_out(order)}


@router.delete("/{order_id}")
def delete_order(order_id: int, db: Session = Depends(get_db)):
    order = _get_or_404(db, order_id)
    deleted = _order_to_out(order)
    db.delete(order)
    db.commit()
    return {"status": "success", "message": "Order deleted", "data": deleted}
