# backend/routes/stock.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.stock import StockMovement
from models.product import Product
from models.users import User
from utils.audit import write_log, client_ip
from utils.errors import NotFoundError, ValidationError, StoreError
from utils.locking import exclusive_table_lock
from utils.tokenJWT import get_current_user
import schemas.stock as stock_schemas

router = APIRouter(prefix="/stocks", tags=["Stocks"])
logger = logging.getLogger(__name__)


def _movement_out(m: StockMovement) -> dict:
    data = stock_schemas.StockMovementResponse.model_validate(m).model_dump()
    data["product_name"] = m.product.name if m.product else None
    return data


def _apply_delta(db: Session, product_id: int, delta: int) -> None:
    """Add `delta` to Product.stock with one UPDATE statement; 404 if the product is gone."""
    updated = (
        db.query(Product)
        .filter(Product.id == product_id)
        .update({Product.stock: func.coalesce(Product.stock, 0) + delta}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise NotFoundError("Product not found")


def _commit(db: Session, what: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Stock %s rolled back", what)
        raise StoreError()


@router.get("")
def list_movements(db: Session = Depends(get_db)):
    items = (
        db.query(StockMovement)
        .join(Product)
        .order_by(StockMovement.id.desc())
        .all()
    )
    return {"status": "success", "total": len(items), "data": [_movement_out(m) for m in items]}


@router.get("/product/{product_id}")
def list_product_movements(product_id: int, db: Session = Depends(get_db)):
    items = (
        db.query(StockMovement)
        .join(Product)
        .filter(StockMovement.product_id == product_id)
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        .all()
    )
    return {"status": "success", "total": len(items), "data": [_movement_out(m) for m in items]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_movement(
    payload: stock_schemas.StockMovementCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.quantity_change == 0:
        raise ValidationError("All fields are required (product_id, quantity_change, action)")

    # Movement record and stock increment are committed together
    _apply_delta(db, payload.product_id, payload.quantity_change)
    movement = StockMovement(
        product_id=payload.product_id, quantity_change=payload.quantity_change, action=payload.action
    )
    db.add(movement)
    write_log(db, user_id=current_user.id, action="STOCK_CREATE", resource="stocks",
              ip=client_ip(request), meta={"product_id": payload.product_id, "delta": payload.quantity_change},
              commit=False)
    _commit(db, "insert")
    db.refresh(movement)

    return {
        "status": "success",
        "message": "Stock movement recorded and product stock updated",
        "data": _movement_out(movement),
    }


@router.put("/{movement_id}")
def update_movement(
    movement_id: int,
    payload: stock_schemas.StockMovementUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    # The old quantity is read and replaced under the lock
    with exclusive_table_lock(db, StockMovement.__tablename__):
        movement = db.query(StockMovement).filter(StockMovement.id == movement_id).first()
        if not movement:
            db.rollback()
            raise NotFoundError("Stock movement not found")

        if "quantity_change" in changes:
            _apply_delta(db, movement.product_id, changes["quantity_change"] - movement.quantity_change)
        for key, value in changes.items():
            setattr(movement, key, value)

        write_log(db, user_id=current_user.id, action="STOCK_UPDATE", resource="stocks",
                  ip=client_ip(request), meta={"id": movement_id}, commit=False)
        _commit(db, "update")

    db.refresh(movement)
    return {"status": "success", "message": "Stock movement updated", "data": _movement_out(movement)}


@router.delete("/{movement_id}")
def delete_movement(
    movement_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    with exclusive_table_lock(db, StockMovement.__tablename__):
        movement = db.query(StockMovement).filter(StockMovement.id == movement_id).first()
        if not movement:
            db.rollback()
            raise NotFoundError("Stock movement not found")

        deleted = _movement_out(movement)
        _apply_delta(db, movement.product_id, -movement.quantity_change)
        db.delete(movement)
        write_log(db, user_id=current_user.id, action="STOCK_DELETE", resource="stocks",
                  ip=client_ip(request), meta={"id": movement_id}, commit=False)
        _commit(db, "delete")

    return {"status": "success", "message": "Stock movement deleted", "data": deleted}
