# backend/routes/products.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.stock import StockMovement
from models.users import User
import schemas.product as product_schemas
from utils.audit import write_log, client_ip
from utils.errors import ConflictError, NotFoundError, StoreError
from utils.locking import exclusive_table_lock
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger(__name__)


def _to_out(product: Product) -> dict:
    return product_schemas.ProductOut.model_validate(product).model_dump()


def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def create_product(db: Session, payload: product_schemas.ProductCreate) -> Product:
    """
    Insert a product under the next free id.

    The products table is locked for writers while MAX(id)+1 is computed and
    the row inserted, so concurrent creations never collide. The client-sent
    `id` is ignored. Any failure rolls the whole transaction back.
    """
    try:
        with exclusive_table_lock(db, Product.__tablename__):
            next_id = db.query(func.coalesce(func.max(Product.id), 0) + 1).scalar()
            product = Product(
                id=next_id,
                name=payload.name,
                price=payload.price,
                size=payload.size,
                color=payload.color,
                category=payload.category,
                available=True,
                stock=0,
            )
            db.add(product)
            db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Product creation rolled back")
        raise StoreError("Server error")
    except Exception:
        db.rollback()
        raise

    db.refresh(product)
    return product


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=product_schemas.ProductListPage)
def list_products(
    available: Optional[str] = Query(None, description="'true' returns available products only"),
    db: Session = Depends(get_db),
):
    query = db.query(Product)
    if available == "true":
        query = query.filter(Product.available.is_(True))
    items = query.order_by(Product.id.asc()).all()
    return {"count": len(items), "data": [_to_out(p) for p in items]}


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _to_out(_get_or_404(db, product_id))


# =========================
# ADD PRODUCT
# =========================
@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = create_product(db, payload)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request),
        meta={"id": product.id, "requested_id": payload.id},
    )
    return _to_out(product)


# =========================
# UPDATE PRODUCT (PUT)
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = _get_or_404(db, product_id)

    for key, value in payload.model_dump(exclude={"available"}).items():
        setattr(product, key, value)
    if payload.available is not None:
        product.available = payload.available

    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id},
    )
    return _to_out(product)


# =========================
# DELETE
# =========================
@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = _get_or_404(db, product_id)
    pid = product.id

    # Products with movement history are kept
    if db.query(StockMovement.id).filter(StockMovement.product_id == pid).first():
        raise ConflictError("Product has stock movements and cannot be deleted")

    db.delete(product)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Product has stock movements and cannot be deleted")
    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"id": pid})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
