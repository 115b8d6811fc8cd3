# backend/routes/categories.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from schemas.category import CategoryCreate, CategoryUpdate, CategoryOut
from utils.errors import NotFoundError

router = APIRouter(prefix="/categories", tags=["Categories"])


def _get_or_404(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _out(category: Category) -> dict:
    return CategoryOut.model_validate(category).model_dump()


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    items = db.query(Category).order_by(Category.id.asc()).all()
    return {"status": "success", "data": [_out(c) for c in items]}


@router.get("/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    return {"status": "success", "data": _out(_get_or_404(db, category_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    category = Category(name=payload.name, description=payload.description or None)
    db.add(category)
    db.commit()
    db.refresh(category)
    return {"status": "success", "message": "Category created", "data": _out(category)}


@router.put("/{category_id}")
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)

    # Update fields if provided in the payload
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key == "name" and value is None:
            continue
        setattr(category, key, value)

    db.commit()
    db.refresh(category)
    return {"status": "success", "message": "Category updated", "data": _out(category)}


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    db.delete(category)
    db.commit()
    return {"status": "success", "message": "Category deleted"}
