# backend/routes/users.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.order import Order
from models.users import User
from schemas.user import UserResponse, UserUpdate
from utils.audit import write_log, client_ip
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


def _out(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True)


def _get_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


# Retrieve users, optionally filtered by email/username fragment or role
@router.get("")
def list_users(
    q: Optional[str] = Query(None, description="Search by email or username"),
    role: Optional[str] = Query(None, description="Filter by role"),
    db: Session = Depends(get_db),
):
    query = db.query(User)

    if q:
        like = f"%{q.lower()}%"
        query = query.filter(or_(User.email.ilike(like), User.username.ilike(like)))

    if role:
        query = query.filter(User.role.ilike(role))

    users = query.order_by(User.id.asc()).all()
    return {"status": "success", "count": len(users), "data": [_out(u) for u in users]}


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return {"status": "success", "data": _out(_get_or_404(db, user_id))}


# Partial profile update, including role changes and disabling the account
@router.put("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _get_or_404(db, user_id)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].strip().lower()
    if "role" in changes:
        changes["role"] = changes["role"].value

    for key, value in changes.items():
        setattr(user, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email or username already in use")
    db.refresh(user)

    write_log(db, user_id=current_user.id, action="USER_UPDATE", resource="users",
              ip=client_ip(request), meta={"id": user.id, "fields": sorted(changes)})

    return {"status": "success", "message": "User updated", "data": _out(user)}


# Delete a user account
@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _get_or_404(db, user_id)

    # Prevent self-deletion
    if user.id == current_user.id:
        raise ValidationError("You cannot delete your own account")

    if db.query(Order.id).filter(Order.customer_id == user.id).first():
        raise ConflictError("User has orders and cannot be deleted")

    deleted = {"id": user.id, "fullname": user.fullname, "email": user.email}
    db.delete(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User has orders and cannot be deleted")

    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              ip=client_ip(request), meta=deleted)

    return {"status": "success", "message": "User deleted", "data": deleted}
