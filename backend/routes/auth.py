# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.users import User, TokenPair
from schemas import user as schemas
from utils.audit import write_log, client_ip
from utils.errors import ConflictError, NotFoundError, AuthError, Unauthorized, StoreError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import TokenService, TokenIdentity, get_token_service, verify_token, get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


def _find_duplicate(db: Session, username: str, email: str):
    return db.query(User).filter(
        or_(func.lower(User.email) == email, User.username == username)
    ).first()


# Register a new user
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()
    username = payload.username.strip()

    # Check and insert share one transaction; the unique constraints catch racing inserts
    if _find_duplicate(db, username, normalized_email):
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": normalized_email, "reason": "duplicate"})
        raise ConflictError("Email or username already in use")

    new_user = User(
        fullname=payload.fullname,
        username=username,
        email=normalized_email,
        password=get_password_hash(payload.password),
        role=payload.role.value,
    )
    db.add(new_user)
    try:
        db.flush()
        write_log(db, user_id=new_user.id, action="REGISTER", resource="auth", status="SUCCESS",
                  ip=client_ip(request), meta={"email": normalized_email}, commit=False)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email or username already in use")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed for %s", normalized_email)
        raise StoreError()
    db.refresh(new_user)

    return {
        "status": "success",
        "message": "Account created",
        "data": schemas.UserPublic.model_validate(new_user).model_dump(),
    }


# Authenticate user and issue an access/refresh token pair
@router.post("/login")
def login(
    payload: schemas.UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    email = payload.email.strip().lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()
    if user is None:
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "unknown email"})
        raise NotFoundError("Email not found")

    if not verify_password(payload.password, user.password):
        write_log(db, user_id=user.id, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "wrong password"})
        raise AuthError("Wrong password")

    # Admin tokens are issued without expiry (see TokenService)
    access_token = tokens.issue_access_token(user.id, user.email, user.role)
    refresh_token = tokens.issue_refresh_token(user.id)

    # Replace the previous pair atomically: one live pair per user
    try:
        db.query(TokenPair).filter(TokenPair.user_id == user.id).delete(synchronize_session=False)
        db.add(TokenPair(user_id=user.id, token=access_token, refresh_token=refresh_token))
        write_log(db, user_id=user.id, action="LOGIN", resource="auth", status="SUCCESS",
                  ip=client_ip(request), meta={"email": email}, commit=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not store token pair for user %s", user.id)
        raise StoreError()

    return {
        "status": "success",
        "message": "Login successful",
        "data": schemas.LoginUser.model_validate(user).model_dump(),
        "accessToken": access_token,
        "refreshToken": refresh_token,
    }


# Exchange a refresh token for a new access token
@router.post("/refresh")
def refresh(
    payload: schemas.RefreshRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    check = tokens.verify_refresh(payload.refreshToken)
    if check.expired:
        raise Unauthorized("Refresh token expired, please log in again")
    if not check.ok:
        raise Unauthorized("Invalid refresh token")

    pair = db.query(TokenPair).filter(
        TokenPair.user_id == check.claims["id"],
        TokenPair.refresh_token == payload.refreshToken,
    ).first()
    if pair is None or pair.user is None:
        raise Unauthorized("Refresh token has been revoked")

    user = pair.user
    pair.token = tokens.issue_access_token(user.id, user.email, user.role)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not refresh token pair for user %s", check.claims["id"])
        raise StoreError()

    return {"status": "success", "accessToken": pair.token}


# Revoke the caller's token pair
@router.post("/logout")
def logout(
    request: Request,
    identity: TokenIdentity = Depends(verify_token),
    db: Session = Depends(get_db),
):
    db.query(TokenPair).filter(TokenPair.user_id == identity.id).delete(synchronize_session=False)
    write_log(db, user_id=identity.id, action="LOGOUT", resource="auth", status="SUCCESS",
              ip=client_ip(request), commit=False)
    db.commit()

    return {"status": "success", "message": "Logged out"}


# Retrieve current authenticated user details
@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"status": "success", "data": schemas.UserPublic.model_validate(current_user).model_dump()}
