# utils/tokenJWT.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.users import User, Role
from utils.errors import Unauthorized, Forbidden, NotFoundError

logger = logging.getLogger(__name__)

# Raw Authorization header; "Bearer " is optional
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)

TOKEN_EXPIRED = "expired"
TOKEN_INVALID = "invalid"


# Result of a token check. Exactly one of claims / error is set.
@dataclass
class TokenCheck:
    claims: Optional[dict] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.claims is not None

    @property
    def expired(self) -> bool:
        return self.error == TOKEN_EXPIRED


# Identity attached to the request after the token has been verified
@dataclass
class TokenIdentity:
    id: int
    role: Optional[Role]


class TokenService:
    """Issues and verifies access/refresh JWTs with explicitly supplied secrets."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_expire_minutes: int = 60,
        refresh_expire_days: int = 7,
        algorithm: str = "HS256",
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_expire = timedelta(minutes=access_expire_minutes)
        self.refresh_expire = timedelta(days=refresh_expire_days)
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.JWT_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            access_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            refresh_expire_days=settings.REFRESH_TOKEN_EXPIRE_DAYS,
            algorithm=settings.ALGORITHM,
        )

    def issue_access_token(self, identity: int, email: str, role) -> str:
        parsed = Role.parse(role)
        claims = {"id": identity, "email": email, "role": parsed.value if parsed else role}
        if parsed is Role.ADMIN:
            return self._issue_admin_token(claims)
        claims["exp"] = datetime.now(timezone.utc) + self.access_expire
        return jwt.encode(claims, self.access_secret, algorithm=self.algorithm)

    def _issue_admin_token(self, claims: dict) -> str:
        # Admin access tokens carry no exp claim and never expire
        return jwt.encode(claims, self.access_secret, algorithm=self.algorithm)

    def issue_refresh_token(self, identity: int) -> str:
        claims = {"id": identity, "exp": datetime.now(timezone.utc) + self.refresh_expire}
        return jwt.encode(claims, self.refresh_secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: Optional[str] = None) -> TokenCheck:
        """Decode `token` against `secret` (access secret by default). Never raises."""
        try:
            claims = jwt.decode(token, secret or self.access_secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return TokenCheck(error=TOKEN_EXPIRED)
        except (JWTError, AttributeError, TypeError, ValueError):
            return TokenCheck(error=TOKEN_INVALID)
        if not isinstance(claims, dict) or claims.get("id") is None:
            return TokenCheck(error=TOKEN_INVALID)
        return TokenCheck(claims=claims)

    def verify_refresh(self, token: str) -> TokenCheck:
        return self.verify(token, self.refresh_secret)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService.from_settings(settings)


def _strip_bearer(header_value: str) -> str:
    if header_value.startswith("Bearer "):
        return header_value[len("Bearer "):]
    return header_value


# Stage 1: verify the bearer token and attach the identity to the request
def verify_token(
    request: Request,
    authorization: Optional[str] = Depends(authorization_header),
    tokens: TokenService = Depends(get_token_service),
) -> TokenIdentity:
    if not authorization:
        raise Unauthorized("Token not found or not logged in")

    check = tokens.verify(_strip_bearer(authorization))
    if check.expired:
        logger.info("Rejected expired token on %s", request.url.path)
        raise Unauthorized("Token expired, please log in again")
    if not check.ok:
        logger.warning("Rejected invalid token on %s", request.url.path)
        raise Unauthorized("Invalid token")

    identity = TokenIdentity(id=check.claims["id"], role=Role.parse(check.claims.get("role")))
    request.state.user = identity
    return identity


# Stage 2: dependency factory checking the stored role and disabled flag
def require_roles(*allowed_roles: Role):
    allowed = {Role.parse(r) for r in allowed_roles}

    def _checker(
        identity: TokenIdentity = Depends(verify_token),
        db: Session = Depends(get_db),
    ) -> User:
        # Read fresh from the store so bans and role changes apply immediately
        user = db.query(User).filter(User.id == identity.id).first()
        if user is None:
            raise NotFoundError("User not found")
        if user.is_disabled:
            raise Forbidden("Account disabled")
        if user.role_enum not in allowed:
            raise Forbidden(f"Role not permitted: '{user.role}'")
        return user

    return _checker


# Retrieve the currently authenticated user (token only, no role gate)
def get_current_user(
    identity: TokenIdentity = Depends(verify_token),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == identity.id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user
