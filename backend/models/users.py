# backend/models/users.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base


# Closed set of roles; anything else is rejected when parsed
class Role(str, enum.Enum):
    ADMIN = "admin"
    CASHIER = "cashier"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup. Returns None for unknown roles."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    fullname = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    role = Column(String, nullable=False)
    is_disabled = Column(Boolean, nullable=False, default=False)

    token_pair = relationship("TokenPair", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def role_enum(self):
        return Role.parse(self.role)


# Issued access/refresh tokens, at most one row per user
class TokenPair(Base):
    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    token = Column(String, nullable=False)
    refresh_token = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="token_pair")
