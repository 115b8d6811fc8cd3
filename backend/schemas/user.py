from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional

from models.users import Role


def _parse_role(value):
    if value is None:
        return None
    role = Role.parse(value)
    if role is None:
        allowed = ", ".join(r.value for r in Role)
        raise ValueError(f"role must be one of: {allowed}")
    return role


# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

# Schema for user registration requests, every field is required
class UserCreate(BaseModel):
    fullname: str = Field(min_length=1)
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)
    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, value):
        return _parse_role(value)

# Public user fields returned by register and /auth/me
class UserPublic(BaseModel):
    id: int
    fullname: str
    username: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)

# Full profile returned by the /users endpoints
class UserResponse(UserPublic):
    phone: Optional[str] = None
    address: Optional[str] = None
    is_disabled: bool = Field(default=False, serialization_alias="_is_active_disabled")

# Partial profile update (admin only); omitted fields keep their value
class UserUpdate(BaseModel):
    fullname: Optional[str] = Field(default=None, min_length=1)
    username: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Optional[Role] = None
    is_disabled: Optional[bool] = Field(default=None, alias="_is_active_disabled")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, value):
        return _parse_role(value)

# Identity returned next to the tokens on login
class LoginUser(BaseModel):
    id: int
    fullname: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)

# Schema for exchanging a refresh token for a new access token
class RefreshRequest(BaseModel):
    refreshToken: str = Field(min_length=1)
