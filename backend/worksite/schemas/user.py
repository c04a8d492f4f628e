"""User Schemas — auth requests, token response, admin mutations.

Invariants:
    - password is write-only: no response schema carries it or its hash
    - username: 3-50 chars, letters/digits/._- only
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from worksite.core.domain_types import Role


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9._-]+$")
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role
    active: bool
    created_at: datetime | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserStatusUpdate(BaseModel):
    active: bool


class UserRoleUpdate(BaseModel):
    role: Role
