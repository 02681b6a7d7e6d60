"""Dashboard authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from support_desk.models import UserRole
from support_desk.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Schema for creating an organization together with its first user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, description="At least 8 characters")
    organization_name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(CamelModel):
    """Schema for password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserDetail(CamelModel):
    """Schema for user details. Never includes the password hash."""

    id: UUID
    name: str
    email: str
    role: UserRole
    organization_id: UUID | None
    created_at: datetime


class TokenResponse(CamelModel):
    """Schema for a freshly issued session token."""

    token: str
    user: UserDetail
