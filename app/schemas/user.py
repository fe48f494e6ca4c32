# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Role = Literal["user", "admin"]
AccountStatus = Literal["pending", "approved", "rejected"]


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: EmailStr
    name: str
    phone_number: str | None
    role: Role
    account_status: AccountStatus
    approved_at: datetime | None
    rejection_reason: str | None
    created_at: datetime


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Email and role are not editable here.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)
    phone_number: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role


class UserRejection(SQLModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(max_length=500)

    @field_validator("reason")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason cannot be empty")
        return v


class AdminCreate(SQLModel):
    """
    Admin-only payload to create another administrator.

    The password goes to Supabase Auth and is never stored in users.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    name: str = Field(max_length=50)
    phone_number: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class AdminUpdate(SQLModel):
    """
    Partial update of an administrator. Null fields are left unchanged.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=72)
    name: str | None = Field(default=None, max_length=50)
    phone_number: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UserStats(SQLModel):
    total: int
    pending: int
    approved: int
    rejected: int
