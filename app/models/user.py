# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user profile.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "user" | "admin"

    Approval:
      - "pending"  : registered, waiting for an admin decision
      - "approved" : may use authenticated endpoints
      - "rejected" : locked out, rejection_reason explains why
      Admins are always approved.

    Password hashes live in Supabase Auth, not here.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users",
    )

    name: str = Field(
        max_length=50,
        description="Display name; first part of email by default",
    )

    phone_number: str | None = Field(default=None, max_length=20)

    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    account_status: str = Field(
        default="pending",
        index=True,
        description="Approval state: pending | approved | rejected",
    )
    approved_at: datetime | None = None
    approved_by: uuid.UUID | None = Field(
        default=None,
        description="Admin who approved this account",
    )
    rejection_reason: str | None = Field(default=None, max_length=500)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_approved(self) -> bool:
        return self.is_admin or self.account_status == "approved"
