# app/repositories/user_repo.py
from __future__ import annotations

import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def list(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        account_status: str | None = None,
    ) -> list[User]:
        """
        Paginated user listing, optionally filtered by approval state.
        """
        stmt = select(User)
        if account_status is not None:
            stmt = stmt.where(User.account_status == account_status)
        stmt = stmt.order_by(User.created_at).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_by_role(self, session: Session, role: str) -> list[User]:
        stmt = select(User).where(User.role == role).order_by(User.created_at)
        return list(session.exec(stmt).all())

    def count_by_role(self, session: Session, role: str) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == role)
        return int(session.exec(stmt).one() or 0)

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == "user")
        return int(session.exec(stmt).one() or 0)

    def count_by_status(self, session: Session) -> dict[str, int]:
        """Customer counts keyed by account_status (admins excluded)."""
        stmt = (
            select(User.account_status, func.count())
            .where(User.role == "user")
            .group_by(User.account_status)
        )
        return {status: int(n) for status, n in session.exec(stmt).all()}

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        session.delete(user)
        session.commit()
