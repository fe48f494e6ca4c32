# app/services/user_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import BackgroundTasks, HTTPException, status
from sqlmodel import Session

from app.core.errors import ConflictError, NotFoundError
from app.core.supabase_client import (
    create_auth_user,
    delete_auth_user,
    update_auth_user,
)
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AdminCreate,
    AdminUpdate,
    UserRoleUpdate,
    UserStats,
    UserUpdate,
)
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - profile edits (no email / role change by the user)
      - admin approval gate: approve / reject registrations
      - role management (admins are always approved)
      - administrator accounts: create / update / delete, mirrored in
        Supabase Auth
    """

    def __init__(self, repo: UserRepository, notifier: NotificationService):
        self.repo = repo
        self.notifier = notifier

    # ----- Self profile -----

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits: name and phone number.
        """
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(current_user, field, value)

        return self.repo.update(session, current_user)

    # ----- Admin operations -----

    def list_users(
        self,
        session: Session,
        skip: int,
        limit: int,
        account_status: str | None = None,
    ) -> list[User]:
        """List users with pagination (admin only)."""
        return self.repo.list(session, skip=skip, limit=limit, account_status=account_status)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User")
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role (admin only). Promoting to admin also approves.
        """
        user = self.get_user(session, user_id)
        user.role = payload.role
        if payload.role == "admin" and user.account_status != "approved":
            user.account_status = "approved"
            user.approved_at = datetime.now(timezone.utc)
            user.rejection_reason = None
        return self.repo.update(session, user)

    def approve_user(
        self,
        session: Session,
        admin: User,
        user_id: uuid.UUID,
        background_tasks: BackgroundTasks | None = None,
    ) -> User:
        user = self.get_user(session, user_id)
        if user.account_status == "approved":
            raise ConflictError("User is already approved")

        user.account_status = "approved"
        user.approved_at = datetime.now(timezone.utc)
        user.approved_by = admin.id
        user.rejection_reason = None
        user = self.repo.update(session, user)
        logger.info("User %s approved by %s", user.id, admin.id)

        self.notifier.dispatch(
            background_tasks, self.notifier.account_approved, user.email, user.name
        )
        return user

    def reject_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        reason: str,
        background_tasks: BackgroundTasks | None = None,
    ) -> User:
        user = self.get_user(session, user_id)
        if user.account_status == "rejected":
            raise ConflictError("User is already rejected")
        if user.role == "admin":
            raise ConflictError("Admin accounts cannot be rejected")

        user.account_status = "rejected"
        user.rejection_reason = reason
        user.approved_at = None
        user.approved_by = None
        user = self.repo.update(session, user)
        logger.info("User %s rejected: %s", user.id, reason)

        self.notifier.dispatch(
            background_tasks, self.notifier.account_rejected, user.email, user.name, reason
        )
        return user

    def get_user_statistics(self, session: Session) -> UserStats:
        by_status = self.repo.count_by_status(session)
        return UserStats(
            total=self.repo.count(session),
            pending=by_status.get("pending", 0),
            approved=by_status.get("approved", 0),
            rejected=by_status.get("rejected", 0),
        )

    # ----- Administrators -----

    def list_admins(self, session: Session) -> list[User]:
        return self.repo.list_by_role(session, "admin")

    def _get_admin(self, session: Session, admin_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, admin_id)
        if user is None or not user.is_admin:
            raise NotFoundError("Admin", f"Admin not found with id: {admin_id}")
        return user

    def create_admin(
        self,
        session: Session,
        creator: User,
        payload: AdminCreate,
        background_tasks: BackgroundTasks | None = None,
    ) -> User:
        """
        Create a Supabase Auth login plus an approved admin profile.

        If the profile cannot be stored, the Auth user is removed again.
        """
        if self.repo.get_by_email(session, payload.email) is not None:
            raise ConflictError("Email already exists")

        auth_id = create_auth_user(payload.email, payload.password)
        admin = User(
            id=auth_id,
            email=payload.email,
            name=payload.name,
            phone_number=payload.phone_number,
            role="admin",
            account_status="approved",
            approved_at=datetime.now(timezone.utc),
            approved_by=creator.id,
        )
        try:
            admin = self.repo.create(session, admin)
        except Exception:
            session.rollback()
            delete_auth_user(auth_id)
            raise
        logger.info("Admin %s created by %s", admin.id, creator.id)

        self.notifier.dispatch(
            background_tasks, self.notifier.admin_welcome, admin.email, admin.name
        )
        return admin

    def update_admin(
        self,
        session: Session,
        admin_id: uuid.UUID,
        payload: AdminUpdate,
    ) -> User:
        admin = self._get_admin(session, admin_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if changes.get("email") == admin.email:
            changes.pop("email")
        if "email" in changes and self.repo.get_by_email(session, changes["email"]):
            raise ConflictError("Email already exists")

        auth_changes = {}
        if "email" in changes:
            auth_changes["email"] = changes["email"]
        if "password" in changes:
            auth_changes["password"] = changes.pop("password")
        if auth_changes:
            update_auth_user(admin.id, auth_changes)

        for field, value in changes.items():
            setattr(admin, field, value)
        return self.repo.update(session, admin)

    def delete_admin(
        self,
        session: Session,
        current_admin: User,
        admin_id: uuid.UUID,
    ) -> None:
        """
        Remove an administrator profile and its Auth login.

        Admins cannot delete themselves and the last admin is kept.
        """
        admin = self._get_admin(session, admin_id)
        if admin.id == current_admin.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own admin account",
            )
        if self.repo.count_by_role(session, "admin") <= 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete the last admin account",
            )

        self.repo.delete(session, admin)
        delete_auth_user(admin_id)
        logger.info("Admin %s deleted by %s", admin_id, current_admin.id)
