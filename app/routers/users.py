# app/routers/users.py
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlmodel import Session

from app.core.auth import require_auth, require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AccountStatus,
    UserRead,
    UserRejection,
    UserRoleUpdate,
    UserStats,
    UserUpdate,
)
from app.services.notification_service import NotificationService
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository(), NotificationService())


# -------- Self profile --------


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile, including approval state.

    Pending and rejected users may call this.
    """
    return current_user


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update name / phone number.
    """
    return service.update_me(session, current_user, payload)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def list_users(
    session: Session = Depends(get_session),
    account_status: AccountStatus | None = None,
    skip: int = 0,
    limit: int = 50,
):
    return service.list_users(session, skip, limit, account_status=account_status)


@router.get(
    "/pending",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def list_pending_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    Registrations waiting for an admin decision.
    """
    return service.list_users(session, skip, limit, account_status="pending")


@router.get(
    "/stats",
    response_model=UserStats,
    dependencies=[Depends(require_admin)],
)
def get_user_statistics(session: Session = Depends(get_session)):
    return service.get_user_statistics(session)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_user(session, user_id)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Allowed roles: user, admin. Promoting to admin approves the account.
    """
    return service.update_role(session, user_id, payload)


@router.post("/{user_id}/approve", response_model=UserRead)
def approve_user(
    user_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return service.approve_user(session, admin, user_id, background_tasks)


@router.post(
    "/{user_id}/reject",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def reject_user(
    user_id: uuid.UUID,
    payload: UserRejection,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    return service.reject_user(session, user_id, payload.reason, background_tasks)
