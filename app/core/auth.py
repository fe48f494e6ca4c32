# app/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session, select

from app.core.config import get_settings
from app.database import get_session
from app.models.user import User

# auto_error=False => missing Authorization header does not raise here,
# so get_current_user can report guests as None.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (SUPABASE_JWT_SECRET / SUPABASE_JWT_ALG)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _default_name_from_email(email: str) -> str:
    if "@" in email:
        return email.split("@", 1)[0][:50]
    return email[:50]


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the caller from a Supabase JWT.

    Flow:
      1. No Authorization header => guest => None.
      2. Decode JWT => 'sub' (auth user id) and 'email'.
      3. Load the profile from users.
      4. If missing, register a profile in 'pending' state; an admin
         has to approve it before it can place orders.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    user = session.exec(select(User).where(User.id == sub_uuid)).first()

    if user is None:
        user = User(
            id=sub_uuid,
            email=email,
            name=_default_name_from_email(email),
            role="user",
            account_status="pending",
        )
        session.add(user)
        session.commit()
        session.refresh(user)

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication only (any approval state).

    Used by profile endpoints so pending users can still see their status.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_approved(user: User = Depends(require_auth)) -> User:
    """
    Enforce the admin-approval gate.

    Raises:
        HTTPException(403): if the account is pending or rejected.
    """
    if not user.is_approved:
        detail = (
            "Account rejected"
            if user.account_status == "rejected"
            else "Account pending admin approval"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role.

    Raises:
        HTTPException(403): if role is not admin.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
