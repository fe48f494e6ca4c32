# app/core/supabase_client.py
import uuid
from functools import lru_cache

from supabase import create_client, Client

from app.core.config import get_settings


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Used for uploading product images to Storage and managing admin
    accounts in Supabase Auth (bypasses RLS).
    Never expose the service role key to the frontend.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    settings = get_settings()
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY):
        raise RuntimeError(
            "Missing SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY in .env"
        )
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def create_auth_user(email: str, password: str) -> uuid.UUID:
    """
    Create a confirmed Supabase Auth user and return its id.
    """
    response = supabase_admin().auth.admin.create_user(
        {"email": email, "password": password, "email_confirm": True}
    )
    return uuid.UUID(str(response.user.id))


def update_auth_user(user_id: uuid.UUID, attributes: dict) -> None:
    """
    Update email and/or password of a Supabase Auth user.
    """
    supabase_admin().auth.admin.update_user_by_id(str(user_id), attributes)


def delete_auth_user(user_id: uuid.UUID) -> None:
    supabase_admin().auth.admin.delete_user(str(user_id))
