# app/core/storage_utils.py
import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin


def _bucket():
    return supabase_admin().storage.from_(get_settings().STORAGE_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return the public URL.

    Existing objects at `path` are overwritten (upsert).

    Args:
        path: object path inside the bucket, e.g. "products/<id>/<uuid>.png"
        file_bytes: file content.
        content_type: MIME type stored with the object.
    """
    bucket = _bucket()
    bucket.upload(
        path,
        file_bytes,
        {"upsert": "true", "content-type": content_type},
    )
    return bucket.get_public_url(path)


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/assets/products/p/a.png
        -> 'products/p/a.png'
    """
    marker = f"/storage/v1/object/public/{get_settings().STORAGE_BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def delete_public_url(url: str) -> None:
    """
    Delete a file by its public URL.
    No-op if the URL does not belong to this bucket.
    """
    path = extract_path_from_public_url(url)
    if path:
        _bucket().remove([path])


def generate_filename(ext: str) -> str:
    """Random "<uuid4>.<ext>" filename."""
    return f"{uuid.uuid4()}.{ext}"
