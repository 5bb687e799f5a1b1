# ecofinds/core/storage_utils.py
import logging
import uuid

from ecofinds.core.config import get_settings
from ecofinds.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)

BUCKET = get_settings().STORAGE_BUCKET


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it is overwritten ('upsert').

    Args:
        path: Full object path inside the bucket.
              Example: "products/42/<uuid>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.
    """
    bucket = supabase_admin().storage.from_(BUCKET)
    bucket.upload(path, file_bytes, {"upsert": "true", "content-type": content_type})
    return bucket.get_public_url(path)


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path.
    """
    supabase_admin().storage.from_(BUCKET).remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/ecofinds/users/7/a.png
        -> 'users/7/a.png'
    """
    marker = f"/storage/v1/object/public/{BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def delete_public_url(url: str) -> None:
    """
    Best-effort delete of a file by its public URL.

    No-op if the URL does not belong to this bucket; storage failures are
    logged and swallowed so that row deletion still goes through.
    """
    path = extract_path_from_public_url(url)
    if not path:
        return
    try:
        delete_from_storage(path)
    except Exception:
        logger.warning("Failed to delete storage object %s", path, exc_info=True)


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4, e.g. "<uuid4>.png".
    """
    return f"{uuid.uuid4()}.{ext}"
