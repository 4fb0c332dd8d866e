# vegist/core/storage_utils.py
from vegist.core.config import get_settings
from vegist.core.supabase_client import supabase_public

settings = get_settings()


def public_url(path: str) -> str:
    """
    Public URL for an object path inside the storefront bucket.

    Example path (relative to bucket):
        'products/apple/hero.png'
    """
    return supabase_public().storage.from_(settings.STORAGE_BUCKET).get_public_url(path)


def resolve_image_url(ref: str | None) -> str:
    """
    Turn a stored image reference into something a client can load.

    - absolute URLs (http/https) and data URIs are returned unchanged
    - empty references stay empty
    - anything else is a bucket path and becomes a public Storage URL
    """
    if not ref:
        return ""
    if ref.startswith(("http://", "https://", "data:")):
        return ref
    return public_url(ref.lstrip("/"))
