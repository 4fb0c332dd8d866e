# vegist/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client

from vegist.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_public() -> Client:
    """
    Anon-key Supabase client, created on first use.

    Only used to build public URLs for catalog and banner images kept in
    the storage bucket; row-level security still applies to it.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
