"""Supabase client for the assessment tables.

All app.db modules share one service-role client; row-level security is
bypassed, so callers scope every query by its own ids.
"""

from functools import lru_cache

from supabase import Client, create_client

from app.core.config import get_settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Get the shared Supabase client (cached singleton).

    Returns:
        Supabase client configured with the service role key

    Raises:
        RuntimeError: If settings are missing or client creation fails
    """
    try:
        settings = get_settings()
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e
