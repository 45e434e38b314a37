# filmsync/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client

from filmsync.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - admin Auth operations (create user, set app_metadata,
        global sign-out, magic-link token generation)

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
