import logging
from functools import lru_cache
from supabase import Client, create_client

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase() -> Client:
    settings = get_settings()
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_KEY) must be set")
    logger.info("[db] Creating Supabase client for %s", settings.SUPABASE_URL)
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
