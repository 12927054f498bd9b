from supabase import Client, create_client
import os
import logging

logger = logging.getLogger(__name__)


class SupabaseConfigError(RuntimeError):
    pass


def create_supabase_client() -> Client:
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url or not supabase_key:
        logger.error("Supabase URL or Key not found in environment variables")
        raise SupabaseConfigError("SUPABASE_URL and SUPABASE_KEY must be set")

    logger.debug("Creating Supabase client")
    return create_client(supabase_url, supabase_key)
