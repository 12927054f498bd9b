from fastapi import Depends, HTTPException, Request
from typing import Optional
from app.schemas.profile import Session
from app.services.supabase import SupabaseConfigError, create_supabase_client
import os
import time
import logging

logger = logging.getLogger(__name__)

DEFAULT_AUTH_COOKIE = "sb-access-token"


def get_supabase():
    try:
        return create_supabase_client()
    except SupabaseConfigError:
        raise HTTPException(status_code=500, detail="Server configuration error")


def _access_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None

    cookie_name = os.getenv("SUPABASE_AUTH_COOKIE", DEFAULT_AUTH_COOKIE)
    return request.cookies.get(cookie_name) or None


def get_current_session(request: Request, supabase=Depends(get_supabase)) -> Optional[Session]:
    """
    Resolve the visitor's Supabase session, if any.

    A missing, expired or unverifiable token means an anonymous visitor.
    """
    token = _access_token(request)
    if not token:
        return None

    try:
        start_time = time.time()
        user_res = supabase.auth.get_user(token)
        end_time = time.time()
        logger.info(f"Token validation completed in {end_time - start_time:.2f} seconds")
    except Exception as e:
        logger.warning(f"Supabase token validation error, continuing as anonymous: {str(e)}")
        return None

    if not user_res or not user_res.user:
        logger.warning("No user for the supplied token, continuing as anonymous")
        return None

    return Session(user_id=str(user_res.user.id), access_token=token)
