from typing import Callable, List, Optional
from postgrest.exceptions import APIError
from app.schemas.profile import UserProfile, Resource, StudyGroup
import httpx
import logging

logger = logging.getLogger(__name__)

# Visitors without a session only ever see this many items per section
PUBLIC_ITEMS_LIMIT = 3


def normalize_username(raw: str) -> str:
    """Strip a single leading "@" and surrounding whitespace."""
    if raw.startswith("@"):
        return raw[1:].strip()
    return raw.strip()


def escape_like(value: str) -> str:
    """Escape the LIKE wildcards that PostgREST lets through ("%", "_")."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _run_query(table: str, query: Callable):
    # Query failures are reported as missing data, never to the visitor
    try:
        return query()
    except (APIError, httpx.HTTPError) as e:
        logger.warning(f"Query on {table} failed, treating as empty: {str(e)}")
        return None


def _maybe_single_row(table: str, query: Callable) -> Optional[dict]:
    response = _run_query(table, query)
    # maybe_single() returns None instead of a response on some client versions
    if response is None:
        return None
    return response.data or None


def find_profile(supabase, username: str) -> Optional[UserProfile]:
    """
    Look up a profile by username.

    The exact match uses the username index; the case-insensitive match
    only runs when the exact match misses.
    """
    row = _maybe_single_row(
        "user_profiles",
        lambda: supabase
        .table("user_profiles")
        .select("*")
        .eq("username", username)
        .maybe_single()
        .execute(),
    )

    if not row:
        row = _maybe_single_row(
            "user_profiles",
            lambda: supabase
            .table("user_profiles")
            .select("*")
            .ilike("username", escape_like(username))
            .maybe_single()
            .execute(),
        )
        # PostgREST reads "*" as a wildcard and has no escape for it
        if row and str(row.get("username", "")).lower() != username.lower():
            logger.info(f"Fallback match {row.get('username')!r} is not {username!r}, ignoring")
            row = None

    if not row:
        return None
    return UserProfile.model_validate(row)


def _fetch_list(table: str, query: Callable) -> List[dict]:
    response = _run_query(table, query)
    if response is None:
        return []
    return response.data or []


def fetch_public_resources(supabase, profile_id: str) -> List[Resource]:
    rows = _fetch_list(
        "resources",
        lambda: supabase
        .table("resources")
        .select("*")
        .eq("author_id", profile_id)
        .eq("is_approved", True)
        .order("created_at", desc=True)
        .limit(PUBLIC_ITEMS_LIMIT)
        .execute(),
    )
    return [Resource.model_validate(r) for r in rows[:PUBLIC_ITEMS_LIMIT]]


def fetch_public_study_groups(supabase, profile_id: str) -> List[StudyGroup]:
    rows = _fetch_list(
        "study_groups",
        lambda: supabase
        .table("study_groups")
        .select("*")
        .eq("created_by", profile_id)
        .eq("is_private", False)
        .order("created_at", desc=True)
        .limit(PUBLIC_ITEMS_LIMIT)
        .execute(),
    )
    return [StudyGroup.model_validate(g) for g in rows[:PUBLIC_ITEMS_LIMIT]]
