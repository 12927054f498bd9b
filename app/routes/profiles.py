from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pathlib import Path
from urllib.parse import quote
from app.dependencies.auth import get_current_session, get_supabase
from app.services.public_profile import (
    fetch_public_resources,
    fetch_public_study_groups,
    find_profile,
    normalize_username,
)
import logging

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def dashboard_profile_path(raw_username: str) -> str:
    return f"/dashboard/public-profile/{quote(raw_username, safe='@')}"


@router.get("/{username}", response_class=HTMLResponse)
def public_profile_page(
    request: Request,
    username: str,
    session=Depends(get_current_session),
    supabase=Depends(get_supabase),
):
    # Signed-in visitors get the full profile inside the dashboard
    if session:
        return RedirectResponse(url=dashboard_profile_path(username))

    clean_username = normalize_username(username)
    profile = find_profile(supabase, clean_username)

    if not profile:
        logger.info(f"No public profile for {clean_username!r}")
        return templates.TemplateResponse(
            request,
            "profile_not_found.html",
            {"username": clean_username},
            status_code=404,
        )

    resources = fetch_public_resources(supabase, profile.id)
    study_groups = fetch_public_study_groups(supabase, profile.id)

    logger.info(
        f"Rendering public profile {profile.username} "
        f"({len(resources)} resources, {len(study_groups)} study groups)"
    )
    return templates.TemplateResponse(
        request,
        "profile.html",
        {
            "profile": profile,
            "resources": resources,
            "study_groups": study_groups,
        },
    )
