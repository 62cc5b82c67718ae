# rentals_api/routers/preferences.py
from fastapi import APIRouter, Depends, Request, Response

from rentals_api.deps import THEME_COOKIE_MAX_AGE
from rentals_api.models import ThemePreference

router = APIRouter(prefix="/api/preferences", tags=["preferences"])

THEME_COOKIE = "hcr-theme"
THEMES = ("system", "light", "dark")


def get_theme(request: Request) -> str:
    """Request-scoped theme; a missing or unknown cookie reads as "system"."""
    value = request.cookies.get(THEME_COOKIE)
    return value if value in THEMES else "system"


@router.get("/theme", response_model=ThemePreference)
def read_theme(theme: str = Depends(get_theme)):
    return ThemePreference(theme=theme)


@router.put("/theme", response_model=ThemePreference)
def set_theme(payload: ThemePreference, response: Response):
    response.set_cookie(
        THEME_COOKIE,
        payload.theme,
        max_age=THEME_COOKIE_MAX_AGE,
        samesite="lax",
    )
    return payload
