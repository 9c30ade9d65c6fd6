"""
Flash messages - one-shot notices carried across a redirect in the session.
"""

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette import status

FLASH_KEY = "_flash"
FORWARDING_KEY = "forwarding_url"


def flash(request: Request, kind: str, message: str) -> None:
    """Queue a message ("success", "info", "warning", "danger") for the next page."""
    request.session.setdefault(FLASH_KEY, []).append({"kind": kind, "message": message})


def pop_flashes(request: Request) -> list[dict[str, str]]:
    return request.session.pop(FLASH_KEY, [])


def store_location(request: Request) -> None:
    """Remember a GET URL so login can forward back to it."""
    if request.method == "GET":
        request.session[FORWARDING_KEY] = request.url.path


def pop_location(request: Request) -> str | None:
    return request.session.pop(FORWARDING_KEY, None)


def redirect(url: str) -> RedirectResponse:
    """303 so that browsers and clients follow POST/PATCH/DELETE with a GET."""
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
