"""
HTTP routes.

Combines the page, user, session and activation routers into one router
mounted at the application root.
"""

from fastapi import APIRouter

from src.api.routes import account_activations, sessions, static_pages, users

router = APIRouter()
router.include_router(static_pages.router)
router.include_router(users.router)
router.include_router(account_activations.router)
router.include_router(sessions.router)

__all__ = ["router"]
