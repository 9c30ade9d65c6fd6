"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services, infrastructure adapters and the session into routes.
"""

from functools import lru_cache

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleEmailSender
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from src.domain.ports import AvatarStorage
from src.domain.session import Session


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


@lru_cache
def get_email_sender() -> ConsoleEmailSender:
    """Get console email sender (singleton, stateless)."""
    return ConsoleEmailSender(base_url=get_settings().base_url)


def get_avatar_storage(request: Request) -> AvatarStorage:
    """Avatar storage built once during lifespan startup."""
    return request.app.state.avatar_storage


def get_account_service(request: Request) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the repository, email sender and avatar storage.
    """
    return AccountService(
        repository=get_repository(request),
        email_sender=get_email_sender(),
        avatar_storage=get_avatar_storage(request),
        bcrypt_cost=get_settings().bcrypt_cost,
    )


def get_session(request: Request) -> Session:
    """Wrap the signed cookie session installed by SessionMiddleware."""
    return Session(request.session)
