"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory account repository (no database needed)
- A resettable recording mailer, fresh per test
- Local avatar storage under tmp_path
- A FastAPI app wired to the fakes, and its TestClient
"""

import threading
from collections.abc import Generator
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from src.adapters.storage.local import LocalAvatarStorage
from src.api.dependencies import get_account_service
from src.api.routes import router
from src.domain.accounts import AccountService
from src.domain.models import Account

# bcrypt's minimum work factor keeps the suite fast
TEST_BCRYPT_COST = 4


class InMemoryAccountRepository:
    """AccountRepository backed by a dict, with the same atomicity guarantees."""

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(
        self, name: str, email: str, password_digest: str, activation_digest: str
    ) -> Account | None:
        with self._lock:
            if any(a.email == email for a in self._accounts.values()):
                return None
            now = datetime.now(timezone.utc)
            account = Account(
                id=self._next_id,
                name=name,
                email=email,
                password_digest=password_digest,
                activation_digest=activation_digest,
                created_at=now,
                updated_at=now,
            )
            self._accounts[account.id] = account
            self._next_id += 1
            return replace(account)

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            for account in self._accounts.values():
                if account.email == email:
                    return replace(account)
            return None

    def find_by_id(self, account_id: int) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            return replace(account) if account else None

    def activate(self, account_id: int) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None or account.activated:
                return False
            account.activated = True
            account.activated_at = datetime.now(timezone.utc)
            return True

    def update_profile(
        self, account_id: int, name: str, email: str, password_digest: str | None
    ) -> Account | None:
        with self._lock:
            if any(a.email == email and a.id != account_id for a in self._accounts.values()):
                return None
            account = self._accounts[account_id]
            account.name = name
            account.email = email
            if password_digest is not None:
                account.password_digest = password_digest
            account.updated_at = datetime.now(timezone.utc)
            return replace(account)

    def set_avatar_url(self, account_id: int, avatar_url: str) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            account.avatar_url = avatar_url
            return replace(account)

    def count(self) -> int:
        return len(self._accounts)


class RecordingEmailSender:
    """EmailSender that keeps every activation email it was asked to send."""

    def __init__(self) -> None:
        self.deliveries: list[Account] = []

    def send_activation_email(self, account: Account) -> None:
        self.deliveries.append(account)

    def clear(self) -> None:
        self.deliveries.clear()


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def avatar_storage(upload_dir: Path) -> LocalAvatarStorage:
    return LocalAvatarStorage(upload_dir, "/uploads")


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    email_sender: RecordingEmailSender,
    avatar_storage: LocalAvatarStorage,
) -> AccountService:
    return AccountService(
        repository=repository,
        email_sender=email_sender,
        avatar_storage=avatar_storage,
        bcrypt_cost=TEST_BCRYPT_COST,
    )


@pytest.fixture
def app(service: AccountService) -> Generator[FastAPI, None, None]:
    """Application routes wired to in-memory fakes."""
    test_app = FastAPI()
    test_app.add_middleware(SessionMiddleware, secret_key="test-secret")
    test_app.include_router(router)
    test_app.dependency_overrides[get_account_service] = lambda: service
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def activated_account(service: AccountService, repository: InMemoryAccountRepository) -> Account:
    """An activated account "Michael Example" with password "password"."""
    account = service.register("Michael Example", "michael@example.com", "password", "password")
    repository.activate(account.id)
    return repository.find_by_id(account.id)


@pytest.fixture
def other_account(service: AccountService, repository: InMemoryAccountRepository) -> Account:
    """A second activated account "Sterling Archer"."""
    account = service.register("Sterling Archer", "duchess@example.gov", "password", "password")
    repository.activate(account.id)
    return repository.find_by_id(account.id)
