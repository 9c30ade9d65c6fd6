"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .models import Account


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def create(
        self, name: str, email: str, password_digest: str, activation_digest: str
    ) -> Account | None:
        """
        Insert a pending account.

        Email uniqueness is enforced atomically by the store.

        Args:
            name: Display name
            email: Normalized email address
            password_digest: bcrypt hashed password
            activation_digest: bcrypt hashed activation token

        Returns:
            The stored Account, or None if the email is already taken
        """
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Look up an account by normalized email."""
        ...

    def find_by_id(self, account_id: int) -> Account | None:
        """Look up an account by id."""
        ...

    def activate(self, account_id: int) -> bool:
        """
        Mark an account activated, only if it is not activated yet.

        Implemented as a single conditional update so that concurrent
        activation requests cannot both succeed.

        Returns:
            True if this call performed the transition, False otherwise
        """
        ...

    def update_profile(
        self, account_id: int, name: str, email: str, password_digest: str | None
    ) -> Account | None:
        """
        Update name, email and (when given) password digest.

        Returns:
            The updated Account, or None if the email belongs to another account
        """
        ...

    def set_avatar_url(self, account_id: int, avatar_url: str) -> Account | None:
        """Record the stored avatar location."""
        ...

    def count(self) -> int:
        """Number of stored accounts."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_activation_email(self, account: Account) -> None:
        """
        Send the activation link to a newly registered account.

        Args:
            account: Account carrying its transient activation_token
        """
        ...


class AvatarStorage(Protocol):
    """Port interface for avatar file persistence."""

    def store(self, key: str, data: bytes, content_type: str | None) -> str:
        """
        Persist an uploaded file.

        Args:
            key: Object key, e.g. avatars/42/3f2a.png
            data: File content
            content_type: MIME type reported by the client

        Returns:
            Public URL of the stored file
        """
        ...
