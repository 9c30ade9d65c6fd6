"""
Domain models - Account entity and lifecycle enums.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath


class AccountState(str, Enum):
    """
    Account lifecycle states.

    State Transitions (forward-only):
    - PENDING -> ACTIVATED (valid activation token + email)

    ACTIVATED is terminal: further activation attempts are no-ops.
    """

    PENDING = "PENDING"
    ACTIVATED = "ACTIVATED"


class ActivationResult(Enum):
    """
    Result of an activation attempt.

    Only ACTIVATED establishes a logged-in session.
    """

    ACTIVATED = "activated"
    ALREADY_ACTIVATED = "already_activated"
    INVALID = "invalid"
    NOT_FOUND = "not_found"


@dataclass
class Account:
    """
    A registered user account.

    ``activation_token`` is transient: it is only populated on the instance
    returned by registration so the mailer can embed it in the activation
    link. The persisted form is ``activation_digest``.
    """

    id: int
    name: str
    email: str
    password_digest: str
    activation_digest: str | None = None
    activated: bool = False
    activated_at: datetime | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    activation_token: str | None = field(default=None, repr=False, compare=False)

    @property
    def state(self) -> AccountState:
        return AccountState.ACTIVATED if self.activated else AccountState.PENDING

    def gravatar_url(self, size: int = 80) -> str:
        """Gravatar image URL for the account's email."""
        digest = hashlib.md5(self.email.lower().encode()).hexdigest()
        return f"https://secure.gravatar.com/avatar/{digest}?s={size}"


@dataclass
class AvatarUpload:
    """An uploaded image file."""

    filename: str
    content_type: str | None
    data: bytes

    @property
    def extension(self) -> str:
        return PurePosixPath(self.filename).suffix.lower().lstrip(".")


@dataclass
class ProfileUpdate:
    """Submitted profile edit form. Blank password fields leave the password unchanged."""

    name: str | None
    email: str | None
    password: str | None = None
    password_confirmation: str | None = None
    avatar: AvatarUpload | None = None
