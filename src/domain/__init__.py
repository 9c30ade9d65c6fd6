"""
Domain layer - Pure business logic with zero web framework imports.

This package contains the account lifecycle: signup with email activation,
session login/logout, profile edits and avatar uploads. It defines its own
port interfaces for infrastructure abstraction.
"""

from .accounts import AccountService
from .exceptions import (
    AccountError,
    AccountNotActivated,
    AuthError,
    InvalidCredentials,
    NotLoggedIn,
)
from .models import Account, AccountState, ActivationResult, AvatarUpload, ProfileUpdate
from .ports import AccountRepository, AvatarStorage, EmailSender
from .session import Session
from .validation import FieldErrors

__all__ = [
    "Account",
    "AccountError",
    "AccountNotActivated",
    "AccountRepository",
    "AccountService",
    "AccountState",
    "ActivationResult",
    "AuthError",
    "AvatarStorage",
    "AvatarUpload",
    "EmailSender",
    "FieldErrors",
    "InvalidCredentials",
    "NotLoggedIn",
    "ProfileUpdate",
    "Session",
]
