"""
Domain exceptions - Semantic error types for the account lifecycle.

Validation problems are not exceptions: they are returned as FieldErrors.
These types cover authentication and authorization outcomes that the
HTTP layer translates into responses.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class AuthError(AccountError):
    """Login refused."""

    pass


class InvalidCredentials(AuthError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    pass


class AccountNotActivated(AuthError):
    """Credentials are correct but the account is still pending activation."""

    pass


class NotLoggedIn(AccountError):
    """Operation requires a logged-in session."""

    pass
