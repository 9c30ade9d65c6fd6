"""
Secret hashing - bcrypt digests for passwords and activation tokens.

Security Design - Timing Oracle Prevention:
------------------------------------------
verify_secret() always runs one bcrypt comparison. When there is no stored
digest (unknown email) it compares against a pre-computed dummy digest, so
response time does not reveal whether an account exists.
"""

import secrets

import bcrypt

from .validation import PASSWORD_MAX_BYTES

# Hash of a throwaway value with cost factor 10, computed once at import.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))


def hash_secret(secret: str, cost: int) -> str:
    """
    Hash a password or token with bcrypt.

    Callers validate length first; bcrypt rejects inputs over 72 bytes.
    """
    return bcrypt.hashpw(secret.encode(), bcrypt.gensalt(rounds=cost)).decode()


def verify_secret(secret: str, digest: str | None) -> bool:
    """Constant-time comparison of a secret against a stored bcrypt digest."""
    encoded = secret.encode()
    if digest is None or len(encoded) > PASSWORD_MAX_BYTES:
        bcrypt.checkpw(b"dummy_password_for_timing_safety", _DUMMY_BCRYPT_HASH)
        return False
    return bcrypt.checkpw(encoded, digest.encode())


def generate_token() -> str:
    """URL-safe random activation token."""
    return secrets.token_urlsafe(16)
