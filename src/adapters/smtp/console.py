"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging activation messages for development use.
"""

import logging
from urllib.parse import quote, urlencode

from src.domain.models import Account

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Account activation"


def activation_url(base_url: str, token: str, email: str) -> str:
    """Link to GET /account_activations/<token>/edit?email=<email>."""
    return (
        f"{base_url.rstrip('/')}/account_activations/{quote(token, safe='')}/edit?"
        f"{urlencode({'email': email})}"
    )


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - the activation link is logged instead
    of delivered.
    """

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        self._base_url = base_url

    def send_activation_email(self, account: Account) -> None:
        """
        Log the activation message (simulates email delivery).

        Args:
            account: Newly registered account carrying its activation_token
        """
        if not account.activation_token:
            raise ValueError("Account has no activation token to send")

        link = activation_url(self._base_url, account.activation_token, account.email)
        logger.info(
            "[ACTIVATION] To: %s Subject: %s Hi %s, activate your account: %s",
            account.email,
            ACTIVATION_SUBJECT,
            account.name,
            link,
        )
