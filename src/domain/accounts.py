"""
Account lifecycle service - signup, activation, login and profile changes.

Account State Machine (Forward-Only Transitions)
================================================

States:
- PENDING: Initial state after signup (activation email sent)
- ACTIVATED: Terminal state after a valid token + email pair was presented

Transitions:
    PENDING   -> ACTIVATED  (activate with matching token)
    PENDING   -> PENDING    (activate with wrong token: no change, INVALID)
    ACTIVATED -> ACTIVATED  (any activation attempt: no change, ALREADY_ACTIVATED)

Session state (logged-in / logged-out) is orthogonal and lives in the
Session passed into each call. A pending account can never log in.

Note: the PENDING -> ACTIVATED transition is a conditional update in the
repository, so two concurrent activations cannot both report ACTIVATED.
"""

import logging
import secrets
from dataclasses import dataclass

from .exceptions import AccountNotActivated, InvalidCredentials, NotLoggedIn
from .models import Account, ActivationResult, AvatarUpload, ProfileUpdate
from .passwords import generate_token, hash_secret, verify_secret
from .ports import AccountRepository, AvatarStorage, EmailSender
from .session import Session
from .validation import (
    TAKEN,
    FieldErrors,
    is_blank,
    normalize_email,
    validate_avatar,
    validate_profile,
    validate_signup,
)

logger = logging.getLogger(__name__)


@dataclass
class AccountService:
    """
    Domain service for the account lifecycle.

    Orchestrates validation, hashing, persistence, mail and storage ports.
    """

    repository: AccountRepository
    email_sender: EmailSender
    avatar_storage: AvatarStorage | None = None
    bcrypt_cost: int = 10

    def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        password_confirmation: str | None,
    ) -> Account | FieldErrors:
        """
        Create a pending account and send its activation email.

        Args:
            name: Display name
            email: Email address (will be normalized)
            password: Plaintext password (will be hashed)
            password_confirmation: Must equal password

        Returns:
            The new Account (with its activation_token set), or the
            FieldErrors describing every violated rule
        """
        errors = validate_signup(name, email, password, password_confirmation)
        self._check_email_available(errors, email)
        if errors:
            return errors

        token = generate_token()
        account = self.repository.create(
            name=name.strip(),
            email=normalize_email(email),
            password_digest=hash_secret(password, self.bcrypt_cost),
            activation_digest=hash_secret(token, self.bcrypt_cost),
        )
        if account is None:
            # Lost a concurrent signup for the same address
            errors.add("email", TAKEN)
            return errors

        account.activation_token = token
        logger.info("Registered account id=%s pending activation", account.id)
        self._send_activation_email(account)
        return account

    def activate(self, token: str, email: str, session: Session) -> ActivationResult:
        """
        Activate an account from the emailed token + email pair.

        Unknown emails are a silent no-op (NOT_FOUND). Only ACTIVATED logs
        the session in.
        """
        account = self.repository.find_by_email(normalize_email(email))
        if account is None:
            return ActivationResult.NOT_FOUND

        if account.activated:
            return ActivationResult.ALREADY_ACTIVATED

        if not verify_secret(token, account.activation_digest):
            logger.warning("Invalid activation token for account id=%s", account.id)
            return ActivationResult.INVALID

        if not self.repository.activate(account.id):
            # Another request completed the transition first
            return ActivationResult.ALREADY_ACTIVATED

        session.log_in(account)
        logger.info("Activated account id=%s", account.id)
        return ActivationResult.ACTIVATED

    def login(self, email: str | None, password: str | None, session: Session) -> Account:
        """
        Authenticate and log the session in.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            AccountNotActivated: Correct credentials, account still pending
        """
        account = None
        if not is_blank(email):
            account = self.repository.find_by_email(normalize_email(email))

        # Always run bcrypt, even for unknown emails
        digest = account.password_digest if account is not None else None
        password_valid = verify_secret(password or "", digest)

        if account is None or not password_valid:
            logger.warning("Refused login")
            raise InvalidCredentials()

        if not account.activated:
            raise AccountNotActivated(account.email)

        session.log_in(account)
        logger.info("Logged in account id=%s", account.id)
        return account

    def logout(self, session: Session) -> None:
        if session.is_logged_in:
            logger.info("Logged out account id=%s", session.user_id)
        session.log_out()

    def current_account(self, session: Session) -> Account | None:
        """Account referenced by the session, or None (stale ids log the session out)."""
        if not session.is_logged_in:
            return None
        account = self.repository.find_by_id(session.user_id)
        if account is None:
            session.log_out()
        return account

    def find_account(self, account_id: int) -> Account | None:
        return self.repository.find_by_id(account_id)

    def update_profile(self, session: Session, fields: ProfileUpdate) -> Account | FieldErrors:
        """
        Apply a profile edit for the logged-in account.

        Blank password fields keep the current password. An avatar, when
        given, is validated with the other fields so that a rejected upload
        leaves the account untouched.

        Raises:
            NotLoggedIn: Session holds no valid account
        """
        account = self._require_account(session)

        errors = validate_profile(
            fields.name, fields.email, fields.password, fields.password_confirmation
        )
        errors.merge(validate_avatar(fields.avatar))
        self._check_email_available(errors, fields.email, account_id=account.id)
        if errors:
            return errors

        password_digest = None
        if not is_blank(fields.password):
            password_digest = hash_secret(fields.password, self.bcrypt_cost)

        updated = self.repository.update_profile(
            account.id,
            name=fields.name.strip(),
            email=normalize_email(fields.email),
            password_digest=password_digest,
        )
        if updated is None:
            errors.add("email", TAKEN)
            return errors

        logger.info("Updated profile of account id=%s", account.id)
        if fields.avatar is not None:
            return self._store_avatar(updated, fields.avatar)
        return updated

    def upload_avatar(self, session: Session, upload: AvatarUpload) -> Account | FieldErrors:
        """
        Store a new avatar image for the logged-in account.

        Raises:
            NotLoggedIn: Session holds no valid account
        """
        account = self._require_account(session)

        errors = validate_avatar(upload)
        if errors:
            return errors
        return self._store_avatar(account, upload)

    def _store_avatar(self, account: Account, upload: AvatarUpload) -> Account:
        if self.avatar_storage is None:
            raise RuntimeError("Avatar storage is not configured")

        key = f"avatars/{account.id}/{secrets.token_hex(8)}.{upload.extension}"
        url = self.avatar_storage.store(key, upload.data, upload.content_type)
        logger.info("Stored avatar for account id=%s at %s", account.id, key)
        return self.repository.set_avatar_url(account.id, url)

    def _check_email_available(
        self, errors: FieldErrors, email: str | None, account_id: int | None = None
    ) -> None:
        """
        Report a taken email alongside the other field errors.

        The store still enforces uniqueness atomically on write.
        """
        if "email" in errors:
            return
        existing = self.repository.find_by_email(normalize_email(email))
        if existing is not None and existing.id != account_id:
            errors.add("email", TAKEN)

    def _require_account(self, session: Session) -> Account:
        account = self.current_account(session)
        if account is None:
            raise NotLoggedIn()
        return account

    def _send_activation_email(self, account: Account) -> None:
        """Fire-and-forget: a delivery failure leaves the account pending."""
        try:
            self.email_sender.send_activation_email(account)
        except Exception:
            logger.exception("Activation email delivery failed for account id=%s", account.id)
