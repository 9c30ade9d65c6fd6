"""
Form validation - field rules shared by signup and profile edit.

Every violated rule adds its own message, so one field can carry several
messages (a blank password is also too short). Nothing here raises: callers
receive a FieldErrors collection and decide how to render it.
"""

from email_validator import EmailNotValidError
from email_validator import validate_email as check_email_syntax

from .models import AvatarUpload

NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72  # bcrypt input limit
AVATAR_EXTENSIONS = ("jpg", "jpeg", "gif", "png")
AVATAR_MAX_BYTES = 5 * 1024 * 1024

BLANK = "can't be blank"
INVALID = "is invalid"
TAKEN = "has already been taken"
CONFIRMATION_MISMATCH = "doesn't match Password"


class FieldErrors:
    """Validation failures keyed by field name, in insertion order."""

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def merge(self, other: "FieldErrors") -> None:
        for field, messages in other._errors.items():
            for message in messages:
                self.add(field, message)

    def __getitem__(self, field: str) -> list[str]:
        return list(self._errors.get(field, []))

    def __contains__(self, field: object) -> bool:
        return field in self._errors

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._errors.values())

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __repr__(self) -> str:
        return f"FieldErrors({self._errors!r})"

    @property
    def fields(self) -> list[str]:
        return list(self._errors)

    def as_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}

    def full_messages(self) -> list[str]:
        """Messages prefixed with the humanized field name, e.g. "Name can't be blank"."""
        return [
            f"{humanize(field)} {message}"
            for field, messages in self._errors.items()
            for message in messages
        ]

    def summary(self) -> str:
        count = len(self)
        return f"The form contains {count} error{'' if count == 1 else 's'}."


def humanize(field: str) -> str:
    return field.replace("_", " ").capitalize()


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def validate_name(name: str | None) -> FieldErrors:
    errors = FieldErrors()
    if is_blank(name):
        errors.add("name", BLANK)
    if name is not None and len(name) > NAME_MAX_LENGTH:
        errors.add("name", f"is too long (maximum is {NAME_MAX_LENGTH} characters)")
    return errors


def validate_email(email: str | None) -> FieldErrors:
    """Presence, length and format. Uniqueness is left to the repository."""
    errors = FieldErrors()
    if is_blank(email):
        errors.add("email", BLANK)
    if email is not None and len(email) > EMAIL_MAX_LENGTH:
        errors.add("email", f"is too long (maximum is {EMAIL_MAX_LENGTH} characters)")
    if email is None or not is_valid_email_syntax(email.strip()):
        errors.add("email", INVALID)
    return errors


def is_valid_email_syntax(email: str) -> bool:
    """Address syntax only; no DNS lookups."""
    try:
        check_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_password(password: str | None, confirmation: str | None) -> FieldErrors:
    errors = FieldErrors()
    if is_blank(password):
        errors.add("password", BLANK)
    if password is not None:
        if len(password) < PASSWORD_MIN_LENGTH:
            errors.add(
                "password", f"is too short (minimum is {PASSWORD_MIN_LENGTH} characters)"
            )
        if len(password.encode()) > PASSWORD_MAX_BYTES:
            errors.add(
                "password", f"is too long (maximum is {PASSWORD_MAX_BYTES} characters)"
            )
    # Confirmation is only compared once a password was actually given
    if not is_blank(password) and confirmation is not None and confirmation != password:
        errors.add("password_confirmation", CONFIRMATION_MISMATCH)
    return errors


def validate_signup(
    name: str | None,
    email: str | None,
    password: str | None,
    confirmation: str | None,
) -> FieldErrors:
    errors = validate_name(name)
    errors.merge(validate_email(email))
    errors.merge(validate_password(password, confirmation))
    return errors


def validate_profile(
    name: str | None,
    email: str | None,
    password: str | None,
    confirmation: str | None,
) -> FieldErrors:
    """Like signup, except blank password fields mean "keep the current password"."""
    errors = validate_name(name)
    errors.merge(validate_email(email))
    if not is_blank(password):
        errors.merge(validate_password(password, confirmation))
    return errors


def validate_avatar(upload: AvatarUpload | None) -> FieldErrors:
    """Image type and size rules for an uploaded avatar; no upload is valid."""
    errors = FieldErrors()
    if upload is None:
        return errors
    if upload.extension not in AVATAR_EXTENSIONS:
        errors.add(
            "avatar",
            f'You are not allowed to upload "{upload.extension}" files, '
            f"allowed types: {', '.join(AVATAR_EXTENSIONS)}",
        )
    if len(upload.data) > AVATAR_MAX_BYTES:
        errors.add("avatar", "should be less than 5MB")
    return errors
