"""
API request and response models.

Pydantic models for FastAPI endpoint responses and OpenAPI schema generation.
Form input arrives as form fields and is validated by the domain layer.
"""

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.domain.models import Account
from src.domain.validation import FieldErrors


class FlashMessage(BaseModel):
    """One-shot notice set by the previous request."""

    kind: str = Field(..., description="success, info, warning or danger")
    message: str


class FormField(BaseModel):
    """Input expected by a form."""

    name: str
    type: str = "text"
    label: str


class FormDescriptor(BaseModel):
    """Describes where and how a form is submitted."""

    action: str
    method: str = "post"
    fields: list[FormField]
    values: dict[str, str] = Field(default_factory=dict)
    flash: list[FlashMessage] = Field(default_factory=list)


class AccountResponse(BaseModel):
    """Public view of an account."""

    id: int
    name: str
    gravatar_url: str
    avatar_url: str | None = None
    activated: bool

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            gravatar_url=account.gravatar_url(),
            avatar_url=account.avatar_url,
            activated=account.activated,
        )


class ProfileResponse(BaseModel):
    """Response model for a user's profile page."""

    account: AccountResponse
    flash: list[FlashMessage] = Field(default_factory=list)


class HomeResponse(BaseModel):
    """Response model for the home page."""

    current_account: AccountResponse | None = None
    flash: list[FlashMessage] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str


class FieldErrorsResponse(BaseModel):
    """Form re-render payload: summary plus every field message."""

    detail: str = Field(..., examples=["The form contains 4 errors."])
    errors: dict[str, list[str]]
    messages: list[str]

    @classmethod
    def from_errors(cls, errors: FieldErrors) -> "FieldErrorsResponse":
        return cls(
            detail=errors.summary(),
            errors=errors.as_dict(),
            messages=errors.full_messages(),
        )


def field_errors_response(errors: FieldErrors) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=FieldErrorsResponse.from_errors(errors).model_dump(),
    )


SIGNUP_FIELDS = [
    FormField(name="name", label="Name"),
    FormField(name="email", type="email", label="Email"),
    FormField(name="password", type="password", label="Password"),
    FormField(name="password_confirmation", type="password", label="Password confirmation"),
]

PROFILE_FIELDS = [*SIGNUP_FIELDS, FormField(name="avatar", type="file", label="Avatar")]

LOGIN_FIELDS = [
    FormField(name="email", type="email", label="Email"),
    FormField(name="password", type="password", label="Password"),
]
