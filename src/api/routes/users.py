"""
User routes - signup, profile page and profile edit.

Edit and update require the session to belong to the user being edited:
anonymous visitors are sent to the login page (and forwarded back after
logging in), other users are sent home.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import RedirectResponse

from src.api.dependencies import get_account_service, get_session
from src.api.flash import flash, pop_flashes, redirect, store_location
from src.api.models import (
    PROFILE_FIELDS,
    SIGNUP_FIELDS,
    AccountResponse,
    ErrorResponse,
    FieldErrorsResponse,
    FormDescriptor,
    ProfileResponse,
    field_errors_response,
)
from src.domain.accounts import AccountService
from src.domain.models import Account, AvatarUpload, ProfileUpdate
from src.domain.session import Session
from src.domain.validation import FieldErrors

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.get("/signup", response_model=FormDescriptor, summary="Signup form")
async def new_user(request: Request) -> FormDescriptor:
    return FormDescriptor(action="/signup", fields=SIGNUP_FIELDS, flash=pop_flashes(request))


@router.post(
    "/signup",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": FieldErrorsResponse, "description": "Form errors"}},
    summary="Register a new user",
    description="Create a pending account and email its activation link.",
)
@router.post(
    "/users",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": FieldErrorsResponse, "description": "Form errors"}},
    summary="Register a new user",
    description="Create a pending account and email its activation link.",
)
async def create_user(
    request: Request,
    name: str | None = Form(None),
    email: str | None = Form(None),
    password: str | None = Form(None),
    password_confirmation: str | None = Form(None),
    service: AccountService = Depends(get_account_service),
):
    result = service.register(name, email, password, password_confirmation)
    if isinstance(result, FieldErrors):
        return field_errors_response(result)

    flash(request, "info", "Please check your email to activate your account.")
    return redirect("/")


@router.get(
    "/users/{user_id}",
    response_model=ProfileResponse,
    responses={404: {"model": ErrorResponse, "description": "No such user"}},
    summary="User profile",
)
async def show_user(
    user_id: int,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    """Profile of an activated user; pending accounts are not shown."""
    account = service.find_account(user_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not account.activated:
        return redirect("/")
    return ProfileResponse(
        account=AccountResponse.from_account(account),
        flash=pop_flashes(request),
    )


@router.get(
    "/users/{user_id}/edit",
    response_model=FormDescriptor,
    summary="Profile edit form",
)
async def edit_user(
    user_id: int,
    request: Request,
    service: AccountService = Depends(get_account_service),
    session: Session = Depends(get_session),
):
    account = _current_account_or_redirect(request, service, session, user_id)
    if not isinstance(account, Account):
        return account

    return FormDescriptor(
        action=f"/users/{user_id}",
        method="patch",
        fields=PROFILE_FIELDS,
        values={"name": account.name, "email": account.email},
        flash=pop_flashes(request),
    )


@router.patch(
    "/users/{user_id}",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    responses={422: {"model": FieldErrorsResponse, "description": "Form errors"}},
    summary="Update profile",
    description="Update name and email, optionally password and avatar. "
    "Blank password fields keep the current password.",
)
async def update_user(
    user_id: int,
    request: Request,
    name: str | None = Form(None),
    email: str | None = Form(None),
    password: str | None = Form(None),
    password_confirmation: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    service: AccountService = Depends(get_account_service),
    session: Session = Depends(get_session),
):
    account = _current_account_or_redirect(request, service, session, user_id)
    if not isinstance(account, Account):
        return account

    upload = None
    if avatar is not None and avatar.filename:
        upload = AvatarUpload(avatar.filename, avatar.content_type, await avatar.read())

    result = service.update_profile(
        session,
        ProfileUpdate(
            name=name,
            email=email,
            password=password,
            password_confirmation=password_confirmation,
            avatar=upload,
        ),
    )
    if isinstance(result, FieldErrors):
        return field_errors_response(result)

    flash(request, "success", "Profile updated")
    return redirect(f"/users/{user_id}")


def _current_account_or_redirect(
    request: Request,
    service: AccountService,
    session: Session,
    user_id: int,
) -> Account | RedirectResponse:
    """
    Guard for edit/update.

    Returns the logged-in account when it is the one in the URL, otherwise
    the redirect to answer with.
    """
    account = service.current_account(session)
    if account is None:
        store_location(request)
        flash(request, "danger", "Please log in.")
        return redirect("/login")

    if account.id != user_id:
        logger.warning("Account id=%s tried to edit account id=%s", account.id, user_id)
        return redirect("/")

    return account
