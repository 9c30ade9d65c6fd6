"""
Session routes - login and logout.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from src.api.dependencies import get_account_service, get_session
from src.api.flash import pop_flashes, pop_location, redirect
from src.api.models import LOGIN_FIELDS, ErrorResponse, FormDescriptor
from src.domain.accounts import AccountService
from src.domain.exceptions import AccountNotActivated, InvalidCredentials
from src.domain.session import Session

router = APIRouter(tags=["sessions"])


@router.get("/login", response_model=FormDescriptor, summary="Login form")
async def new_session(request: Request) -> FormDescriptor:
    return FormDescriptor(action="/login", fields=LOGIN_FIELDS, flash=pop_flashes(request))


@router.post(
    "/login",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid email/password combination"},
        403: {"model": ErrorResponse, "description": "Account not activated"},
    },
    summary="Log in",
)
async def create_session(
    request: Request,
    email: str | None = Form(None),
    password: str | None = Form(None),
    service: AccountService = Depends(get_account_service),
    session: Session = Depends(get_session),
) -> RedirectResponse:
    """
    Log in with email and password.

    Redirects to the page that required login, or to the user's profile.
    """
    try:
        account = service.login(email, password, session)
    except InvalidCredentials:
        # Same answer for unknown email and wrong password
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email/password combination",
        ) from None
    except AccountNotActivated:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account not activated. Check your email for the activation link.",
        ) from None

    return redirect(pop_location(request) or f"/users/{account.id}")


@router.delete(
    "/logout",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Log out",
)
async def destroy_session(
    service: AccountService = Depends(get_account_service),
    session: Session = Depends(get_session),
) -> RedirectResponse:
    service.logout(session)
    return redirect("/")
