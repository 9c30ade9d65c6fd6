"""
Account activation route - the link sent in the activation email.
"""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from src.api.dependencies import get_account_service, get_session
from src.api.flash import flash, redirect
from src.domain.accounts import AccountService
from src.domain.models import ActivationResult
from src.domain.session import Session

router = APIRouter(tags=["account_activations"])


@router.get(
    "/account_activations/{token}/edit",
    response_class=RedirectResponse,
    status_code=303,
    summary="Activate account",
    description="Follow the emailed activation link. Always redirects; "
    "the outcome is reported as a flash message.",
)
async def edit_account_activation(
    token: str,
    request: Request,
    email: str = Query(""),
    service: AccountService = Depends(get_account_service),
    session: Session = Depends(get_session),
) -> RedirectResponse:
    result = service.activate(token, email, session)

    if result == ActivationResult.ACTIVATED:
        flash(request, "success", "Account activated!")
        return redirect(f"/users/{session.user_id}")

    if result == ActivationResult.ALREADY_ACTIVATED:
        flash(request, "warning", "Account already activated!")
        return redirect("/")

    # INVALID and NOT_FOUND look the same to the client
    flash(request, "danger", "Invalid activation link")
    return redirect("/")
