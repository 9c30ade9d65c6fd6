"""
Home page route.
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_account_service, get_session
from src.api.flash import pop_flashes
from src.api.models import AccountResponse, HomeResponse
from src.domain.accounts import AccountService
from src.domain.session import Session

router = APIRouter(tags=["pages"])


@router.get("/", response_model=HomeResponse, summary="Home page")
async def home(
    request: Request,
    service: AccountService = Depends(get_account_service),
    session: Session = Depends(get_session),
) -> HomeResponse:
    """Current account (if logged in) and pending flash messages."""
    account = service.current_account(session)
    return HomeResponse(
        current_account=AccountResponse.from_account(account) if account else None,
        flash=pop_flashes(request),
    )
