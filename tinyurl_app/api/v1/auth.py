from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from tinyurl_app.config import settings
from tinyurl_app.dependencies import (
    SESSION_COOKIE_NAME,
    get_current_account_id,
    get_identity_store,
    get_session_manager,
    get_session_token,
)
from tinyurl_app.exceptions import UnauthorizedError
from tinyurl_app.schemas.auth import AccountResponse, Credentials
from tinyurl_app.services.identity_service import IdentityStore
from tinyurl_app.services.session_service import SessionManager

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_max_age,
    )


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def register(
    credentials: Credentials,
    response: Response,
    identities: IdentityStore = Depends(get_identity_store),
    sessions: SessionManager = Depends(get_session_manager)
):
    """Create an account and log it in"""
    account = identities.register(credentials.email, credentials.password)
    _set_session_cookie(response, sessions.start(account.id))
    return account


@router.post("/login", response_model=AccountResponse)
def login(
    credentials: Credentials,
    response: Response,
    identities: IdentityStore = Depends(get_identity_store),
    sessions: SessionManager = Depends(get_session_manager)
):
    """Check credentials and start a session"""
    account = identities.authenticate(credentials.email, credentials.password)
    _set_session_cookie(response, sessions.start(account.id))
    return account


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: Optional[str] = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager)
):
    """End the current session (a no-op when anonymous)"""
    sessions.end(token)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/me", response_model=AccountResponse)
async def who_am_i(
    account_id: Optional[str] = Depends(get_current_account_id),
    identities: IdentityStore = Depends(get_identity_store)
):
    """The logged-in account"""
    if account_id is None:
        raise UnauthorizedError()
    return identities.get_account(account_id)
