"""
FastAPI dependencies for dependency injection.

This module provides the process-wide store instances and resolves the
session cookie into an optional account id for each request.

Pattern: Dependency Injection
- Each store is one explicit object, created once and handed to routes
- Easy to test (clear the cache, or override the dependency)
- Identity is passed to store operations explicitly, never read ambiently
"""

from functools import lru_cache
from typing import Optional

from fastapi import Cookie, Depends

from tinyurl_app.config import settings
from tinyurl_app.services.identity_service import IdentityStore
from tinyurl_app.services.mapping_service import MappingStore
from tinyurl_app.services.session_service import SessionManager
from tinyurl_app.services.short_code_strategies import RandomShortCodeStrategy

SESSION_COOKIE_NAME = settings.session_cookie_name


@lru_cache()
def get_identity_store() -> IdentityStore:
    """Get the account store (singleton)"""
    return IdentityStore(bcrypt_rounds=settings.bcrypt_rounds)


@lru_cache()
def get_session_manager() -> SessionManager:
    """Get the session manager (singleton)"""
    return SessionManager(settings.secret_key, max_age=settings.session_max_age)


@lru_cache()
def get_mapping_store() -> MappingStore:
    """Get the mapping store (singleton)"""
    strategy = RandomShortCodeStrategy(
        length=settings.short_code_length,
        max_retries=settings.max_retries
    )
    return MappingStore(short_code_strategy=strategy)


def get_session_token(
    session: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)
) -> Optional[str]:
    """Raw session token from the request cookie, if any"""
    return session


def get_current_account_id(
    token: Optional[str] = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager)
) -> Optional[str]:
    """
    Account id of the requester, or None when anonymous.

    Anonymous is not an error here: each store operation decides whether it
    needs an identity.
    """
    return sessions.resolve(token)
