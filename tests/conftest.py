"""
Test configuration and fixtures for the TinyURL app.
This centralizes all test setup, making individual tests clean.
"""

import os

# Cheap bcrypt for tests; must be set before settings are loaded
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from main import app
from tinyurl_app.dependencies import (
    get_identity_store,
    get_mapping_store,
    get_session_manager,
)
from tinyurl_app.services.identity_service import IdentityStore
from tinyurl_app.services.mapping_service import MappingStore
from tinyurl_app.services.session_service import SessionManager
from tinyurl_app.services.short_code_strategies import RandomShortCodeStrategy


@pytest.fixture(scope="function")
def identity_store():
    """Fresh account store per test"""
    return IdentityStore(bcrypt_rounds=4)


@pytest.fixture(scope="function")
def session_manager():
    """Fresh session manager per test"""
    return SessionManager("test-secret-key")


@pytest.fixture(scope="function")
def mapping_store():
    """Fresh mapping store per test"""
    return MappingStore(RandomShortCodeStrategy(length=6, max_retries=10))


def _clear_singletons():
    get_identity_store.cache_clear()
    get_session_manager.cache_clear()
    get_mapping_store.cache_clear()


@pytest.fixture(scope="function")
def client():
    """
    Create a test client backed by brand-new stores.
    This is the main fixture that HTTP tests will use.
    """
    _clear_singletons()

    with TestClient(app) as test_client:
        yield test_client

    _clear_singletons()


@pytest.fixture(scope="function")
def make_client(client):
    """
    Factory for extra clients sharing the same stores as `client`,
    each with its own cookie jar (i.e. a different browser).
    """
    clients = []

    def _make():
        test_client = TestClient(app)
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.close()
