"""
Pytest configuration for mock_oauth_server. One RSA key for the whole session
(2048-bit generation is slow); every test gets a fresh app and store.
"""
import os

# Settings are read at import; clear env overrides so tests see the defaults
for _name in ("MOCK_USER_EMAIL", "MOCK_USER_NAME", "MOCK_TOKEN_EXPIRY", "MOCK_ISSUER_URL", "MOCK_OAUTH_PORT"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient

from mock_oauth_server.error_scenarios import ErrorScenarioEngine
from mock_oauth_server.keys import KeySigner
from mock_oauth_server.main import create_app
from mock_oauth_server.store import MemoryStore
from mock_oauth_server.token_issuer import TokenIssuer

TEST_ISSUER = "http://mock-issuer.test"
TEST_CLIENT_ID = "test-client"
TEST_REDIRECT_URI = "http://127.0.0.1:8000/callback"


@pytest.fixture(scope="session")
def signer():
    s = KeySigner()
    s.ensure_keys()
    return s


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(store):
    return ErrorScenarioEngine(store)


@pytest.fixture
def issuer(signer, store):
    return TokenIssuer(signer, store, TEST_ISSUER)


@pytest.fixture
def app(signer):
    return create_app(issuer_url=TEST_ISSUER, signer=signer)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def authorize_params():
    return {
        "response_type": "code",
        "client_id": TEST_CLIENT_ID,
        "redirect_uri": TEST_REDIRECT_URI,
        "scope": "openid email profile",
        "state": "s1",
    }
