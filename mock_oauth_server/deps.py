"""
FastAPI dependencies. Shared components are created once in create_app() and kept on app.state.
"""
from fastapi import Request

from mock_oauth_server.error_scenarios import ErrorScenarioEngine
from mock_oauth_server.keys import KeySigner
from mock_oauth_server.models import UserInfo
from mock_oauth_server.store import MemoryStore
from mock_oauth_server.token_issuer import TokenIssuer


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_signer(request: Request) -> KeySigner:
    return request.app.state.signer


def get_issuer(request: Request) -> TokenIssuer:
    return request.app.state.issuer


def get_error_engine(request: Request) -> ErrorScenarioEngine:
    return request.app.state.error_engine


def get_default_user(request: Request) -> UserInfo:
    return request.app.state.default_user


def get_issuer_url(request: Request) -> str:
    return request.app.state.issuer_url
