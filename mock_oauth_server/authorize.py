"""
Authorization endpoint (GET /authorize). No login or consent: every valid request is
approved immediately and redirected back with a fresh code, unless an error scenario
is configured for "authorize".
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from mock_oauth_server.config import CODE_TTL_SECONDS
from mock_oauth_server.deps import get_error_engine, get_store
from mock_oauth_server.error_scenarios import (
    ENDPOINT_AUTHORIZE,
    ErrorScenarioEngine,
    add_query_params,
    error_redirect,
)
from mock_oauth_server.models import AuthorizationGrant
from mock_oauth_server.store import MemoryStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _invalid_request(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=400)


@router.get("/authorize")
def authorize(
    response_type: str | None = None,
    client_id: str | None = None,
    redirect_uri: str | None = None,
    scope: str | None = None,
    state: str | None = None,
    store: MemoryStore = Depends(get_store),
    engine: ErrorScenarioEngine = Depends(get_error_engine),
):
    """
    OAuth2 authorization endpoint.
    Requires client_id, redirect_uri, scope and response_type=code; state is echoed back.
    """
    if not client_id or not redirect_uri or not scope or response_type != "code":
        return _invalid_request("Invalid request parameters")

    scenario = engine.consult(ENDPOINT_AUTHORIZE)
    if scenario is not None:
        try:
            return error_redirect(redirect_uri, scenario, state)
        except ValueError:
            return _invalid_request("Invalid redirect URI")

    code = str(uuid.uuid4())
    params = {"code": code}
    if state:
        params["state"] = state
    try:
        location = add_query_params(redirect_uri, params)
    except ValueError:
        return _invalid_request("Invalid redirect URI")

    store.store_auth_code(
        code,
        AuthorizationGrant(
            client_id=client_id,
            redirect_uri=redirect_uri,
            scope=scope,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=CODE_TTL_SECONDS),
        ),
    )
    logger.info("Issued authorization code for client_id=%s scope=%s", client_id, scope)
    return RedirectResponse(url=location, status_code=302)
