"""
Token endpoint (POST /token). Authorization code grant only.
"""
import logging

from fastapi import APIRouter, Depends, Form, HTTPException

from mock_oauth_server.deps import get_error_engine, get_issuer
from mock_oauth_server.error_scenarios import ENDPOINT_TOKEN, ErrorScenarioEngine, error_json
from mock_oauth_server.errors import InvalidGrantError, MockOAuthError
from mock_oauth_server.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/token")
def token(
    grant_type: str | None = Form(None),
    code: str | None = Form(None),
    client_id: str | None = Form(None),
    redirect_uri: str | None = Form(None),
    issuer: TokenIssuer = Depends(get_issuer),
    engine: ErrorScenarioEngine = Depends(get_error_engine),
):
    """Exchange an authorization code for access_token, id_token and refresh_token."""
    scenario = engine.consult(ENDPOINT_TOKEN)
    if scenario is not None:
        return error_json(scenario)

    if grant_type != "authorization_code":
        raise HTTPException(
            status_code=400,
            detail={"error": "unsupported_grant_type", "error_description": "Unsupported grant type"},
        )

    try:
        tokens = issuer.exchange(code or "", client_id or "", redirect_uri or "")
    except InvalidGrantError as e:
        raise HTTPException(status_code=400, detail={"error": "invalid_grant", "error_description": e.description})
    except MockOAuthError as e:
        logger.error("Token issuance failed for client_id=%s: %s", client_id, e)
        raise HTTPException(status_code=500, detail={"error": "server_error"})
    return tokens.to_dict()
