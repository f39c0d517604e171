"""
OIDC UserInfo endpoint (GET /userinfo). Bearer access token required; returns the
generated profile for the token's client with any configured overrides applied.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mock_oauth_server.deps import get_error_engine, get_store
from mock_oauth_server.error_scenarios import ENDPOINT_USERINFO, ErrorScenarioEngine, error_json
from mock_oauth_server.store import MemoryStore

logger = logging.getLogger(__name__)
router = APIRouter()
# auto_error=False: a configured error scenario must win over a missing header
security = HTTPBearer(auto_error=False)


def mask_token(token: str) -> str:
    """Hide most of the token for logs."""
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}...{token[-4:]}"


def _unauthorized(description: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "invalid_token", "error_description": description},
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.get("/userinfo")
def userinfo(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    store: MemoryStore = Depends(get_store),
    engine: ErrorScenarioEngine = Depends(get_error_engine),
):
    scenario = engine.consult(ENDPOINT_USERINFO)
    if scenario is not None:
        return error_json(scenario)

    if credentials is None:
        logger.info("UserInfo request failed: missing or malformed Authorization header")
        raise _unauthorized("Missing or invalid Authorization header")

    token = credentials.credentials
    user = store.get_user_info_by_token(token)
    if user is None:
        logger.info("UserInfo request failed: unknown token %s", mask_token(token))
        raise _unauthorized("Invalid token")

    logger.info("UserInfo request successful for sub=%s", user.sub)
    return user.to_dict()
