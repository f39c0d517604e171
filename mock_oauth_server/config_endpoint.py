"""
Runtime configuration endpoint (POST /config). Lets tests change the default user,
override token claims and inject error scenarios.

Body: {"user_info": {...}?, "tokens": {...}?, "error_scenario": {...}?}
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from mock_oauth_server.deps import get_default_user, get_error_engine, get_store
from mock_oauth_server.error_scenarios import ErrorScenarioEngine, scenario_from_config
from mock_oauth_server.models import UserInfo
from mock_oauth_server.schemas import ConfigRequest
from mock_oauth_server.store import MemoryStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _bad_request(error: ValidationError) -> JSONResponse:
    first = error.errors()[0]
    if first["type"] == "json_invalid":
        description = f"Invalid JSON: {first['msg']}"
    else:
        location = ".".join(str(part) for part in first["loc"]) or "body"
        description = f"Invalid {location}: {first['msg']}"
    return JSONResponse(status_code=400, content={"error": "invalid_request", "error_description": description})


@router.post("/config")
async def configure(
    request: Request,
    store: MemoryStore = Depends(get_store),
    engine: ErrorScenarioEngine = Depends(get_error_engine),
    default_user: UserInfo = Depends(get_default_user),
):
    # Parsed here rather than as a body parameter: a bad payload is a 400, not a 422
    try:
        body = ConfigRequest.model_validate_json(await request.body())
    except ValidationError as e:
        return _bad_request(e)

    logger.info(
        "Received config request: user_info=%s tokens=%s error_scenario=%s",
        body.user_info is not None,
        body.tokens is not None,
        body.error_scenario is not None,
    )

    if body.user_info is not None:
        default_user.apply_override(body.user_info)
    if body.tokens is not None:
        store.store_token_config(body.tokens)
    if body.error_scenario is not None:
        engine.configure(scenario_from_config(body.error_scenario))

    return {"status": "success", "message": "Configuration updated"}
