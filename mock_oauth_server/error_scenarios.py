"""
Configurable error injection. A test posts an error_scenario to /config; the targeted
endpoint then answers with that OAuth2 error before doing any normal processing.
Only one scenario is active at a time.
"""
import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi.responses import JSONResponse, RedirectResponse

from mock_oauth_server.models import ErrorScenario
from mock_oauth_server.schemas import ErrorScenarioConfig
from mock_oauth_server.store import MemoryStore

logger = logging.getLogger(__name__)

ENDPOINT_AUTHORIZE = "authorize"
ENDPOINT_TOKEN = "token"
ENDPOINT_USERINFO = "userinfo"

# OAuth2 error code -> HTTP status (RFC 6749 sections 4.1.2.1 and 5.2)
STATUS_CODES = {
    "invalid_request": 400,
    "invalid_client": 401,
    "invalid_grant": 400,
    "unauthorized_client": 401,
    "unsupported_grant_type": 400,
    "invalid_scope": 400,
    "access_denied": 403,
    "unsupported_response_type": 400,
    "server_error": 500,
    "temporarily_unavailable": 503,
}
DEFAULT_STATUS_CODE = 400


def status_code_for(error_code: str) -> int:
    return STATUS_CODES.get(error_code, DEFAULT_STATUS_CODE)


def scenario_from_config(config: ErrorScenarioConfig) -> ErrorScenario:
    """Turn the validated error_scenario object of POST /config into an ErrorScenario."""
    return ErrorScenario(
        endpoint=config.endpoint,
        error_code=config.error,
        status_code=status_code_for(config.error),
        description=config.error_description,
        enabled=config.enabled is not False,
    )


class ErrorScenarioEngine:
    """Decides, per endpoint, whether to short-circuit with the configured error."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def configure(self, scenario: ErrorScenario) -> None:
        """Replace the active scenario, whatever endpoint the previous one targeted."""
        logger.info(
            "Storing error scenario: endpoint=%s error=%s enabled=%s status_code=%d",
            scenario.endpoint,
            scenario.error_code,
            scenario.enabled,
            scenario.status_code,
        )
        self._store.store_error_scenario(scenario)

    def consult(self, endpoint: str) -> ErrorScenario | None:
        scenario = self._store.get_error_scenario(endpoint)
        if scenario is not None:
            logger.info("Returning configured error for %s: %s", endpoint, scenario.error_code)
        return scenario

    def clear(self, endpoint: str) -> None:
        self._store.clear_error_scenario(endpoint)


def add_query_params(url: str, params: dict[str, str]) -> str:
    """Set params on url, keeping any query it already has. Raises ValueError for unparsable URLs."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query.extend(params.items())
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def error_redirect(redirect_uri: str, scenario: ErrorScenario, state: str | None) -> RedirectResponse:
    """Authorize-style error: 302 back to the client with error params in the query."""
    params = {"error": scenario.error_code}
    if scenario.description:
        params["error_description"] = scenario.description
    if state:
        params["state"] = state
    return RedirectResponse(url=add_query_params(redirect_uri, params), status_code=302)


def error_json(scenario: ErrorScenario) -> JSONResponse:
    """Token/userinfo-style error: configured status with an OAuth2 JSON error body."""
    body = {"error": scenario.error_code}
    if scenario.description:
        body["error_description"] = scenario.description
    return JSONResponse(status_code=scenario.status_code, content=body)
