"""
In-memory store for authorization codes, issued access tokens, token claim overrides
and the single active error scenario. Every access goes through one lock; nothing
else is called while it is held.
"""
import logging
import threading
from dataclasses import replace

from mock_oauth_server.models import AuthorizationGrant, ErrorScenario, UserInfo
from mock_oauth_server.schemas import TokenOverrideConfig

logger = logging.getLogger(__name__)


class MemoryStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._auth_codes: dict[str, AuthorizationGrant] = {}
        self._tokens: dict[str, str] = {}  # access_token -> client_id
        self._token_config: TokenOverrideConfig | None = None
        self._error_scenario: ErrorScenario | None = None

    # --- authorization codes ---

    def store_auth_code(self, code: str, grant: AuthorizationGrant) -> None:
        with self._lock:
            self._auth_codes[code] = grant

    def get_auth_code(self, code: str) -> AuthorizationGrant | None:
        """Plain lookup. Expiry is enforced by the exchange path, not here."""
        with self._lock:
            return self._auth_codes.get(code)

    def remove_auth_code(self, code: str) -> None:
        with self._lock:
            self._auth_codes.pop(code, None)

    def redeem_auth_code(self, code: str, access_token: str, client_id: str) -> bool:
        """
        Remove the code and register the access token in one critical section.
        Returns False (and stores nothing) if the code is no longer present.
        """
        with self._lock:
            if self._auth_codes.pop(code, None) is None:
                return False
            self._tokens[access_token] = client_id
            return True

    # --- access tokens ---

    def store_token(self, token: str, client_id: str) -> None:
        with self._lock:
            self._tokens[token] = client_id

    def get_client_id_by_token(self, token: str) -> str | None:
        with self._lock:
            return self._tokens.get(token)

    # --- token claim overrides ---

    def store_token_config(self, config: TokenOverrideConfig) -> None:
        """Replace (not merge) the active overrides."""
        with self._lock:
            self._token_config = config.model_copy(deep=True)

    def get_token_config(self) -> TokenOverrideConfig | None:
        """Independent copy of the active overrides, or None if never configured."""
        with self._lock:
            if self._token_config is None:
                return None
            return self._token_config.model_copy(deep=True)

    # --- error scenario (single slot) ---

    def store_error_scenario(self, scenario: ErrorScenario) -> None:
        with self._lock:
            self._error_scenario = replace(scenario)

    def get_error_scenario(self, endpoint: str) -> ErrorScenario | None:
        """The stored scenario if it targets endpoint and is enabled."""
        with self._lock:
            scenario = self._error_scenario
            if scenario is None or scenario.endpoint != endpoint or not scenario.enabled:
                return None
            return replace(scenario)

    def clear_error_scenario(self, endpoint: str) -> None:
        with self._lock:
            if self._error_scenario is not None and self._error_scenario.endpoint == endpoint:
                self._error_scenario = None

    # --- composite reads ---

    def get_user_info_by_token(self, token: str) -> UserInfo | None:
        """Generated profile for the token's client, with configured user_info overrides applied."""
        with self._lock:
            client_id = self._tokens.get(token)
            override = None
            if self._token_config is not None and self._token_config.user_info is not None:
                override = self._token_config.user_info.model_copy()
        if client_id is None:
            return None
        user = UserInfo.generated_for(client_id)
        user.apply_override(override)
        return user
