"""
In-process provider API over the store and issuer, for tests that drive the flow
without HTTP. Mirrors what a client library would see from the endpoints.
"""
from urllib.parse import urlencode

from mock_oauth_server.errors import InvalidGrantError, MockOAuthError
from mock_oauth_server.store import MemoryStore
from mock_oauth_server.token_issuer import TokenIssuer


class OAuthError(Exception):
    """OAuth2 error with a standard error code and human-readable description."""

    def __init__(self, code: str, description: str):
        super().__init__(f"{code}: {description}")
        self.code = code
        self.description = description


class MockProvider:
    def __init__(self, store: MemoryStore, issuer: TokenIssuer):
        self.store = store
        self.issuer = issuer

    def generate_auth_url(self, client_id: str, redirect_uri: str, scope: str, state: str = "") -> str:
        params = {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "scope": scope,
            "response_type": "code",
        }
        if state:
            params["state"] = state
        return "/authorize?" + urlencode(params)

    def exchange_code_for_token(self, code: str) -> dict:
        """Exchange a code using the client_id/redirect_uri it was issued for."""
        grant = self.store.get_auth_code(code)
        if grant is None:
            raise OAuthError("invalid_grant", "Invalid authorization code")
        try:
            tokens = self.issuer.exchange(code, grant.client_id, grant.redirect_uri)
        except InvalidGrantError as e:
            raise OAuthError("invalid_grant", e.description) from e
        except MockOAuthError as e:
            raise OAuthError("server_error", "Failed to generate tokens") from e
        return tokens.to_dict()

    def get_user_info(self, access_token: str) -> dict:
        user = self.store.get_user_info_by_token(access_token)
        if user is None:
            raise OAuthError("invalid_token", "Invalid access token")
        return user.to_dict()
