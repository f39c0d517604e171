"""
Authorization code exchange: validates the grant, signs access and ID tokens,
then redeems the code and registers the access token in one store operation.
"""
import logging
import secrets
import time
from datetime import datetime

from mock_oauth_server.config import ACCESS_TOKEN_EXPIRES
from mock_oauth_server.errors import InvalidGrantError
from mock_oauth_server.keys import KeySigner
from mock_oauth_server.models import AuthorizationGrant, TokenResponse
from mock_oauth_server.store import MemoryStore

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = ["openid"]


def subject_for(client_id: str) -> str:
    """Mock identity: the subject is derived from the client, not from a real user."""
    return "user-" + client_id


def refresh_token_for(client_id: str) -> str:
    # Opaque and never validated; the random suffix separates grants issued in the same second
    return f"mock-refresh-token-{client_id}-{time.strftime('%Y%m%d%H%M%S')}-{secrets.token_hex(4)}"


class TokenIssuer:
    def __init__(
        self,
        signer: KeySigner,
        store: MemoryStore,
        issuer_url: str,
        expires_in: int = ACCESS_TOKEN_EXPIRES,
    ):
        self.signer = signer
        self.store = store
        self.issuer_url = issuer_url.rstrip("/")
        self.expires_in = expires_in

    def _id_token_claims(self) -> tuple[str, str]:
        """email/name for the ID token, only from configured user_info overrides."""
        config = self.store.get_token_config()
        if config is None or config.user_info is None:
            return "", ""
        return config.user_info.email or "", config.user_info.name or ""

    def issue(self, grant: AuthorizationGrant) -> TokenResponse:
        """Sign a token set for the grant. Does not touch the code or token registry."""
        client_id = grant.client_id
        sub = subject_for(client_id)
        scopes = grant.scope.split() or list(DEFAULT_SCOPES)

        access_token = self.signer.sign_access_token(self.issuer_url, client_id, sub, scopes)
        email, name = self._id_token_claims()
        id_token = self.signer.sign_id_token(self.issuer_url, client_id, sub, email=email, name=name)
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token_for(client_id),
            id_token=id_token,
            expires_in=self.expires_in,
        )

    def exchange(
        self,
        code: str,
        client_id: str,
        redirect_uri: str,
        now: datetime | None = None,
    ) -> TokenResponse:
        """
        Exchange an authorization code for tokens. On return the code is gone and the
        access token resolves to client_id. Raises InvalidGrantError on any mismatch.
        """
        grant = self.store.get_auth_code(code) if code else None
        if grant is None:
            raise InvalidGrantError("Invalid authorization code")
        if grant.expired(now):
            self.store.remove_auth_code(code)
            raise InvalidGrantError("Invalid authorization code")
        if grant.client_id != client_id:
            raise InvalidGrantError("Client ID mismatch")
        if grant.redirect_uri != redirect_uri:
            raise InvalidGrantError("Redirect URI mismatch")

        # Signing happens outside the store lock; redemption decides who wins a race.
        tokens = self.issue(grant)
        if not self.store.redeem_auth_code(code, tokens.access_token, client_id):
            raise InvalidGrantError("Invalid authorization code")

        logger.info("authorization_code grant: tokens issued for client_id=%s", client_id)
        return tokens
