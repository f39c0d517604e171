"""
RSA key pair for signing JWTs. One key per KeySigner, generated in memory on first use
(or eagerly at app startup) and kept until process exit. No key material is persisted.
"""
import base64
import logging
import secrets
import threading
import time
import uuid

import jwt
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, generate_private_key

from mock_oauth_server.config import ACCESS_TOKEN_EXPIRES, KEY_BITS, KEY_ID
from mock_oauth_server.errors import KeyGenerationError, TokenSigningError, TokenVerificationError

logger = logging.getLogger(__name__)

_PUBLIC_EXPONENT = 65537
# Verification accepts any RSA signature; issuance always uses RS256.
_RSA_ALGORITHMS = ["RS256", "RS384", "RS512"]


def _b64url_uint(value: int) -> str:
    """Big-endian unsigned int, base64url without padding (RFC 7518 section 6.3.1)."""
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def public_key_to_jwk(public_key, kid: str) -> dict:
    """Export cryptography RSA public key to JWK with given kid."""
    numbers = public_key.public_numbers()
    return {
        "kty": "RSA",
        "use": "sig",
        "kid": kid,
        "alg": "RS256",
        "n": _b64url_uint(numbers.n),
        "e": _b64url_uint(numbers.e),
    }


def generate_nonce() -> str:
    """128-bit random nonce, base64url without padding."""
    return base64.urlsafe_b64encode(secrets.token_bytes(16)).rstrip(b"=").decode("ascii")


class KeySigner:
    """
    Owns one RSA key pair: signs access/ID tokens, verifies tokens, publishes the JWKS.
    Safe to share between request threads.
    """

    def __init__(self, kid: str = KEY_ID, key_bits: int = KEY_BITS, token_ttl: int = ACCESS_TOKEN_EXPIRES):
        self._kid = kid
        self._key_bits = key_bits
        self._token_ttl = token_ttl
        self._private_key: RSAPrivateKey | None = None
        self._lock = threading.Lock()

    @property
    def key_id(self) -> str:
        return self._kid

    def ensure_keys(self) -> RSAPrivateKey:
        """
        Generate the key pair once. Concurrent first callers block on the lock and all
        get the same fully-built key.
        """
        key = self._private_key
        if key is not None:
            return key
        with self._lock:
            if self._private_key is None:
                try:
                    key = generate_private_key(_PUBLIC_EXPONENT, self._key_bits, default_backend())
                except Exception as e:
                    raise KeyGenerationError(f"RSA key generation failed: {e}") from e
                # Publish only after the key is complete
                self._private_key = key
                logger.info("Generated %d-bit RSA signing key (kid=%s)", self._key_bits, self._kid)
            return self._private_key

    def public_key(self):
        return self.ensure_keys().public_key()

    def _sign(self, claims: dict) -> str:
        private_key = self.ensure_keys()
        try:
            token = jwt.encode(
                claims,
                private_key,
                algorithm="RS256",
                headers={"kid": self._kid, "typ": "JWT"},
            )
        except Exception as e:
            raise TokenSigningError(f"JWT signing failed: {e}") from e
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return token

    def sign_access_token(self, issuer: str, client_id: str, subject: str, scopes: list[str]) -> str:
        """Access token with a unique jti, so two grants never yield the same token."""
        now = int(time.time())
        claims = {
            "iss": issuer,
            "sub": subject,
            "aud": client_id,
            "iat": now,
            "exp": now + self._token_ttl,
            "scope": list(scopes),
            "jti": str(uuid.uuid4()),
        }
        return self._sign(claims)

    def sign_id_token(
        self,
        issuer: str,
        client_id: str,
        subject: str,
        email: str = "",
        name: str = "",
    ) -> str:
        """ID token with a fresh nonce. email/name claims only when non-empty."""
        now = int(time.time())
        claims = {
            "iss": issuer,
            "sub": subject,
            "aud": client_id,
            "iat": now,
            "exp": now + self._token_ttl,
            "nonce": generate_nonce(),
        }
        if email:
            claims["email"] = email
        if name:
            claims["name"] = name
        return self._sign(claims)

    def verify(self, token: str) -> dict:
        """Verify signature and expiry of a token signed by this key. Returns all claims."""
        public_key = self.public_key()
        try:
            return jwt.decode(
                token,
                public_key,
                algorithms=_RSA_ALGORITHMS,
                options={"verify_aud": False},
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Token verification failed: %s", e)
            raise TokenVerificationError(str(e)) from e

    def get_jwks(self) -> dict:
        return {"keys": [public_key_to_jwk(self.public_key(), self._kid)]}
