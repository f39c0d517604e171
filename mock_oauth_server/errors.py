"""
Domain exceptions for the mock server core. Routers translate these into HTTP responses.
"""


class MockOAuthError(Exception):
    """Base class for errors raised by the store, signer and issuer."""


class KeyGenerationError(MockOAuthError):
    """The RSA signing key could not be created."""


class TokenSigningError(MockOAuthError):
    """A JWT could not be encoded/signed."""


class TokenVerificationError(MockOAuthError):
    """A JWT failed verification (bad signature, wrong algorithm, malformed, expired)."""


class InvalidGrantError(MockOAuthError):
    """Authorization code exchange rejected (unknown, expired, or mismatched)."""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description
