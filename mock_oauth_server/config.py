"""
Mock OAuth2 server configuration. Values are read once from the environment at import.
No secrets in this file; the signing key is generated in memory at startup.
"""
import os


def _int_env(name: str, default: int) -> int:
    """Integer env var; a missing or non-numeric value keeps the default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Listening port and bind address for the uvicorn entry point
PORT = _int_env("MOCK_OAUTH_PORT", 8080)
BIND_HOST = os.environ.get("MOCK_OAUTH_HOST", "127.0.0.1")

# Issuer / public base URL. Empty ISSUER_URL means unset: fall back to localhost on the port.
ISSUER_URL = os.environ.get("MOCK_ISSUER_URL", "").strip().rstrip("/")
ISSUER = ISSUER_URL or f"http://localhost:{PORT}"

# Default user profile (updated at runtime via POST /config user_info)
MOCK_USER_EMAIL = os.environ.get("MOCK_USER_EMAIL", "testuser@example.com")
MOCK_USER_NAME = os.environ.get("MOCK_USER_NAME", "Test User")

# Access/ID token lifetime (seconds)
ACCESS_TOKEN_EXPIRES = _int_env("MOCK_TOKEN_EXPIRY", 3600)

# Authorization code lifetime (seconds)
CODE_TTL_SECONDS = 600

# Signing key parameters. One key per process, fixed kid.
KEY_BITS = 2048
KEY_ID = "mock-key-1"

LOG_LEVEL = os.environ.get("MOCK_OAUTH_LOG_LEVEL", "INFO").upper()
