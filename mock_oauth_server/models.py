"""
Data model for the mock server: authorization grants, error scenarios,
the OpenID UserInfo profile and the token response.
"""
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from mock_oauth_server.config import MOCK_USER_EMAIL, MOCK_USER_NAME
from mock_oauth_server.schemas import UserInfoOverride


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuthorizationGrant:
    """Pending authorization request, keyed by its code in the store."""

    client_id: str
    redirect_uri: str
    scope: str
    expires_at: datetime

    def expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or _utc_now())


@dataclass
class ErrorScenario:
    endpoint: str
    error_code: str
    status_code: int = 400
    description: str = ""
    enabled: bool = True


@dataclass
class UserInfo:
    """OpenID Connect UserInfo profile (Google-style claim set)."""

    sub: str
    name: str = ""
    given_name: str = ""
    family_name: str = ""
    email: str = ""
    email_verified: bool = False
    picture: str = ""
    locale: str = ""
    hd: str = ""

    @classmethod
    def generated_for(cls, client_id: str) -> "UserInfo":
        """Profile synthesized for a token issued to client_id."""
        return cls(
            sub=client_id,
            name="Generated User",
            email=f"{client_id}@example.com",
            email_verified=True,
        )

    def apply_override(self, override: UserInfoOverride | None) -> None:
        if override is None:
            return
        for key, value in override.provided().items():
            setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        # Optional claims are omitted when empty
        for key in ("locale", "hd"):
            if not data[key]:
                data.pop(key)
        return data


def new_default_user() -> UserInfo:
    """Default profile for the server; email and name come from the environment."""
    return UserInfo(
        sub="123456789",
        name=MOCK_USER_NAME,
        given_name="Test",
        family_name="User",
        email=MOCK_USER_EMAIL,
        email_verified=True,
        picture="https://example.com/profile.jpg",
    )


@dataclass
class TokenResponse:
    access_token: str
    refresh_token: str
    id_token: str
    expires_in: int = 3600
    token_type: str = "Bearer"

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
            "refresh_token": self.refresh_token,
            "id_token": self.id_token,
        }
