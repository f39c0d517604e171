"""
Request models for POST /config. The body is validated here once; the store, issuer and
error-scenario engine only ever see these typed values.
"""
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictStr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class UserInfoOverride(BaseModel):
    """
    Partial user profile. None means "not provided"; a claim of the wrong JSON type
    is treated as not provided rather than rejecting the whole request.
    """

    model_config = ConfigDict(extra="ignore")

    sub: StrictStr | None = None
    name: StrictStr | None = None
    given_name: StrictStr | None = None
    family_name: StrictStr | None = None
    email: StrictStr | None = None
    email_verified: StrictBool | None = None
    picture: StrictStr | None = None
    locale: StrictStr | None = None
    hd: StrictStr | None = None

    @field_validator("*", mode="wrap")
    @classmethod
    def _ignore_mistyped(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    def provided(self) -> dict[str, Any]:
        """Only the fields that were set."""
        return self.model_dump(exclude_none=True)


class TokenOverrideConfig(BaseModel):
    """
    Token claim overrides (the "tokens" key). user_info is typed; any other keys are
    kept as-is and available through model_extra.
    """

    model_config = ConfigDict(extra="allow")

    user_info: UserInfoOverride | None = None


class ErrorScenarioConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Omitted means enabled; only an explicit false disables
    enabled: StrictBool | None = None
    endpoint: StrictStr = ""
    error: StrictStr = ""
    error_description: StrictStr = ""


class ConfigRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_info: UserInfoOverride | None = None
    tokens: TokenOverrideConfig | None = None
    error_scenario: ErrorScenarioConfig | None = None
