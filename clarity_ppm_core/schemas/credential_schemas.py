"""
Pydantic schema for Clarity PPM credentials.

Accepts both the snake_case attribute names and the camelCase names used by
the credential surface (``authType``, ``apiKey``, ``clientId``).
"""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import ApiPath, AuthType, EnvironmentVariable
from ..exceptions import ConfigError

# Fields each auth type needs before a header can be produced
REQUIRED_FIELDS_BY_AUTH_TYPE = {
    AuthType.API_KEY: ("api_key", "client_id"),
    AuthType.BASIC: ("username", "password"),
    AuthType.SESSION_TOKEN: ("username", "password"),
}


class ClarityCredentials(BaseModel):
    """Connection credentials for one Clarity PPM instance."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    host: str = Field(..., min_length=1, description="Base URL, including port if not standard")
    auth_type: AuthType = Field(
        default=AuthType.API_KEY, alias="authType", description="Authentication method"
    )
    username: Optional[str] = Field(default=None, description="Username (basic, token)")
    password: Optional[str] = Field(default=None, description="Password (basic, token)")
    api_key: Optional[str] = Field(default=None, alias="apiKey", description="JWT API key")
    client_id: Optional[str] = Field(
        default=None, alias="clientId", description="Client application identifier"
    )

    @field_validator("host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the host without a trailing slash for path concatenation."""
        return v.strip().rstrip("/")

    @property
    def base_url(self) -> str:
        """Root of the REST API for this host."""
        return f"{self.host}{ApiPath.BASE}"

    def missing_fields(self) -> List[str]:
        """Names of fields the selected auth type needs but does not have."""
        required = REQUIRED_FIELDS_BY_AUTH_TYPE[self.auth_type]
        return [name for name in required if not getattr(self, name)]

    @classmethod
    def from_env(cls) -> "ClarityCredentials":
        """
        Build credentials from CLARITY_* environment variables.

        Raises:
            ConfigError: If CLARITY_HOST is not set
        """
        host = os.getenv(EnvironmentVariable.CLARITY_HOST.value, "").strip()
        if not host:
            raise ConfigError(
                f"{EnvironmentVariable.CLARITY_HOST.value} is not set", missing_fields=["host"]
            )
        return cls(
            host=host,
            auth_type=os.getenv(EnvironmentVariable.CLARITY_AUTH_TYPE.value, AuthType.API_KEY.value),
            username=os.getenv(EnvironmentVariable.CLARITY_USERNAME.value) or None,
            password=os.getenv(EnvironmentVariable.CLARITY_PASSWORD.value) or None,
            api_key=os.getenv(EnvironmentVariable.CLARITY_API_KEY.value) or None,
            client_id=os.getenv(EnvironmentVariable.CLARITY_CLIENT_ID.value) or None,
        )
