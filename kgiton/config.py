"""
Configuration management for the KGiTON SDK.
"""

from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.kgiton.com"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 1000


class GatewayConfig(BaseSettings):
    """Settings for the request gateway.

    Values come from keyword arguments first, then ``KGITON_*`` environment
    variables, then a local ``.env`` file, then the defaults below. For
    example ``KGITON_API_KEY=kgiton_xxx`` installs an API key without
    touching code.
    """

    model_config = SettingsConfigDict(
        env_prefix="KGITON_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default=DEFAULT_BASE_URL)

    # Credentials: api_key wins over access_token when both are present
    api_key: Optional[str] = Field(default=None)
    access_token: Optional[str] = Field(default=None)

    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    debug: bool = Field(default=False)
    headers: Dict[str, str] = Field(default_factory=dict)

    # Retry policy
    retry_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=1)
    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    max_retry_delay_ms: Optional[int] = Field(default=None, ge=0)

    log_level: str = Field(default="info")

    @property
    def effective_credential(self) -> Optional[str]:
        """The credential the gateway will send, if any."""
        if self.api_key:
            return self.api_key
        if self.access_token:
            return self.access_token
        return None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    def merged(self, **changes: Any) -> "GatewayConfig":
        """Return a copy with every non-None value in ``changes`` applied.

        ``None`` never clears a field; credentials are only removed through
        :meth:`kgiton.http_client.HttpClient.clear_auth`.
        """
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise TypeError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

        updates = {key: value for key, value in changes.items() if value is not None}
        if not updates:
            return self
        data = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)

    def without_credentials(self) -> "GatewayConfig":
        return self.model_copy(update={"api_key": None, "access_token": None})


def get_config(**overrides: Any) -> GatewayConfig:
    """Build a gateway configuration, ignoring overrides that are None."""
    return GatewayConfig(**{key: value for key, value in overrides.items() if value is not None})
