"""Configuration model consumed by the provider adapters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import ProviderName

DEFAULT_TIMEOUT = 30.0


class ClientConfig(BaseModel):
    """Settings for a single provider client.

    ``provider`` keeps unknown tags as plain strings so the factory can report
    them as unsupported instead of failing validation here.
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderName | str = Field(..., description="Provider tag used to select an adapter")
    api_key: str = Field("", description="API key used for authentication")
    base_url: str | None = Field(default=None, description="Base URL for the provider API")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="HTTP request timeout in seconds")
    default_model: str | None = Field(default=None, description="Model used when a request sets none")
    default_temperature: float | None = Field(default=None, ge=0)
    default_max_tokens: int | None = Field(default=None, ge=0)
    default_top_p: float | None = Field(default=None, ge=0, le=1)
    default_top_k: int | None = Field(default=None, ge=0)
    extra_config: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider specific settings such as the Qwen api_mode or Azure api_version",
    )

    @field_validator("provider", mode="before")
    @classmethod
    def _coerce_provider(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, ProviderName):
            try:
                return ProviderName(value.strip().lower())
            except ValueError:
                return value
        return value


__all__ = ("ClientConfig", "DEFAULT_TIMEOUT")
