"""Environment driven settings for building a client configuration."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import DEFAULT_TIMEOUT, ClientConfig


class LLMSettings(BaseSettings):
    """Client settings read from ``LLM_*`` environment variables or ``.env``.

    The adapters never read the environment themselves; this is a convenience
    for applications that keep credentials there.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=(".env",),
        extra="ignore",
    )

    provider: str = Field(default="openai", description="Provider tag passed to the client factory.")
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LLM_API_KEY", "LLM_PROVIDER_API_KEY"),
        description="Credential used to authenticate with the provider.",
    )
    base_url: str | None = Field(default=None, description="Override for the provider base URL.")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds.")
    default_model: str | None = Field(default=None)
    default_temperature: float | None = Field(default=None)
    default_max_tokens: int | None = Field(default=None)
    default_top_p: float | None = Field(default=None)
    default_top_k: int | None = Field(default=None)
    extra_config: dict[str, Any] = Field(
        default_factory=dict,
        description="JSON object of provider specific settings.",
    )

    @field_validator("base_url", "default_model", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_client_config(self) -> ClientConfig:
        """Build the :class:`ClientConfig` described by these settings."""

        return ClientConfig(
            provider=self.provider,
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            default_model=self.default_model,
            default_temperature=self.default_temperature,
            default_max_tokens=self.default_max_tokens,
            default_top_p=self.default_top_p,
            default_top_k=self.default_top_k,
            extra_config=dict(self.extra_config),
        )


@lru_cache()
def get_settings() -> LLMSettings:
    """Return a cached instance of the client settings."""

    return LLMSettings()


__all__ = ("LLMSettings", "get_settings")
