"""Client factory keyed on the configured provider."""

from __future__ import annotations

import logging

import httpx

from .config import ClientConfig
from .exceptions import UnsupportedProviderError
from .providers.azure import AzureOpenAIClient
from .providers.base import BaseLLMClient
from .providers.cohere import CohereClient
from .providers.openai import OpenAICompatibleClient
from .providers.qwen import API_MODE_LEGACY, QwenClient, QwenLegacyClient, resolve_api_mode
from .types import ProviderName

logger = logging.getLogger(__name__)


def new_client(
    config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> BaseLLMClient:
    """Build the adapter matching ``config.provider``.

    *transport* replaces the HTTP transport of the adapter, which is how tests
    stub the remote API.
    """

    try:
        provider = ProviderName(config.provider)
    except ValueError as exc:
        raise UnsupportedProviderError(f"unsupported LLM provider: {config.provider}") from exc

    match provider:
        case ProviderName.OPENAI | ProviderName.DEEPSEEK:
            client = new_openai_compatible_client(config, transport=transport)
        case ProviderName.QWEN:
            client = new_qwen_client(config, transport=transport)
        case ProviderName.AZURE:
            client = new_azure_client(config, transport=transport)
        case ProviderName.COHERE:
            client = new_cohere_client(config, transport=transport)

    logger.debug("Created %s client for %s", type(client).__name__, client.config.base_url)
    return client


def new_openai_compatible_client(
    config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> OpenAICompatibleClient:
    """Client for OpenAI-compatible APIs (OpenAI, DeepSeek)."""

    return OpenAICompatibleClient(config, transport=transport)


def new_qwen_client(
    config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> QwenClient | QwenLegacyClient:
    if resolve_api_mode(config) == API_MODE_LEGACY:
        return QwenLegacyClient(config, transport=transport)
    return QwenClient(config, transport=transport)


def new_azure_client(
    config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> AzureOpenAIClient:
    return AzureOpenAIClient(config, transport=transport)


def new_cohere_client(
    config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> CohereClient:
    return CohereClient(config, transport=transport)


__all__ = (
    "new_azure_client",
    "new_client",
    "new_cohere_client",
    "new_openai_compatible_client",
    "new_qwen_client",
)
