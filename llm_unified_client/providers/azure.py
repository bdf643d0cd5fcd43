"""Azure OpenAI provider adapter."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from ..config import ClientConfig
from ..exceptions import ConfigurationError
from ..types import ProviderName, Request, Response
from .base import BaseLLMClient, apply_sampling_parameters, convert_messages
from .openai import OPENAI_PARAMETERS, parse_chat_completion

DEFAULT_API_VERSION = "2023-12-01-preview"
# Informational only: Azure selects the model through the deployment path.
DEFAULT_DEPLOYMENT_MODEL = "gpt-35-turbo"


class AzureOpenAIClient(BaseLLMClient):
    """Adapter for Azure OpenAI deployments.

    ``base_url`` must point at a deployment, e.g.
    ``https://<resource>.openai.azure.com/openai/deployments/<deployment>``.
    """

    display_name = "Azure OpenAI"

    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not config.api_key:
            raise ConfigurationError("API key is required")
        if not config.base_url:
            raise ConfigurationError("base URL is required for Azure OpenAI")
        if "/deployments/" not in config.base_url:
            raise ConfigurationError(
                "Azure OpenAI URL must include deployment name: /deployments/<deployment-name>"
            )

        config = config.model_copy(
            deep=True,
            update={"default_model": config.default_model or DEFAULT_DEPLOYMENT_MODEL}
        )
        self._api_version = str(config.extra_config.get("api_version") or DEFAULT_API_VERSION)
        super().__init__(
            ProviderName.AZURE.value,
            config,
            default_headers={"api-key": config.api_key},
            transport=transport,
        )

    def _chat_endpoint(self) -> str:
        return "/chat/completions"

    def _query_params(self) -> dict[str, str]:
        return {"api-version": self._api_version}

    def _build_payload(self, request: Request) -> Mapping[str, Any]:
        payload: dict[str, Any] = {
            "messages": convert_messages(request.messages),
            "stream": request.stream,
        }
        apply_sampling_parameters(payload, request, self.config, names=OPENAI_PARAMETERS)
        payload.update(request.extra_params)
        return payload

    def _parse_response(self, data: Mapping[str, Any]) -> Response:
        return parse_chat_completion(data, provider=self.name, display_name=self.display_name)


__all__ = ("AzureOpenAIClient",)
