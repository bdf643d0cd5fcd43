"""Provider specific LLM adapter implementations."""

from .azure import AzureOpenAIClient
from .base import BaseLLMClient
from .cohere import CohereClient
from .openai import OpenAICompatibleClient
from .qwen import QwenClient, QwenLegacyClient

__all__ = (
    "AzureOpenAIClient",
    "BaseLLMClient",
    "CohereClient",
    "OpenAICompatibleClient",
    "QwenClient",
    "QwenLegacyClient",
)
