"""Provider adapters for external dictionaries and language models"""

import httpx

from ..config.settings import ProviderSettings
from ..core.constants import ProviderConstants
from .base import BaseProvider
from .generative import (
    AnthropicProvider,
    GenerativeProvider,
    OllamaProvider,
    OpenAICompatibleProvider,
)
from .linguatools import LinguatoolsProvider
from .pons import PonsProvider


def build_providers(
    config: ProviderSettings, client: httpx.AsyncClient
) -> list[BaseProvider]:
    """All adapters in fixed priority order, configured or not"""
    dictionary_timeout = config.dictionary_timeout
    generative_timeout = config.generative_timeout
    return [
        PonsProvider(
            client, config.pons_api_key, config.pons_base_url, dictionary_timeout
        ),
        LinguatoolsProvider(
            client,
            config.linguatools_api_key,
            config.linguatools_base_url,
            dictionary_timeout,
        ),
        OpenAICompatibleProvider(
            client,
            ProviderConstants.GROQ,
            config.groq_api_key,
            ProviderConstants.GROQ_URL,
            config.groq_model,
            generative_timeout,
        ),
        OpenAICompatibleProvider(
            client,
            ProviderConstants.OPENAI,
            config.openai_api_key,
            config.openai_base_url,
            config.openai_model,
            generative_timeout,
        ),
        AnthropicProvider(
            client,
            config.anthropic_api_key,
            config.anthropic_model,
            timeout=generative_timeout,
        ),
        OllamaProvider(
            client, config.ollama_url, config.ollama_model, generative_timeout
        ),
    ]


__all__ = [
    "BaseProvider",
    "GenerativeProvider",
    "PonsProvider",
    "LinguatoolsProvider",
    "OpenAICompatibleProvider",
    "AnthropicProvider",
    "OllamaProvider",
    "build_providers",
]
