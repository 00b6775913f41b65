"""Generative language model adapters.

Each adapter sends the same prompt asking for a JSON object and extracts the
first ``{...}`` block from the model's free-text reply. A reply yields
exactly one raw candidate.
"""

from abc import abstractmethod
from typing import Any

import httpx

from ..core.classifier import guess_category, guess_level
from ..core.constants import ProviderConstants
from ..core.text_processor import TextProcessor
from ..exceptions import ParseError
from ..models.results import RawCandidate
from ..models.vocabulary import CEFRLevel, VocabularyRecord
from .base import BaseProvider

SYSTEM_PROMPT = "You are a German language expert."

PROMPT_TEMPLATE = """For the word "{word}" (language: {source_lang}), provide:

1. Correct German article (der, die, das) if it is a noun
2. Translation into {target_lang}
3. Pronunciation in IPA format
4. A simple example sentence in the source language
5. A short grammar note (plural, conjugation class or similar)
6. Word type (noun, verb, adjective, adverb)
7. CEFR level (A1, A2, B1, B2, C1, C2)
8. Category (e.g. food, family, transport)

Respond ONLY in this JSON format:
{{
  "article": "der|die|das|null",
  "translation": "translation",
  "pronunciation": "IPA pronunciation",
  "example_sentence": "example sentence",
  "grammar_note": "grammar note",
  "word_type": "noun|verb|adjective|adverb",
  "level": "A1|A2|B1|B2|C1|C2",
  "category": "category_name"
}}"""

REQUIRED_FIELDS = ("word_type", "level", "category")
MAX_TOKENS = 200
TEMPERATURE = 0.1
VALID_LEVELS = {level.value for level in CEFRLevel}


def build_prompt(word: str, source_lang: str = "de", target_lang: str = "en") -> str:
    return PROMPT_TEMPLATE.format(
        word=word, source_lang=source_lang, target_lang=target_lang
    )


class GenerativeProvider(BaseProvider):
    """Common reply handling for chat-style model APIs"""

    kind = "generative"

    def __init__(
        self,
        client: httpx.AsyncClient,
        model: str,
        timeout: float = 30.0,
    ):
        super().__init__(client, timeout)
        self.model = model

    async def _fetch(self, word: str, source_lang: str, target_lang: str) -> Any:
        data = await self._complete(build_prompt(word, source_lang, target_lang))
        try:
            return self._extract_text(data)
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError(self.id, "unexpected reply envelope", data) from e

    @abstractmethod
    async def _complete(self, prompt: str) -> Any:
        """Send the prompt, returning the decoded JSON envelope"""
        pass

    @abstractmethod
    def _extract_text(self, data: Any) -> str:
        """Pull the model's text out of the reply envelope"""
        pass

    def _split(self, data: Any, word: str) -> list[RawCandidate]:
        try:
            parsed = TextProcessor.extract_json_object(data)
        except ValueError as e:
            raise ParseError(self.id, str(e), data) from e
        return [self._candidate(parsed)]

    def _build(self, payload: dict[str, Any], word: str) -> VocabularyRecord:
        missing = [name for name in REQUIRED_FIELDS if name not in payload]
        if missing:
            raise ParseError(
                self.id, f"reply is missing {', '.join(missing)}", payload
            )

        translation = str(payload.get("translation") or "")
        level = str(payload.get("level") or "").strip().upper()
        if level not in VALID_LEVELS:
            level = guess_level(word)

        return VocabularyRecord(
            word=word,
            article=payload.get("article"),
            translation=translation,
            pronunciation=payload.get("pronunciation"),
            example_sentence=TextProcessor.clean_text(payload.get("example_sentence")),
            grammar_note=payload.get("grammar_note"),
            word_type=payload.get("word_type"),
            level=level,
            category=payload.get("category") or guess_category(word, translation),
            confidence=ProviderConstants.GENERATIVE_CONFIDENCE,
            source=self.id,
        )


class OpenAICompatibleProvider(GenerativeProvider):
    """Chat completions endpoint shared by OpenAI and Groq"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        provider_id: str,
        api_key: str | None,
        url: str,
        model: str,
        timeout: float = 30.0,
    ):
        super().__init__(client, model, timeout)
        self.id = provider_id
        self.api_key = api_key
        self.url = url

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _complete(self, prompt: str) -> Any:
        return await self._request(
            "POST",
            self.url,
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                "max_tokens": MAX_TOKENS,
                "temperature": TEMPERATURE,
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    def _extract_text(self, data: Any) -> str:
        return data["choices"][0]["message"]["content"]


class AnthropicProvider(GenerativeProvider):
    """Anthropic messages endpoint"""

    id = ProviderConstants.ANTHROPIC

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        model: str = "claude-3-haiku-20240307",
        url: str = ProviderConstants.ANTHROPIC_URL,
        timeout: float = 30.0,
    ):
        super().__init__(client, model, timeout)
        self.api_key = api_key
        self.url = url

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _complete(self, prompt: str) -> Any:
        return await self._request(
            "POST",
            self.url,
            json={
                "model": self.model,
                "max_tokens": MAX_TOKENS,
                "system": SYSTEM_PROMPT,
                "messages": [{"role": "user", "content": prompt}],
            },
            headers={
                "x-api-key": self.api_key or "",
                "anthropic-version": ProviderConstants.ANTHROPIC_VERSION,
            },
        )

    def _extract_text(self, data: Any) -> str:
        return data["content"][0]["text"]


class OllamaProvider(GenerativeProvider):
    """Local Ollama generate endpoint; enabled only when a URL is configured"""

    id = ProviderConstants.OLLAMA

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str | None,
        model: str = "llama3.1:8b",
        timeout: float = 30.0,
    ):
        super().__init__(client, model, timeout)
        self.url = url

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    async def _complete(self, prompt: str) -> Any:
        return await self._request(
            "POST",
            self.url or "",
            json={
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": TEMPERATURE, "top_p": 0.9},
            },
        )

    def _extract_text(self, data: Any) -> str:
        return data["response"]
