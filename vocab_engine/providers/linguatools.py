"""Linguatools translation dictionary adapter"""

from typing import Any

import httpx

from ..core.classifier import guess_category, guess_level
from ..core.constants import ProviderConstants
from ..core.text_processor import TextProcessor
from ..exceptions import ParseError
from ..models.results import RawCandidate
from ..models.vocabulary import VocabularyRecord, WordType
from .base import BaseProvider, clamp


class LinguatoolsProvider(BaseProvider):
    """Dictionary lookups against the Linguatools API.

    Replies carry a ``translations`` list; each entry becomes one candidate.
    """

    id = ProviderConstants.LINGUATOOLS
    kind = "dictionary"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = "https://api.linguatools.org/v1",
        timeout: float = 10.0,
    ):
        super().__init__(client, timeout)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _fetch(self, word: str, source_lang: str, target_lang: str) -> Any:
        return await self._request(
            "GET",
            f"{self.base_url}/translate",
            params={"q": word, "src": source_lang, "dst": target_lang, "format": "json"},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    def _split(self, data: Any, word: str) -> list[RawCandidate]:
        if not isinstance(data, dict) or not isinstance(
            data.get("translations", []), list
        ):
            raise ParseError(self.id, "expected an object with a translations list", data)
        return [self._candidate(item) for item in data.get("translations", [])]

    def _build(self, payload: dict[str, Any], word: str) -> VocabularyRecord:
        if not isinstance(payload, dict):
            raise ParseError(self.id, "translation entry is not an object", payload)

        translation = TextProcessor.clean_text(payload.get("target"))
        if not translation:
            raise ParseError(self.id, "candidate has no target", payload)

        source_text = TextProcessor.clean_text(payload.get("source")) or word
        headword = TextProcessor.extract_word(source_text, word)
        article = TextProcessor.extract_article(source_text)

        return VocabularyRecord(
            word=headword,
            article=article,
            translation=translation,
            pronunciation=payload.get("pronunciation")
            or TextProcessor.extract_pronunciation(source_text),
            example_sentence=TextProcessor.clean_text(payload.get("example")),
            grammar_note=TextProcessor.extract_grammar(source_text),
            word_type=WordType.NOUN if article else WordType.UNKNOWN,
            level=guess_level(headword),
            category=guess_category(headword, translation),
            confidence=clamp(
                payload.get("confidence"),
                0.0,
                1.0,
                ProviderConstants.DICTIONARY_CONFIDENCE,
            ),
            frequency=int(clamp(payload.get("frequency"), 0, 10, 0)),
            source=self.id,
        )
