"""PONS online dictionary adapter"""

from typing import Any

import httpx

from ..core.classifier import guess_category, guess_level
from ..core.constants import ProviderConstants
from ..core.text_processor import TextProcessor
from ..exceptions import ParseError
from ..models.results import RawCandidate
from ..models.vocabulary import VocabularyRecord, WordType
from .base import BaseProvider

# PONS "wordclass" values mapped onto the coarse word types
WORDCLASS_MAP = {
    "noun": WordType.NOUN,
    "verb": WordType.VERB,
    "adjective": WordType.ADJECTIVE,
    "adverb": WordType.ADVERB,
}


class PonsProvider(BaseProvider):
    """Dictionary lookups against the PONS API.

    One raw candidate is produced per ``arab`` block of the reply, which is
    nested as ``[{hits: [{roms: [{arabs: [...]}]}]}]``.
    """

    id = ProviderConstants.PONS
    kind = "dictionary"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = "https://api.pons.com/v1",
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
            f"{self.base_url}/dictionary",
            params={
                "q": word,
                "l": f"{source_lang}{target_lang}",
                "in": source_lang,
                "format": "json",
            },
            headers={"X-Secret": self.api_key or ""},
        )

    def _split(self, data: Any, word: str) -> list[RawCandidate]:
        if not isinstance(data, list):
            raise ParseError(self.id, "expected a list of language blocks", data)

        candidates: list[RawCandidate] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            for hit in entry.get("hits") or []:
                if not isinstance(hit, dict):
                    continue
                for rom in hit.get("roms") or []:
                    if not isinstance(rom, dict):
                        continue
                    for arab in rom.get("arabs") or []:
                        candidates.append(
                            self._candidate(
                                {
                                    "arab": arab,
                                    "headword_full": rom.get("headword_full", ""),
                                    "wordclass": rom.get("wordclass", ""),
                                }
                            )
                        )
        return candidates

    def _build(self, payload: dict[str, Any], word: str) -> VocabularyRecord:
        arab = payload["arab"]
        if not isinstance(arab, dict):
            raise ParseError(self.id, "arab block is not an object", arab)

        translation = ""
        for item in arab.get("translations") or []:
            target = TextProcessor.clean_text(item.get("target"))
            if target:
                translation = target
                break
        if not translation:
            raise ParseError(self.id, "candidate has no translation", arab)

        header = TextProcessor.clean_text(
            arab.get("header") or payload.get("headword_full")
        )
        headword = TextProcessor.extract_word(header, word)

        examples = arab.get("examples") or []
        example = TextProcessor.clean_text(examples[0].get("source")) if examples else ""

        article = TextProcessor.extract_article(header)
        wordclass = str(payload.get("wordclass") or "").lower()
        word_type = WORDCLASS_MAP.get(wordclass.split()[0] if wordclass else "")
        if word_type is None:
            word_type = WordType.NOUN if article else WordType.UNKNOWN

        return VocabularyRecord(
            word=headword,
            article=article,
            translation=translation,
            pronunciation=TextProcessor.extract_pronunciation(header),
            example_sentence=example,
            grammar_note=TextProcessor.extract_grammar(header),
            word_type=word_type,
            level=guess_level(headword),
            category=guess_category(headword, translation),
            confidence=ProviderConstants.DICTIONARY_CONFIDENCE,
            source=self.id,
        )
