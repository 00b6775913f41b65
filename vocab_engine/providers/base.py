"""Shared HTTP plumbing and error mapping for provider adapters"""

import asyncio
from abc import abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError

from ..core.interfaces import VocabularyProviderInterface
from ..exceptions import (
    ParseError,
    ProviderConfigError,
    ProviderError,
    ProviderNetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
)
from ..logging_config import get_logger
from ..models.results import RawCandidate
from ..models.vocabulary import VocabularyRecord

logger = get_logger(__name__)


def clamp(value: Any, low: float, high: float, default: float) -> float:
    """Coerce a provider-reported number into ``[low, high]``"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


class BaseProvider(VocabularyProviderInterface):
    """Adapter skeleton: credential check, bounded request, reply splitting.

    Subclasses supply ``_fetch`` (the HTTP exchange), ``_split`` (reply to
    raw candidates) and ``_build`` (one raw candidate to a record).
    """

    id = ""
    kind = "dictionary"

    def __init__(self, client: httpx.AsyncClient, timeout: float = 10.0):
        self._client = client
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} configured={self.is_configured}>"

    async def search(
        self, word: str, source_lang: str = "de", target_lang: str = "en"
    ) -> list[RawCandidate]:
        if not self.is_configured:
            raise ProviderConfigError(self.id, "credential or endpoint not configured")

        try:
            data = await asyncio.wait_for(
                self._fetch(word, source_lang, target_lang), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                self.id, f"no reply within {self.timeout:g}s", e
            ) from e

        if data is None:
            return []
        return self._split(data, word)

    def normalize(self, raw: RawCandidate, word: str) -> VocabularyRecord:
        try:
            return self._build(raw.payload, word)
        except ParseError:
            raise
        except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise ParseError(self.id, str(e), raw.payload) from e

    @abstractmethod
    async def _fetch(self, word: str, source_lang: str, target_lang: str) -> Any:
        """Perform the HTTP exchange and return decoded JSON (None for no content)"""
        pass

    @abstractmethod
    def _split(self, data: Any, word: str) -> list[RawCandidate]:
        """Split a decoded reply into raw candidates, raising ParseError if malformed"""
        pass

    @abstractmethod
    def _build(self, payload: dict[str, Any], word: str) -> VocabularyRecord:
        pass

    def _candidate(self, payload: dict[str, Any]) -> RawCandidate:
        return RawCandidate(provider_id=self.id, payload=payload)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Issue one request and map transport and status failures"""
        try:
            response = await self._client.request(
                method, url, timeout=self.timeout, **kwargs
            )
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.id, "request timed out", e) from e
        except httpx.RequestError as e:
            raise ProviderNetworkError(self.id, f"request failed: {e}", e) from e

        self._check_status(response)
        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(self.id, "reply is not valid JSON", response.text) from e

    def _check_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        error: ProviderError
        if status == 429:
            error = QuotaExceededError(self.id, "rate limit or quota reached (HTTP 429)")
        elif status in (401, 403):
            error = ProviderConfigError(self.id, f"credential rejected (HTTP {status})")
        else:
            error = ProviderNetworkError(self.id, f"unexpected HTTP status {status}")
        logger.debug(f"{self.id} replied {status}: {response.text[:200]}")
        raise error
