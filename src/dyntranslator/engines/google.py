"""Network-backed engine using the public Google Translate endpoint.

Calls the keyless ``translate_a/single`` endpoint (client "gtx"), letting
Google auto-detect the source language. The response is a nested JSON array
whose first element lists translated sentence chunks:

    [[["Hola mundo", "Hello world", null, null, 10]], null, "en", ...]

The engine keeps one requests.Session for connection pooling. All transport
and decoding problems are raised as TranslationEngineError so the pipeline
can recover from them.

Python 3.13+. Uses requests for HTTP.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from dyntranslator.constants import DEFAULT_HTTP_TIMEOUT, GOOGLE_TRANSLATE_URL
from dyntranslator.engines.base import BaseTranslationEngine
from dyntranslator.errors import TranslationEngineError
from dyntranslator.locale_utils import split_locale

__all__ = ["GoogleTranslateEngine"]

logger = logging.getLogger(__name__)


class GoogleTranslateEngine(BaseTranslationEngine):
    """Machine translation through translate.googleapis.com.

    Uses the target locale's language subtag only; regional variants are
    translated with the base language.

    Example:
        >>> engine = GoogleTranslateEngine()
        >>> engine.translate("Hello world", "es")  # doctest: +SKIP
        'Hola Mundo'

    Attributes:
        url: Endpoint URL
        timeout: Per-request HTTP timeout in seconds
        source_language: Source language, "auto" for detection
    """

    def __init__(
        self,
        *,
        url: str = GOOGLE_TRANSLATE_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        source_language: str = "auto",
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            url: Endpoint URL (overridable for proxies and tests)
            timeout: Per-request HTTP timeout in seconds
            source_language: Source language code, "auto" for detection
            session: Pre-configured session; a new one is created if omitted
        """
        self.url = url
        self.timeout = timeout
        self.source_language = source_language
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "dyntranslator/1.0"})

    def translate(self, text: str, target: str) -> str:
        if not text.strip():
            return text

        language, _ = split_locale(target)
        params = {
            "client": "gtx",
            "sl": self.source_language,
            "tl": language,
            "dt": "t",
            "q": text,
        }
        try:
            response = self._session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            msg = f"Translation request failed: {e}"
            raise TranslationEngineError(
                msg, engine_name=type(self).__name__, locale_code=target
            ) from e
        except ValueError as e:
            msg = f"Translation response is not valid JSON: {e}"
            raise TranslationEngineError(
                msg, engine_name=type(self).__name__, locale_code=target
            ) from e

        translated = self._extract_text(payload, target)
        logger.debug("Translated %d chars to '%s'", len(text), language)
        return translated

    def _extract_text(self, payload: Any, target: str) -> str:
        """Join the translated sentence chunks of a response payload.

        Raises:
            TranslationEngineError: If the payload does not have the expected shape
        """
        try:
            chunks = payload[0]
            return "".join(chunk[0] for chunk in chunks if chunk and chunk[0])
        except (TypeError, IndexError, KeyError) as e:
            msg = f"Unexpected translation response shape: {payload!r:.200}"
            raise TranslationEngineError(
                msg, engine_name=type(self).__name__, locale_code=target
            ) from e

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self._session.close()

    def __repr__(self) -> str:
        return f"GoogleTranslateEngine(url={self.url!r}, timeout={self.timeout})"
