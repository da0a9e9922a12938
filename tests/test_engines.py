"""Tests for built-in translation engines and capability probes."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest
import requests

from dyntranslator.constants import GOOGLE_TRANSLATE_URL
from dyntranslator.engines import (
    BaseTranslationEngine,
    GoogleTranslateEngine,
    IdentityTranslationEngine,
    UppercaseTranslationEngine,
    engine_is_enabled,
    engine_is_inline,
    engine_name,
)
from dyntranslator.errors import TranslationEngineError
from tests.helpers.fakes import MinimalEngine


def _session_returning(payload: object) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    session = MagicMock()
    session.headers = {}
    session.get.return_value = response
    return session


class TestGoogleTranslateEngine:
    """HTTP engine with a mocked requests.Session."""

    def test_joins_sentence_chunks(self) -> None:
        session = _session_returning(
            [[["Hola ", "Hello ", None, None, 10], ["mundo", "world", None, None, 10]], None, "en"]
        )
        engine = GoogleTranslateEngine(session=session)

        assert engine.translate("Hello world", "es_MX") == "Hola mundo"

    def test_request_parameters(self) -> None:
        session = _session_returning([[["Hola", "Hello"]]])
        engine = GoogleTranslateEngine(session=session, timeout=3.0)
        engine.translate("Hello", "pt_BR")

        session.get.assert_called_once_with(
            GOOGLE_TRANSLATE_URL,
            params={"client": "gtx", "sl": "auto", "tl": "pt", "dt": "t", "q": "Hello"},
            timeout=3.0,
        )

    def test_sets_user_agent(self) -> None:
        session = _session_returning([[["x"]]])
        GoogleTranslateEngine(session=session)
        assert session.headers["User-Agent"].startswith("dyntranslator/")

    def test_blank_input_skips_request(self) -> None:
        session = _session_returning([[["x"]]])
        engine = GoogleTranslateEngine(session=session)

        assert engine.translate("  ", "es") == "  "
        session.get.assert_not_called()

    def test_network_error_wrapped(self) -> None:
        session = _session_returning(None)
        session.get.side_effect = requests.ConnectionError("unreachable")
        engine = GoogleTranslateEngine(session=session)

        with pytest.raises(TranslationEngineError, match="Translation request failed") as exc_info:
            engine.translate("Hello", "es")
        assert exc_info.value.engine_name == "GoogleTranslateEngine"
        assert exc_info.value.locale_code == "es"

    def test_http_error_wrapped(self) -> None:
        session = _session_returning(None)
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("429")
        engine = GoogleTranslateEngine(session=session)

        with pytest.raises(TranslationEngineError):
            engine.translate("Hello", "es")

    def test_invalid_json_wrapped(self) -> None:
        session = _session_returning(None)
        session.get.return_value.json.side_effect = ValueError("no json")
        engine = GoogleTranslateEngine(session=session)

        with pytest.raises(TranslationEngineError, match="not valid JSON"):
            engine.translate("Hello", "es")

    @pytest.mark.parametrize("payload", [None, [], {"a": 1}, 5])
    def test_unexpected_shape(self, payload: object) -> None:
        engine = GoogleTranslateEngine(session=_session_returning(payload))

        with pytest.raises(TranslationEngineError, match="Unexpected translation response"):
            engine.translate("Hello", "es")

    def test_async_runs_in_thread(self) -> None:
        engine = GoogleTranslateEngine(session=_session_returning([[["Hola"]]]))
        assert asyncio.run(engine.translate_async("Hello", "es")) == "Hola"

    def test_network_engine_capabilities(self) -> None:
        engine = GoogleTranslateEngine(session=_session_returning([]))
        assert engine_is_enabled(engine)
        assert not engine_is_inline(engine)

    def test_close_closes_session(self) -> None:
        session = _session_returning([])
        GoogleTranslateEngine(session=session).close()
        session.close.assert_called_once()


class TestLocalEngines:
    def test_uppercase(self) -> None:
        engine = UppercaseTranslationEngine()
        assert engine.translate("Adiós", "es") == "ADIÓS"
        assert asyncio.run(engine.translate_async("hi", "es")) == "HI"
        assert engine_is_inline(engine)

    def test_identity(self) -> None:
        engine = IdentityTranslationEngine()
        assert engine.translate("same", "es") == "same"
        assert engine_is_enabled(engine)
        assert not engine_is_inline(engine)

    def test_identity_disabled(self) -> None:
        assert not engine_is_enabled(IdentityTranslationEngine(enabled=False))

    def test_repr(self) -> None:
        assert repr(UppercaseTranslationEngine()) == "UppercaseTranslationEngine()"


class TestCapabilityProbes:
    """Engines that only implement translate() get default capabilities."""

    def test_minimal_engine_defaults(self) -> None:
        engine = MinimalEngine()
        assert engine_is_enabled(engine)
        assert not engine_is_inline(engine)
        assert engine_name(engine) == "MinimalEngine"

    def test_base_requires_translate(self) -> None:
        with pytest.raises(TypeError):
            BaseTranslationEngine()  # type: ignore[abstract]

    def test_base_async_default(self) -> None:
        class Reverse(BaseTranslationEngine):
            def translate(self, text: str, target: str) -> str:
                return text[::-1]

        assert asyncio.run(Reverse().translate_async("abc", "es")) == "cba"
