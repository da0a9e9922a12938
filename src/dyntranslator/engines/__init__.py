"""Translation engines for the DynTranslator chain.

Submodules:
    base   - TranslationEngine protocol, BaseTranslationEngine, capability probes
    google - GoogleTranslateEngine (network-backed, default chain member)
    simple - UppercaseTranslationEngine, IdentityTranslationEngine (local)

Python 3.13+.
"""

from dyntranslator.engines.base import (
    BaseTranslationEngine,
    TranslationEngine,
    engine_is_enabled,
    engine_is_inline,
    engine_name,
)
from dyntranslator.engines.google import GoogleTranslateEngine
from dyntranslator.engines.simple import IdentityTranslationEngine, UppercaseTranslationEngine

__all__ = [
    "BaseTranslationEngine",
    "GoogleTranslateEngine",
    "IdentityTranslationEngine",
    "TranslationEngine",
    "UppercaseTranslationEngine",
    "engine_is_enabled",
    "engine_is_inline",
    "engine_name",
]
