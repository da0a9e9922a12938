"""Local engines that need no network.

UppercaseTranslationEngine is handy for spotting which strings went through
the chain while developing a UI; IdentityTranslationEngine keeps a chain slot
occupied without changing the text.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dyntranslator.engines.base import BaseTranslationEngine

__all__ = ["IdentityTranslationEngine", "UppercaseTranslationEngine"]


class UppercaseTranslationEngine(BaseTranslationEngine):
    """Uppercases text. Inline: applied even to natively localized strings."""

    def translate(self, text: str, target: str) -> str:
        return text.upper()

    async def translate_async(self, text: str, target: str) -> str:
        return text.upper()


class IdentityTranslationEngine(BaseTranslationEngine):
    """Returns text unchanged.

    Stands in for a network engine in a chain, so it keeps the default
    non-inline capability and is subject to the connectivity check.

    Args:
        enabled: Whether the engine takes part in the chain
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled

    def translate(self, text: str, target: str) -> str:
        return text

    async def translate_async(self, text: str, target: str) -> str:
        return text

    def is_enabled(self) -> bool:
        return self._enabled
