"""Translation engine capability interface.

An engine transforms (text, target locale) into text. Engines are chained:
each receives the previous engine's output. They are pluggable components;
the pipeline only relies on the structural interface below.

Components:
    TranslationEngine - Protocol every engine satisfies (structural typing)
    BaseTranslationEngine - Convenience base with the optional capabilities
        filled in (enabled, not inline, async via worker thread)
    engine_name / engine_is_enabled / engine_is_inline - Capability probes
        tolerant of engines that only implement translate()

Python 3.13+.
"""

from __future__ import annotations

import asyncio
from abc import abstractmethod
from typing import Protocol

__all__ = [
    "BaseTranslationEngine",
    "TranslationEngine",
    "engine_is_enabled",
    "engine_is_inline",
    "engine_name",
]


class TranslationEngine(Protocol):
    """Protocol for text-transforming translation engines.

    This is a Protocol (structural typing) rather than ABC so any object with
    matching methods can join the chain. is_enabled() and is_inline() are
    optional capabilities; engines lacking them count as enabled and not
    inline.

    Engines must not touch the pipeline's state. Caching or rate limiting
    inside an engine is the engine's own concern. Calling an engine twice
    with the same input must be safe.

    Example:
        >>> class ReverseEngine:
        ...     def translate(self, text: str, target: str) -> str:
        ...         return text[::-1]
        ...     async def translate_async(self, text: str, target: str) -> str:
        ...         return text[::-1]
        ...
        >>> translator.add_engine(ReverseEngine())
    """

    def translate(self, text: str, target: str) -> str:
        """Translate text, blocking the calling thread.

        Args:
            text: Source text (already formatted)
            target: Canonical target locale code (e.g., "es", "pt_BR")

        Returns:
            Translated text. Blank output means "no translation".

        Raises:
            TranslationEngineError: If the translation cannot be produced
        """
        ...

    async def translate_async(self, text: str, target: str) -> str:
        """Translate text cooperatively; same contract as translate()."""
        ...


class BaseTranslationEngine(TranslationEngine):
    """Base class supplying the optional engine capabilities.

    Subclasses implement translate(). translate_async() defaults to running
    translate() on a worker thread so the event loop is never blocked.
    """

    @abstractmethod
    def translate(self, text: str, target: str) -> str: ...

    async def translate_async(self, text: str, target: str) -> str:
        return await asyncio.to_thread(self.translate, text, target)

    def is_enabled(self) -> bool:
        """Disabled engines are skipped by the chain."""
        return True

    def is_inline(self) -> bool:
        """Inline engines work on the literal text without locale resources.

        A chain containing an enabled inline engine is applied even when the
        resource set already localizes the string.
        """
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def engine_name(engine: object) -> str:
    """Human-readable engine name for logs and error context."""
    return type(engine).__name__


def engine_is_enabled(engine: object) -> bool:
    probe = getattr(engine, "is_enabled", None)
    return bool(probe()) if callable(probe) else True


def engine_is_inline(engine: object) -> bool:
    probe = getattr(engine, "is_inline", None)
    return bool(probe()) if callable(probe) else False
