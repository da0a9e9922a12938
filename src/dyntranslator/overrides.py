"""Manual override table: the highest-priority source of resolved text.

An override replaces whatever the pipeline would otherwise compute for one
(identifier, locale) pair. Overrides are tagged values holding either a
literal template or a producer callback. Producers run at lookup time, not at
registration time, and receive an explicit OverrideContext so they can react
to runtime state (such as the time of day) without capturing it.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Self

from dyntranslator.keys import LocaleKey

__all__ = [
    "Override",
    "OverrideContext",
    "OverrideEntry",
    "OverrideTable",
    "OverrideValue",
    "TemplateProducer",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OverrideContext:
    """Runtime context handed to override producers.

    Attributes:
        key: The key being resolved
        now: Local time of the lookup
    """

    key: LocaleKey
    now: datetime = field(default_factory=datetime.now)


type TemplateProducer = Callable[[OverrideContext], str]
"""Callback returning a template string for the current context."""


@dataclass(frozen=True, slots=True)
class Override:
    """Literal template or lazily evaluated producer.

    Build with Override.literal() or Override.dynamic(). Exactly one of
    template and producer is set.

    Example:
        >>> Override.literal("[Hola] %1$s").render(OverrideContext(LocaleKey.of(1, "es")))
        '[Hola] %1$s'
        >>> greeting = Override.dynamic(
        ...     lambda ctx: "Good morning %1$s" if ctx.now.hour < 12 else "Good evening %1$s"
        ... )
    """

    template: str | None = None
    producer: TemplateProducer | None = None

    def __post_init__(self) -> None:
        """Validate that the value is exactly one of the two variants.

        Raises:
            ValueError: If both or neither of template and producer are set
        """
        if (self.template is None) == (self.producer is None):
            msg = "Override requires exactly one of template or producer"
            raise ValueError(msg)

    @classmethod
    def literal(cls, template: str) -> Self:
        return cls(template=template)

    @classmethod
    def dynamic(cls, producer: TemplateProducer) -> Self:
        return cls(producer=producer)

    @property
    def is_dynamic(self) -> bool:
        return self.producer is not None

    def render(self, context: OverrideContext) -> str:
        """Return the template, evaluating the producer if needed."""
        if self.producer is not None:
            return str(self.producer(context))
        return self.template  # type: ignore[return-value]

    @classmethod
    def coerce(cls, value: OverrideValue) -> Override:
        """Wrap a plain template or callable as an Override.

        Raises:
            TypeError: If value is neither a str, a callable nor an Override
        """
        match value:
            case Override():
                return value
            case str():
                return cls.literal(value)
            case _ if callable(value):
                return cls.dynamic(value)
            case _:
                msg = f"Override value must be str, callable or Override, got {type(value).__name__}"
                raise TypeError(msg)


type OverrideValue = str | TemplateProducer | Override
"""Anything accepted where an override is registered."""

type OverrideEntry = tuple[LocaleKey, OverrideValue]
"""A (key, value) pair as passed to OverrideTable.set() and add_all()."""


class OverrideTable:
    """Mapping from LocaleKey to Override.

    Lookups use exact LocaleKey equality (identifier plus case-insensitive
    language and region). A missing entry is the normal case, not an error.

    Mutation is intended for configuration time or under external
    synchronization; lookups do not lock.

    Example:
        >>> table = OverrideTable()
        >>> table.add(LocaleKey.of(1, "es"), "[Hola] %1$s")
        >>> table.get(LocaleKey.of(1, "ES")).template
        '[Hola] %1$s'
        >>> table.get(LocaleKey.of(1, "bg")) is None
        True
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[OverrideEntry] = ()) -> None:
        self._entries: dict[LocaleKey, Override] = {}
        self.add_all(entries)

    def set(self, entries: Iterable[OverrideEntry]) -> None:
        """Replace all entries."""
        new_entries = {key: Override.coerce(value) for key, value in entries}
        self._entries = new_entries
        logger.info("Override table replaced: %d entries", len(new_entries))

    def add_all(self, entries: Iterable[OverrideEntry]) -> None:
        """Add entries, replacing existing ones with the same key."""
        for key, value in entries:
            self.add(key, value)

    def add(self, key: LocaleKey, value: OverrideValue) -> None:
        """Add or replace a single entry."""
        self._entries[key] = Override.coerce(value)
        logger.debug("Override registered for %s", key)

    def remove(self, key: LocaleKey) -> bool:
        """Remove an entry.

        Returns:
            True if an entry was removed, False if none existed
        """
        removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("Override removed for %s", key)
        return removed

    def clear(self) -> None:
        self._entries.clear()
        logger.debug("Override table cleared")

    def get(self, key: LocaleKey) -> Override | None:
        return self._entries.get(key)

    def keys(self) -> tuple[LocaleKey, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[LocaleKey]:
        return iter(tuple(self._entries))
