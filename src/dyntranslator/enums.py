"""Enumerations for DynTranslator type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class ResolutionSource(StrEnum):
    """Step of the resolution pipeline that produced the returned text.

    StrEnum provides automatic string conversion: str(ResolutionSource.CACHE) == "cache"
    """

    INVALID_LOCALE = "invalid_locale"
    """Locale failed validation; the text is the diagnostic sentinel."""

    OVERRIDE = "override"
    """A manual override matched the identifier and locale."""

    CACHE = "cache"
    """A previously translated value was read from the cache store."""

    NATIVE = "native"
    """The resource set has its own localization for the locale."""

    OFFLINE = "offline"
    """No network available; untranslated native text returned."""

    SAFE_MODE = "safe_mode"
    """Safe mode is active; the engine chain was bypassed."""

    TRANSLATED = "translated"
    """The engine chain produced the text (and it was cached)."""

    UNTRANSLATED = "untranslated"
    """The chain ran but no engine produced output; native text returned."""

    MISSING_RESOURCE = "missing_resource"
    """No catalog defines the identifier; the text is a fallback marker."""


__all__ = [
    "ResolutionSource",
]
