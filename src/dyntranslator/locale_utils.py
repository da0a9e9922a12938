"""Locale utilities for tag parsing, validation and normalization.

Centralizes locale handling used throughout the codebase. Every locale tag
entering the system is split into a lowercased language and an uppercased
region once, at the boundary, so cache keys and lookups stay consistent
regardless of how callers spell the tag ("es-mx", "ES_MX", "es_MX").

Language validation is delegated to Babel's CLDR data: a language is valid
when Babel can load a locale for it.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
import re
from typing import TYPE_CHECKING

from dyntranslator.constants import DEFAULT_LOCALE, MAX_LANGUAGE_CACHE_SIZE
from dyntranslator.errors import InvalidLocaleError

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "clear_locale_cache",
    "format_locale",
    "get_babel_locale",
    "get_display_name",
    "get_system_locale",
    "is_known_language",
    "normalize_locale",
    "parse_locale",
    "split_locale",
]

_LANGUAGE_RE = re.compile(r"[A-Za-z]{2,3}")
_SCRIPT_RE = re.compile(r"[A-Za-z]{4}")
_REGION_RE = re.compile(r"[A-Za-z]{2}|[0-9]{3}")


def split_locale(locale_code: str) -> tuple[str, str]:
    """Split a BCP-47 or POSIX locale tag into (language, region).

    Purely syntactic: the language is not checked against CLDR. A script
    subtag is accepted and dropped since keys only distinguish language and
    region. Encoding suffixes (".UTF-8") and modifiers ("@euro") are ignored.

    Args:
        locale_code: Locale tag (e.g., "es", "es-MX", "zh_Hans_CN")

    Returns:
        Tuple of lowercased language and uppercased region ("" if absent)

    Raises:
        InvalidLocaleError: If the tag is empty or structurally malformed

    Example:
        >>> split_locale("es-mx")
        ('es', 'MX')
        >>> split_locale("zh_Hans_CN")
        ('zh', 'CN')
        >>> split_locale("de")
        ('de', '')
    """
    if not isinstance(locale_code, str) or not locale_code.strip():
        msg = f"Locale code must be a non-empty string, got {locale_code!r}"
        raise InvalidLocaleError(msg, locale_code=str(locale_code))

    tag = locale_code.strip().split(".", 1)[0].split("@", 1)[0]
    parts = tag.replace("-", "_").split("_")

    language = parts[0]
    if not _LANGUAGE_RE.fullmatch(language):
        msg = f"Invalid language subtag '{language}' in locale '{locale_code}'"
        raise InvalidLocaleError(msg, locale_code=locale_code)

    rest = parts[1:]
    if rest and _SCRIPT_RE.fullmatch(rest[0]):
        rest = rest[1:]

    region = ""
    if rest:
        if len(rest) > 1 or not _REGION_RE.fullmatch(rest[0]):
            msg = f"Invalid region subtag in locale '{locale_code}'"
            raise InvalidLocaleError(msg, locale_code=locale_code)
        region = rest[0]

    return language.lower(), region.upper()


def format_locale(language: str, region: str = "") -> str:
    """Join language and region into the canonical POSIX form.

    Example:
        >>> format_locale("es", "MX")
        'es_MX'
        >>> format_locale("de")
        'de'
    """
    return f"{language}_{region}" if region else language


def normalize_locale(locale_code: str) -> str:
    """Convert a locale tag to canonical POSIX form (language_REGION).

    This is the canonical normalization function. All locale handling should
    normalize at the system boundary (entry point) using this function, then
    use the normalized form for cache keys and lookups.

    Args:
        locale_code: BCP-47 or POSIX locale tag

    Returns:
        Canonical tag (e.g., "en_US", "pt_BR", "de")

    Raises:
        InvalidLocaleError: If the tag is structurally malformed

    Example:
        >>> normalize_locale("en-us")
        'en_US'
        >>> normalize_locale("EN")
        'en'
    """
    return format_locale(*split_locale(locale_code))


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> locale = get_babel_locale("en-US")
        >>> locale.language
        'en'
        >>> locale.territory
        'US'
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(locale_code.replace("-", "_"))


@functools.lru_cache(maxsize=MAX_LANGUAGE_CACHE_SIZE)
def is_known_language(language: str) -> bool:
    """Check whether CLDR has data for a language subtag.

    Args:
        language: Lowercase language subtag (e.g., "es", "bg")

    Returns:
        True if Babel can load a locale for the language

    Example:
        >>> is_known_language("es")
        True
        >>> is_known_language("xx")
        False
    """
    from babel import UnknownLocaleError  # noqa: PLC0415

    try:
        get_babel_locale(language)
    except (UnknownLocaleError, ValueError):
        return False
    return True


def parse_locale(locale_code: str) -> tuple[str, str]:
    """Split a locale tag and validate its language against CLDR.

    Args:
        locale_code: Locale tag to validate

    Returns:
        Tuple of lowercased language and uppercased region

    Raises:
        InvalidLocaleError: If the tag is malformed or the language is unknown

    Example:
        >>> parse_locale("bg")
        ('bg', '')
        >>> parse_locale("xx-INVALID")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
            ...
        InvalidLocaleError: Invalid region subtag in locale 'xx-INVALID'
    """
    language, region = split_locale(locale_code)
    if not is_known_language(language):
        msg = f"Unknown language code '{language}' in locale '{locale_code}'"
        raise InvalidLocaleError(msg, locale_code=locale_code)
    return language, region


def get_display_name(locale_code: str, display_locale: str = "en") -> str:
    """Human-readable name of a locale, for logs and settings screens.

    Falls back to the tag itself when CLDR has no data for it.

    Example:
        >>> get_display_name("es_MX")
        'Spanish (Mexico)'
        >>> get_display_name("es_MX", "es")
        'español (México)'
    """
    from babel import UnknownLocaleError  # noqa: PLC0415

    try:
        locale = get_babel_locale(locale_code)
        name = locale.get_display_name(get_babel_locale(display_locale))
    except (UnknownLocaleError, ValueError):
        return locale_code
    return name or locale_code


def clear_locale_cache() -> None:
    """Clear the Babel locale and language validation caches."""
    get_babel_locale.cache_clear()
    is_known_language.cache_clear()


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Normalizes the result to canonical POSIX form. Filters out "C" and
    "POSIX" pseudo-locales and values that do not parse as locale tags.

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return DEFAULT_LOCALE as fallback.

    Returns:
        Detected locale code in canonical POSIX form.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.

    Example:
        >>> import os
        >>> os.environ['LANG'] = 'de_DE.UTF-8'
        >>> get_system_locale()
        'de_DE'
    """
    import locale as locale_module  # noqa: PLC0415

    candidates: list[str] = []
    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale:
            candidates.append(system_locale)
    except (ValueError, AttributeError):
        pass

    candidates.extend(
        value for var in ("LC_ALL", "LC_MESSAGES", "LANG") if (value := os.environ.get(var))
    )

    for candidate in candidates:
        if candidate in ("C", "POSIX"):
            continue
        try:
            return normalize_locale(candidate)
        except InvalidLocaleError:
            continue

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_LOCALE
