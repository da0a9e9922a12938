"""Identity type for (resource identifier, locale) lookups.

LocaleKey is the sole lookup key for the override table and the cache store.
Two keys are equal when their identifiers match and their locales agree on
language and region, compared case-insensitively.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from dyntranslator.locale_utils import format_locale, split_locale

__all__ = ["LocaleKey", "ResourceId"]

type ResourceId = int
"""Integer identifier of a string resource (e.g., 1001)."""


@dataclass(frozen=True, slots=True)
class LocaleKey:
    """Immutable (identifier, language, region) key.

    Only the normalized language (lowercase) and region (uppercase) are
    stored, so dataclass equality and hashing are case-insensitive with
    respect to the original tag. Use LocaleKey.of() to build a key from a
    locale tag.

    Example:
        >>> LocaleKey.of(7, "es-mx") == LocaleKey.of(7, "ES_MX")
        True
        >>> LocaleKey.of(7, "es") == LocaleKey.of(7, "es-MX")
        False

    Attributes:
        identifier: Resource identifier
        language: Lowercase language subtag
        region: Uppercase region subtag, "" when absent
    """

    identifier: ResourceId
    language: str
    region: str = ""

    def __post_init__(self) -> None:
        """Re-normalize directly constructed keys.

        Raises:
            TypeError: If identifier is not an int
        """
        if isinstance(self.identifier, bool) or not isinstance(self.identifier, int):
            msg = f"identifier must be int, got {type(self.identifier).__name__}"
            raise TypeError(msg)
        object.__setattr__(self, "language", self.language.lower())
        object.__setattr__(self, "region", self.region.upper())

    @classmethod
    def of(cls, identifier: ResourceId, locale_code: str) -> Self:
        """Build a key from an identifier and a locale tag.

        Raises:
            InvalidLocaleError: If the tag is structurally malformed
        """
        language, region = split_locale(locale_code)
        return cls(identifier, language, region)

    @property
    def locale_code(self) -> str:
        """Canonical POSIX locale tag (e.g., "es_MX")."""
        return format_locale(self.language, self.region)

    @property
    def storage_key(self) -> str:
        """Flat string form for string-keyed stores (e.g., "1001.es.MX")."""
        return f"{self.identifier}.{self.language}.{self.region}"

    @classmethod
    def from_storage_key(cls, value: str) -> Self:
        """Inverse of storage_key.

        Raises:
            ValueError: If value is not a storage key
        """
        identifier, language, region = value.split(".")
        return cls(int(identifier), language, region)
