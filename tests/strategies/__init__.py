"""Hypothesis strategies for DynTranslator property-based testing.

Usage:
    from tests.strategies import locale_keys, locale_tags, plain_text
"""

from .locales import (
    LOCALE_POOL,
    locale_keys,
    locale_spellings,
    locale_tags,
    plain_text,
    resource_ids,
)

__all__ = [
    "LOCALE_POOL",
    "locale_keys",
    "locale_spellings",
    "locale_tags",
    "plain_text",
    "resource_ids",
]
