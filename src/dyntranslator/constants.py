"""Shared constants for DynTranslator.

Centralizes defaults used across the pipeline, the built-in engines and the
reference collaborators. Placing constants here avoids circular imports and
provides a single source of truth.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Locales
    "DEFAULT_LOCALE",
    "DEFAULT_PROBE_LOCALE",
    # Timeouts and limits
    "DEFAULT_ENGINE_TIMEOUT",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_CACHE_SIZE",
    "MAX_LANGUAGE_CACHE_SIZE",
    # Network
    "GOOGLE_TRANSLATE_URL",
    "DEFAULT_HTTP_TIMEOUT",
    "CONNECTIVITY_HOST",
    "CONNECTIVITY_PORT",
    "CONNECTIVITY_TIMEOUT",
    # Fallback strings
    "FALLBACK_INVALID_LANGUAGE",
    "FALLBACK_MISSING_RESOURCE",
]

# ============================================================================
# LOCALES
# ============================================================================

# Used when neither the caller nor the environment provides a locale.
DEFAULT_LOCALE: str = "en_US"

# Komi has no catalog in any realistic resource set. Rendering a string for it
# always yields the default-catalog text, which makes it the comparison point
# for detecting whether the requested locale has its own localization.
DEFAULT_PROBE_LOCALE: str = "kv"

# ============================================================================
# TIMEOUTS AND LIMITS
# ============================================================================

# Seconds an engine may take before the call counts as failed.
DEFAULT_ENGINE_TIMEOUT: float = 2.0

# Worker threads backing the blocking path's timeout enforcement.
DEFAULT_MAX_WORKERS: int = 4

# Default maximum entries for MemoryCacheStore.
DEFAULT_CACHE_SIZE: int = 1000

# Bounded cache of language-code validation results.
MAX_LANGUAGE_CACHE_SIZE: int = 256

# ============================================================================
# NETWORK
# ============================================================================

GOOGLE_TRANSLATE_URL: str = "https://translate.googleapis.com/translate_a/single"
DEFAULT_HTTP_TIMEOUT: float = 5.0

# Public DNS resolver; a TCP connect to port 53 is a cheap reachability check.
CONNECTIVITY_HOST: str = "8.8.8.8"
CONNECTIVITY_PORT: int = 53
CONNECTIVITY_TIMEOUT: float = 1.5

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Format strings - use .format(...) with the named field.
FALLBACK_INVALID_LANGUAGE: str = "Invalid Language code [{language}] provided!"
FALLBACK_MISSING_RESOURCE: str = "{{{identifier}}}"  # e.g., {1001}
