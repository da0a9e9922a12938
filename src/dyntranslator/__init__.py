"""DynTranslator - localized strings with machine-translation fallback.

Resolves the text for a string resource in a target locale. Native
localizations are used when the resource set has them; otherwise the string
is run through a chain of pluggable translation engines and the result is
cached. Manual overrides take precedence over everything.

Public API:
    DynamicTranslator - The resolution pipeline
    Resolution - Text plus the pipeline step that produced it
    TranslatorConfig - Construction-time settings
    LocaleKey - (resource id, language, region) lookup key
    Override - Literal or dynamic override value
    MappingResourceProvider / PathResourceLoader - Resource providers
    MemoryCacheStore / JsonFileCacheStore - Cache stores
    GoogleTranslateEngine / UppercaseTranslationEngine - Engines

Exceptions:
    DynTranslatorError - Base exception class
    InvalidLocaleError - Malformed or unknown locale
    ResourceNotFoundError - Identifier absent from every catalog
    TranslationEngineError / EngineTimeoutError - Engine failures
    CacheStoreError - Cache store failures

Submodules:
    dyntranslator.api - Process-wide facade (init / get_api)
    dyntranslator.engines - Engine protocol and implementations
    dyntranslator.formatting - Positional %1$s template formatting
    dyntranslator.locale_utils - Locale parsing and validation
"""

from .config import TranslatorConfig
from .connectivity import SocketConnectivityProbe, StaticConnectivityProbe
from .engines import (
    BaseTranslationEngine,
    GoogleTranslateEngine,
    IdentityTranslationEngine,
    TranslationEngine,
    UppercaseTranslationEngine,
)
from .enums import ResolutionSource
from .errors import (
    CacheStoreError,
    DynTranslatorError,
    EngineTimeoutError,
    InvalidLocaleError,
    ResourceNotFoundError,
    TranslationEngineError,
)
from .formatting import format_template
from .keys import LocaleKey, ResourceId
from .overrides import Override, OverrideContext, OverrideTable
from .resources import MappingResourceProvider, PathResourceLoader, ResourceProvider
from .storage import CacheStore, JsonFileCacheStore, MemoryCacheStore
from .translator import DynamicTranslator, Resolution

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("dyntranslator")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Pipeline
    "DynamicTranslator",
    "Resolution",
    "ResolutionSource",
    "TranslatorConfig",
    # Keys and overrides
    "LocaleKey",
    "ResourceId",
    "Override",
    "OverrideContext",
    "OverrideTable",
    # Collaborators
    "ResourceProvider",
    "MappingResourceProvider",
    "PathResourceLoader",
    "CacheStore",
    "MemoryCacheStore",
    "JsonFileCacheStore",
    "SocketConnectivityProbe",
    "StaticConnectivityProbe",
    # Engines
    "TranslationEngine",
    "BaseTranslationEngine",
    "GoogleTranslateEngine",
    "IdentityTranslationEngine",
    "UppercaseTranslationEngine",
    # Formatting
    "format_template",
    # Errors
    "DynTranslatorError",
    "InvalidLocaleError",
    "ResourceNotFoundError",
    "TranslationEngineError",
    "EngineTimeoutError",
    "CacheStoreError",
    # Metadata
    "__version__",
]
