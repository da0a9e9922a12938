"""String resource providers.

A resource provider renders the raw template for an identifier as the
platform would for a given locale: it prefers the most specific catalog and
transparently falls back to the default catalog when the locale has no
string of its own. That fallback is what the pipeline's probe-locale
comparison detects.

Lookup order for "es_MX": "es_MX" catalog, then "es", then the default.

Components:
    ResourceProvider - Protocol consumed by the pipeline
    CatalogResourceProvider - Base class implementing the fallback chain
    MappingResourceProvider - In-memory catalogs
    PathResourceLoader - JSON catalogs on disk with path-traversal protection

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from threading import RLock
from typing import Protocol

from dyntranslator.errors import InvalidLocaleError, ResourceNotFoundError
from dyntranslator.keys import ResourceId
from dyntranslator.locale_utils import format_locale, normalize_locale, split_locale

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceProvider",
    # Implementations
    "CatalogResourceProvider",
    "MappingResourceProvider",
    "PathResourceLoader",
    # Helpers
    "DEFAULT_CATALOG",
    "parse_catalog",
]

logger = logging.getLogger(__name__)

type Catalog = Mapping[ResourceId, str]

DEFAULT_CATALOG = "default"
"""Catalog name of the locale-independent strings."""


class ResourceProvider(Protocol):
    """Protocol for rendering string resources per locale.

    Example:
        >>> class ConstantProvider:
        ...     def get_string(self, identifier: int, locale: str) -> str:
        ...         return "Hello %1$s"
    """

    def get_string(self, identifier: ResourceId, locale: str) -> str:
        """Return the raw (unformatted) template for identifier in locale.

        Falls back to the default catalog when the locale has no string of
        its own, exactly like a platform resource system would.

        Raises:
            ResourceNotFoundError: If no catalog defines the identifier
        """
        ...


def parse_catalog(data: object, *, source: str = "<catalog>") -> dict[ResourceId, str]:
    """Validate a decoded JSON object as a catalog.

    Keys must be integer identifiers (JSON object keys are strings, so "1001"
    is accepted) and values must be strings.

    Raises:
        ValueError: If data is not a mapping of integer ids to strings
    """
    if not isinstance(data, Mapping):
        msg = f"Catalog {source} must be a JSON object, got {type(data).__name__}"
        raise ValueError(msg)

    catalog: dict[ResourceId, str] = {}
    for raw_key, value in data.items():
        try:
            identifier = int(raw_key)
        except (TypeError, ValueError):
            msg = f"Catalog {source} has non-integer resource id {raw_key!r}"
            raise ValueError(msg) from None
        if not isinstance(value, str):
            msg = f"Catalog {source} value for {identifier} must be a string"
            raise ValueError(msg)
        catalog[identifier] = value
    return catalog


def _catalog_chain(locale: str) -> tuple[str, ...]:
    """Catalog names to search for a locale, most specific first."""
    try:
        language, region = split_locale(locale)
    except InvalidLocaleError:
        return (DEFAULT_CATALOG,)
    if region:
        return (format_locale(language, region), language, DEFAULT_CATALOG)
    return (language, DEFAULT_CATALOG)


class CatalogResourceProvider(ABC):
    """Resource provider backed by per-locale catalogs.

    Subclasses supply catalogs by name; this class implements the
    locale -> language -> default fallback chain.
    """

    __slots__ = ()

    @abstractmethod
    def get_catalog(self, name: str) -> Catalog | None:
        """Return the catalog for a canonical locale name or DEFAULT_CATALOG.

        Returns None when no such catalog exists.
        """

    def get_string(self, identifier: ResourceId, locale: str) -> str:
        for name in _catalog_chain(locale):
            catalog = self.get_catalog(name)
            if catalog is not None and identifier in catalog:
                return catalog[identifier]

        msg = f"No string resource {identifier} for locale '{locale}' or default catalog"
        raise ResourceNotFoundError(msg, identifier=identifier, locale_code=locale)

    def has_localized_catalog(self, locale: str) -> bool:
        """Check whether a catalog exists specifically for locale."""
        return self.get_catalog(normalize_locale(locale)) is not None


class MappingResourceProvider(CatalogResourceProvider):
    """In-memory catalogs.

    Example:
        >>> provider = MappingResourceProvider(
        ...     {1: "Hello %1$s"},
        ...     {"es": {1: "Hola %1$s"}},
        ... )
        >>> provider.get_string(1, "es-MX")
        'Hola %1$s'
        >>> provider.get_string(1, "bg")
        'Hello %1$s'
    """

    __slots__ = ("_catalogs",)

    def __init__(
        self,
        default: Catalog,
        localized: Mapping[str, Catalog] | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            default: Locale-independent strings
            localized: Catalogs keyed by locale tag (any spelling)

        Raises:
            InvalidLocaleError: If a catalog key is not a locale tag
        """
        self._catalogs: dict[str, dict[ResourceId, str]] = {DEFAULT_CATALOG: dict(default)}
        for locale, catalog in (localized or {}).items():
            self.add_catalog(locale, catalog)

    def add_catalog(self, locale: str, catalog: Catalog) -> None:
        """Add strings for a locale, merging into any existing catalog."""
        name = normalize_locale(locale)
        self._catalogs.setdefault(name, {}).update(catalog)

    def get_catalog(self, name: str) -> Catalog | None:
        return self._catalogs.get(name)


class PathResourceLoader(CatalogResourceProvider):
    """File system catalogs using a path template.

    Each catalog is a JSON object mapping integer ids to templates. The
    {locale} placeholder in the template is replaced by the canonical locale
    name ("es", "es_MX") or by the default catalog name. Catalogs are read
    on first use and kept in memory; missing files mean "no catalog".

    Security:
        Locale names containing path separators or ".." are rejected, and
        every resolved path is verified against a fixed root directory.

    Example:
        >>> loader = PathResourceLoader("res/{locale}/strings.json")
        >>> loader.get_string(1001, "es")
        # Reads res/es/strings.json, then res/default/strings.json

    Attributes:
        base_path: Path template with {locale} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of base_path.
        default_name: Directory name substituted for the default catalog
    """

    __slots__ = ("_catalogs", "_lock", "_resolved_root", "base_path", "default_name", "root_dir")

    def __init__(
        self,
        base_path: str,
        *,
        root_dir: str | None = None,
        default_name: str = DEFAULT_CATALOG,
    ) -> None:
        """Validate the template and resolve the root directory.

        Raises:
            ValueError: If base_path does not contain {locale} placeholder
        """
        if "{locale}" not in base_path:
            msg = (
                f"base_path must contain '{{locale}}' placeholder for locale substitution, "
                f"got: '{base_path}'"
            )
            raise ValueError(msg)

        self.base_path = base_path
        self.root_dir = root_dir
        self.default_name = default_name
        self._catalogs: dict[str, dict[ResourceId, str] | None] = {}
        self._lock = RLock()

        if root_dir is not None:
            self._resolved_root = Path(root_dir).resolve()
        else:
            static_prefix = base_path.split("{locale}")[0].rstrip("/\\")
            self._resolved_root = (
                Path(static_prefix).resolve() if static_prefix else Path.cwd().resolve()
            )

    @staticmethod
    def _validate_locale(name: str) -> None:
        """Reject catalog names that could escape the root directory.

        Raises:
            ValueError: If name contains unsafe path components
        """
        if not name:
            msg = "Locale code cannot be empty"
            raise ValueError(msg)
        if ".." in name:
            msg = f"Path traversal sequences not allowed in locale: '{name}'"
            raise ValueError(msg)
        if "/" in name or "\\" in name:
            msg = f"Path separators not allowed in locale: '{name}'"
            raise ValueError(msg)

    def describe_path(self, name: str) -> str:
        """Return the locale-substituted path for diagnostics."""
        directory = self.default_name if name == DEFAULT_CATALOG else name
        return self.base_path.replace("{locale}", directory)

    def _resolve(self, name: str) -> Path:
        """Resolve and validate the catalog path for a name.

        Raises:
            ValueError: If the path escapes the root directory
        """
        self._validate_locale(name)
        full_path = Path(self.describe_path(name)).resolve()
        try:
            full_path.relative_to(self._resolved_root)
        except ValueError:
            msg = f"Path traversal detected: resolved path escapes root directory. locale='{name}'"
            raise ValueError(msg) from None
        return full_path

    def load(self, name: str) -> dict[ResourceId, str]:
        """Read and validate one catalog file, bypassing the memory cache.

        Raises:
            FileNotFoundError: If the catalog file does not exist
            OSError: If the file cannot be read
            ValueError: If the path is unsafe or the content is not a catalog
        """
        path = self._resolve(name)
        data = json.loads(path.read_text(encoding="utf-8"))
        return parse_catalog(data, source=str(path))

    def get_catalog(self, name: str) -> Catalog | None:
        with self._lock:
            if name in self._catalogs:
                return self._catalogs[name]

            try:
                catalog: dict[ResourceId, str] | None = self.load(name)
                logger.debug("Loaded %d strings from %s", len(catalog), self.describe_path(name))
            except FileNotFoundError:
                catalog = None
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable catalog %s: %s", self.describe_path(name), e)
                catalog = None

            self._catalogs[name] = catalog
            return catalog

    def reload(self) -> None:
        """Forget loaded catalogs so the next lookup re-reads the files."""
        with self._lock:
            self._catalogs.clear()
