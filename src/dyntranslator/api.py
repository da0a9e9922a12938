"""Process-wide translator facade.

Apps that want a single translator for their whole lifetime call init() once
during startup and get_api() (or the module-level helpers) everywhere else.
Components that prefer explicit wiring construct DynamicTranslator directly
and never touch this module.

Example:
    >>> from dyntranslator import api
    >>> api.init(MappingResourceProvider({1001: "Hello %1$s"}), default_locale="es")
    >>> api.resolve(1001, "World")

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from threading import Lock

from dyntranslator.config import TranslatorConfig
from dyntranslator.connectivity import ConnectivityProbe
from dyntranslator.engines.base import TranslationEngine
from dyntranslator.keys import ResourceId
from dyntranslator.overrides import OverrideEntry
from dyntranslator.resources import ResourceProvider
from dyntranslator.storage import CacheStore
from dyntranslator.translator import DynamicTranslator, Resolution

__all__ = [
    "add_engine",
    "get_api",
    "init",
    "is_initialized",
    "reset",
    "resolve",
    "set_engine",
    "set_language",
    "set_overrides",
]

logger = logging.getLogger(__name__)

_lock = Lock()
_instance: DynamicTranslator | None = None


def init(
    resources: ResourceProvider,
    *,
    default_locale: str | None = None,
    cache: CacheStore | None = None,
    connectivity: ConnectivityProbe | None = None,
    engines: Iterable[TranslationEngine] | None = None,
    overrides: Iterable[OverrideEntry] = (),
    config: TranslatorConfig | None = None,
    on_resolution: Callable[[Resolution], None] | None = None,
) -> DynamicTranslator:
    """Create the process-wide translator.

    Calling init() again replaces the previous instance and closes it.

    Args:
        resources: Provider of native resource strings
        default_locale: Shortcut for config.default_locale
        cache: Cache store (default: in-memory LRU)
        connectivity: Reachability probe (default: TCP connect probe)
        engines: Engine chain (default: one GoogleTranslateEngine)
        overrides: Initial override entries
        config: Static settings
        on_resolution: Callback invoked with every Resolution

    Returns:
        The new translator

    Raises:
        InvalidLocaleError: If default_locale is malformed
    """
    global _instance  # noqa: PLW0603

    if config is None:
        config = TranslatorConfig() if default_locale is None else TranslatorConfig(default_locale)
    elif default_locale is not None:
        config = replace(config, default_locale=default_locale)

    translator = DynamicTranslator(
        resources,
        cache=cache,
        connectivity=connectivity,
        engines=engines,
        overrides=overrides,
        config=config,
        on_resolution=on_resolution,
    )

    with _lock:
        previous, _instance = _instance, translator

    if previous is not None:
        logger.info("Replacing previously initialized translator")
        previous.close()
    logger.info("Translator initialized: %r", translator)
    return translator


def get_api() -> DynamicTranslator:
    """Return the process-wide translator.

    Raises:
        RuntimeError: If init() has not been called
    """
    instance = _instance
    if instance is None:
        msg = "DynTranslator is not initialized. Call init() first."
        raise RuntimeError(msg)
    return instance


def is_initialized() -> bool:
    return _instance is not None


def reset() -> None:
    """Close and forget the process-wide translator."""
    global _instance  # noqa: PLW0603

    with _lock:
        previous, _instance = _instance, None
    if previous is not None:
        previous.close()


def resolve(
    identifier: ResourceId,
    *format_args: object,
    locale: str | None = None,
) -> str:
    """Shortcut for get_api().resolve()."""
    return get_api().resolve(identifier, *format_args, locale=locale)


def set_language(locale: str) -> DynamicTranslator:
    return get_api().set_language(locale)


def set_overrides(entries: Iterable[OverrideEntry]) -> DynamicTranslator:
    return get_api().set_overrides(entries)


def set_engine(engine: TranslationEngine) -> DynamicTranslator:
    return get_api().set_engine(engine)


def add_engine(engine: TranslationEngine) -> DynamicTranslator:
    return get_api().add_engine(engine)
