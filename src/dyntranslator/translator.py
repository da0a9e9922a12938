"""Resolution pipeline: overrides, cache, native resources, engine chain.

DynamicTranslator answers "what text should the user see for resource N in
locale L?" For each request it runs a fixed decision sequence and stops at
the first step that yields an answer:

    1. Validate the locale          -> diagnostic sentinel if invalid
    2. Override table               -> formatted override
    3. Cache store                  -> cached translation
    4. Native resource exists?      -> formatted localized resource, passed
                                       through the inline engines only
    5. Safe mode?                   -> formatted native text
    6. Network reachable?           -> formatted native text if offline
       Engine chain
    7. Cache write of the chain output
    8. Return the chain output

Inline engines need no network and never consult resources. They run over
native localizations and over offline text too; their output is then
reported under NATIVE or OFFLINE and is not cached. The connectivity check
is skipped when every enabled engine is inline.

Step 4 uses the probe-locale heuristic. The resource system silently falls
back to the default catalog for locales without their own strings, so the
rendering for the requested locale is compared with the rendering for a
probe locale that never has a catalog. Different text means a genuine
localization exists and no translation is needed.

Failure handling:
    An engine raising, or exceeding the configured timeout, is caught where
    it is invoked. The pre-engine text is kept and safe mode is switched on;
    while safe mode is on, engines are skipped for every request until it is
    explicitly cleared. No error reaches the caller of resolve().

Concurrency:
    resolve() blocks while engines run (bounded by engine_timeout through a
    worker pool). resolve_async() awaits engines cooperatively under
    asyncio.wait_for(), and runs the connectivity probe on a worker thread.
    Both share the decision sequence. Configuration mutators are meant for a
    setup phase or external synchronization; the only lock guards creation
    of the worker pool.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from threading import Lock
from typing import Self

from dyntranslator.config import TranslatorConfig
from dyntranslator.connectivity import ConnectivityProbe, SocketConnectivityProbe
from dyntranslator.constants import FALLBACK_INVALID_LANGUAGE, FALLBACK_MISSING_RESOURCE
from dyntranslator.engines.base import (
    TranslationEngine,
    engine_is_enabled,
    engine_is_inline,
    engine_name,
)
from dyntranslator.engines.google import GoogleTranslateEngine
from dyntranslator.enums import ResolutionSource
from dyntranslator.errors import (
    CacheStoreError,
    EngineTimeoutError,
    InvalidLocaleError,
    ResourceNotFoundError,
    TranslationEngineError,
)
from dyntranslator.formatting import format_template
from dyntranslator.keys import LocaleKey, ResourceId
from dyntranslator.locale_utils import format_locale, get_display_name, parse_locale
from dyntranslator.overrides import OverrideContext, OverrideEntry, OverrideTable, OverrideValue
from dyntranslator.resources import ResourceProvider
from dyntranslator.storage import CacheStore, MemoryCacheStore

__all__ = ["DynamicTranslator", "Resolution"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of one resolution request.

    Attributes:
        text: Text to show the user
        source: Pipeline step that produced the text
        locale: Canonical locale the request resolved for (the raw tag when
            the locale was invalid)
        identifier: Requested resource identifier
    """

    text: str
    source: ResolutionSource
    locale: str
    identifier: ResourceId


@dataclass(frozen=True, slots=True)
class _PendingTranslation:
    """Request that needs engines run over its text.

    Attributes:
        key: Resolved request key
        text: Formatted native text fed to the first engine
        engines: Engines to run, in order
        inline_engines: Subset of engines that need no network
        local_source: Set when only inline engines run (native text or
            offline). The result is then reported under this source and is
            not cached.
        needs_connectivity: Whether the connectivity probe must be consulted
    """

    key: LocaleKey
    text: str
    engines: tuple[TranslationEngine, ...]
    inline_engines: tuple[TranslationEngine, ...] = ()
    local_source: ResolutionSource | None = None
    needs_connectivity: bool = False

    def offline(self) -> _PendingTranslation:
        """Same request restricted to the inline engines."""
        return replace(
            self,
            engines=self.inline_engines,
            local_source=ResolutionSource.OFFLINE,
            needs_connectivity=False,
        )


class DynamicTranslator:
    """Resolves localized strings, machine-translating when none exist.

    Example:
        >>> resources = MappingResourceProvider(
        ...     {1: "Hello %1$s", 2: "Good bye"},
        ...     {"es": {2: "Adiós"}},
        ... )
        >>> translator = DynamicTranslator(
        ...     resources,
        ...     engines=[UppercaseTranslationEngine()],
        ...     overrides=[(LocaleKey.of(1, "bg"), "Здравей %1$s")],
        ...     config=TranslatorConfig(default_locale="es"),
        ... )
        >>> translator.resolve(1, "World", locale="bg")
        'Здравей World'
        >>> translator.resolve(1, "World")
        'HELLO WORLD'

    Attributes:
        config: Construction-time settings
        resources: Resource provider rendering native strings
        cache: Store for translated strings
        connectivity: Network reachability probe
    """

    __slots__ = (
        "_default_locale",
        "_engines",
        "_executor",
        "_executor_lock",
        "_on_resolution",
        "_overrides",
        "_safe_mode",
        "cache",
        "config",
        "connectivity",
        "resources",
    )

    def __init__(
        self,
        resources: ResourceProvider,
        *,
        cache: CacheStore | None = None,
        connectivity: ConnectivityProbe | None = None,
        engines: Iterable[TranslationEngine] | None = None,
        overrides: Iterable[OverrideEntry] = (),
        config: TranslatorConfig | None = None,
        on_resolution: Callable[[Resolution], None] | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            resources: Provider of native resource strings
            cache: Cache store (default: in-memory LRU)
            connectivity: Reachability probe (default: TCP connect probe)
            engines: Engine chain in order (default: one GoogleTranslateEngine)
            overrides: Initial override entries
            config: Static settings (default: TranslatorConfig())
            on_resolution: Optional callback invoked with every Resolution.
                Useful for monitoring which strings get machine-translated.
        """
        self.config = config if config is not None else TranslatorConfig()
        self.resources = resources
        self.cache: CacheStore = cache if cache is not None else MemoryCacheStore()
        self.connectivity: ConnectivityProbe = (
            connectivity if connectivity is not None else SocketConnectivityProbe()
        )
        self._engines: list[TranslationEngine] = (
            list(engines) if engines is not None else [GoogleTranslateEngine()]
        )
        self._overrides = OverrideTable(overrides)
        self._default_locale = self.config.default_locale
        self._safe_mode = self.config.safe_mode
        self._on_resolution = on_resolution
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = Lock()

    # ------------------------------------------------------------------
    # Configuration surface
    # ------------------------------------------------------------------

    @property
    def default_locale(self) -> str:
        """Target locale used when a request names none."""
        return self._default_locale

    @property
    def safe_mode(self) -> bool:
        """True while the engine chain is bypassed after a failure."""
        return self._safe_mode

    @property
    def engines(self) -> tuple[TranslationEngine, ...]:
        return tuple(self._engines)

    @property
    def overrides(self) -> OverrideTable:
        return self._overrides

    def configure(
        self,
        *,
        default_locale: str | None = None,
        overrides: Iterable[OverrideEntry] | None = None,
        add_overrides: Iterable[OverrideEntry] | None = None,
        engines: Iterable[TranslationEngine] | None = None,
        add_engines: Iterable[TranslationEngine] | None = None,
        safe_mode: bool | None = None,
    ) -> Self:
        """Apply several configuration changes at once.

        Options left as None are unchanged. ``overrides`` and ``engines``
        replace, ``add_overrides`` and ``add_engines`` append (after any
        replacement).

        Raises:
            InvalidLocaleError: If default_locale is invalid
        """
        if default_locale is not None:
            self.set_language(default_locale)
        if overrides is not None:
            self.set_overrides(overrides)
        if add_overrides is not None:
            self.add_overrides(add_overrides)
        if engines is not None:
            self.set_engines(engines)
        if add_engines is not None:
            for engine in add_engines:
                self.add_engine(engine)
        if safe_mode is not None:
            if safe_mode:
                self.enable_safe_mode()
            else:
                self.clear_safe_mode()
        return self

    def set_language(self, locale: str) -> Self:
        """Set the default target locale.

        Raises:
            InvalidLocaleError: If the tag is malformed or the language unknown
        """
        self._default_locale = format_locale(*parse_locale(locale))
        logger.info(
            "Default locale set to '%s' (%s)",
            self._default_locale,
            get_display_name(self._default_locale),
        )
        return self

    def set_engine(self, engine: TranslationEngine) -> Self:
        """Replace the chain with a single engine."""
        return self.set_engines([engine])

    def set_engines(self, engines: Iterable[TranslationEngine]) -> Self:
        self._engines = list(engines)
        logger.info("Engine chain set: %s", [engine_name(e) for e in self._engines])
        return self

    def add_engine(self, engine: TranslationEngine) -> Self:
        """Append an engine to the end of the chain."""
        self._engines.append(engine)
        logger.info("Engine appended: %s", engine_name(engine))
        return self

    def set_overrides(self, entries: Iterable[OverrideEntry]) -> Self:
        self._overrides.set(entries)
        return self

    def add_overrides(self, entries: Iterable[OverrideEntry]) -> Self:
        self._overrides.add_all(entries)
        return self

    def add_override(self, key: LocaleKey, value: OverrideValue) -> Self:
        self._overrides.add(key, value)
        return self

    def remove_override(self, key: LocaleKey) -> bool:
        return self._overrides.remove(key)

    def clear_overrides(self) -> Self:
        self._overrides.clear()
        return self

    def enable_safe_mode(self) -> Self:
        """Bypass the engine chain until clear_safe_mode() is called."""
        if not self._safe_mode:
            logger.warning("Safe mode enabled: engine chain bypassed")
        self._safe_mode = True
        return self

    def clear_safe_mode(self) -> Self:
        if self._safe_mode:
            logger.info("Safe mode cleared: engine chain re-enabled")
        self._safe_mode = False
        return self

    # ------------------------------------------------------------------
    # Request surface
    # ------------------------------------------------------------------

    def resolve(
        self,
        identifier: ResourceId,
        *format_args: object,
        locale: str | None = None,
        timeout: float | None = None,
    ) -> str:
        """Resolve the text for a resource, blocking while engines run.

        Args:
            identifier: Resource identifier
            *format_args: Positional arguments for %1$s-style placeholders
            locale: Target locale (default: the configured default locale)
            timeout: Per-engine timeout in seconds (default: config value)

        Returns:
            The best available text. Never raises for locale, engine,
            network or storage problems.
        """
        return self.resolve_detailed(identifier, *format_args, locale=locale, timeout=timeout).text

    async def resolve_async(
        self,
        identifier: ResourceId,
        *format_args: object,
        locale: str | None = None,
        timeout: float | None = None,
    ) -> str:
        """Same as resolve(), awaiting engines instead of blocking."""
        resolution = await self.resolve_detailed_async(
            identifier, *format_args, locale=locale, timeout=timeout
        )
        return resolution.text

    def resolve_detailed(
        self,
        identifier: ResourceId,
        *format_args: object,
        locale: str | None = None,
        timeout: float | None = None,
    ) -> Resolution:
        """Like resolve(), but also report which step produced the text."""
        prepared = self._prepare(identifier, format_args, locale)
        if isinstance(prepared, Resolution):
            return self._emit(prepared)

        if prepared.needs_connectivity and not self._is_connected():
            prepared = self._go_offline(prepared)

        text, translated = self._run_chain(prepared.text, prepared.key, prepared.engines, timeout)
        return self._emit(self._complete(prepared, text, translated))

    async def resolve_detailed_async(
        self,
        identifier: ResourceId,
        *format_args: object,
        locale: str | None = None,
        timeout: float | None = None,
    ) -> Resolution:
        """Like resolve_async(), but also report which step produced the text."""
        prepared = self._prepare(identifier, format_args, locale)
        if isinstance(prepared, Resolution):
            return self._emit(prepared)

        if prepared.needs_connectivity and not await asyncio.to_thread(self._is_connected):
            prepared = self._go_offline(prepared)

        text, translated = await self._run_chain_async(
            prepared.text, prepared.key, prepared.engines, timeout
        )
        return self._emit(self._complete(prepared, text, translated))

    def translate(self, text: str, locale: str | None = None, *, timeout: float | None = None) -> str:
        """Run arbitrary text through the engine chain.

        Bypasses overrides, cache and resources. Honors safe mode and the
        failure handling of the pipeline. Invalid locales return text as is.
        """
        key = self._free_text_key(locale)
        engines = self._enabled_engines()
        if key is None or self._safe_mode or not engines:
            return text
        return self._run_chain(text, key, engines, timeout)[0]

    async def translate_async(
        self, text: str, locale: str | None = None, *, timeout: float | None = None
    ) -> str:
        """Same as translate(), awaiting engines instead of blocking."""
        key = self._free_text_key(locale)
        engines = self._enabled_engines()
        if key is None or self._safe_mode or not engines:
            return text
        return (await self._run_chain_async(text, key, engines, timeout))[0]

    # ------------------------------------------------------------------
    # Decision sequence (steps 1-5; step 6 connectivity runs in the callers)
    # ------------------------------------------------------------------

    def _prepare(
        self,
        identifier: ResourceId,
        format_args: Sequence[object],
        locale: str | None,
    ) -> Resolution | _PendingTranslation:
        requested = self._default_locale if locale is None else locale

        try:
            language, region = parse_locale(requested)
        except InvalidLocaleError as e:
            logger.warning("Rejected locale %r for resource %s: %s", requested, identifier, e)
            return Resolution(
                FALLBACK_INVALID_LANGUAGE.format(language=requested),
                ResolutionSource.INVALID_LOCALE,
                str(requested),
                identifier,
            )

        key = LocaleKey(identifier, language, region)
        locale_code = key.locale_code

        override_text = self._read_override(key, format_args)
        if override_text is not None:
            logger.debug("Override hit for %s", key)
            return Resolution(override_text, ResolutionSource.OVERRIDE, locale_code, identifier)

        cached = self._read_cache(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return Resolution(cached, ResolutionSource.CACHE, locale_code, identifier)

        try:
            native = format_template(self.resources.get_string(identifier, locale_code), format_args)
        except ResourceNotFoundError as e:
            logger.warning("%s", e)
            return Resolution(
                FALLBACK_MISSING_RESOURCE.format(identifier=identifier),
                ResolutionSource.MISSING_RESOURCE,
                locale_code,
                identifier,
            )

        engines = self._enabled_engines()
        inline_engines = tuple(engine for engine in engines if engine_is_inline(engine))

        if self._has_native_localization(identifier, native, format_args):
            logger.debug("Native resource exists for %s", key)
            if not inline_engines or self._safe_mode:
                return Resolution(native, ResolutionSource.NATIVE, locale_code, identifier)
            return _PendingTranslation(
                key, native, inline_engines, inline_engines, ResolutionSource.NATIVE
            )

        if self._safe_mode:
            logger.debug("Safe mode; serving native text for %s", key)
            return Resolution(native, ResolutionSource.SAFE_MODE, locale_code, identifier)

        return _PendingTranslation(
            key,
            native,
            engines,
            inline_engines,
            needs_connectivity=len(inline_engines) < len(engines),
        )

    def _go_offline(self, pending: _PendingTranslation) -> _PendingTranslation:
        logger.debug("Offline; serving native text for %s", pending.key)
        return pending.offline()

    def _read_override(self, key: LocaleKey, format_args: Sequence[object]) -> str | None:
        override = self._overrides.get(key)
        if override is None:
            return None
        try:
            template = override.render(OverrideContext(key))
        except Exception:
            logger.exception("Override producer failed for %s; ignoring override", key)
            return None
        return format_template(template, format_args)

    def _read_cache(self, key: LocaleKey) -> str | None:
        try:
            return self.cache.get(key)
        except (CacheStoreError, OSError) as e:
            logger.warning("Cache read failed for %s, treating as miss: %s", key, e)
            return None

    def _write_cache(self, key: LocaleKey, text: str) -> None:
        try:
            self.cache.put(key, text)
        except (CacheStoreError, OSError) as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    def _has_native_localization(
        self, identifier: ResourceId, native: str, format_args: Sequence[object]
    ) -> bool:
        """Compare the locale rendering with the probe-locale rendering."""
        try:
            probe_template = self.resources.get_string(identifier, self.config.probe_locale)
        except ResourceNotFoundError:
            # Defined for the locale but absent from the default catalog
            return True
        return native != format_template(probe_template, format_args)

    def _is_connected(self) -> bool:
        try:
            return bool(self.connectivity.is_connected())
        except Exception:
            logger.exception("Connectivity probe failed; assuming offline")
            return False

    def _enabled_engines(self) -> tuple[TranslationEngine, ...]:
        return tuple(engine for engine in self._engines if engine_is_enabled(engine))

    def _free_text_key(self, locale: str | None) -> LocaleKey | None:
        requested = self._default_locale if locale is None else locale
        try:
            language, region = parse_locale(requested)
        except InvalidLocaleError as e:
            logger.warning("Rejected locale %r for free-text translation: %s", requested, e)
            return None
        return LocaleKey(0, language, region)

    # ------------------------------------------------------------------
    # Engine chain (step 6) and completion (steps 7-8)
    # ------------------------------------------------------------------

    def _effective_timeout(self, timeout: float | None) -> float | None:
        return self.config.engine_timeout if timeout is None else timeout

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_workers, thread_name_prefix="dyntranslator"
                )
            return self._executor

    def _call_engine(
        self, engine: TranslationEngine, text: str, target: str, timeout: float | None
    ) -> str:
        if timeout is None:
            return engine.translate(text, target)

        future = self._get_executor().submit(engine.translate, text, target)
        try:
            return future.result(timeout=timeout)
        except TimeoutError as e:
            future.cancel()
            msg = f"{engine_name(engine)} exceeded {timeout}s"
            raise EngineTimeoutError(
                msg, engine_name=engine_name(engine), locale_code=target, timeout=timeout
            ) from e

    async def _call_engine_async(
        self, engine: TranslationEngine, text: str, target: str, timeout: float | None
    ) -> str:
        translate_async = getattr(engine, "translate_async", None)
        if callable(translate_async):
            call = translate_async(text, target)
        else:
            call = asyncio.to_thread(engine.translate, text, target)

        if timeout is None:
            return await call

        try:
            return await asyncio.wait_for(call, timeout)
        except TimeoutError as e:
            msg = f"{engine_name(engine)} exceeded {timeout}s"
            raise EngineTimeoutError(
                msg, engine_name=engine_name(engine), locale_code=target, timeout=timeout
            ) from e

    def _run_chain(
        self,
        text: str,
        key: LocaleKey,
        engines: Sequence[TranslationEngine],
        timeout: float | None,
    ) -> tuple[str, bool]:
        """Feed text through the engines in order.

        Returns:
            Final text and whether any engine produced output
        """
        bound = self._effective_timeout(timeout)
        current = text
        translated = False
        for engine in engines:
            try:
                result = self._call_engine(engine, current, key.locale_code, bound)
            except Exception as e:
                self._handle_engine_failure(engine, key, e)
                break
            if isinstance(result, str) and result.strip():
                current = result
                translated = True
        return current, translated

    async def _run_chain_async(
        self,
        text: str,
        key: LocaleKey,
        engines: Sequence[TranslationEngine],
        timeout: float | None,
    ) -> tuple[str, bool]:
        bound = self._effective_timeout(timeout)
        current = text
        translated = False
        for engine in engines:
            try:
                result = await self._call_engine_async(engine, current, key.locale_code, bound)
            except Exception as e:
                self._handle_engine_failure(engine, key, e)
                break
            if isinstance(result, str) and result.strip():
                current = result
                translated = True
        return current, translated

    def _handle_engine_failure(
        self, engine: TranslationEngine, key: LocaleKey, error: Exception
    ) -> None:
        """Log an engine failure and switch safe mode on."""
        match error:
            case EngineTimeoutError():
                logger.warning("Engine %s timed out for %s: %s", engine_name(engine), key, error)
            case TranslationEngineError():
                logger.warning("Engine %s failed for %s: %s", engine_name(engine), key, error)
            case _:
                logger.error(
                    "Engine %s raised unexpectedly for %s",
                    engine_name(engine),
                    key,
                    exc_info=error,
                )
        self.enable_safe_mode()

    def _complete(self, pending: _PendingTranslation, text: str, translated: bool) -> Resolution:
        key = pending.key
        if pending.local_source is not None:
            return Resolution(text, pending.local_source, key.locale_code, key.identifier)
        if not translated:
            return Resolution(text, ResolutionSource.UNTRANSLATED, key.locale_code, key.identifier)

        self._write_cache(key, text)
        logger.debug("Translated and cached %s", key)
        return Resolution(text, ResolutionSource.TRANSLATED, key.locale_code, key.identifier)

    def _emit(self, resolution: Resolution) -> Resolution:
        if self._on_resolution is not None:
            try:
                self._on_resolution(resolution)
            except Exception:
                logger.exception("on_resolution callback failed")
        return resolution

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Shut down the worker pool used for blocking timeouts."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"DynamicTranslator(default_locale={self._default_locale!r}, "
            f"engines={[engine_name(e) for e in self._engines]}, "
            f"overrides={len(self._overrides)}, safe_mode={self._safe_mode})"
        )
