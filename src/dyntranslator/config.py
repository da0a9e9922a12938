"""Construction-time configuration for DynamicTranslator.

Provides a single frozen dataclass with the static settings of a
translator. Runtime-mutable state (current default locale, safe mode,
overrides, engine chain) lives on the translator and is changed through
DynamicTranslator.configure() and its setters.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dyntranslator.constants import (
    DEFAULT_ENGINE_TIMEOUT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_PROBE_LOCALE,
)
from dyntranslator.locale_utils import (
    format_locale,
    get_system_locale,
    normalize_locale,
    parse_locale,
)

__all__ = ["TranslatorConfig"]


@dataclass(frozen=True, slots=True)
class TranslatorConfig:
    """Immutable configuration for DynamicTranslator.

    All fields have sensible defaults; ``TranslatorConfig()`` produces a
    usable configuration whose default locale is the system locale.

    Attributes:
        default_locale: Initial target locale when a request names none.
            Validated against CLDR and normalized to canonical POSIX form.
            Defaults to the system locale.
        probe_locale: Locale assumed to have no catalog of its own. Rendering
            a string for it yields the default-catalog text. Must never be a
            locale the resource set localizes (default: "kv").
        engine_timeout: Seconds an engine call may take before it counts as
            failed (default: 2.0). None disables the bound.
        max_workers: Worker threads used to enforce the timeout on the
            blocking path (default: 4).
        safe_mode: Start with the engine chain bypassed (default: False).

    Example:
        >>> config = TranslatorConfig(default_locale="es", engine_timeout=5.0)
        >>> config.default_locale
        'es'
    """

    default_locale: str = field(default_factory=get_system_locale)
    probe_locale: str = DEFAULT_PROBE_LOCALE
    engine_timeout: float | None = DEFAULT_ENGINE_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    safe_mode: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize values at construction time.

        Raises:
            InvalidLocaleError: If default_locale is malformed or names an
                unknown language, or if probe_locale is malformed
            ValueError: If engine_timeout or max_workers is not positive, or if
                probe_locale equals default_locale
        """
        default_locale = format_locale(*parse_locale(self.default_locale))
        object.__setattr__(self, "default_locale", default_locale)
        object.__setattr__(self, "probe_locale", normalize_locale(self.probe_locale))

        if self.engine_timeout is not None and self.engine_timeout <= 0:
            msg = "engine_timeout must be positive or None"
            raise ValueError(msg)
        if self.max_workers <= 0:
            msg = "max_workers must be positive"
            raise ValueError(msg)
        if self.probe_locale == self.default_locale:
            msg = f"probe_locale must differ from default_locale, both are '{self.probe_locale}'"
            raise ValueError(msg)
