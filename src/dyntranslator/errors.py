"""DynTranslator exception hierarchy.

Every error raised by the package derives from DynTranslatorError. The
resolution pipeline catches all of them internally; they surface only from
the building blocks (locale parsing, resource providers, engines, stores)
when those are used directly.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "CacheStoreError",
    "DynTranslatorError",
    "EngineTimeoutError",
    "InvalidLocaleError",
    "ResourceNotFoundError",
    "TranslationEngineError",
]


class DynTranslatorError(Exception):
    """Base exception for all DynTranslator errors."""


class InvalidLocaleError(DynTranslatorError, ValueError):
    """Locale tag is malformed or names an unknown language.

    Attributes:
        locale_code: The tag that failed validation
    """

    def __init__(self, message: str, *, locale_code: str = "") -> None:
        super().__init__(message)
        self.locale_code = locale_code


class ResourceNotFoundError(DynTranslatorError, LookupError):
    """No catalog (including the default one) defines the identifier.

    Attributes:
        identifier: Resource identifier that was requested
        locale_code: Locale the lookup was rendered for
    """

    def __init__(self, message: str, *, identifier: int, locale_code: str = "") -> None:
        super().__init__(message)
        self.identifier = identifier
        self.locale_code = locale_code


class TranslationEngineError(DynTranslatorError):
    """A translation engine could not produce a translation.

    Raised by engines for network failures, malformed responses and other
    translation-specific problems. The pipeline recovers from it by keeping
    the pre-engine text and entering safe mode.

    Attributes:
        engine_name: Name of the failing engine (class name by default)
        locale_code: Target locale of the failed call
    """

    def __init__(self, message: str, *, engine_name: str = "", locale_code: str = "") -> None:
        super().__init__(message)
        self.engine_name = engine_name
        self.locale_code = locale_code


class EngineTimeoutError(TranslationEngineError):
    """Engine call exceeded the configured timeout.

    Attributes:
        timeout: The bound, in seconds, that was exceeded
    """

    def __init__(
        self,
        message: str,
        *,
        engine_name: str = "",
        locale_code: str = "",
        timeout: float | None = None,
    ) -> None:
        super().__init__(message, engine_name=engine_name, locale_code=locale_code)
        self.timeout = timeout


class CacheStoreError(DynTranslatorError):
    """A cache store could not read or persist its entries.

    Attributes:
        path: Backing file, when the store is file-based
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path
