"""Positional template formatting for override and resource strings.

Templates follow the printf-style convention used by platform string
resources:

    %1$s    explicit argument index (1-based)
    %s %d   ordinary conversions, consuming arguments left to right
    %5.2f   flags, width and precision
    %%      literal percent sign
    %n      line separator

Formatting never raises. A placeholder whose argument is missing, or whose
argument does not fit the conversion, is left verbatim in the output so the
caller still sees a usable string.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

__all__ = ["format_template"]

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(
    r"%(?:(?P<index>[1-9][0-9]*)\$)?"
    r"(?P<flags>[-#+ 0]*)"
    r"(?P<width>[0-9]+)?"
    r"(?:\.(?P<precision>[0-9]+))?"
    r"(?P<conversion>[sSdfeExXoc%n])"
)

# Java conversions without a direct %-operator equivalent
_CONVERSION_MAP = {"S": "s"}


def _render(match: re.Match[str], value: object) -> str:
    conversion = match["conversion"]
    spec = "%{flags}{width}{precision}{conversion}".format(
        flags=match["flags"],
        width=match["width"] or "",
        precision=f".{match['precision']}" if match["precision"] else "",
        conversion=_CONVERSION_MAP.get(conversion, conversion),
    )
    rendered = spec % (value,)
    return rendered.upper() if conversion == "S" else rendered


def format_template(template: str, args: Sequence[object] = ()) -> str:
    """Substitute positional arguments into a printf-style template.

    Args:
        template: Template string (e.g., "Hello %1$s, you have %2$d messages")
        args: Positional arguments; index 1 refers to args[0]

    Returns:
        Formatted string. Unresolvable placeholders are kept as written.

    Example:
        >>> format_template("Hello %1$s", ["World"])
        'Hello World'
        >>> format_template("%2$s-%1$s", ["a", "b"])
        'b-a'
        >>> format_template("100%% of %s", ["tests"])
        '100% of tests'
        >>> format_template("Hi %1$s")
        'Hi %1$s'
    """
    ordinary_index = 0

    def substitute(match: re.Match[str]) -> str:
        nonlocal ordinary_index
        conversion = match["conversion"]
        if conversion == "%":
            return "%"
        if conversion == "n":
            return "\n"

        if match["index"] is not None:
            position = int(match["index"]) - 1
        else:
            position = ordinary_index
            ordinary_index += 1

        if position >= len(args):
            return match.group(0)

        try:
            return _render(match, args[position])
        except (TypeError, ValueError, OverflowError) as e:
            logger.debug("Placeholder %r kept verbatim: %s", match.group(0), e)
            return match.group(0)

    return _PLACEHOLDER_RE.sub(substitute, template)
