"""Tests for printf-style positional template formatting."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dyntranslator.formatting import format_template
from tests.strategies import plain_text


class TestPositionalArguments:
    """%N$s placeholders."""

    def test_single_argument(self) -> None:
        assert format_template("Hello %1$s", ["World"]) == "Hello World"

    def test_reordered_arguments(self) -> None:
        assert format_template("%2$s-%1$s", ["a", "b"]) == "b-a"

    def test_repeated_argument(self) -> None:
        assert format_template("%1$s and %1$s", ["x"]) == "x and x"

    def test_integer_conversion(self) -> None:
        assert format_template("You have %1$d messages", [3]) == "You have 3 messages"

    def test_precision(self) -> None:
        assert format_template("%1$.2f%%", [12.3456]) == "12.35%"

    def test_uppercase_string_conversion(self) -> None:
        assert format_template("%1$S!", ["hey"]) == "HEY!"


class TestSequentialArguments:
    """Placeholders without an explicit index consume arguments in order."""

    def test_in_order(self) -> None:
        assert format_template("%s + %s", ["a", "b"]) == "a + b"

    def test_width_and_flags(self) -> None:
        assert format_template("[%-4s]", ["ab"]) == "[ab  ]"
        assert format_template("%05d", [42]) == "00042"


class TestSpecialSequences:
    def test_literal_percent(self) -> None:
        assert format_template("100%% of %s", ["tests"]) == "100% of tests"

    def test_line_separator(self) -> None:
        assert format_template("a%nb") == "a\nb"


class TestUnresolvablePlaceholders:
    """Formatting never raises; unresolvable placeholders stay verbatim."""

    def test_missing_argument(self) -> None:
        assert format_template("Hi %1$s") == "Hi %1$s"

    def test_index_out_of_range(self) -> None:
        assert format_template("%1$s %3$s", ["a", "b"]) == "a %3$s"

    def test_type_mismatch(self) -> None:
        assert format_template("%1$d items", ["many"]) == "%1$d items"

    def test_lone_percent_untouched(self) -> None:
        assert format_template("50% off") == "50% off"

    @pytest.mark.parametrize("args", [(), ("x",), ("x", "y", "z")])
    def test_extra_or_missing_arguments_never_raise(self, args: tuple[str, ...]) -> None:
        assert isinstance(format_template("%1$s %2$s", args), str)


class TestProperties:
    @given(plain_text)
    def test_text_without_placeholders_unchanged(self, text: str) -> None:
        assert format_template(text, ["ignored"]) == text

    @given(plain_text, plain_text)
    def test_substitutes_arbitrary_text(self, prefix: str, value: str) -> None:
        assert format_template(prefix + "%1$s", [value]) == prefix + value

    @pytest.mark.fuzz
    @given(st.text(max_size=200), st.lists(st.one_of(st.text(), st.integers(), st.floats())))
    def test_never_raises(self, template: str, args: list[object]) -> None:
        assert isinstance(format_template(template, args), str)
