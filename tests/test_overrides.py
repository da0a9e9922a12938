"""Tests for the override table and override values."""

from __future__ import annotations

from datetime import datetime

import pytest

from dyntranslator.keys import LocaleKey
from dyntranslator.overrides import Override, OverrideContext, OverrideTable

ES = LocaleKey.of(1, "es")


class TestOverride:
    """Literal and dynamic override values."""

    def test_literal_render(self) -> None:
        assert Override.literal("[Hola] %1$s").render(OverrideContext(ES)) == "[Hola] %1$s"

    def test_dynamic_evaluated_at_render_time(self) -> None:
        """Producers see the context of each lookup, not of registration."""
        override = Override.dynamic(
            lambda ctx: "Good morning" if ctx.now.hour < 12 else "Good evening"
        )
        morning = OverrideContext(ES, now=datetime(2024, 1, 1, 8))
        evening = OverrideContext(ES, now=datetime(2024, 1, 1, 20))

        assert override.is_dynamic
        assert override.render(morning) == "Good morning"
        assert override.render(evening) == "Good evening"

    def test_producer_receives_key(self) -> None:
        override = Override.dynamic(lambda ctx: ctx.key.locale_code)
        assert override.render(OverrideContext(LocaleKey.of(1, "es-mx"))) == "es_MX"

    def test_requires_exactly_one_variant(self) -> None:
        with pytest.raises(ValueError, match="exactly one"):
            Override()
        with pytest.raises(ValueError, match="exactly one"):
            Override(template="x", producer=lambda _ctx: "y")

    @pytest.mark.parametrize("value", ["text", Override.literal("text")])
    def test_coerce_literal(self, value: object) -> None:
        coerced = Override.coerce(value)  # type: ignore[arg-type]
        assert coerced.template == "text"
        assert not coerced.is_dynamic

    def test_coerce_callable(self) -> None:
        assert Override.coerce(lambda _ctx: "x").is_dynamic

    def test_coerce_rejects_other_types(self) -> None:
        with pytest.raises(TypeError, match="must be str, callable or Override"):
            Override.coerce(42)  # type: ignore[arg-type]


class TestOverrideTable:
    """Mapping semantics of the table."""

    def test_lookup_is_case_insensitive(self) -> None:
        table = OverrideTable([(LocaleKey.of(1, "es"), "[Hola] %1$s")])
        found = table.get(LocaleKey.of(1, "ES"))
        assert found is not None
        assert found.template == "[Hola] %1$s"

    def test_missing_entry_returns_none(self) -> None:
        table = OverrideTable([(ES, "x")])
        assert table.get(LocaleKey.of(1, "bg")) is None
        assert table.get(LocaleKey.of(2, "es")) is None

    def test_set_replaces_all(self) -> None:
        table = OverrideTable([(ES, "old"), (LocaleKey.of(2, "es"), "other")])
        table.set([(ES, "new")])

        assert len(table) == 1
        assert table.get(ES).template == "new"  # type: ignore[union-attr]

    def test_set_is_atomic_on_bad_value(self) -> None:
        """A bad entry leaves the previous table intact."""
        table = OverrideTable([(ES, "old")])
        with pytest.raises(TypeError):
            table.set([(LocaleKey.of(2, "es"), "ok"), (ES, 42)])  # type: ignore[list-item]

        assert table.keys() == (ES,)

    def test_add_all_merges(self) -> None:
        table = OverrideTable([(ES, "old")])
        table.add_all([(ES, "new"), (LocaleKey.of(2, "es"), "two")])

        assert len(table) == 2
        assert table.get(ES).template == "new"  # type: ignore[union-attr]

    def test_remove(self) -> None:
        table = OverrideTable([(ES, "x")])
        assert table.remove(ES) is True
        assert table.remove(ES) is False
        assert ES not in table

    def test_clear(self) -> None:
        table = OverrideTable([(ES, "x")])
        table.clear()
        assert len(table) == 0

    def test_iteration_snapshot(self) -> None:
        """Iterating while mutating does not raise."""
        table = OverrideTable([(ES, "x"), (LocaleKey.of(2, "es"), "y")])
        for key in table:
            table.remove(key)
        assert len(table) == 0
