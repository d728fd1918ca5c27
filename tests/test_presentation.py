from __future__ import annotations

from scorecard_core.presentation import DEFAULT_OPTION_TABLE
from scorecard_core.types import NA, Graded


def test_option_labels_by_index():
    table = DEFAULT_OPTION_TABLE
    assert [table.short_label(Graded(i)) for i in range(4)] == ["Best", "Good", "Coach", "Improve"]
    assert table.short_label(NA) == "N/A"
    assert table.short_label(None) == ""


def test_unknown_index_uses_fallback():
    assert DEFAULT_OPTION_TABLE.style_for(Graded(9)) is DEFAULT_OPTION_TABLE.fallback
    assert DEFAULT_OPTION_TABLE.style_for(None) is None


def test_to_dict_is_keyed_by_index():
    payload = DEFAULT_OPTION_TABLE.to_dict()
    assert list(payload["graded"]) == ["0", "1", "2", "3"]
    assert payload["graded"]["0"]["hex"] == "#22c55e"
    assert payload["not_applicable"]["short_label"] == "N/A"
