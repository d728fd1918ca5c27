from __future__ import annotations

import csv
import io

from scorecard_core.audit_export import to_csv, to_json
from scorecard_core.config import BREAKDOWN_FIELDS
from scorecard_core.rubrics import ROLE_JUNIOR
from scorecard_core.scoring import score_breakdown
from scorecard_core.types import NA, Graded


def test_json_breakdown_payload(catalog):
    rubric = catalog.lookup(ROLE_JUNIOR)
    bd = score_breakdown(rubric, {"communication": Graded(2), "knowledge": Graded(1), "escalation": NA, "x": Graded(0)})
    body = to_json(bd)

    assert body["score"] == 50
    assert body["active_weight"] == 55
    assert body["weighted_sum"] == 27.5
    assert body["ignored_keys"] == ["x"]
    rows = {row["section"]: row for row in body["sections"]}
    assert set(rows) == {s.key for s in rubric.sections}
    assert rows["customer_experience"]["ratio"] == round(5 / 12, 4)
    assert rows["escalations"]["touched"] is False
    assert rows["escalations"]["not_applicable"] == 1
    assert rows["escalations"]["ratio"] is None
    assert rows["proactivity"]["variant"] == "use_this_one"


def test_csv_has_fixed_header(catalog):
    bd = score_breakdown(catalog.lookup(ROLE_JUNIOR), {"knowledge": Graded(0)})
    text = to_csv(bd.rows())
    reader = list(csv.DictReader(io.StringIO(text)))
    assert len(reader) == len(bd.sections)
    assert tuple(reader[0].keys()) == BREAKDOWN_FIELDS
    knowledge = next(r for r in reader if r["section"] == "knowledge")
    assert knowledge["touched"] == "True"
    assert knowledge["earned"] == "25"


def test_csv_tolerates_sparse_rows():
    text = to_csv([{"section": "a", "weight": "x"}, None])  # type: ignore[list-item]
    lines = text.strip().splitlines()
    assert lines[0].split(",") == list(BREAKDOWN_FIELDS)
    assert len(lines) == 3
    assert lines[1].split(",")[BREAKDOWN_FIELDS.index("weight")] == "0"
