from __future__ import annotations

import json

from scorecard_core import smoke
from tools import manual_cli, validate_catalog
from tests.conftest import build_tables


def test_smoke_scores_every_rubric():
    results = smoke.run_smoke()
    assert len(results) == 4 * 5
    by_case = {(r["role"], r["variant"], r["case"]): r["score"] for r in results}
    assert by_case[("Junior Scorecard", "use_this_one", "best")] == 100
    assert by_case[("Senior Scorecard", "mentions", "worst")] == 0
    assert all(r["score"] is None for r in results if r["case"] == "empty")
    assert all(r["score"] == 100 for r in results if r["case"] == "first_section_rest_na")


def test_validate_catalog_exit_codes(tmp_path, capsys):
    assert validate_catalog.main([]) == 0
    assert "Meets targets" in capsys.readouterr().out

    skewed = tmp_path / "skewed.json"
    skewed.write_text(json.dumps(build_tables(sections={"a": (70, {"a": [4, 2, 1, 0]})})), encoding="utf-8")
    assert validate_catalog.main([str(skewed)]) == 2

    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"roles": {"X": {"rubrics": {}}}}), encoding="utf-8")
    assert validate_catalog.main([str(broken)]) == 1
    assert validate_catalog.main([str(tmp_path / "missing.json")]) == 1


def test_manual_cli_grades_interactively(monkeypatch, capsys):
    answers = iter(["0", "n"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(answers))

    assert manual_cli.main(["Senior Scorecard", "--variant", "mentions", "--json"]) == 0
    out = capsys.readouterr().out
    state = json.loads(out[out.index("{\n"):])
    assert state["scorecardValues"] == {"process": 0, "knowledge": 4}
    assert state["qualityScorePercent"] == 100


def test_manual_cli_manual_score(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda _prompt="": "85")
    assert manual_cli.main(["Trainee"]) == 0
    assert "score: 85" in capsys.readouterr().out
