from __future__ import annotations

import json

import pytest

from scorecard_core.catalog import CatalogError, RubricCatalog, rubric_to_dict
from scorecard_core.rubrics import ROLE_JUNIOR, ROLE_MEDIOR, ROLE_SENIOR, ROLES

from tests.conftest import build_tables


def test_packaged_catalog_has_all_roles(catalog):
    assert catalog.roles() == ROLES
    assert all(catalog.has_scorecard(r) for r in ROLES)
    assert len(list(catalog.rubrics())) == 4


def test_lookup_uses_default_variant(catalog):
    rubric = catalog.lookup(ROLE_JUNIOR)
    assert rubric is not None
    assert rubric.variant == "use_this_one"
    assert [s.key for s in rubric.sections] == [
        "customer_experience", "escalations", "processes", "knowledge", "proactivity",
    ]
    assert [s.weight for s in rubric.sections] == [30, 15, 20, 25, 10]
    assert rubric.criteria["communication"].points == (12, 8, 5, 2)
    assert rubric.criterion("communication") is rubric.criteria["communication"]
    assert rubric.criterion("process") is None


def test_lookup_unknown_is_none_not_error(catalog):
    assert catalog.lookup("Trainee") is None
    assert catalog.lookup(ROLE_SENIOR) is None
    assert catalog.lookup(ROLE_SENIOR, "missing") is None
    assert catalog.lookup(ROLE_MEDIOR, "mentions") is None


def test_variants_and_selection(catalog):
    assert catalog.variants_for(ROLE_JUNIOR) == []
    assert catalog.variants_for("Trainee") == []
    assert catalog.variants_for(ROLE_SENIOR) == ["mentions", "use_this_one"]
    assert catalog.requires_variant_selection(ROLE_SENIOR) is True
    assert catalog.requires_variant_selection(ROLE_JUNIOR) is False
    assert catalog.requires_variant_selection("Trainee") is False
    assert catalog.variant_labels(ROLE_SENIOR)["mentions"].endswith("Mentions")


def test_declared_variants_with_default_need_no_selection():
    tables = build_tables(variants=["a", "b"], default_variant="b")
    catalog = RubricCatalog.from_dict(tables)
    assert catalog.variants_for("Test Scorecard") == ["a", "b"]
    assert catalog.requires_variant_selection("Test Scorecard") is False
    assert catalog.lookup("Test Scorecard").variant == "b"


def test_categories_and_description(catalog):
    cats = catalog.categories_for(ROLE_MEDIOR)
    assert "Stake chat" in cats
    assert catalog.categories_for("Trainee") == []
    assert catalog.role_entry(ROLE_JUNIOR).default_variant == "use_this_one"
    assert catalog.role_entry("Trainee") is None
    desc = catalog.describe_role(ROLE_SENIOR)
    assert desc["requires_variant_selection"] is True
    assert desc["default_variant"] is None
    assert [v["key"] for v in desc["variants"]] == ["mentions", "use_this_one"]


def test_rubric_to_dict_is_json_safe(catalog):
    payload = rubric_to_dict(catalog.lookup(ROLE_SENIOR, "mentions"))
    text = json.dumps(payload)
    assert '"process"' in text
    assert payload["total_weight"] == 100
    assert payload["max_points"] == 100


def test_catalog_is_read_only(catalog):
    rubric = catalog.lookup(ROLE_JUNIOR)
    with pytest.raises(TypeError):
        rubric.criteria["new"] = rubric.criteria["knowledge"]  # type: ignore[index]
    with pytest.raises(AttributeError):
        rubric.sections[0].weight = 99  # type: ignore[misc]


def test_load_from_override_file(tmp_path):
    path = tmp_path / "rubrics.json"
    path.write_text(json.dumps(build_tables(role="Trainee")), encoding="utf-8")
    catalog = RubricCatalog.load(path)
    assert catalog.roles() == ["Trainee"]
    with pytest.raises(FileNotFoundError):
        RubricCatalog.load(tmp_path / "missing.json")


def _mutate(tables: dict, fn) -> dict:
    rubric = tables["roles"]["Test Scorecard"]["rubrics"]["main"]
    fn(rubric)
    return tables


@pytest.mark.parametrize(
    "mutation,message",
    [
        (lambda r: r["criteria"][0].update(points=[]), "empty point table"),
        (lambda r: r["criteria"][0].update(points=[3, "x"]), "non-integer"),
        (lambda r: r["criteria"].pop(0), "without a point table"),
        (lambda r: r["sections"][0].update(weight=-5), "non-negative"),
        (lambda r: r["sections"][0].update(criteria=[]), "no criteria"),
        (lambda r: r["sections"].append(dict(r["sections"][0])), "duplicate section"),
        (lambda r: r["criteria"][0].update(options=["only one"]), "option labels"),
        (lambda r: r.update(sections=[]), "no sections"),
    ],
)
def test_malformed_tables_fail_at_build(mutation, message):
    tables = _mutate(build_tables(), mutation)
    with pytest.raises(CatalogError, match=message):
        RubricCatalog.from_dict(tables)


def test_variant_wiring_validated():
    tables = build_tables(variants=["a"], default_variant=None)
    tables["roles"]["Test Scorecard"]["variants"].append({"key": "ghost"})
    with pytest.raises(CatalogError, match="ghost"):
        RubricCatalog.from_dict(tables)

    tables = build_tables()
    tables["roles"]["Test Scorecard"]["default_variant"] = "ghost"
    with pytest.raises(CatalogError, match="default variant"):
        RubricCatalog.from_dict(tables)

    with pytest.raises(CatalogError):
        RubricCatalog.from_dict({"roles": []})
