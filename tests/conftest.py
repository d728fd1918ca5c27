from __future__ import annotations

import pytest

from scorecard_core.catalog import RubricCatalog
from scorecard_core.types import RubricDefinition


def build_tables(
    *,
    role: str = "Test Scorecard",
    sections: dict[str, tuple[int, dict[str, list[int]]]] | None = None,
    variants: list[str] | None = None,
    default_variant: str | None = "main",
) -> dict:
    """Create deterministic rubric tables for tests and smoke runs."""

    sections = sections or {
        "customer_experience": (30, {"communication": [12, 8, 5, 2], "opening_message": [3, 2, 1, 0]}),
        "knowledge": (25, {"knowledge": [25, 15, 10, 5]}),
        "processes": (45, {"processes": [20, 15, 10, 5]}),
    }
    variant_keys = variants or [default_variant or "main"]

    def _rubric(variant: str) -> dict:
        criteria = []
        secs = []
        for key, (weight, crits) in sections.items():
            secs.append({"key": key, "weight": weight, "criteria": list(crits)})
            for ckey, points in crits.items():
                criteria.append({"key": ckey, "points": list(points)})
        return {"label": f"{role} {variant}", "criteria": criteria, "sections": secs}

    return {
        "version": "test",
        "roles": {
            role: {
                "variants": [{"key": v, "label": v.title()} for v in variants] if variants else None,
                "default_variant": default_variant,
                "rubrics": {v: _rubric(v) for v in variant_keys},
                "categories": ["General"],
            }
        },
    }


def build_rubric(**kwargs) -> RubricDefinition:
    tables = build_tables(**kwargs)
    role = next(iter(tables["roles"]))
    catalog = RubricCatalog.from_dict(tables)
    variant = kwargs.get("default_variant", "main") or (kwargs.get("variants") or [None])[0]
    rubric = catalog.lookup(role, variant)
    assert rubric is not None
    return rubric


@pytest.fixture
def catalog() -> RubricCatalog:
    return RubricCatalog.load()


@pytest.fixture
def synthetic_rubric() -> RubricDefinition:
    return build_rubric()
