from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from . import config
from .catalog import RubricCatalog
from .types import RubricDefinition


def _blank_rubric(rubric: RubricDefinition) -> dict[str, object]:
    return {
        "sections": len(rubric.sections),
        "criteria": len(rubric.criterion_keys),
        "total_weight": rubric.total_weight,
        "max_points": rubric.max_points,
        "unused_criteria": [],
        "shared_criteria": [],
    }


def audit_rubrics(rubrics: Iterable[RubricDefinition]) -> dict[str, object]:
    coverage: dict[str, dict[str, object]] = {}
    totals = {"rubrics": 0, "sections": 0, "criteria": 0}
    warnings: list[str] = []

    for rubric in rubrics:
        name = f"{rubric.role}/{rubric.variant}"
        data = _blank_rubric(rubric)
        coverage[name] = data
        totals["rubrics"] += 1
        totals["sections"] += len(rubric.sections)
        totals["criteria"] += len(rubric.criterion_keys)

        if rubric.total_weight != config.WEIGHT_TOTAL_EXPECTED:
            warnings.append(
                f"{name} section weights sum to {rubric.total_weight} (expected {config.WEIGHT_TOTAL_EXPECTED})"
            )

        referenced: dict[str, int] = {}
        for section in rubric.sections:
            for key in section.criteria:
                referenced[key] = referenced.get(key, 0) + 1
            if section.weight == 0:
                warnings.append(f"{name} section '{section.key}' has weight 0 and never affects the score")

        unused = sorted(k for k in rubric.criteria if k not in referenced)
        shared = sorted(k for k, n in referenced.items() if n > 1)
        data["unused_criteria"] = unused
        data["shared_criteria"] = shared
        if unused:
            warnings.append(f"{name} defines criteria outside any section: {', '.join(unused)}")
        if shared:
            warnings.append(f"{name} counts criteria in more than one section: {', '.join(shared)}")

        for key, crit in rubric.criteria.items():
            if crit.max_points == 0:
                warnings.append(f"{name} criterion '{key}' has a maximum of 0 points")
            elif max(crit.points) != crit.max_points:
                warnings.append(f"{name} criterion '{key}' option 0 ({crit.max_points}) is not its best option")

    summary = {"coverage": coverage, "warnings": warnings, "totals": totals}
    return summary


def audit_catalog(catalog: RubricCatalog) -> dict[str, object]:
    summary = audit_rubrics(catalog.rubrics())
    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    for role in catalog.roles():
        if catalog.requires_variant_selection(role) and len(catalog.variants_for(role)) == 1:
            warnings.append(f"{role} requires a variant choice but only declares one")
    return summary


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, dict[str, object]] = summary["coverage"]  # type: ignore[assignment]
    print("=== Rubric Coverage ===")
    for name in sorted(coverage):
        data = coverage[name]
        print(f"\nRubric: {name}")
        print(f"  sections={data['sections']}  criteria={data['criteria']}  "
              f"weight={data['total_weight']}  max_points={data['max_points']}")
        if data["unused_criteria"]:
            print(f"    unused_criteria: {', '.join(data['unused_criteria'])}")  # type: ignore[arg-type]
        if data["shared_criteria"]:
            print(f"    shared_criteria: {', '.join(data['shared_criteria'])}")  # type: ignore[arg-type]

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    totals = summary["totals"]
    print("\nTotals:", totals)


def write_summary(summary: dict[str, object], path: Path | None = None) -> str:
    path = path or Path(config.AUDIT_SUMMARY_PATH)
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(_argv: list[str] | None = None) -> int:
    catalog = RubricCatalog.load(_argv[0] if _argv else None)
    summary = audit_catalog(catalog)
    print_report(summary)
    write_summary(summary)
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    import sys
    raise SystemExit(main(sys.argv[1:]))
