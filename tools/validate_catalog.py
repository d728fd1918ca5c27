from __future__ import annotations
import os, sys
from scorecard_core.catalog import CatalogError, RubricCatalog
from scorecard_core.ratings import best_ratings
from scorecard_core.scoring import calculate

# Configurable targets; defaults match the shipped catalog
TARGETS = {
    "options_per_criterion": int(os.getenv("TARGET_OPTIONS", 4)),
    "weight_total": int(os.getenv("TARGET_WEIGHT_TOTAL", 100)),
}

def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        catalog = RubricCatalog.load(argv[0] if argv else None)
    except (CatalogError, FileNotFoundError) as e:
        print(f"Catalog invalid: {e}")
        return 1

    print(f"Targets per rubric: {TARGETS['options_per_criterion']} options per criterion, "
          f"weights summing to {TARGETS['weight_total']}.\n")

    problems = 0
    for rubric in catalog.rubrics():
        print(f"{rubric.role} / {rubric.variant}: sections={len(rubric.sections)} "
              f"criteria={len(rubric.criterion_keys)} weight={rubric.total_weight}")
        for section in rubric.sections:
            pts = sum(rubric.criteria[k].max_points for k in section.criteria)
            print(f"  {section.key:<22} weight {section.weight:3d} | max {pts:3d} pts")

        odd = [k for k, c in rubric.criteria.items() if len(c.points) != TARGETS["options_per_criterion"]]
        best = calculate(rubric, best_ratings(rubric))
        if odd or rubric.total_weight != TARGETS["weight_total"] or best != 100:
            problems += 1
            print(f"  → Check: option counts {odd or '-'}, weight {rubric.total_weight}, all-best score {best}\n")
        else:
            print("  ✓ Meets targets\n")
    return 2 if problems else 0

if __name__ == "__main__":
    raise SystemExit(main())
