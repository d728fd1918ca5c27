from __future__ import annotations

import json
import logging
from typing import Dict, List, Tuple

from .catalog import RubricCatalog
from .config import DEBUG_TRACE
from .ratings import best_ratings, dump_ratings
from .scoring import score_breakdown
from .types import NA, Graded, Rating, RubricDefinition


def _maybe_enable_trace() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    if DEBUG_TRACE:
        logging.getLogger("scorecard_core.scoring").setLevel(logging.DEBUG)


def _synthetic_ratings(rubric: RubricDefinition) -> List[Tuple[str, Dict[str, Rating]]]:
    worst = {key: Graded(len(rubric.criteria[key].points) - 1) for key in rubric.criterion_keys}
    first_section_only = {key: Graded(0) for key in rubric.sections[0].criteria}
    na_elsewhere = dict(first_section_only)
    for section in rubric.sections[1:]:
        for key in section.criteria:
            na_elsewhere[key] = NA
    return [
        ("empty", {}),
        ("best", best_ratings(rubric)),
        ("worst", worst),
        ("first_section", first_section_only),
        ("first_section_rest_na", na_elsewhere),
    ]


def run_smoke() -> List[Dict[str, object]]:
    _maybe_enable_trace()

    catalog = RubricCatalog.load()
    out: List[Dict[str, object]] = []
    for rubric in catalog.rubrics():
        logging.info("Rubric %s/%s: %d sections, weight %d",
                     rubric.role, rubric.variant, len(rubric.sections), rubric.total_weight)
        for name, ratings in _synthetic_ratings(rubric):
            bd = score_breakdown(rubric, ratings)
            logging.info("  %-22s score=%s active_weight=%d", name, bd.score, bd.active_weight)
            out.append({
                "role": rubric.role,
                "variant": rubric.variant,
                "case": name,
                "ratings": dump_ratings(ratings),
                "score": bd.score,
            })
    logging.info("Smoke cases scored: %d", len(out))
    return out


def main() -> None:
    print(json.dumps(run_smoke(), indent=2))


if __name__ == "__main__":
    main()
