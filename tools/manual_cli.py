# tools/manual_cli.py
from __future__ import annotations
import argparse, json, sys
from typing import Any, List
from scorecard_core.catalog import RubricCatalog
from scorecard_core.policy import ReconciliationPolicy, grading_status
from scorecard_core.presentation import DEFAULT_OPTION_TABLE
from scorecard_core.ratings import dump_ratings, parse_rating, RatingParseError
from scorecard_core.types import Criterion

def _opts(crit: Criterion) -> List[str]:
    out: List[str] = []
    for i, label in enumerate(crit.options or [str(p) for p in crit.points]):
        out.append(f"{label} ({crit.points[i]} pts)")
    return out

def _ask(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""

def _pick_variant(catalog: RubricCatalog, role: str, given: str | None) -> str | None:
    if given or not catalog.requires_variant_selection(role):
        return given
    labels = catalog.variant_labels(role)
    keys = list(labels)
    print(f"\n{role} needs a scorecard type:")
    for i, k in enumerate(keys): print(f"  {i}: {labels[k]}")
    s = _ask("Choose index: ")
    try:
        return keys[int(s)]
    except (ValueError, IndexError):
        return keys[0]

def ask_criterion(crit: Criterion) -> Any:
    print(f"\n[{crit.short_label}] {crit.label}")
    for i, opt in enumerate(_opts(crit)):
        print(f"  {i}: {opt}  <{DEFAULT_OPTION_TABLE.graded.get(i, DEFAULT_OPTION_TABLE.fallback).short_label}>")
    print(f"  n: {crit.na_label}   (enter to skip)")
    s = _ask("Choose: ")
    if s == "": return None
    if s.lower() == "n": return "N/A"
    return s

def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Grade one ticket against a scorecard from the terminal")
    ap.add_argument("role", help="Agent position, e.g. 'Junior Scorecard'")
    ap.add_argument("--variant", default=None)
    ap.add_argument("--rubrics", default=None, help="Alternative rubric JSON file")
    ap.add_argument("--json", action="store_true", help="Print the final state as JSON")
    args = ap.parse_args(argv)

    catalog = RubricCatalog.load(args.rubrics)
    policy = ReconciliationPolicy(catalog)
    if not catalog.has_scorecard(args.role):
        print(f"{args.role} has no scorecard; enter the quality score manually.")
        s = _ask("Score (0-100): ")
        try:
            state = policy.set_manual_score(policy.start(args.role), int(s) if s else None)
        except ValueError as e:
            print(f"Invalid score: {e}", file=sys.stderr); return 1
    else:
        variant = _pick_variant(catalog, args.role, args.variant)
        state = policy.start(args.role, variant)
        rubric = policy.rubric_for(state)
        if rubric is None:
            print(f"No scorecard for {args.role}/{variant}", file=sys.stderr); return 1
        for section in rubric.sections:
            print(f"\n== {section.label} ({section.weight}%) ==")
            for key in section.criteria:
                crit = rubric.criterion(key)
                if crit is None:
                    continue
                raw = ask_criterion(crit)
                try:
                    rating = parse_rating(raw)
                except RatingParseError as e:
                    print(f"  skipped: {e}"); continue
                state = policy.apply_rating(state, key, rating)
                print(f"  score so far: {state.score if state.score is not None else '-'}")

    if args.json:
        print(json.dumps({"role": state.role, "variant": state.variant,
                          "scorecardValues": dump_ratings(state.ratings, legacy=True),
                          "qualityScorePercent": state.score}, indent=2))
    else:
        print(f"\nStatus: {grading_status(state)}  score: {state.score if state.score is not None else 'not graded'}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
