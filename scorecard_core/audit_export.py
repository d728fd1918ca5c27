"""Helpers to export per-section score breakdowns in JSON/CSV formats."""
from __future__ import annotations

from typing import Iterable, List, Dict, Any
import csv
import io

from .config import BREAKDOWN_FIELDS as _FIELDS
from .types import ScoreBreakdown


def _normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in _FIELDS:
        val = row.get(key)
        if key in {"weight", "earned", "max_points", "rated", "not_applicable"}:
            try:
                out[key] = int(val)
            except (TypeError, ValueError):
                out[key] = 0
        elif key == "ratio":
            try:
                out[key] = round(float(val), 4)
            except (TypeError, ValueError):
                out[key] = None
        elif key == "touched":
            out[key] = bool(val)
        else:
            out[key] = "" if val is None else str(val)
    return out


def to_json(breakdown: ScoreBreakdown) -> Dict[str, Any]:
    """Return a JSON-safe payload for one scored rubric."""

    rows: List[Dict[str, Any]] = [_normalize_row(r) for r in breakdown.rows()]
    return {
        "score": breakdown.score,
        "active_weight": breakdown.active_weight,
        "weighted_sum": round(breakdown.weighted_sum, 4),
        "ignored_keys": list(breakdown.ignored_keys),
        "sections": rows,
    }


def to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    """Render breakdown rows as CSV with a fixed header."""

    normalized = [_normalize_row(r or {}) for r in rows]
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for row in normalized:
        writer.writerow(row)
    return buf.getvalue()


__all__ = ["to_json", "to_csv"]
