"""Conversions between boundary rating payloads and tagged ratings.

Boundary payloads map criterion keys to an option index or the ``"N/A"``
token. Ticket records (``scorecardValues``, template values) persist N/A as
the legacy slot index instead; only ``legacy=True`` reads that slot as N/A.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from . import config
from .types import NA, Graded, NotApplicable, Rating, RubricDefinition


class RatingParseError(ValueError):
    """A boundary rating value is neither an option index nor N/A."""


def parse_rating(
    value: Any,
    *,
    na_token: str | None = None,
    na_index: int | None = None,
    legacy: bool = False,
) -> Optional[Rating]:
    """
    Decode one boundary value. ``None`` means "not rated" and is returned as
    ``None`` so callers can drop the key. Integers are option indexes unless
    ``legacy`` is set, in which case ``na_index`` (default
    ``NA_LEGACY_INDEX``) also means N/A.
    """
    token = (na_token or config.NA_TOKEN).strip().lower()
    slot = config.NA_LEGACY_INDEX if na_index is None else na_index
    if value is None:
        return None
    if isinstance(value, (Graded, NotApplicable)):
        return value
    if isinstance(value, bool):
        raise RatingParseError(f"boolean is not a rating: {value!r}")
    if isinstance(value, int):
        if legacy and value == slot:
            return NA
        if value < 0:
            raise RatingParseError(f"option index must be non-negative: {value}")
        return Graded(value)
    if isinstance(value, str):
        s = value.strip()
        if s.lower() == token:
            return NA
        try:
            idx = int(s)
        except ValueError:
            raise RatingParseError(f"unrecognised rating: {value!r}") from None
        return parse_rating(idx, na_token=na_token, na_index=na_index, legacy=legacy)
    raise RatingParseError(f"unsupported rating type: {type(value).__name__}")


def parse_ratings(raw: Mapping[str, Any] | None, **kw: Any) -> Dict[str, Rating]:
    out: Dict[str, Rating] = {}
    for key, value in (raw or {}).items():
        try:
            rating = parse_rating(value, **kw)
        except RatingParseError as e:
            raise RatingParseError(f"{key}: {e}") from None
        if rating is not None:
            out[str(key)] = rating
    return out


def dump_rating(rating: Rating, *, legacy: bool = False) -> int | str:
    if isinstance(rating, NotApplicable):
        return config.NA_LEGACY_INDEX if legacy else config.NA_TOKEN
    return int(rating.index)


def dump_ratings(ratings: Mapping[str, Rating], *, legacy: bool = False) -> Dict[str, int | str]:
    """Boundary form by default; ``legacy=True`` gives the persisted ``scorecardValues`` map."""
    return {key: dump_rating(r, legacy=legacy) for key, r in ratings.items()
            if isinstance(r, (Graded, NotApplicable))}


def empty_ratings(rubric: RubricDefinition | None) -> Dict[str, Optional[Rating]]:
    """Every criterion of the rubric, unrated."""
    if rubric is None:
        return {}
    return {key: None for key in rubric.criterion_keys}


def best_ratings(rubric: RubricDefinition) -> Dict[str, Rating]:
    """Every criterion at option 0, i.e. the maximum (the editor's "100%" action)."""
    return {key: Graded(0) for key in rubric.criterion_keys}


def restrict_to(rubric: RubricDefinition, ratings: Mapping[str, Rating]) -> Dict[str, Rating]:
    known = set(rubric.criterion_keys)
    return {k: v for k, v in ratings.items() if k in known}


__all__ = [
    "RatingParseError",
    "parse_rating",
    "parse_ratings",
    "dump_rating",
    "dump_ratings",
    "empty_ratings",
    "best_ratings",
    "restrict_to",
]
