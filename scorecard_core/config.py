from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str | None) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# Boundary token for "Not Applicable" ratings ({"knowledge": "N/A"}).
NA_TOKEN: str = "N/A"
# Ticket records persist N/A as the fifth option slot.
NA_LEGACY_INDEX: int = 4

RUBRICS_PATH: str | None = None
RUBRICS_RESOURCE: str = "data/rubrics.json"

WEIGHT_TOTAL_EXPECTED: int = 100
MANUAL_SCORE_MIN: int = 0
MANUAL_SCORE_MAX: int = 100

AUDIT_EXPORT_ENABLED: bool = True
AUDIT_SUMMARY_PATH: str = "/tmp/catalog_audit.json"

DEBUG_TRACE: bool = False

ALLOWED_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:5173",
)

BREAKDOWN_FIELDS: tuple[str, ...] = (
    "role",
    "variant",
    "section",
    "weight",
    "earned",
    "max_points",
    "ratio",
    "touched",
    "rated",
    "not_applicable",
)
# // env overrides for staging/ops; defaults match the shipped catalog.
NA_TOKEN = _env_str("SCORECARD_NA_TOKEN", NA_TOKEN) or NA_TOKEN
NA_LEGACY_INDEX = _env_int("SCORECARD_NA_INDEX", NA_LEGACY_INDEX)
RUBRICS_PATH = _env_str("RUBRICS_PATH", RUBRICS_PATH)
WEIGHT_TOTAL_EXPECTED = _env_int("WEIGHT_TOTAL_EXPECTED", WEIGHT_TOTAL_EXPECTED)
AUDIT_EXPORT_ENABLED = _env_bool("AUDIT_EXPORT_ENABLED", AUDIT_EXPORT_ENABLED)
AUDIT_SUMMARY_PATH = _env_str("AUDIT_SUMMARY_PATH", AUDIT_SUMMARY_PATH) or AUDIT_SUMMARY_PATH
DEBUG_TRACE = _env_bool("DEBUG_TRACE", False)
_origins = _env_str("ALLOWED_ORIGINS", None)
if _origins:
    ALLOWED_ORIGINS = tuple(o.strip() for o in _origins.split(",") if o.strip())


def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except ValueError: cfg = {}
    e = os.environ
    if e.get("RUBRICS_PATH"): cfg["RUBRICS_PATH"] = e.get("RUBRICS_PATH")
    if e.get("SCORECARD_NA_TOKEN"): cfg["NA_TOKEN"] = e.get("SCORECARD_NA_TOKEN")
    if e.get("SCORECARD_NA_INDEX"): cfg["NA_LEGACY_INDEX"] = _env_int("SCORECARD_NA_INDEX", NA_LEGACY_INDEX)
    if e.get("DEBUG_TRACE"): cfg["DEBUG_TRACE"] = _env_bool("DEBUG_TRACE", False)
    cfg.setdefault("RUBRICS_PATH", RUBRICS_PATH)
    cfg.setdefault("NA_TOKEN", NA_TOKEN)
    cfg.setdefault("NA_LEGACY_INDEX", NA_LEGACY_INDEX)
    cfg.setdefault("DEBUG_TRACE", DEBUG_TRACE)
    return cfg
