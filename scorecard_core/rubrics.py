from __future__ import annotations
import json, importlib.resources as ir
from pathlib import Path
from typing import Any, Dict

from . import config

ROLE_JUNIOR = "Junior Scorecard"
ROLE_MEDIOR = "Medior Scorecard"
ROLE_SENIOR = "Senior Scorecard"
ROLES = [ROLE_JUNIOR, ROLE_MEDIOR, ROLE_SENIOR]


def load_rubric_tables(path: str | Path | None = None) -> Dict[str, Any]:
    """Raw rubric tables: ``path``, else ``RUBRICS_PATH``, else the packaged JSON."""
    src = path or config.RUBRICS_PATH
    if src:
        p = Path(src)
        if not p.exists():
            raise FileNotFoundError(f"Rubric file not found: {p}")
        data = p.read_text(encoding="utf-8")
    else:
        data = ir.files(__package__).joinpath(config.RUBRICS_RESOURCE).read_text(encoding="utf-8")
    raw = json.loads(data)
    if not isinstance(raw, dict) or not isinstance(raw.get("roles"), dict):
        raise ValueError("rubric tables must be an object with a 'roles' mapping")
    return raw
