from __future__ import annotations
from fastapi import FastAPI, HTTPException, Body, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import logging, typing as t

# ---- Engine imports ----
from scorecard_core import config
from scorecard_core.audit_export import to_csv as breakdown_to_csv, to_json as breakdown_to_json
from scorecard_core.catalog import RubricCatalog, rubric_to_dict
from scorecard_core.policy import (
    ManualScoreError,
    ReconciliationPolicy,
    ScorecardTemplate,
    VariantLockedError,
    grading_status,
)
from scorecard_core.presentation import DEFAULT_OPTION_TABLE
from scorecard_core.ratings import RatingParseError, dump_ratings, parse_rating, parse_ratings
from scorecard_core.scoring import score_breakdown
from scorecard_core.types import ScorecardState
from scorecard_core.variants import resolve_variant

log = logging.getLogger(__name__)

CFG = config.load_config()
CATALOG = RubricCatalog.load(CFG.get("RUBRICS_PATH"))
POLICY = ReconciliationPolicy(CATALOG)

app = FastAPI(title="Scorecard Scoring API")

@app.get("/")
def root():
    return {"status": "ok", "service": "scorecard-scoring-api"}

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.ALLOWED_ORIGINS),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

RatingValue = t.Union[int, str, None]

# ---- Schemas ----
class ScoreReq(BaseModel):
    role: str
    variant: str | None = None
    ratings: dict[str, RatingValue] = Field(default_factory=dict)
    # persisted scorecardValues: the legacy slot index means N/A
    legacy: bool = False

class ResolveReq(BaseModel):
    role: str
    requested: str | None = None
    persisted: str | None = None

class StatePayload(BaseModel):
    role: str
    variant: str | None = None
    ratings: dict[str, RatingValue] = Field(default_factory=dict)
    score: int | None = None
    variant_locked: bool = False
    requires_acknowledgement: bool = False

class RatingReq(BaseModel):
    state: StatePayload
    key: str
    value: RatingValue = None

class VariantReq(BaseModel):
    state: StatePayload
    variant: str | None = None

class TemplateReq(BaseModel):
    state: StatePayload
    template: dict[str, t.Any]

class ManualReq(BaseModel):
    state: StatePayload
    score: int | None = None

# ---- Helpers ----
def _parse(raw: dict[str, t.Any], legacy: bool = False) -> dict:
    try:
        return parse_ratings(raw, legacy=legacy)
    except RatingParseError as e:
        raise HTTPException(422, str(e))


def _state_in(p: StatePayload) -> ScorecardState:
    return ScorecardState(
        role=p.role,
        variant=p.variant,
        ratings=_parse(p.ratings),
        score=p.score,
        variant_locked=p.variant_locked,
        requires_acknowledgement=p.requires_acknowledgement,
    )


def _state_out(s: ScorecardState) -> dict[str, t.Any]:
    return {
        "role": s.role,
        "variant": s.variant,
        "ratings": dump_ratings(s.ratings),
        "score": s.score,
        "variant_locked": s.variant_locked,
        "requires_acknowledgement": s.requires_acknowledgement,
        "status": grading_status(s),
        "auto_scorable": POLICY.is_auto_scorable(s.role, s.variant),
    }


def _breakdown(req: ScoreReq):
    rubric = CATALOG.lookup(req.role, req.variant)
    if rubric is None:
        raise HTTPException(404, "no scorecard for role/variant")
    return score_breakdown(rubric, _parse(req.ratings, req.legacy))

# ---- Health ----
@app.get("/health")
def health():
    return {
        "catalog_version": CATALOG.version,
        "roles": len(CATALOG.roles()),
        "rubrics_path": CFG.get("RUBRICS_PATH") or "packaged",
        "audit_export_enabled": config.AUDIT_EXPORT_ENABLED,
    }

# ---- Catalog ----
@app.get("/rubrics")
def list_rubrics():
    return {"roles": [CATALOG.describe_role(r) for r in CATALOG.roles()]}

@app.get("/rubrics/{role}")
def get_role(role: str):
    desc = CATALOG.describe_role(role)
    if desc is None:
        raise HTTPException(404, "role has no scorecard")
    return desc

@app.get("/rubrics/{role}/definition")
def get_definition(role: str, variant: str | None = Query(None)):
    rubric = CATALOG.lookup(role, variant)
    if rubric is None:
        raise HTTPException(404, "no scorecard for role/variant")
    return rubric_to_dict(rubric)

# ---- Scoring ----
@app.post("/score")
def score(req: ScoreReq):
    rubric = CATALOG.lookup(req.role, req.variant)
    if rubric is None:
        # manual scoring only; the calculator is not invoked
        return {"score": None, "auto_scorable": False}
    bd = score_breakdown(rubric, _parse(req.ratings, req.legacy))
    return {"score": bd.score, "auto_scorable": True}

@app.post("/score/breakdown")
def breakdown(req: ScoreReq):
    return breakdown_to_json(_breakdown(req))

@app.post("/score/breakdown.csv")
def breakdown_csv(req: ScoreReq):
    if not config.AUDIT_EXPORT_ENABLED:
        raise HTTPException(404, "breakdown export disabled")
    body = breakdown_to_csv(_breakdown(req).rows())
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=\"score_breakdown.csv\""},
    )

@app.post("/variant/resolve")
def variant_resolve(req: ResolveReq):
    res = resolve_variant(CATALOG, req.role, requested=req.requested, persisted=req.persisted)
    return {
        "role": res.role,
        "variant": res.variant,
        "requires_acknowledgement": res.requires_acknowledgement,
        "locked": res.locked,
        "auto_scorable": res.auto_scorable,
    }

# ---- Grading transitions (stateless: the caller owns the ticket) ----
@app.post("/scorecard/start")
def scorecard_start(req: ResolveReq):
    return _state_out(POLICY.start(req.role, req.requested, persisted_variant=req.persisted))

@app.post("/scorecard/rating")
def scorecard_rating(req: RatingReq):
    state = _state_in(req.state)
    try:
        rating = parse_rating(req.value)
    except RatingParseError as e:
        raise HTTPException(422, f"{req.key}: {e}")
    return _state_out(POLICY.apply_rating(state, req.key, rating))

@app.post("/scorecard/variant")
def scorecard_variant(req: VariantReq):
    state = _state_in(req.state)
    try:
        return _state_out(POLICY.switch_variant(state, req.variant))
    except VariantLockedError as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(422, str(e))

@app.post("/scorecard/template")
def scorecard_template(req: TemplateReq = Body(...)):
    state = _state_in(req.state)
    try:
        return _state_out(POLICY.apply_template(state, ScorecardTemplate.from_dict(req.template)))
    except VariantLockedError as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(422, str(e))

@app.post("/scorecard/manual")
def scorecard_manual(req: ManualReq):
    state = _state_in(req.state)
    try:
        return _state_out(POLICY.set_manual_score(state, req.score))
    except ManualScoreError as e:
        code = 409 if POLICY.is_auto_scorable(state.role, state.variant) else 422
        raise HTTPException(code, str(e))

# ---- Presentation ----
@app.get("/presentation/options")
def presentation_options():
    return DEFAULT_OPTION_TABLE.to_dict()
