"""
Similo API Endpoints
====================
REST API for scoring candidate elements and reporting match outcomes.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from similo import DynamicWeightMatcher, Locator, PageContext

router = APIRouter(prefix="/api/similo", tags=["similo"])


def get_matcher(request: Request) -> DynamicWeightMatcher:
    """The matcher owned by the running app"""
    matcher = getattr(request.app.state, "matcher", None)
    if matcher is None:
        raise HTTPException(status_code=503, detail="Matcher not initialised")
    return matcher


def _resolve_weights_path(matcher: DynamicWeightMatcher, path: Optional[str]) -> Optional[str]:
    """
    Resolve a client-supplied weights path.

    Only files inside the configured weights directory are accepted;
    relative paths are taken relative to it.
    """
    if path is None:
        return None
    if matcher.persistence is None:
        raise HTTPException(status_code=400, detail="No weights file configured")

    weights_dir = matcher.persistence.path.parent.resolve()
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = weights_dir / candidate
    resolved = candidate.resolve()
    if weights_dir not in resolved.parents:
        raise HTTPException(status_code=400, detail="Path must be inside the weights directory")
    return str(resolved)


def _parse_context(label: Optional[str]) -> Optional[PageContext]:
    if label is None:
        return None
    if not PageContext.is_known(label):
        raise HTTPException(status_code=400, detail=f"Unknown context: {label}")
    return PageContext.parse(label)


class ScoreRequest(BaseModel):
    target: Dict[str, Any]
    candidates: List[Dict[str, Any]] = Field(default_factory=list)
    context: Optional[str] = None


class ClassifyRequest(BaseModel):
    locator: Dict[str, Any]


class RecordMatchRequest(BaseModel):
    target: Dict[str, Any]
    matched: Optional[Dict[str, Any]] = None
    success: bool = True


class ContextRequest(BaseModel):
    context: Optional[str] = None


class WeightsFileRequest(BaseModel):
    path: Optional[str] = None


# =========================================================================
# SCORING ENDPOINTS
# =========================================================================

@router.post("/score")
async def score_candidates(body: ScoreRequest, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """
    Score every candidate against the target, best first.

    The caller decides which candidate (if any) to accept.
    """
    context = _parse_context(body.context)
    target = Locator(body.target)
    try:
        results = []
        for index, raw in enumerate(body.candidates):
            score = matcher.score(target, Locator(raw), context)
            results.append({"index": index, **score.to_dict()})
        results.sort(key=lambda r: r["total"], reverse=True)
        return {"success": True, "results": results}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/classify")
async def classify_locator(body: ClassifyRequest, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """Page context the locator would be scored in"""
    return {"context": matcher.classify(Locator(body.locator)).value}


@router.post("/record")
async def record_match(body: RecordMatchRequest, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """
    Report a match outcome.

    Without `matched` the report means no candidate matched the target.
    """
    try:
        target = Locator(body.target)
        if body.matched is None:
            updates = matcher.record_failed_match(target)
        else:
            updates = matcher.record_match(target, Locator(body.matched), body.success)
        return {
            "success": True,
            "weights_updated": [u.context.value for u in updates],
            "stats": matcher.get_stats()
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# =========================================================================
# WEIGHT ENDPOINTS
# =========================================================================

@router.get("/weights")
async def get_all_weights(matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """Learned weights for every context"""
    return {
        "weights": {context.value: matcher.get_weights(context) for context in PageContext}
    }


@router.get("/weights/{context}")
async def get_context_weights(context: str, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    resolved = _parse_context(context)
    return {"context": resolved.value, "weights": matcher.get_weights(resolved)}


@router.get("/statistics")
async def get_statistics(context: Optional[str] = None, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """Per-attribute weight, contribution, success rate and stability"""
    resolved = _parse_context(context) or PageContext.GENERAL
    return {
        "context": resolved.value,
        "attributes": matcher.get_weight_statistics(resolved),
        "stats": matcher.get_stats()
    }


@router.put("/context")
async def set_context(body: ContextRequest, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """Pin a context, or pass null to go back to per-candidate classification"""
    matcher.set_context(_parse_context(body.context))
    pinned = matcher.get_context()
    return {"success": True, "context": pinned.value if pinned else None}


@router.post("/weights/save")
async def save_weights(body: WeightsFileRequest, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    saved = matcher.save_weights(_resolve_weights_path(matcher, body.path))
    if not saved:
        raise HTTPException(status_code=500, detail="Weights could not be saved")
    return {"success": True}


@router.post("/weights/load")
async def load_weights(body: WeightsFileRequest, matcher: DynamicWeightMatcher = Depends(get_matcher)):
    loaded = matcher.load_weights(_resolve_weights_path(matcher, body.path))
    if not loaded:
        raise HTTPException(status_code=404, detail="Weights could not be loaded")
    return {"success": True, "weights": matcher.get_weights(PageContext.GENERAL)}


@router.post("/reset")
async def reset_weights(matcher: DynamicWeightMatcher = Depends(get_matcher)):
    """Restore base weights and clear all learning state"""
    matcher.reset_weights()
    return {"success": True, "message": "Weights reset to initial values"}
