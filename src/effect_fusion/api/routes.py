from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, ValidationError

from ..errors import FusionError, InvalidLevelError
from ..models.fusion import FusionOptions, FusionRecord, OrchestratorStats, ReconstructedArtifact
from ..models.module import LevelPolicy
from ..orchestrator import FusionOrchestrator


router = APIRouter(
    prefix="/api/fusion",
    tags=["fusion"],
)


class FuseRequest(BaseModel):
    source_code: str
    level: Optional[int] = None
    # validated into FusionOptions by the route so NaN never reaches an error body
    options: Dict[str, float] = Field(default_factory=dict)


class LevelView(BaseModel):
    policy: LevelPolicy
    modules: List[str]


def _orchestrator(request: Request) -> FusionOrchestrator:
    return request.app.state.orchestrator


def _invalid_level(exc: InvalidLevelError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"error": "invalid_level", "message": str(exc), "available": exc.available},
    )


def _fusion_options(raw: Dict[str, float]) -> FusionOptions:
    try:
        return FusionOptions.model_validate(raw)
    except ValidationError as e:
        message = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise HTTPException(status_code=422, detail={"error": "invalid_options", "message": message})


@router.post("", response_model=ReconstructedArtifact)
async def fuse_endpoint(req: FuseRequest, request: Request):
    settings = request.app.state.settings
    if len(req.source_code.encode("utf-8")) > settings.max_source_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"source_code exceeds {settings.max_source_bytes} bytes",
        )
    level = req.level if req.level is not None else settings.default_level
    options = _fusion_options(req.options)
    try:
        return await _orchestrator(request).fuse(req.source_code, level, options)
    except InvalidLevelError as e:
        raise _invalid_level(e)
    except FusionError as e:
        raise HTTPException(status_code=500, detail={"error": type(e).__name__, "message": str(e)})


@router.get("/levels", response_model=List[LevelPolicy])
async def list_levels(request: Request):
    orch = _orchestrator(request)
    return [orch.get_level_policy(lvl) for lvl in orch.policies.levels()]


@router.get("/levels/{level}", response_model=LevelView)
async def get_level(level: int, request: Request):
    orch = _orchestrator(request)
    try:
        policy = orch.get_level_policy(level)
        modules = orch.select_modules(level)
    except InvalidLevelError as e:
        raise _invalid_level(e)
    return LevelView(policy=policy, modules=[m.id for m in modules])


@router.get("/history/{fusion_id}", response_model=FusionRecord)
async def get_history(fusion_id: str, request: Request):
    record = await _orchestrator(request).get_fusion(fusion_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Fusion not found")
    return record


@router.get("/stats", response_model=OrchestratorStats)
async def get_stats(request: Request):
    return await _orchestrator(request).stats()
