"""Quality gate endpoints: check catalogue, evaluation and run history."""
from __future__ import annotations
import asyncio

from fastapi import APIRouter, Query, Request

from src.persistence.gate_run_store import GateRunStore
from src.shared.models.quality import (
    CheckDescriptor,
    EvaluateRequest,
    GateRun,
    GateValidationResult,
    QualityResult,
    RunCheckRequest,
)

router = APIRouter(prefix="/api/quality", tags=["quality"])


@router.get("/checks", response_model=list[CheckDescriptor])
async def list_checks(request: Request) -> list[CheckDescriptor]:
    """List every registered check, enabled or not."""
    return request.app.state.service.list_checks()


@router.post("/evaluate", response_model=GateValidationResult)
async def evaluate(body: EvaluateRequest, request: Request) -> GateValidationResult:
    """Evaluate a file set and return the gate verdict.

    A failing gate is a normal 200 response; only malformed input is an
    error (422).
    """
    service = request.app.state.service
    return await asyncio.to_thread(service.evaluate, body.files, body.context)


@router.post("/checks/{check_id}", response_model=list[QualityResult])
async def run_check(check_id: str, body: RunCheckRequest, request: Request) -> list[QualityResult]:
    """Run one registered check (404 for an unknown id)."""
    service = request.app.state.service
    return await asyncio.to_thread(service.run_check, check_id, body.files)


@router.get("/runs", response_model=list[GateRun])
async def list_runs(
    request: Request,
    project_id: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=100),
) -> list[GateRun]:
    store = GateRunStore(request.app.state.pool)
    return await asyncio.to_thread(store.list_for_project, project_id, limit)


@router.get("/runs/{run_id}", response_model=GateRun)
async def get_run(run_id: str, request: Request) -> GateRun:
    store = GateRunStore(request.app.state.pool)
    return await asyncio.to_thread(store.get, run_id)
