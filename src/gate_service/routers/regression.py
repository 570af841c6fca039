"""Regression detection endpoints: comparisons, snapshots and history."""
from __future__ import annotations
import asyncio
import logging

from fastapi import APIRouter, Query, Request

from src.shared.errors import ValidationInputError
from src.shared.models.regression import (
    RegressionReport,
    RegressionRequest,
    RegressionResult,
    SnapshotCreate,
    SnapshotCreateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/regression", tags=["regression"])


async def _detect_and_record(body: RegressionRequest, request: Request) -> RegressionResult:
    result = await request.app.state.comparator.detect(body)
    try:
        await asyncio.to_thread(
            request.app.state.report_store.record,
            body.project_id,
            result,
            body.base_commit,
        )
    except Exception as exc:
        logger.warning(
            "Regression report recording failed (non-blocking): %s",
            exc,
            extra={"project_id": body.project_id},
        )
    return result


@router.post("/detect", response_model=RegressionResult)
async def detect(body: RegressionRequest, request: Request) -> RegressionResult:
    """Compare ``new_code`` against ``previous_code`` or the stored baseline."""
    return await _detect_and_record(body, request)


@router.post("/compare", response_model=RegressionResult)
async def compare(body: RegressionRequest, request: Request) -> RegressionResult:
    """Compare ``new_code`` against the snapshots of ``base_commit``."""
    if not body.base_commit:
        raise ValidationInputError("base_commit is required")
    return await _detect_and_record(body, request)


@router.post("/snapshots", response_model=SnapshotCreateResponse, status_code=201)
async def create_snapshots(body: SnapshotCreate, request: Request) -> SnapshotCreateResponse:
    store = request.app.state.snapshot_store
    snapshots = await asyncio.to_thread(store.save, body.project_id, body.files, body.commit_hash)
    return SnapshotCreateResponse(snapshots=snapshots, count=len(snapshots))


@router.get("/history", response_model=list[RegressionReport])
async def history(
    request: Request,
    project_id: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=100),
) -> list[RegressionReport]:
    store = request.app.state.report_store
    return await asyncio.to_thread(store.list_for_project, project_id, limit)
