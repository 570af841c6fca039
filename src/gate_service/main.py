"""Quality Gate service FastAPI application."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.persistence import GateRunStore, RegressionReportStore, SnapshotStore, init_persistence_db
from src.quality_gate import QualityGateService, build_default_registry
from src.quality_gate.policy_config import load_gate_policy
from src.regression import AIRegressionAnalyzer, RegressionComparator
from src.shared.completion import build_completion_client
from src.shared.config import GateServiceConfig
from src.shared.constants import QUALITY_GATE_PORT, QUALITY_GATE_SERVICE_NAME, VERSION
from src.shared.db import ConnectionPool
from src.shared.errors import register_exception_handlers
from src.shared.logging import TraceIDMiddleware, setup_logging

config = GateServiceConfig()
logger = setup_logging(QUALITY_GATE_SERVICE_NAME, config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - initialize and cleanup resources."""
    app.state.start_time = time.time()

    app.state.pool = ConnectionPool(config.database_path)
    init_persistence_db(app.state.pool)

    policy = load_gate_policy(config.gate_policy_path)
    registry = policy.apply(build_default_registry())
    app.state.service = QualityGateService(
        registry,
        run_store=GateRunStore(app.state.pool),
        max_workers=policy.max_workers or config.gate_workers,
    )

    client = build_completion_client(config)
    analyzer = (
        AIRegressionAnalyzer(client, timeout=config.ai_timeout_seconds)
        if client is not None
        else None
    )
    app.state.ai_enabled = analyzer is not None
    app.state.snapshot_store = SnapshotStore(app.state.pool)
    app.state.report_store = RegressionReportStore(app.state.pool)
    app.state.comparator = RegressionComparator(
        snapshot_store=app.state.snapshot_store,
        ai_analyzer=analyzer,
        snapshot_limit=config.snapshot_query_limit,
    )

    logger.info(
        "Service started: name=%s version=%s port=%d db=%s checks=%d",
        QUALITY_GATE_SERVICE_NAME, VERSION, QUALITY_GATE_PORT,
        config.database_path, len(registry),
    )
    yield

    if app.state.pool:
        app.state.pool.close()
    logger.info("Service stopped: name=%s", QUALITY_GATE_SERVICE_NAME)


app = FastAPI(
    title="Quality Gate",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(TraceIDMiddleware)
register_exception_handlers(app)

# Register all routers
from src.gate_service.routers.health import router as health_router
from src.gate_service.routers.quality import router as quality_router
from src.gate_service.routers.regression import router as regression_router

app.include_router(health_router)
app.include_router(quality_router)
app.include_router(regression_router)
