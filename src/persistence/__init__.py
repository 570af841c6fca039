"""Persistence layer -- snapshots, gate runs and regression history in SQLite."""
from src.persistence.gate_run_store import GateRunStore
from src.persistence.regression_store import RegressionReportStore
from src.persistence.schema import init_persistence_db
from src.persistence.snapshot_store import SnapshotStore

__all__ = [
    "GateRunStore",
    "RegressionReportStore",
    "SnapshotStore",
    "init_persistence_db",
]
