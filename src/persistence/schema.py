"""Persistence layer database schema for snapshots, gate runs and reports."""
from __future__ import annotations

from src.shared.db.connection import ConnectionPool

SCHEMA_VERSION = 1


def init_persistence_db(pool: ConnectionPool) -> None:
    """Initialize the persistence layer database schema.

    ``CREATE TABLE IF NOT EXISTS`` + explicit indexes, so calling it on an
    existing database is a no-op.

    Args:
        pool: Connection pool pointing at the persistence database.
    """
    conn = pool.get()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER NOT NULL
        );

        CREATE TABLE IF NOT EXISTS code_snapshots (
            id TEXT PRIMARY KEY,
            project_id TEXT NOT NULL,
            file_path TEXT NOT NULL,
            content TEXT NOT NULL DEFAULT '',
            checksum TEXT NOT NULL,
            commit_hash TEXT,
            created_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_snapshots_project
            ON code_snapshots(project_id, created_at);
        CREATE INDEX IF NOT EXISTS idx_snapshots_commit
            ON code_snapshots(project_id, commit_hash);

        CREATE TABLE IF NOT EXISTS gate_runs (
            id TEXT PRIMARY KEY,
            project_id TEXT NOT NULL,
            triggered_by TEXT NOT NULL DEFAULT 'system',
            status TEXT NOT NULL DEFAULT 'running'
                CHECK(status IN ('running', 'passed', 'failed', 'warning')),
            results_json TEXT NOT NULL DEFAULT '[]',
            summary_json TEXT,
            created_at TEXT NOT NULL,
            completed_at TEXT
        );
        CREATE INDEX IF NOT EXISTS idx_gate_runs_project
            ON gate_runs(project_id, created_at);

        CREATE TABLE IF NOT EXISTS regression_reports (
            id TEXT PRIMARY KEY,
            project_id TEXT NOT NULL,
            base_commit TEXT,
            severity TEXT NOT NULL,
            has_regressions INTEGER NOT NULL DEFAULT 0,
            score INTEGER NOT NULL DEFAULT 100,
            result_json TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_regression_reports_project
            ON regression_reports(project_id, created_at);
    """)

    row = conn.execute("SELECT version FROM schema_version").fetchone()
    if row is None:
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
    conn.commit()
