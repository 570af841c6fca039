"""Snapshot store -- insert-only storage of file content baselines."""
from __future__ import annotations

import logging
import uuid

from src.shared.constants import SNAPSHOT_QUERY_LIMIT
from src.shared.db.connection import ConnectionPool
from src.shared.models.common import FileRecord
from src.shared.models.regression import CodeSnapshot
from src.shared.utils import now_iso, sha256_hex

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Stores and retrieves ``code_snapshots`` rows.

    Snapshots are never updated or deleted; a newer baseline is simply a
    newer row.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def save(
        self,
        project_id: str,
        files: list[FileRecord],
        commit_hash: str | None = None,
    ) -> list[CodeSnapshot]:
        """Store one snapshot per file and return them."""
        now = now_iso()
        snapshots = [
            CodeSnapshot(
                id=str(uuid.uuid4()),
                project_id=project_id,
                file_path=f.path,
                content=f.content,
                checksum=sha256_hex(f.content),
                commit_hash=commit_hash,
                created_at=now,
            )
            for f in files
        ]

        with self._pool.transaction() as conn:
            conn.executemany(
                """INSERT INTO code_snapshots
                   (id, project_id, file_path, content, checksum, commit_hash, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (s.id, s.project_id, s.file_path, s.content, s.checksum, s.commit_hash, now)
                    for s in snapshots
                ],
            )

        logger.info(
            "Created %d code snapshot(s)",
            len(snapshots),
            extra={"project_id": project_id},
        )
        return snapshots

    def query(
        self,
        project_id: str,
        commit_hash: str | None = None,
        limit: int = SNAPSHOT_QUERY_LIMIT,
    ) -> list[FileRecord]:
        """Return the most recent snapshots of *project_id* as file records.

        Newest first, at most *limit* entries, optionally restricted to one
        commit.
        """
        conn = self._pool.get()
        limit = max(1, min(limit, SNAPSHOT_QUERY_LIMIT))

        sql = "SELECT file_path, content FROM code_snapshots WHERE project_id = ?"
        params: list[object] = [project_id]
        if commit_hash is not None:
            sql += " AND commit_hash = ?"
            params.append(commit_hash)
        sql += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(limit)

        rows = conn.execute(sql, params).fetchall()
        return [FileRecord(path=r["file_path"], content=r["content"], type="FILE") for r in rows]

