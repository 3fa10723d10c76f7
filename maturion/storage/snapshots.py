"""SQLite persistence for learning model snapshots."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from maturion.exceptions import SnapshotNotFoundError
from maturion.models.snapshot import ModelSnapshot, ModelState, SnapshotType
from maturion.storage.database import get_connection

logger = logging.getLogger(__name__)


def _from_row(row: sqlite3.Row) -> ModelSnapshot:
    return ModelSnapshot(
        id=row["id"],
        organization_id=row["organization_id"],
        snapshot_name=row["snapshot_name"],
        snapshot_type=SnapshotType(row["snapshot_type"]),
        snapshot_reason=row["snapshot_reason"],
        pattern_count=row["pattern_count"],
        active_rules_count=row["active_rules_count"],
        model_state=ModelState.model_validate_json(row["model_state"]),
        performance_metrics=json.loads(row["performance_metrics"]),
        is_baseline=bool(row["is_baseline"]),
        rollback_available=bool(row["rollback_available"]),
        created_by=row["created_by"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class SnapshotRepository:
    """Stores snapshots in ``learning_model_snapshots``.

    At most one snapshot per organization is flagged as the baseline.

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def add(self, snapshot: ModelSnapshot) -> ModelSnapshot:
        conn = get_connection(self._db_path)
        try:
            with conn:
                if snapshot.is_baseline:
                    conn.execute(
                        "UPDATE learning_model_snapshots SET is_baseline = 0 WHERE organization_id = ?",
                        (snapshot.organization_id,),
                    )
                conn.execute(
                    """
                    INSERT INTO learning_model_snapshots
                        (id, organization_id, snapshot_name, snapshot_type, snapshot_reason,
                         pattern_count, active_rules_count, model_state, performance_metrics,
                         is_baseline, rollback_available, created_by, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        snapshot.id,
                        snapshot.organization_id,
                        snapshot.snapshot_name,
                        snapshot.snapshot_type.value,
                        snapshot.snapshot_reason,
                        snapshot.pattern_count,
                        snapshot.active_rules_count,
                        snapshot.model_state.model_dump_json(),
                        json.dumps(snapshot.performance_metrics),
                        int(snapshot.is_baseline),
                        int(snapshot.rollback_available),
                        snapshot.created_by,
                        snapshot.created_at.isoformat(),
                    ),
                )
        finally:
            conn.close()
        return snapshot

    def get(self, snapshot_id: str) -> ModelSnapshot:
        """Fetch a snapshot by ID.

        Raises:
            SnapshotNotFoundError: If no such snapshot exists.
        """
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT * FROM learning_model_snapshots WHERE id = ?", (snapshot_id,)
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise SnapshotNotFoundError(snapshot_id)
        return _from_row(row)

    def list_for_organization(self, organization_id: str) -> list[ModelSnapshot]:
        """List snapshots, newest first."""
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                """
                SELECT * FROM learning_model_snapshots
                WHERE organization_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (organization_id,),
            ).fetchall()
        finally:
            conn.close()
        return [_from_row(row) for row in rows]

    def set_baseline(self, organization_id: str, snapshot_id: str) -> None:
        """Make one snapshot the organization's baseline, clearing any other.

        Raises:
            SnapshotNotFoundError: If the snapshot does not belong to the organization.
        """
        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(
                    "UPDATE learning_model_snapshots SET is_baseline = 0 WHERE organization_id = ?",
                    (organization_id,),
                )
                cursor = conn.execute(
                    """
                    UPDATE learning_model_snapshots SET is_baseline = 1
                    WHERE id = ? AND organization_id = ?
                    """,
                    (snapshot_id, organization_id),
                )
                if cursor.rowcount == 0:
                    raise SnapshotNotFoundError(snapshot_id)
        finally:
            conn.close()
        logger.info("Snapshot %s is now the baseline for %s", snapshot_id, organization_id)

    def delete(self, snapshot_id: str) -> bool:
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM learning_model_snapshots WHERE id = ?", (snapshot_id,)
                )
        finally:
            conn.close()
        return cursor.rowcount > 0
