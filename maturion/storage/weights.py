"""SQLite persistence for per-organization feedback weights."""

import json
import logging
from pathlib import Path

from maturion.learning.weights import DEFAULT_FEEDBACK_WEIGHTS, FeedbackWeightTable
from maturion.models.feedback import FeedbackWeight
from maturion.storage.database import get_connection

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO feedback_weights
        (organization_id, feedback_type, feedback_category, weight_multiplier,
         is_critical, applies_to_content_types, updated_by, updated_at)
    VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ON CONFLICT (organization_id, feedback_type, feedback_category) DO UPDATE SET
        weight_multiplier = excluded.weight_multiplier,
        is_critical = excluded.is_critical,
        applies_to_content_types = excluded.applies_to_content_types,
        updated_by = excluded.updated_by,
        updated_at = CURRENT_TIMESTAMP
"""


def _params(organization_id: str, weight: FeedbackWeight, user_id: str | None) -> tuple:
    return (
        organization_id,
        weight.feedback_type,
        weight.feedback_category,
        weight.weight_multiplier,
        int(weight.is_critical),
        json.dumps(weight.applies_to_content_types),
        user_id,
    )


class FeedbackWeightRepository:
    """Stores one weight row per (organization, feedback_type, feedback_category).

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def load_table(self, organization_id: str) -> FeedbackWeightTable:
        """Load an organization's weights; an empty table is a valid result."""
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                "SELECT * FROM feedback_weights WHERE organization_id = ? ORDER BY feedback_type",
                (organization_id,),
            ).fetchall()
        finally:
            conn.close()
        return FeedbackWeightTable(
            FeedbackWeight(
                feedback_type=row["feedback_type"],
                feedback_category=row["feedback_category"],
                weight_multiplier=row["weight_multiplier"],
                is_critical=bool(row["is_critical"]),
                applies_to_content_types=json.loads(row["applies_to_content_types"]),
            )
            for row in rows
        )

    def upsert(
        self, organization_id: str, weight: FeedbackWeight, user_id: str | None = None
    ) -> None:
        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(_UPSERT_SQL, _params(organization_id, weight, user_id))
        finally:
            conn.close()

    def delete(self, organization_id: str, feedback_type: str, feedback_category: str) -> bool:
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    """
                    DELETE FROM feedback_weights
                    WHERE organization_id = ? AND feedback_type = ? AND feedback_category = ?
                    """,
                    (organization_id, feedback_type, feedback_category),
                )
        finally:
            conn.close()
        return cursor.rowcount > 0

    def reset_to_defaults(self, organization_id: str, user_id: str | None = None) -> None:
        """Replace an organization's weights with the defaults in one transaction."""
        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(
                    "DELETE FROM feedback_weights WHERE organization_id = ?",
                    (organization_id,),
                )
                conn.executemany(
                    _UPSERT_SQL,
                    [_params(organization_id, w, user_id) for w in DEFAULT_FEEDBACK_WEIGHTS],
                )
        finally:
            conn.close()
        logger.info("Reset feedback weights for organization %s", organization_id)
