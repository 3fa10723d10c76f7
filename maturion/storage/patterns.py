"""SQLite persistence for learning patterns."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from maturion.exceptions import ConcurrentUpdateError, PatternNotFoundError
from maturion.models.pattern import LearningPattern, PatternStrength, ValidationStatus
from maturion.storage.database import get_connection

logger = logging.getLogger(__name__)


def _to_row(pattern: LearningPattern) -> dict:
    return {
        "id": pattern.id,
        "organization_id": pattern.organization_id,
        "pattern_type": pattern.pattern_type,
        "pattern_category": pattern.pattern_category,
        "pattern_text": pattern.pattern_text,
        "confidence_score": pattern.confidence_score,
        "frequency_count": pattern.frequency_count,
        "pattern_strength": pattern.strength.value,
        "validation_status": pattern.validation_status.value,
        "validated_by": pattern.validated_by,
        "validated_at": pattern.validated_at.isoformat() if pattern.validated_at else None,
        "suppression_rule": pattern.suppression_rule,
        "replacement_suggestion": pattern.replacement_suggestion,
        "learning_weight": pattern.learning_weight,
        "is_active": int(pattern.is_active),
        "source_feedback_ids": json.dumps(pattern.source_feedback_ids),
        "affected_domains": json.dumps(pattern.affected_domains),
        "first_detected_at": pattern.first_detected_at.isoformat(),
        "last_detected_at": pattern.last_detected_at.isoformat(),
        "version": pattern.version,
    }


def _from_row(row: sqlite3.Row) -> LearningPattern:
    return LearningPattern(
        id=row["id"],
        organization_id=row["organization_id"],
        pattern_type=row["pattern_type"],
        pattern_category=row["pattern_category"],
        pattern_text=row["pattern_text"],
        confidence_score=row["confidence_score"],
        frequency_count=row["frequency_count"],
        strength=PatternStrength(row["pattern_strength"]),
        validation_status=ValidationStatus(row["validation_status"]),
        validated_by=row["validated_by"],
        validated_at=datetime.fromisoformat(row["validated_at"]) if row["validated_at"] else None,
        suppression_rule=row["suppression_rule"],
        replacement_suggestion=row["replacement_suggestion"],
        learning_weight=row["learning_weight"],
        is_active=bool(row["is_active"]),
        source_feedback_ids=json.loads(row["source_feedback_ids"]),
        affected_domains=json.loads(row["affected_domains"]),
        first_detected_at=datetime.fromisoformat(row["first_detected_at"]),
        last_detected_at=datetime.fromisoformat(row["last_detected_at"]),
        version=row["version"],
    )


class PatternRepository:
    """Stores learning patterns in the ``learning_patterns`` table.

    Metric writes are guarded by the row version so two feedback events
    racing on the same pattern cannot silently overwrite each other.

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def add(self, pattern: LearningPattern) -> LearningPattern:
        row = _to_row(pattern)
        columns = ", ".join(row)
        placeholders = ", ".join(f":{name}" for name in row)
        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(
                    f"INSERT INTO learning_patterns ({columns}) VALUES ({placeholders})",
                    row,
                )
        finally:
            conn.close()
        logger.info("Stored new %s pattern %s", pattern.pattern_type, pattern.id)
        return pattern

    def get(self, pattern_id: str) -> LearningPattern:
        """Fetch a pattern by ID.

        Raises:
            PatternNotFoundError: If no such pattern exists.
        """
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT * FROM learning_patterns WHERE id = ?", (pattern_id,)
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise PatternNotFoundError(pattern_id)
        return _from_row(row)

    def find_active(
        self,
        organization_id: str,
        pattern_type: str,
        pattern_category: str,
        pattern_text: str,
    ) -> LearningPattern | None:
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                """
                SELECT * FROM learning_patterns
                WHERE organization_id = ? AND pattern_type = ?
                  AND pattern_category = ? AND pattern_text = ? AND is_active = 1
                """,
                (organization_id, pattern_type, pattern_category, pattern_text),
            ).fetchone()
        finally:
            conn.close()
        return _from_row(row) if row else None

    def list_for_organization(
        self, organization_id: str, active_only: bool = False
    ) -> list[LearningPattern]:
        """List patterns, most confident and most frequent first."""
        query = "SELECT * FROM learning_patterns WHERE organization_id = ?"
        if active_only:
            query += " AND is_active = 1"
        query += " ORDER BY confidence_score DESC, frequency_count DESC"
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(query, (organization_id,)).fetchall()
        finally:
            conn.close()
        return [_from_row(row) for row in rows]

    def save_metrics(self, pattern: LearningPattern, expected_version: int) -> LearningPattern:
        """Write confidence, frequency and strength in a single UPDATE.

        Args:
            pattern: Pattern carrying the new metric values.
            expected_version: Version the caller read before computing them.

        Returns:
            The pattern with its version incremented.

        Raises:
            ConcurrentUpdateError: If the stored version no longer matches.
        """
        saved = pattern.model_copy(update={"version": expected_version + 1})
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    """
                    UPDATE learning_patterns
                    SET confidence_score = ?, frequency_count = ?, pattern_strength = ?,
                        last_detected_at = ?, source_feedback_ids = ?, version = ?
                    WHERE id = ? AND version = ?
                    """,
                    (
                        saved.confidence_score,
                        saved.frequency_count,
                        saved.strength.value,
                        saved.last_detected_at.isoformat(),
                        json.dumps(saved.source_feedback_ids),
                        saved.version,
                        saved.id,
                        expected_version,
                    ),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise ConcurrentUpdateError(
                f"Pattern {pattern.id} changed since version {expected_version}"
            )
        return saved

    def set_active(self, pattern_id: str, is_active: bool) -> None:
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    "UPDATE learning_patterns SET is_active = ?, version = version + 1 WHERE id = ?",
                    (int(is_active), pattern_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise PatternNotFoundError(pattern_id)

    def record_validation(self, pattern: LearningPattern, notes: str | None = None) -> None:
        """Persist a human validation decision and append it to the audit log."""
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    """
                    UPDATE learning_patterns
                    SET validation_status = ?, validated_by = ?, validated_at = ?,
                        suppression_rule = ?, replacement_suggestion = ?,
                        version = version + 1
                    WHERE id = ?
                    """,
                    (
                        pattern.validation_status.value,
                        pattern.validated_by,
                        pattern.validated_at.isoformat() if pattern.validated_at else None,
                        pattern.suppression_rule,
                        pattern.replacement_suggestion,
                        pattern.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise PatternNotFoundError(pattern.id)
                conn.execute(
                    """
                    INSERT INTO pattern_validation_log
                        (pattern_id, validation_status, validated_by, notes)
                    VALUES (?, ?, ?, ?)
                    """,
                    (pattern.id, pattern.validation_status.value, pattern.validated_by, notes),
                )
        finally:
            conn.close()

    def validation_history(self, pattern_id: str) -> list[dict]:
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                "SELECT * FROM pattern_validation_log WHERE pattern_id = ? ORDER BY id",
                (pattern_id,),
            ).fetchall()
        finally:
            conn.close()
        return [dict(row) for row in rows]
