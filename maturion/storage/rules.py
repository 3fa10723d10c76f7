"""SQLite persistence for learning rules."""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from maturion.exceptions import RuleNotFoundError
from maturion.learning.rules import default_rules
from maturion.models.rule import LearningRule
from maturion.storage.database import get_connection

logger = logging.getLogger(__name__)


def _to_row(rule: LearningRule) -> dict:
    return {
        "id": rule.id,
        "organization_id": rule.organization_id,
        "rule_name": rule.rule_name,
        "rule_type": rule.rule_type.value,
        "rule_category": rule.rule_category,
        "settings": rule.settings.model_dump_json(),
        "is_enabled": int(rule.is_enabled),
        "applies_to_content_types": json.dumps(rule.applies_to_content_types),
        "applies_to_domains": json.dumps(rule.applies_to_domains),
        "priority_level": rule.priority_level,
        "auto_activation_enabled": int(rule.auto_activation_enabled),
        "last_triggered_at": rule.last_triggered_at.isoformat() if rule.last_triggered_at else None,
        "trigger_count": rule.trigger_count,
        "effectiveness_score": rule.effectiveness_score,
        "created_by": rule.created_by,
        "updated_by": rule.updated_by,
        "created_at": rule.created_at.isoformat(),
        "updated_at": rule.updated_at.isoformat(),
    }


def _from_row(row: sqlite3.Row) -> LearningRule:
    return LearningRule(
        id=row["id"],
        organization_id=row["organization_id"],
        rule_name=row["rule_name"],
        rule_category=row["rule_category"],
        settings=json.loads(row["settings"]),
        is_enabled=bool(row["is_enabled"]),
        applies_to_content_types=json.loads(row["applies_to_content_types"]),
        applies_to_domains=json.loads(row["applies_to_domains"]),
        priority_level=row["priority_level"],
        auto_activation_enabled=bool(row["auto_activation_enabled"]),
        last_triggered_at=(
            datetime.fromisoformat(row["last_triggered_at"]) if row["last_triggered_at"] else None
        ),
        trigger_count=row["trigger_count"],
        effectiveness_score=row["effectiveness_score"],
        created_by=row["created_by"],
        updated_by=row["updated_by"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _insert(conn: sqlite3.Connection, rule: LearningRule) -> None:
    row = _to_row(rule)
    columns = ", ".join(row)
    placeholders = ", ".join(f":{name}" for name in row)
    conn.execute(f"INSERT INTO learning_rules ({columns}) VALUES ({placeholders})", row)


class RuleRepository:
    """Stores learning rules in the ``learning_rules`` table.

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def add(self, rule: LearningRule) -> LearningRule:
        conn = get_connection(self._db_path)
        try:
            with conn:
                _insert(conn, rule)
        finally:
            conn.close()
        logger.info("Stored %s rule %r (%s)", rule.rule_type.value, rule.rule_name, rule.id)
        return rule

    def load_default_rules(
        self, organization_id: str, user_id: str | None = None
    ) -> list[LearningRule]:
        """Insert the starter rule set for an organization in one transaction."""
        rules = default_rules(organization_id, user_id)
        conn = get_connection(self._db_path)
        try:
            with conn:
                for rule in rules:
                    _insert(conn, rule)
        finally:
            conn.close()
        logger.info("Loaded %d default rules for organization %s", len(rules), organization_id)
        return rules

    def get(self, rule_id: str) -> LearningRule:
        """Fetch a rule by ID.

        Raises:
            RuleNotFoundError: If no such rule exists.
        """
        conn = get_connection(self._db_path)
        try:
            row = conn.execute("SELECT * FROM learning_rules WHERE id = ?", (rule_id,)).fetchone()
        finally:
            conn.close()
        if row is None:
            raise RuleNotFoundError(rule_id)
        return _from_row(row)

    def list_for_organization(
        self, organization_id: str, enabled_only: bool = False
    ) -> list[LearningRule]:
        """List rules, highest priority first, newest first within a priority."""
        query = "SELECT * FROM learning_rules WHERE organization_id = ?"
        if enabled_only:
            query += " AND is_enabled = 1"
        query += " ORDER BY priority_level DESC, created_at DESC"
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(query, (organization_id,)).fetchall()
        finally:
            conn.close()
        return [_from_row(row) for row in rows]

    def update(self, rule: LearningRule, user_id: str | None = None) -> LearningRule:
        """Write a rule's editable fields back.

        Trigger bookkeeping is left alone; use ``record_trigger`` for that.
        """
        updated = rule.model_copy(update={"updated_by": user_id, "updated_at": datetime.now()})
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    """
                    UPDATE learning_rules
                    SET rule_name = ?, rule_type = ?, rule_category = ?, settings = ?,
                        is_enabled = ?, applies_to_content_types = ?, applies_to_domains = ?,
                        priority_level = ?, auto_activation_enabled = ?,
                        effectiveness_score = ?, updated_by = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        updated.rule_name,
                        updated.rule_type.value,
                        updated.rule_category,
                        updated.settings.model_dump_json(),
                        int(updated.is_enabled),
                        json.dumps(updated.applies_to_content_types),
                        json.dumps(updated.applies_to_domains),
                        updated.priority_level,
                        int(updated.auto_activation_enabled),
                        updated.effectiveness_score,
                        updated.updated_by,
                        updated.updated_at.isoformat(),
                        updated.id,
                    ),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise RuleNotFoundError(rule.id)
        return self.get(rule.id)

    def set_enabled(self, rule_id: str, is_enabled: bool, user_id: str | None = None) -> None:
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    """
                    UPDATE learning_rules
                    SET is_enabled = ?, updated_by = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (int(is_enabled), user_id, datetime.now().isoformat(), rule_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise RuleNotFoundError(rule_id)
        logger.info("Rule %s %s by %s", rule_id, "enabled" if is_enabled else "disabled", user_id)

    def record_trigger(self, rule_id: str, user_id: str | None = None) -> LearningRule:
        """Increment the trigger count and stamp the trigger time.

        The increment happens in SQL so concurrent triggers are all counted.

        Raises:
            RuleNotFoundError: If no such rule exists.
        """
        now = datetime.now().isoformat()
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute(
                    """
                    UPDATE learning_rules
                    SET trigger_count = trigger_count + 1, last_triggered_at = ?,
                        updated_by = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (now, user_id, now, rule_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise RuleNotFoundError(rule_id)
        rule = self.get(rule_id)
        logger.debug("Rule %s triggered (%d total)", rule_id, rule.trigger_count)
        return rule

    def delete(self, rule_id: str) -> bool:
        conn = get_connection(self._db_path)
        try:
            with conn:
                cursor = conn.execute("DELETE FROM learning_rules WHERE id = ?", (rule_id,))
        finally:
            conn.close()
        return cursor.rowcount > 0
