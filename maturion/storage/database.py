"""SQLite database initialization and connection management."""

import sqlite3
from pathlib import Path


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def initialize_database(db_path: str | Path) -> None:
    """Create the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS learning_patterns (
                id TEXT PRIMARY KEY,
                organization_id TEXT NOT NULL,
                pattern_type TEXT NOT NULL,
                pattern_category TEXT NOT NULL,
                pattern_text TEXT NOT NULL,
                confidence_score REAL NOT NULL,
                frequency_count INTEGER NOT NULL,
                pattern_strength TEXT NOT NULL DEFAULT 'weak',
                validation_status TEXT NOT NULL DEFAULT 'unvalidated',
                validated_by TEXT,
                validated_at TIMESTAMP,
                suppression_rule TEXT,
                replacement_suggestion TEXT,
                learning_weight REAL DEFAULT 1.0,
                is_active INTEGER DEFAULT 1,
                source_feedback_ids TEXT DEFAULT '[]',
                affected_domains TEXT DEFAULT '[]',
                first_detected_at TIMESTAMP NOT NULL,
                last_detected_at TIMESTAMP NOT NULL,
                version INTEGER NOT NULL DEFAULT 1
            );

            CREATE INDEX IF NOT EXISTS idx_patterns_org
                ON learning_patterns (organization_id);

            CREATE TABLE IF NOT EXISTS pattern_validation_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                pattern_id TEXT NOT NULL REFERENCES learning_patterns (id),
                validation_status TEXT NOT NULL,
                validated_by TEXT NOT NULL,
                notes TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS feedback_weights (
                organization_id TEXT NOT NULL,
                feedback_type TEXT NOT NULL,
                feedback_category TEXT NOT NULL,
                weight_multiplier REAL NOT NULL CHECK (weight_multiplier > 0),
                is_critical INTEGER DEFAULT 0,
                applies_to_content_types TEXT DEFAULT '[]',
                updated_by TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (organization_id, feedback_type, feedback_category)
            );

            CREATE TABLE IF NOT EXISTS chunk_batches (
                id TEXT PRIMARY KEY,
                document_id TEXT NOT NULL,
                chunk_size INTEGER NOT NULL,
                overlap INTEGER NOT NULL,
                source_length INTEGER NOT NULL,
                reviewed_by TEXT,
                reviewed_at TIMESTAMP,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS document_chunks (
                batch_id TEXT NOT NULL REFERENCES chunk_batches (id),
                chunk_index INTEGER NOT NULL,
                content TEXT NOT NULL,
                start_offset INTEGER NOT NULL,
                end_offset INTEGER NOT NULL,
                PRIMARY KEY (batch_id, chunk_index)
            );

            CREATE TABLE IF NOT EXISTS learning_rules (
                id TEXT PRIMARY KEY,
                organization_id TEXT NOT NULL,
                rule_name TEXT NOT NULL,
                rule_type TEXT NOT NULL,
                rule_category TEXT NOT NULL,
                settings TEXT NOT NULL,
                is_enabled INTEGER DEFAULT 1,
                applies_to_content_types TEXT DEFAULT '[]',
                applies_to_domains TEXT DEFAULT '[]',
                priority_level INTEGER NOT NULL CHECK (priority_level BETWEEN 1 AND 10),
                auto_activation_enabled INTEGER DEFAULT 0,
                last_triggered_at TIMESTAMP,
                trigger_count INTEGER NOT NULL DEFAULT 0,
                effectiveness_score REAL,
                created_by TEXT,
                updated_by TEXT,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_rules_org
                ON learning_rules (organization_id);

            CREATE TABLE IF NOT EXISTS learning_model_snapshots (
                id TEXT PRIMARY KEY,
                organization_id TEXT NOT NULL,
                snapshot_name TEXT NOT NULL,
                snapshot_type TEXT NOT NULL,
                snapshot_reason TEXT,
                pattern_count INTEGER NOT NULL,
                active_rules_count INTEGER NOT NULL,
                model_state TEXT NOT NULL,
                performance_metrics TEXT DEFAULT '{}',
                is_baseline INTEGER DEFAULT 0,
                rollback_available INTEGER DEFAULT 1,
                created_by TEXT,
                created_at TIMESTAMP NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_snapshots_org
                ON learning_model_snapshots (organization_id);
            """
        )
        conn.commit()
    finally:
        conn.close()
