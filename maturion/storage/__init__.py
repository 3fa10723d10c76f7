"""SQLite persistence for patterns, weights, rules, snapshots and approved chunks."""

from maturion.storage.chunks import ChunkRepository
from maturion.storage.database import get_connection, initialize_database
from maturion.storage.patterns import PatternRepository
from maturion.storage.rules import RuleRepository
from maturion.storage.snapshots import SnapshotRepository
from maturion.storage.weights import FeedbackWeightRepository

__all__ = [
    "ChunkRepository",
    "FeedbackWeightRepository",
    "PatternRepository",
    "RuleRepository",
    "SnapshotRepository",
    "get_connection",
    "initialize_database",
]
