"""Feedback pattern learning: strength classification, weights, rules and statistics."""

from maturion.learning.classifier import (
    DEFAULT_THRESHOLDS,
    StrengthThresholds,
    classify,
    clamp_confidence,
    update_metrics,
)
from maturion.learning.rules import RuleStatistics, calculate_rule_statistics, default_rules
from maturion.learning.statistics import PatternStatistics, calculate_pattern_statistics
from maturion.learning.weights import (
    DEFAULT_FEEDBACK_WEIGHTS,
    FeedbackWeightTable,
    weight_for,
)

__all__ = [
    "DEFAULT_FEEDBACK_WEIGHTS",
    "DEFAULT_THRESHOLDS",
    "FeedbackWeightTable",
    "PatternStatistics",
    "RuleStatistics",
    "StrengthThresholds",
    "calculate_pattern_statistics",
    "calculate_rule_statistics",
    "clamp_confidence",
    "classify",
    "default_rules",
    "update_metrics",
    "weight_for",
]
