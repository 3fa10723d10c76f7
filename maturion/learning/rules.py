"""Learning rule defaults, statistics and filters."""

from collections.abc import Iterable
from dataclasses import dataclass

from maturion.models.rule import (
    AutoValidationSettings,
    ConfidenceThresholdSettings,
    LearningRule,
    PatternDetectionSettings,
    RuleType,
    SuppressionTriggerSettings,
)

HIGH_PRIORITY = 8
MEDIUM_PRIORITY = 5


def default_rules(organization_id: str, user_id: str | None = None) -> list[LearningRule]:
    """Build the starter rule set for an organization.

    Every default rule is enabled but none auto-activates; an administrator
    has to opt in.
    """
    common = {
        "organization_id": organization_id,
        "created_by": user_id,
        "updated_by": user_id,
        "auto_activation_enabled": False,
    }
    return [
        LearningRule(
            rule_name="High Confidence Pattern Detection",
            rule_category="content_quality",
            settings=PatternDetectionSettings(
                min_frequency=3, min_confidence=75, validation_threshold=80
            ),
            priority_level=8,
            applies_to_content_types=["criteria", "evidence", "mps_statement"],
            **common,
        ),
        LearningRule(
            rule_name="Sector Alignment Validation",
            rule_category="sector_alignment",
            settings=AutoValidationSettings(
                sector_match_threshold=85, cross_validation_required=True
            ),
            priority_level=7,
            applies_to_content_types=["criteria", "intent"],
            **common,
        ),
        LearningRule(
            rule_name="Compliance Accuracy Threshold",
            rule_category="compliance_accuracy",
            settings=ConfidenceThresholdSettings(min_accuracy=90, require_human_review=True),
            priority_level=9,
            applies_to_content_types=["criteria", "evidence"],
            **common,
        ),
        LearningRule(
            rule_name="Content Suppression Trigger",
            rule_category="content_quality",
            settings=SuppressionTriggerSettings(
                rejection_frequency=5, confidence_decline_threshold=-20
            ),
            priority_level=6,
            applies_to_content_types=["criteria", "mps_statement", "intent"],
            **common,
        ),
    ]


@dataclass
class RuleStatistics:
    """Rule counts by state, priority band and type."""

    total: int = 0
    enabled: int = 0
    disabled: int = 0
    auto_activation_ready: int = 0
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0
    pattern_detection: int = 0
    confidence_threshold: int = 0
    auto_validation: int = 0
    suppression_trigger: int = 0

    def count_for(self, rule_type: RuleType) -> int:
        return getattr(self, rule_type.value)


def calculate_rule_statistics(rules: Iterable[LearningRule]) -> RuleStatistics:
    stats = RuleStatistics()
    for rule in rules:
        stats.total += 1
        if rule.is_enabled:
            stats.enabled += 1
            if rule.auto_activation_enabled:
                stats.auto_activation_ready += 1
        else:
            stats.disabled += 1

        if rule.priority_level >= HIGH_PRIORITY:
            stats.high_priority += 1
        elif rule.priority_level >= MEDIUM_PRIORITY:
            stats.medium_priority += 1
        else:
            stats.low_priority += 1

        setattr(stats, rule.rule_type.value, stats.count_for(rule.rule_type) + 1)
    return stats


def rules_by_type(rules: Iterable[LearningRule], rule_type: RuleType) -> list[LearningRule]:
    return [r for r in rules if r.rule_type == rule_type]


def rules_by_category(rules: Iterable[LearningRule], category: str) -> list[LearningRule]:
    return [r for r in rules if r.rule_category == category]


def enabled_rules(rules: Iterable[LearningRule]) -> list[LearningRule]:
    return [r for r in rules if r.is_enabled]


def auto_activation_ready_rules(rules: Iterable[LearningRule]) -> list[LearningRule]:
    """Rules that are both enabled and opted in to auto-activation."""
    return [r for r in rules if r.is_enabled and r.auto_activation_enabled]
