"""Custom exceptions for Maturion Core."""


class MaturionError(Exception):
    """Base exception for Maturion Core."""

    pass


class InvalidConfiguration(MaturionError, ValueError):
    """Raised when chunking parameters or tier thresholds make no sense."""

    pass


class PatternNotFoundError(MaturionError, KeyError):
    """Raised when a learning pattern does not exist."""

    pass


class ConcurrentUpdateError(MaturionError):
    """Raised when a pattern row changed since it was read."""

    pass


class ApprovalRequiredError(MaturionError):
    """Raised when an unapproved chunk batch is forwarded to storage."""

    pass


class DuplicatePatternError(MaturionError):
    """Raised when reactivating a pattern would shadow another active one."""

    pass


class RuleNotFoundError(MaturionError, KeyError):
    """Raised when a learning rule does not exist."""

    pass


class SnapshotNotFoundError(MaturionError, KeyError):
    """Raised when a model snapshot does not exist."""

    pass
