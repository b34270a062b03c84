"""
Classification context logger.

Provides logging interface for the classification context with automatic [classification] prefix.
All classification modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[classification]"


# Wrapper functions with automatic [classification] prefix


def _log_info(message: str) -> None:
    """Log info message with [classification] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [classification] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [classification] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [classification] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [classification] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level classification logging helpers


def log_classification_summary(counts: dict, rule_counts: dict) -> None:
    """Log per-type totals and which rules fired for a batch."""
    _log_info(
        f"Classified {sum(counts.values())} phrases: "
        f"{counts.get('core_skills', 0)} core skills, {counts.get('tools', 0)} tools, "
        f"{counts.get('candidates', 0)} candidates, {counts.get('rejected', 0)} rejected"
    )
    for rule, count in sorted(rule_counts.items(), key=lambda kv: -kv[1]):
        _log_debug(f"  {rule}: {count}")


def log_item_classified(raw: str, item_type: str, rule: str, confidence: float) -> None:
    """Log one classification decision."""
    _log_debug(f"'{raw}' -> {item_type} via {rule} ({confidence:.2f})")


def log_normalization_summary(bucket_counts: dict, dropped_low_confidence: int, duplicates: int) -> None:
    """Log bucket sizes after canonicalization and deduplication."""
    breakdown = ", ".join(f"{name}={count}" for name, count in bucket_counts.items())
    _log_info(f"Normalized buckets: {breakdown}")
    if dropped_low_confidence:
        _log_debug(f"  Dropped {dropped_low_confidence} items below minimum confidence")
    if duplicates:
        _log_debug(f"  Merged {duplicates} duplicate or suppressed items")
