"""
Review context logger.

Provides logging interface for the review context with automatic [review] prefix.
All review modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from skillfit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[review]"


def setup_review_logger(log_dir: Path, inputs: Optional[dict] = None) -> Path:
    """
    Setup logger for the review context.

    Args:
        log_dir: Directory for this logging session
        inputs: Paths the run depends on, logged in the session header

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="review", log_dir=log_dir, inputs=inputs)


# Wrapper functions with automatic [review] prefix


def _log_info(message: str) -> None:
    """Log info message with [review] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [review] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [review] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [review] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [review] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level review logging helpers


def log_candidates_stored(new: int, recurring: int, total: int) -> None:
    """Log a candidate store operation."""
    _log_info(f"Stored {new} new candidates, {recurring} recurring (total: {total})")


def log_candidate_feedback(canonical: str, action: str, classified_as: str = None) -> None:
    """Log reviewer feedback on one candidate."""
    suffix = f" as {classified_as}" if classified_as else ""
    _log_info(f"Feedback for '{canonical}': {action}{suffix}")


def log_candidate_promoted(canonical: str, kind: str) -> None:
    """Log a promotion into the user dictionary extension."""
    _log_success(f"Promoted '{canonical}' to dictionary extension as {kind}")


def log_candidate_removed(canonical: str) -> None:
    _log_info(f"Removed candidate '{canonical}'")


def log_candidates_cleared(count: int) -> None:
    _log_warning(f"Cleared {count} candidates")


def log_candidate_demoted(canonical: str, rows: int) -> None:
    _log_info(f"Dropped {rows} dictionary extension rows for '{canonical}'")
