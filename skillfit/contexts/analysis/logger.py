"""
Analysis context logger.

Provides logging interface for the analysis context with automatic [analysis] prefix.
All analysis modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from skillfit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[analysis]"


def setup_analysis_logger(log_dir: Path, inputs: Optional[dict] = None) -> Path:
    """
    Setup logger for the analysis context.

    Args:
        log_dir: Directory for this logging session
        inputs: Paths the run depends on, logged in the session header

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="analysis", log_dir=log_dir, inputs=inputs)


# Wrapper functions with automatic [analysis] prefix


def _log_info(message: str) -> None:
    """Log info message with [analysis] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [analysis] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [analysis] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [analysis] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [analysis] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level analysis logging helpers


def log_analysis_complete(text_hash: str, bucket_counts: dict, cached: bool) -> None:
    """Log a finished extraction with its bucket sizes."""
    source = "cache" if cached else "pipeline"
    breakdown = ", ".join(f"{name}={count}" for name, count in bucket_counts.items())
    _log_info(f"Analysis {text_hash[:12]} from {source}: {breakdown}")


def log_analysis_failed(reason: str) -> None:
    _log_error(f"Analysis input rejected: {reason}")


def log_cache_eviction(key: str, size: int) -> None:
    _log_debug(f"Cache full ({size}), evicted oldest entry {key[:12]}")


def log_vocabulary_refreshed(signature: tuple, cleared: int) -> None:
    """Log a store rebuild after the dictionary extension changed."""
    _log_info(f"Dictionary extension changed {signature}, vocabulary rebuilt")
    if cleared:
        _log_debug(f"  Cleared {cleared} cached results")


def log_stale_result_skipped(text_hash: str) -> None:
    _log_debug(f"Vocabulary changed during analysis {text_hash[:12]}, result not cached")
