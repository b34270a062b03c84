"""
Extraction context logger.

Provides logging interface for the extraction context with automatic [extraction] prefix.
All extraction modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[extraction]"


# Wrapper functions with automatic [extraction] prefix


def _log_info(message: str) -> None:
    """Log info message with [extraction] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [extraction] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [extraction] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [extraction] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [extraction] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level extraction logging helpers


def log_phrases_extracted(strategy_counts: dict, total: int) -> None:
    """Log per-strategy phrase counts after extraction."""
    breakdown = ", ".join(f"{name}={count}" for name, count in strategy_counts.items())
    _log_debug(f"Extracted {total} phrases ({breakdown})")


def log_tagger_fallback(reason: str) -> None:
    """Log that noun-phrase extraction fell back to regex patterns."""
    _log_warning(f"POS tagger unavailable, using regex noun-phrase fallback: {reason}")


def log_sections_detected(sections: list, default_to_required: bool) -> None:
    """Log detected requirement section headers."""
    if default_to_required:
        _log_debug("No required/desired headers found, defaulting every phrase to required")
        return
    for section in sections:
        _log_debug(f"  Section [{section.kind}] '{section.header}' chars {section.content_start}-{section.end}")
