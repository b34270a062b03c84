"""
Scoring context logger.

Provides logging interface for the scoring context with automatic [scoring] prefix.
All scoring modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[scoring]"


# Wrapper functions with automatic [scoring] prefix


def _log_info(message: str) -> None:
    """Log info message with [scoring] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [scoring] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [scoring] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [scoring] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [scoring] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level scoring logging helpers


def log_fit_score(overall: float, label: str, core_score: float, tools_score: float, total_penalty: float) -> None:
    """Log a computed fit score and its components."""
    _log_info(f"Fit score {overall:.2f} ({label})")
    _log_debug(f"  Core skills: {core_score:.2f}, tools: {tools_score:.2f}, penalty: {total_penalty:+.2f}")


def log_penalty_capped(raw_penalty: float, floor: float) -> None:
    """Log that the summed penalties hit the floor."""
    _log_debug(f"Penalty {raw_penalty:+.2f} capped at floor {floor:+.2f}")


def log_validation_warnings(warnings: list) -> None:
    """Log non-fatal input warnings."""
    for warning in warnings:
        _log_warning(warning)
