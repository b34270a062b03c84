"""
Taxonomy context logger.

Provides logging interface for the taxonomy context with automatic [taxonomy] prefix.
All taxonomy modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[taxonomy]"


# Wrapper functions with automatic [taxonomy] prefix


def _log_info(message: str) -> None:
    """Log info message with [taxonomy] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [taxonomy] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [taxonomy] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [taxonomy] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [taxonomy] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level taxonomy logging helpers


def log_store_loaded(data_path: Path, stats: dict) -> None:
    """Log a successful dataset load with its sizes."""
    _log_info(f"Loaded taxonomy v{stats.get('version')} from {data_path}")
    _log_debug(f"  Skills: {stats.get('skills')}")
    _log_debug(f"  Tools: {stats.get('tools')}")
    _log_debug(f"  Deny-list terms: {stats.get('deny_list_terms')}")
    _log_debug(f"  Soft-skill patterns: {stats.get('soft_skill_patterns')}")


def log_extension_merged(added_skills: int, added_tools: int, added_noise: int, skipped: list) -> None:
    """Log the result of merging a user dictionary extension."""
    _log_info(
        f"Merged dictionary extension: {added_skills} skills, {added_tools} tools, {added_noise} noise phrases"
    )
    for canonical in skipped:
        _log_debug(f"  Skipped existing canonical key: {canonical}")
