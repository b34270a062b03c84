"""
Loguru session setup for the CLIs.

Library code logs through the contexts/{context}/logger.py wrappers and never
installs sinks; only scripts call setup_logger (via the context setup helpers).
"""

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()
CONSOLE_LOG_LEVEL = os.getenv("SKILLFIT_LOG_LEVEL", "INFO")

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(context_name: str, log_dir: Path, inputs: Optional[dict] = None) -> Path:
    """
    Replace loguru's sinks with a DEBUG file log and a console log, then write the header.

    Args:
        context_name: Log file stem ("analysis", "review")
        log_dir: Directory for this session
        inputs: Paths and settings the run depends on, echoed in the header

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=CONSOLE_LOG_LEVEL, colorize=True)

    log_provenance(inputs)
    return log_file


def log_provenance(inputs: Optional[dict] = None) -> None:
    """Log command line, package version and run inputs."""
    from skillfit import __version__

    logger.debug("=" * 80)
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python {sys.version.split()[0]}, skillfit {__version__}")
    for key, value in (inputs or {}).items():
        logger.debug(f"{key}: {value}")
    logger.debug("=" * 80)
