"""Unit tests for CLI logging setup."""

import pytest
from loguru import logger

from skillfit import __version__
from skillfit.contexts.review.logger import log_candidate_removed, setup_review_logger


@pytest.fixture
def log_dir(tmp_path):
    yield tmp_path / "logs" / "review_session"
    logger.remove()


@pytest.mark.unit
def test_session_header_lists_inputs(log_dir):
    """Test that the log file opens with version and run inputs, then context messages."""
    log_file = setup_review_logger(log_dir, inputs={"Candidate DB": "outs/candidates.db"})
    log_candidate_removed("qwyzzlebot")
    logger.remove()

    assert log_file == log_dir / "review.log"
    content = log_file.read_text(encoding="utf-8")
    assert f"skillfit {__version__}" in content
    assert "Candidate DB: outs/candidates.db" in content
    assert "[review] Removed candidate 'qwyzzlebot'" in content
    assert content.index("Candidate DB") < content.index("[review]")


@pytest.mark.unit
def test_header_without_inputs(log_dir):
    """Test setup with no run inputs."""
    log_file = setup_review_logger(log_dir)
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "Working directory:" in content
    assert content.count("=" * 80) == 2
