"""Unit tests for job text preprocessing."""

import pytest

from skillfit.contexts.extraction.normalizer import normalize_unicode, preprocess_job_text, strip_markdown_emphasis


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw,expected",
    [
        ("\u2022 SQL\u00a0and Python", "* SQL and Python"),
        ("\u201cdata\u201d team\u2019s", '"data" team\'s'),
        ("Py\u200bthon", "Python"),
        ("A\u2014B", "A-B"),
    ],
)
def test_normalize_unicode(raw, expected):
    """Test replacement of problematic unicode with ASCII."""
    assert normalize_unicode(raw) == expected


@pytest.mark.unit
def test_strip_markdown_emphasis():
    """Test that bold markers go and single bullets stay."""
    assert strip_markdown_emphasis("**Requirements:**\n* SQL") == "Requirements:\n* SQL"
    assert strip_markdown_emphasis("__Nice to have__") == "Nice to have"


class TestPreprocess:
    """Test the full preprocessing pass."""

    @pytest.mark.unit
    def test_line_endings_and_headers(self):
        """Test CRLF conversion and header cleanup."""
        assert preprocess_job_text("**Requirements:**\r\n- SQL\r- Python") == "Requirements:\n- SQL\n- Python"

    @pytest.mark.unit
    def test_whitespace(self):
        """Test trailing space removal and blank-line collapsing."""
        assert preprocess_job_text("  a   \n\n\n\nb\t\n") == "a\n\nb"

    @pytest.mark.unit
    def test_empty(self):
        """Test that empty or missing text yields an empty string."""
        assert preprocess_job_text("") == ""
        assert preprocess_job_text(None) == ""

    @pytest.mark.unit
    def test_idempotent(self):
        """Test that preprocessing normalized text changes nothing."""
        raw = "**About**\r\n\u2022 Email marketing \u2014 lifecycle\n\n\n\n* SQL  "
        once = preprocess_job_text(raw)
        assert preprocess_job_text(once) == once
