"""Unit tests for compound phrase splitting."""

import pytest

from skillfit.contexts.extraction.phrase_data_structure import ExtractedPhrase
from skillfit.contexts.extraction.skill_splitter import (
    CONJUNCTIONS,
    SkillSplitter,
    clean_fragment,
    handle_edge_cases,
    parenthetical_variants,
)


@pytest.fixture
def splitter(store):
    return SkillSplitter(store)


@pytest.mark.unit
@pytest.mark.parametrize(
    "phrase,expected",
    [
        ("SQL, Python, and R", ["SQL", "Python", "R"]),
        ("HubSpot; Salesforce; Marketo", ["HubSpot", "Salesforce", "Marketo"]),
        ("lifecycle marketing and segmentation", ["lifecycle marketing", "segmentation"]),
        ("Looker or Mode", ["Looker", "Mode"]),
        ("GA4 (Google Analytics 4)", ["GA4", "Google Analytics 4"]),
        ("Python (Pandas, NumPy)", ["Python", "Pandas", "NumPy"]),
        ("3+ years of SQL and/or Python", ["SQL", "Python"]),
        ("and/or SQL", ["SQL"]),
        ("Looker and/or", ["Looker"]),
        ("SQL, and/or Python", ["SQL", "Python"]),
        ("Excel (advanced)", ["Excel"]),
        ("and Tableau", ["Tableau"]),
        (" email marketing ; SEO ", ["email marketing", "SEO"]),
        ("data analysis, and, reporting", ["data analysis", "reporting"]),
    ],
)
def test_split(splitter, phrase, expected):
    """Test splitting representative compound phrases."""
    assert splitter.split(phrase) == expected


@pytest.mark.unit
def test_semicolon_takes_precedence_over_comma(splitter):
    """Test that only the highest-precedence separator is applied."""
    assert splitter.split("SQL, Python; Looker") == ["SQL, Python", "Looker"]


@pytest.mark.unit
def test_known_compound_is_not_split(store):
    """Test that multi-word taxonomy names survive the "and" split."""
    assert SkillSplitter(store).split("Test and Learn") == ["Test and Learn"]
    assert SkillSplitter(None).split("Test and Learn") == ["Test", "Learn"]


@pytest.mark.unit
def test_single_character_fragments(splitter):
    """Test that only R and C survive as single-character fragments."""
    assert splitter.split("R") == ["R"]
    assert splitter.split("C, x, and y") == ["C"]


@pytest.mark.unit
def test_duplicates_removed_case_insensitively(splitter):
    """Test first-seen casing wins on duplicates."""
    assert splitter.split("SQL, sql, Python") == ["SQL", "Python"]
    assert splitter.split_batch(["SQL, Python", "python and Looker"]) == ["SQL", "Python", "Looker"]


@pytest.mark.unit
def test_empty_input(splitter):
    """Test that blank phrases split to nothing."""
    assert splitter.split("") == []
    assert splitter.split("   ") == []
    assert splitter.split(", ;") == []


@pytest.mark.unit
def test_fragments_are_clean(splitter):
    """Test that fragments are never empty, padded or conjunction-bounded."""
    phrases = [
        "SQL, Python, and R",
        "and Tableau",
        "Looker or Mode with",
        " email marketing ; SEO ",
        "data analysis, and, reporting",
        "using Braze, Iterable or Klaviyo",
        "and/or SQL",
        "Mode and/or",
    ]
    for phrase in phrases:
        for fragment in splitter.split(phrase):
            assert fragment
            assert fragment == fragment.strip()
            words = fragment.lower().split()
            assert words[0] not in CONJUNCTIONS
            assert words[-1] not in CONJUNCTIONS
            assert "and/or" not in (words[0], words[-1])


@pytest.mark.unit
def test_helpers():
    """Test the module-level cleanup helpers."""
    assert handle_edge_cases("3+ years of SQL and/or Python") == "SQL, Python"
    assert handle_edge_cases("Excel (advanced)") == "Excel"
    assert parenthetical_variants("GA4 (Google Analytics 4)") == ["GA4", "Google Analytics 4"]
    assert parenthetical_variants("plain") == ["plain"]
    assert clean_fragment(" and (Looker, ") == "Looker"


class TestSplitPhrase:
    """Test splitting extracted phrases with offsets."""

    @pytest.mark.unit
    def test_unsplit_phrase_returned_as_is(self, splitter):
        """Test that an atomic phrase comes back unchanged."""
        phrase = ExtractedPhrase(text="Tableau", strategy="bullet", start=2, end=9)
        assert splitter.split_phrase(phrase, "* Tableau") == [phrase]

    @pytest.mark.unit
    def test_fragments_located_after_parent(self, splitter):
        """Test that fragments are positioned at or after the parent phrase."""
        text = "We love SQL.\nSkills: SQL; Python\n"
        start = text.index("SQL; Python")
        phrase = ExtractedPhrase(text="SQL; Python", strategy="list", start=start, end=start + 11)

        fragments = splitter.split_phrase(phrase, text)

        assert [f.text for f in fragments] == ["SQL", "Python"]
        assert fragments[0].start == start
        assert fragments[1].start == text.index("Python")
        assert all(f.parent == "SQL; Python" for f in fragments)
        assert all(f.strategy == "list" for f in fragments)
        assert "Python" in fragments[1].context
