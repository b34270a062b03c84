"""Unit tests for multi-strategy phrase extraction."""

import pytest

from skillfit.contexts.extraction.extraction_patterns import clean_extracted_phrase, trim_at_clause_break
from skillfit.contexts.extraction.phrase_data_structure import STRATEGIES
from skillfit.contexts.extraction.phrase_extractor import PhraseExtractor
from skillfit.contexts.extraction.pos_tagger import PosTagger


class StubTagger:
    """Tags every token NN except the ones given explicit tags."""

    def __init__(self, overrides=None):
        self.overrides = overrides or {}

    def tag(self, tokens):
        return [(token, self.overrides.get(token, "NN")) for token in tokens]


@pytest.fixture
def extractor(store):
    return PhraseExtractor(store, tagger=PosTagger(enabled=False))


class TestStrategies:
    """Test each extraction strategy on its own."""

    @pytest.mark.unit
    def test_bullet_items_split_short_labels(self, extractor):
        """Test that "label: list" bullets yield the label and the list separately."""
        text = "* Analytics: Looker, Tableau\n- SQL\n1. Python\n"
        items = [item for item, _ in extractor.extract_bullet_items(text)]
        assert items == ["Analytics", "Looker, Tableau", "SQL", "Python"]

    @pytest.mark.unit
    def test_indicator_phrases_trim_at_clause_break(self, extractor):
        """Test that indicator captures stop at clause boundaries."""
        text = "Experience with Braze is a plus. Knowledge of SQL for reporting."
        phrases = [phrase for phrase, _ in extractor.extract_indicator_phrases(text)]
        assert phrases == ["Braze", "SQL"]

    @pytest.mark.unit
    def test_list_items_after_cue(self, extractor):
        """Test that "tools include:" lists are itemized."""
        text = "Tools include: Segment, Amplitude and Mixpanel."
        items = [item for item, _ in extractor.extract_list_items(text)]
        assert items == ["Segment", "Amplitude", "Mixpanel"]

    @pytest.mark.unit
    def test_list_items_record_positions(self, extractor):
        """Test that list items carry their offset in the text."""
        text = "Platforms such as Looker or Mode."
        items = extractor.extract_list_items(text)
        assert items == [("Looker", text.index("Looker")), ("Mode", text.index("Mode"))]

    @pytest.mark.unit
    def test_taxonomy_matches_keep_written_form(self, extractor):
        """Test that known terms are returned as written, in text order."""
        text = "Our PR team reports in Tableau and Amplitude."
        matches = [term for term, _ in extractor.extract_taxonomy_matches(text)]

        assert "PR" in matches
        assert matches.index("Tableau") < matches.index("Amplitude")

    @pytest.mark.unit
    def test_acronym_terms_match_case_sensitively(self, extractor):
        """Test that a lowercase "pr" in prose is not taken for the acronym."""
        matches = [term.lower() for term, _ in extractor.extract_taxonomy_matches("please approve the pr request")]
        assert "pr" not in matches

    @pytest.mark.unit
    def test_ambiguous_tool_names_skipped(self, extractor):
        """Test that common-word tool names are never scanned for."""
        matches = [term.lower() for term, _ in extractor.extract_taxonomy_matches("segment the audience in Amplitude")]
        assert "segment" not in matches
        assert "amplitude" in matches


class TestNounPhrases:
    """Test tagger-driven and fallback noun phrases."""

    @pytest.mark.unit
    def test_regex_fallback(self, extractor):
        """Test that the regex fallback keeps domain compounds and drops stop modifiers."""
        phrases, fallback = extractor.extract_noun_phrases("We need strong email marketing and cohort analysis")

        assert fallback
        assert [p for p, _ in phrases] == ["email marketing", "cohort analysis"]

    @pytest.mark.unit
    def test_tagged_chunks(self, store):
        """Test that tagged chunks ending in a domain head noun are kept."""
        extractor = PhraseExtractor(store, tagger=StubTagger({"Deep": "JJ"}))
        phrases, fallback = extractor.extract_noun_phrases("Deep email marketing expertise")

        assert not fallback
        assert phrases == [("email marketing", 5)]

    @pytest.mark.unit
    def test_tagged_acronyms(self, store):
        """Test that proper-noun acronyms are kept from tagged text."""
        extractor = PhraseExtractor(store, tagger=StubTagger({"SQL": "NNP", "uses": "VBZ"}))
        phrases, _ = extractor.extract_noun_phrases("team uses SQL")
        assert ("SQL", 10) in phrases

    @pytest.mark.unit
    def test_disabled_tagger(self):
        """Test that a disabled tagger reports itself unavailable without probing."""
        tagger = PosTagger(enabled=False)
        assert not tagger.available
        assert tagger.tag(["SQL"]) is None
        assert tagger.unavailable_reason == "disabled"


class TestExtract:
    """Test the unioned result."""

    @pytest.mark.unit
    def test_extract_dedups_and_counts(self, extractor):
        """Test that phrases are deduplicated and counted per strategy."""
        text = "Requirements\n* SQL\n* Tableau\nExperience with SQL and Looker.\n"
        result = extractor.extract(text)

        keys = [p.key for p in result.phrases]
        assert len(keys) == len(set(keys))
        assert "sql" in keys
        assert set(result.strategy_counts) == set(STRATEGIES)
        assert sum(result.strategy_counts.values()) == len(result.phrases)

        sql = next(p for p in result.phrases if p.key == "sql")
        assert sql.strategy == "bullet"
        assert sql.start == text.index("SQL")
        assert "SQL" in sql.context

    @pytest.mark.unit
    def test_empty_text(self, extractor):
        """Test that blank text extracts nothing."""
        result = extractor.extract("   ")
        assert result.phrases == []
        assert result.dropped == 0

    @pytest.mark.unit
    def test_over_long_bullets_dropped(self, extractor):
        """Test that bullets past the word bound are counted as dropped."""
        text = "- own the weekly business review deck and present it to leadership every monday\n"
        result = extractor.extract(text)

        assert result.dropped >= 1
        assert all(extractor.within_bounds(p.text) for p in result.phrases)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "phrase,expected",
        [
            ("R", True),
            ("C", True),
            ("x", False),
            ("", False),
            ("SQL", True),
            ("a" * 51, False),
            ("one two three four five six seven", True),
            ("one two three four five six seven eight", False),
        ],
    )
    def test_within_bounds(self, extractor, phrase, expected):
        """Test the character and word bounds."""
        assert extractor.within_bounds(phrase) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw,expected",
    [
        ("5+ years of experience with SQL", "SQL"),
        ("Lifecycle marketing experience.", "Lifecycle marketing"),
        ("Strong knowledge of Looker", "Looker"),
        ("SQL skills required", "SQL"),
        ("  Tableau, ", "Tableau"),
        ("", ""),
    ],
)
def test_clean_extracted_phrase(raw, expected):
    """Test phrase cleanup of qualifiers and punctuation."""
    assert clean_extracted_phrase(raw) == expected


@pytest.mark.unit
def test_trim_at_clause_break():
    """Test cutting a capture at the first clause word."""
    assert trim_at_clause_break("dbt to build models") == "dbt"
    assert trim_at_clause_break("Looker") == "Looker"
