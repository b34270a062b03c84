"""Unit tests for required vs desired detection."""

import pytest

from skillfit.config import RequirementSettings
from skillfit.contexts.extraction.phrase_data_structure import DESIRED, REQUIRED, ExtractedPhrase
from skillfit.contexts.extraction.requirement_detector import (
    RequirementDetector,
    detect_language_signals,
    get_penalty,
)
from skillfit.contexts.extraction.section_patterns import match_header_line, match_section_archetype


def phrases_in(text, *terms):
    """Build ExtractedPhrase records positioned at each term's first occurrence."""
    phrases = []
    for term in terms:
        start = text.index(term)
        phrases.append(ExtractedPhrase(text=term, strategy="bullet", start=start, end=start + len(term)))
    return phrases


@pytest.fixture
def detector():
    return RequirementDetector()


class TestSections:
    """Test header recognition and section spans."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Requirements:", "required"),
            ("## Nice to Have", "desired"),
            ("Preferred Qualifications", "desired"),
            ("Qualifications", "required"),
            ("What you'll bring", "required"),
            ("Bonus points if you have", "desired"),
            ("Benefits", "boundary"),
            ("About the role", "boundary"),
            ("We use SQL every day", None),
        ],
    )
    def test_match_section_archetype(self, header, expected):
        """Test header text classification."""
        assert match_section_archetype(header) == expected

    @pytest.mark.unit
    def test_inline_header(self):
        """Test that a label before a colon is treated as a header."""
        assert match_header_line("Required: SQL, Python") == ("required", "required", 9)
        assert match_header_line("Nice to have: Looker") == ("desired", "nice to have", 13)

    @pytest.mark.unit
    def test_long_prose_line_is_not_header(self):
        """Test that prose past the header length is ignored."""
        line = "Requirements gathering with stakeholders across the whole organization every week"
        assert match_header_line(line) is None

    @pytest.mark.unit
    def test_parse_sections(self, detector):
        """Test that each section runs to the next recognized header."""
        text = "About the role\nWe build things.\nRequirements\n- SQL\nNice to have\n- Looker\n"
        sections = detector.parse_sections(text)

        assert [s.kind for s in sections] == ["boundary", "required", "desired"]
        assert sections[1].end == sections[2].start
        assert sections[2].end == len(text)
        assert sections[1].contains(text.index("SQL"))
        assert not sections[1].contains(text.index("Looker"))


class TestDetect:
    """Test per-phrase requirement levels."""

    @pytest.mark.unit
    def test_no_sections_defaults_to_required(self, detector):
        """Test that a posting with no requirement headers marks everything required."""
        text = "We are hiring an analyst who works with SQL and Tableau every day."
        result = detector.detect(text, phrases_in(text, "SQL", "Tableau"))

        assert result.default_to_required
        assert [a.level for a in result.assessments] == [REQUIRED, REQUIRED]
        assert all(a.multiplier == pytest.approx(2.0) for a in result.assessments)
        assert result.desired == []

    @pytest.mark.unit
    def test_boundary_headers_only_still_default(self, detector):
        """Test that non-requirement headers do not disable the default."""
        text = "About the role\nYou will use SQL.\n"
        result = detector.detect(text, phrases_in(text, "SQL"))

        assert result.default_to_required
        assert not result.has_required_section
        assert len(result.sections) == 1

    @pytest.mark.unit
    def test_section_membership(self, detector):
        """Test that phrases take their section's level."""
        text = "Requirements\n- SQL\nNice to have\n- Looker\n"
        result = detector.detect(text, phrases_in(text, "SQL", "Looker"))

        assert result.has_required_section
        assert result.has_desired_section
        sql, looker = result.assessments
        assert sql.level == REQUIRED
        assert sql.section == "requirements"
        assert looker.level == DESIRED
        assert looker.multiplier == pytest.approx(1.0)
        assert result.for_text("looker") is looker

    @pytest.mark.unit
    def test_expert_language_overrides_desired_section(self, detector):
        """Test that expert language inside a desired section makes the phrase required."""
        text = "Nice to have\n- Expert in Tableau\n"
        (assessment,) = detector.detect(text, phrases_in(text, "Tableau")).assessments

        assert assessment.level == REQUIRED
        assert assessment.multiplier == pytest.approx(3.0)
        assert assessment.language_signal == "expert required"

    @pytest.mark.unit
    def test_years_language(self, detector):
        """Test that "N+ years" language records the year count."""
        text = "Requirements\n- 3+ years of experience with Python\n"
        (assessment,) = detector.detect(text, phrases_in(text, "Python")).assessments

        assert assessment.level == REQUIRED
        assert assessment.language_signal == "3 years required"
        assert assessment.multiplier == pytest.approx(2.0)

    @pytest.mark.unit
    def test_preferred_language_overrides_required_section(self, detector):
        """Test that preferred language inside a required section makes the phrase desired."""
        text = "Requirements\n- Looker is preferred\n"
        (assessment,) = detector.detect(text, phrases_in(text, "Looker")).assessments

        assert assessment.level == DESIRED
        assert assessment.language_signal == "preferred"

    @pytest.mark.unit
    def test_inline_desired_header(self, detector):
        """Test that an inline "Nice to have:" header governs the rest of its line."""
        text = "Nice to have: Looker"
        (assessment,) = detector.detect(text, phrases_in(text, "Looker")).assessments

        assert assessment.level == DESIRED
        assert assessment.section == "nice to have"

    @pytest.mark.unit
    def test_required_occurrence_wins(self, detector):
        """Test that a phrase listed in both sections is required."""
        text = "Nice to have\n- SQL\nRequirements\n- SQL\n"
        (assessment,) = detector.detect(text, phrases_in(text, "SQL")).assessments
        assert assessment.level == REQUIRED

    @pytest.mark.unit
    def test_context_clipped_to_section(self, detector):
        """Test that language from a neighboring section does not leak in."""
        text = "Requirements\n- Expert in SQL\nNice to have\n- Looker\n"
        result = detector.detect(text, phrases_in(text, "SQL", "Looker"))

        assert result.for_text("SQL").language_signal == "expert required"
        assert result.for_text("Looker").level == DESIRED
        assert result.for_text("Looker").language_signal is None

    @pytest.mark.unit
    def test_preamble_phrases_default_to_required(self, detector):
        """Test that phrases before the first header are required."""
        text = "We need Tableau.\nNice to have\n- Looker\n"
        result = detector.detect(text, phrases_in(text, "Tableau", "Looker"))

        assert result.for_text("Tableau").level == REQUIRED
        assert result.for_text("Tableau").section is None

    @pytest.mark.unit
    def test_assessments_keep_input_order(self, detector):
        """Test one assessment per phrase in input order."""
        text = "Requirements\n- SQL\n- Python\n- Looker\n"
        phrases = phrases_in(text, "Looker", "SQL", "Python")
        result = detector.detect(text, phrases)
        assert [a.phrase for a in result.assessments] == phrases
        assert len(detector.detect_batch([(text, phrases), ("", [])])) == 2


class TestMultipliers:
    """Test multipliers and penalties."""

    @pytest.mark.unit
    def test_analyze_section(self, detector):
        """Test explicit intensity phrases within a section."""
        assert detector.analyze_section("Expert in SQL. Must have Looker.") == {"SQL": 3.0, "Looker": 2.0}
        assert detector.analyze_section("") == {}

    @pytest.mark.unit
    def test_get_multiplier(self, detector):
        """Test level and signal multipliers."""
        assert detector.get_multiplier(DESIRED, "expert required") == pytest.approx(1.0)
        assert detector.get_multiplier(REQUIRED) == pytest.approx(2.0)
        assert detector.get_multiplier(REQUIRED, "advanced required") == pytest.approx(2.5)
        assert detector.get_multiplier(REQUIRED, "expert required") == pytest.approx(3.0)

    @pytest.mark.unit
    def test_expert_multiplier_never_below_required(self):
        """Test that a low expert multiplier is lifted to the required one."""
        detector = RequirementDetector(RequirementSettings(expert_multiplier=1.5))
        assert detector.get_multiplier(REQUIRED, "expert required") == pytest.approx(2.0)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "level,item_type,signal,expected",
        [
            (REQUIRED, "CORE_SKILL", None, -0.10),
            (REQUIRED, "CORE_SKILL", "expert required", -0.10),
            (REQUIRED, "TOOL", None, -0.12),
            (REQUIRED, "TOOL", "expert required", -0.15),
            (DESIRED, "TOOL", None, -0.05),
            (DESIRED, "CORE_SKILL", None, 0.0),
        ],
    )
    def test_get_penalty(self, level, item_type, signal, expected):
        """Test penalties for missing items."""
        assert get_penalty(level, item_type, signal) == pytest.approx(expected)


@pytest.mark.unit
def test_detect_language_signals():
    """Test intensity language scanning."""
    signals = detect_language_signals("5+ years of experience with")
    assert signals.years_required
    assert signals.years_count == 5
    assert not signals.expert_required

    assert detect_language_signals("would be a plus").preferred
    assert detect_language_signals("must have").must_have
    assert not detect_language_signals("we like dashboards").any
