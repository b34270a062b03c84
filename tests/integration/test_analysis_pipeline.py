"""
Integration tests for the full analysis pipeline.

Runs SkillAnalyzer end to end (preprocess, extract, split, detect
requirements, classify, normalize, score) against the packaged taxonomy.
"""

import pytest

from skillfit.contexts.classification.classification_data_structure import ItemType
from skillfit.contexts.scoring.report import render_report

ANALYST_POSTING = "Requirements\n- SQL\n- Python\nNice to have\n- R\n"


def keys(items):
    return [item.canonical for item in items]


class TestAnalyze:
    """Test analyze() on representative postings."""

    @pytest.mark.integration
    def test_weighted_score_end_to_end(self, analyzer):
        """Test two required skills, one desired, and a profile holding one of them."""
        result = analyzer.analyze(ANALYST_POSTING, {"coreSkills": ["SQL"]})

        assert result.success
        assert sorted(keys(result.buckets.required_core_skills)) == ["python", "sql"]
        assert keys(result.buckets.desired_core_skills) == ["r_programming"]
        assert result.fit_score.core_skills.score == pytest.approx(0.4)
        assert result.fit_score.tools.score == pytest.approx(1.0)
        assert result.fit_score.overall_score == pytest.approx(0.48)
        assert not result.metadata["default_to_required"]
        assert result.metadata["noun_phrase_fallback"]

    @pytest.mark.integration
    def test_soft_skill_never_becomes_public_relations(self, analyzer):
        """Test that a soft-skill bullet is rejected and yields no skill."""
        result = analyzer.analyze_requirements("Requirements\n- Strong communication skills\n")

        assert result.buckets.total == 0
        assert "public_relations" not in keys(result.buckets.required_core_skills)
        assert [item.rule for item in result.rejected] == ["soft_skill"]
        assert result.quality.soft_skills_rejected == 1

    @pytest.mark.integration
    def test_vendor_lands_in_tools(self, analyzer):
        """Test that a vendor name is a required tool."""
        result = analyzer.analyze("Requirements\n- Salesforce\n", {"tools": ["Salesforce"]})

        assert keys(result.buckets.required_tools) == ["salesforce"]
        assert result.buckets.required_core_skills == []
        assert result.fit_score.overall_score == pytest.approx(1.0)

    @pytest.mark.integration
    def test_no_sections_defaults_to_required(self, analyzer):
        """Test that a posting without section headers treats every item as required."""
        result = analyzer.analyze_requirements("Our analysts work with SQL and Tableau every day.")
        buckets = result.buckets

        assert result.metadata["default_to_required"]
        assert "sql" in keys(buckets.required_core_skills)
        assert "tableau" in keys(buckets.required_tools)
        assert buckets.desired_core_skills == []
        assert buckets.desired_tools == []
        assert all(item.multiplier == pytest.approx(2.0) for item in buckets.all_items)

    @pytest.mark.integration
    def test_known_compounds_survive_splitting(self, analyzer):
        """Test that multi-word skills containing "and" or hyphens stay whole."""
        result = analyzer.analyze_requirements("Requirements\n- Go-to-Market Strategy\n- Test and Learn\n")
        required = keys(result.buckets.required_core_skills)

        assert "go_to_market_strategy" in required
        assert "ab_testing" in required
        assert "learn" not in required

    @pytest.mark.integration
    def test_special_requirements(self, analyzer):
        """Test that application logistics are surfaced with the analysis."""
        result = analyzer.analyze_requirements("Requirements\n- SQL\n\nTravel up to 30%. Please include a cover letter.")
        alert_types = {alert.type for alert in result.special_requirements.alerts}

        assert alert_types == {"TRAVEL_REQUIRED", "COVER_LETTER_REQUIRED"}
        assert result.special_requirements.by_type("TRAVEL_REQUIRED").details["travel_percentage"] == 30

    @pytest.mark.integration
    def test_report_renders_from_analysis(self, analyzer):
        """Test rendering the report for a real analysis."""
        result = analyzer.analyze(ANALYST_POSTING, {"coreSkills": ["SQL"]})
        report = render_report(result.to_dict())

        assert "FIT SCORE: 48% (Moderate Match)" in report
        assert "REQUIRED CORE SKILLS (2)" in report
        assert "POS tagger unavailable" in report


class TestInputValidation:
    """Test that bad input yields error results instead of exceptions."""

    @pytest.mark.integration
    @pytest.mark.parametrize("text", ["", "   \n ", None, 42])
    def test_bad_text(self, analyzer, text):
        """Test empty, missing and non-string postings."""
        result = analyzer.analyze(text, {"coreSkills": ["SQL"]})

        assert not result.success
        assert result.overall_score == 0.0
        assert result.error.startswith("Job description")
        assert result.fit_score.error == result.error

    @pytest.mark.integration
    @pytest.mark.parametrize("profile", [None, {}, {"coreSkills": []}, ["SQL"]])
    def test_bad_profile(self, analyzer, profile):
        """Test missing, empty and malformed profiles."""
        result = analyzer.analyze(ANALYST_POSTING, profile)

        assert not result.success
        assert result.overall_score == 0.0
        assert result.error.startswith("User profile")
        assert result.buckets.total == 0


class TestCachingAndBatches:
    """Test the cache and multi-posting entry points."""

    @pytest.mark.integration
    def test_repeat_analysis_hits_cache(self, analyzer):
        """Test that the second analysis of the same text comes from the cache."""
        first = analyzer.analyze(ANALYST_POSTING, {"coreSkills": ["SQL"]})
        second = analyzer.analyze(ANALYST_POSTING, {"coreSkills": ["SQL", "Python", "R"]})

        assert not first.metadata["cached"]
        assert second.metadata["cached"]
        assert second.fit_score.overall_score == pytest.approx(1.0)
        assert analyzer.cache.stats()["hits"] == 1

    @pytest.mark.integration
    def test_requirements_only(self, analyzer):
        """Test extraction without a profile."""
        result = analyzer.analyze_requirements(ANALYST_POSTING, job_info={"job_id": "j-1", "company": "Acme"})

        assert result.success
        assert result.fit_score is None
        assert result.metadata["job_id"] == "j-1"
        assert result.metadata["company"] == "Acme"

    @pytest.mark.integration
    def test_batch(self, analyzer):
        """Test that batch results keep order and isolate failures."""
        results = analyzer.analyze_batch(
            [
                {"job_id": "a", "text": ANALYST_POSTING},
                {"job_id": "b", "text": ""},
                {"job_id": "c", "text": "Requirements\n- Salesforce\n"},
            ],
            {"coreSkills": ["SQL"], "tools": ["Salesforce"]},
        )

        assert [r.metadata["job_id"] for r in results] == ["a", "b", "c"]
        assert [r.success for r in results] == [True, False, True]
        assert results[2].buckets.required_tools[0].item_type == ItemType.TOOL
