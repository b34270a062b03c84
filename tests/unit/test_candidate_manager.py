"""Unit tests for the candidate review store."""

import pytest

from skillfit.contexts.classification.classification_data_structure import ClassifiedItem, InferredType, ItemType
from skillfit.contexts.review.candidate_manager import CandidateManager
from skillfit.contexts.review.exceptions import CandidateNotFoundError, ClearNotConfirmedError, InvalidFeedbackError
from skillfit.utils.event_logging import get_recent_events
from skillfit.utils.text_processing import to_canonical_key


def candidate(raw, confidence=0.35, inferred=InferredType.UNKNOWN, item_type=ItemType.CANDIDATE):
    return ClassifiedItem(
        raw=raw,
        canonical=to_canonical_key(raw),
        item_type=item_type,
        confidence=confidence,
        evidence="No clear classification - human review needed",
        rule="candidate_fallback",
        inferred_type=inferred,
        context=f"Experience with {raw}.",
    )


class TestStore:
    """Test storing and reading candidates."""

    @pytest.mark.unit
    def test_store_new_and_recurring(self, candidate_manager):
        """Test that a recurring candidate increments its occurrence count."""
        assert candidate_manager.store_candidates([candidate("Qwyzzlebot"), candidate("Acme.io", 0.5)]) == 2
        assert candidate_manager.store_candidates([candidate("Qwyzzlebot")]) == 0

        stored = candidate_manager.get_candidate("qwyzzlebot")
        assert stored.occurrences == 2
        assert stored.raw == "Qwyzzlebot"
        assert stored.context == "Experience with Qwyzzlebot."
        assert stored.needs_review
        assert candidate_manager.count() == 2

    @pytest.mark.unit
    def test_duplicates_within_one_batch_count_once(self, candidate_manager):
        """Test that one analysis mentioning a candidate twice counts one occurrence."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot"), candidate("qwyzzlebot")])
        assert candidate_manager.get_candidate("qwyzzlebot").occurrences == 1

    @pytest.mark.unit
    def test_non_candidates_ignored(self, candidate_manager):
        """Test that classified items of other types are not stored."""
        stored = candidate_manager.store_candidates([candidate("SQL", 0.95, item_type=ItemType.CORE_SKILL)])
        assert stored == 0
        assert candidate_manager.count() == 0

    @pytest.mark.unit
    def test_persists_across_instances(self, tmp_path, events_file):
        """Test that candidates survive reopening the database."""
        db_path = tmp_path / "nested" / "candidates.db"
        with CandidateManager(db_path=db_path, events_file=events_file) as manager:
            manager.store_candidates([candidate("Qwyzzlebot")])

        with CandidateManager(db_path=db_path, events_file=events_file) as manager:
            assert manager.get_candidate("qwyzzlebot").raw == "Qwyzzlebot"

    @pytest.mark.unit
    def test_missing_candidate(self, candidate_manager):
        """Test lookups and removals of unknown keys."""
        with pytest.raises(CandidateNotFoundError) as exc_info:
            candidate_manager.get_candidate("missing")
        assert "missing" in str(exc_info.value)

        with pytest.raises(CandidateNotFoundError):
            candidate_manager.remove_candidate("missing")


class TestFeedback:
    """Test reviewer feedback and promotion."""

    @pytest.mark.unit
    def test_accept(self, candidate_manager):
        """Test recording plain feedback."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        updated = candidate_manager.update_feedback("qwyzzlebot", "Accept", note="looks real")

        assert updated.feedback.action == "accept"
        assert updated.feedback.classified_as is None
        assert updated.feedback.note == "looks real"
        assert not updated.needs_review
        assert candidate_manager.extension_signature() == (0, 0)

    @pytest.mark.unit
    def test_classify_as_tool_promotes(self, candidate_manager):
        """Test that classify feedback writes the dictionary extension."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        updated = candidate_manager.update_feedback("qwyzzlebot", "classify", "tool")

        assert updated.feedback.classified_as == "TOOL"
        assert candidate_manager.extension_signature() == (1, 1)

        extension = candidate_manager.get_extension()
        assert [t.canonical for t in extension.tools] == ["qwyzzlebot"]
        assert extension.tools[0].name == "Qwyzzlebot"

    @pytest.mark.unit
    def test_classify_as_rejected_adds_noise(self, candidate_manager):
        """Test that REJECTED classification stores the phrase as noise."""
        candidate_manager.store_candidates([candidate("Synergy Stuff")])
        candidate_manager.update_feedback("synergy_stuff", "classify", "REJECTED")

        extension = candidate_manager.get_extension()
        assert extension.noise == ("Synergy Stuff",)
        assert candidate_manager.list_extensions()[0]["kind"] == "NOISE"

    @pytest.mark.unit
    def test_repeat_classification_promotes_once(self, candidate_manager):
        """Test that classifying twice does not duplicate the extension row."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", "TOOL")
        candidate_manager.update_feedback("qwyzzlebot", "classify", "TOOL")

        assert candidate_manager.extension_signature()[0] == 1

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "first,second,expected_kind",
        [
            ("CORE_SKILL", "TOOL", "TOOL"),
            ("CORE_SKILL", "REJECTED", "NOISE"),
            ("TOOL", "CORE_SKILL", "CORE_SKILL"),
        ],
    )
    def test_reclassification_replaces_promotion(self, candidate_manager, first, second, expected_kind):
        """Test that the latest classification is the only extension row for a key."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", first)
        before = candidate_manager.extension_signature()
        candidate_manager.update_feedback("qwyzzlebot", "classify", second)

        rows = candidate_manager.list_extensions()
        assert [(row["kind"], row["canonical"]) for row in rows] == [(expected_kind, "qwyzzlebot")]
        assert candidate_manager.extension_signature() != before

    @pytest.mark.unit
    def test_reclassification_to_noise_clears_skill(self, candidate_manager):
        """Test that REJECTED after CORE_SKILL leaves only the noise entry."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", "CORE_SKILL")
        candidate_manager.update_feedback("qwyzzlebot", "classify", "REJECTED")

        extension = candidate_manager.get_extension()
        assert extension.skills == ()
        assert extension.tools == ()
        assert extension.noise == ("Qwyzzlebot",)

    @pytest.mark.unit
    def test_invalid_feedback(self, candidate_manager):
        """Test unknown actions and classify without a valid target."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])

        with pytest.raises(InvalidFeedbackError) as exc_info:
            candidate_manager.update_feedback("qwyzzlebot", "promote")
        assert "Allowed: accept, reject, classify" in str(exc_info.value)

        with pytest.raises(InvalidFeedbackError):
            candidate_manager.update_feedback("qwyzzlebot", "classify")
        with pytest.raises(InvalidFeedbackError):
            candidate_manager.update_feedback("qwyzzlebot", "classify", "CANDIDATE")

        assert candidate_manager.get_candidate("qwyzzlebot").needs_review

    @pytest.mark.unit
    def test_feedback_on_missing_candidate(self, candidate_manager):
        """Test that feedback for an unknown key raises."""
        with pytest.raises(CandidateNotFoundError):
            candidate_manager.update_feedback("missing", "accept")


class TestRemoval:
    """Test removing and clearing candidates."""

    @pytest.mark.unit
    def test_remove(self, candidate_manager):
        """Test removing one candidate."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot"), candidate("Acme.io")])
        candidate_manager.remove_candidate("qwyzzlebot")

        assert [c.canonical for c in candidate_manager.get_candidates()] == [to_canonical_key("Acme.io")]

    @pytest.mark.unit
    def test_remove_drops_promotion(self, candidate_manager):
        """Test that removing a promoted candidate also removes it from the extension."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", "TOOL")
        candidate_manager.remove_candidate("qwyzzlebot")

        assert candidate_manager.list_extensions() == []
        assert candidate_manager.get_extension().is_empty

    @pytest.mark.unit
    def test_demote_after_clear(self, candidate_manager, events_file):
        """Test undoing a promotion whose candidate row was already cleared."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", "CORE_SKILL")
        candidate_manager.clear_candidates(confirmed=True)

        assert candidate_manager.demote("qwyzzlebot") == 1
        assert candidate_manager.demote("qwyzzlebot") == 0
        assert candidate_manager.get_extension().skills == ()
        assert len(get_recent_events(canonical="qwyzzlebot", event_type="demotion", events_file=events_file)) == 1

    @pytest.mark.unit
    def test_clear_requires_confirmation(self, candidate_manager):
        """Test that clearing without confirmation changes nothing."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot"), candidate("Acme.io")])

        with pytest.raises(ClearNotConfirmedError):
            candidate_manager.clear_candidates()
        assert candidate_manager.count() == 2

        assert candidate_manager.clear_candidates(confirmed=True) == 2
        assert candidate_manager.count() == 0

    @pytest.mark.unit
    def test_clear_keeps_extensions(self, candidate_manager):
        """Test that promotions survive a bulk clear."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", "CORE_SKILL")
        candidate_manager.clear_candidates(confirmed=True)

        assert [s.canonical for s in candidate_manager.get_extension().skills] == ["qwyzzlebot"]


class TestReviewViews:
    """Test grouped, ordered and exported views."""

    @pytest.fixture
    def populated(self, candidate_manager):
        candidate_manager.store_candidates(
            [
                candidate("Acme.io", 0.5, InferredType.TOOL),
                candidate("retention modeling", 0.35, InferredType.CORE_SKILL),
                candidate("XQZ", 0.4),
            ]
        )
        candidate_manager.store_candidates([candidate("XQZ", 0.4)])
        return candidate_manager

    @pytest.mark.unit
    def test_grouped(self, populated):
        """Test grouping by inferred type with review stats."""
        populated.update_feedback("xqz", "reject")
        grouped = populated.get_candidates_grouped()

        assert [c.raw for c in grouped["inferred_tools"]] == ["Acme.io"]
        assert [c.raw for c in grouped["inferred_skills"]] == ["retention modeling"]
        assert [c.raw for c in grouped["unknown"]] == ["XQZ"]
        assert grouped["stats"] == {"total": 3, "with_feedback": 1, "needs_review": 2}

    @pytest.mark.unit
    def test_by_confidence_skips_reviewed(self, populated):
        """Test that unreviewed candidates come back lowest confidence first."""
        assert [c.raw for c in populated.get_candidates_by_confidence()] == ["retention modeling", "XQZ", "Acme.io"]

        populated.update_feedback("xqz", "accept")
        assert [c.raw for c in populated.get_candidates_by_confidence(limit=1)] == ["retention modeling"]
        assert "XQZ" not in [c.raw for c in populated.get_candidates_by_confidence()]

    @pytest.mark.unit
    def test_by_frequency(self, populated):
        """Test ordering by occurrence count."""
        assert populated.get_candidates_by_frequency()[0].raw == "XQZ"

    @pytest.mark.unit
    def test_export_excludes_rejected(self, populated):
        """Test that rejected candidates are left out of exports by default."""
        populated.update_feedback("xqz", "reject")
        populated.update_feedback("retention_modeling", "classify", "CORE_SKILL")

        export = populated.export_candidates()
        assert export["version"] == "1.0"
        assert [c["raw"] for c in export["candidates"]] == ["Acme.io", "retention modeling"]
        assert export["stats"] == {"total": 2, "classified": 1, "rejected": 0, "pending": 1}

        full = populated.export_candidates(include_rejected=True)
        assert full["stats"]["rejected"] == 1


class TestEvents:
    """Test the review event log."""

    @pytest.mark.unit
    def test_feedback_and_promotion_events(self, candidate_manager, events_file):
        """Test that feedback, promotion and clear events are appended in order."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot")])
        candidate_manager.update_feedback("qwyzzlebot", "classify", "TOOL", note="vendor")
        candidate_manager.clear_candidates(confirmed=True)

        events = get_recent_events(10, events_file=events_file)
        assert [e["event_type"] for e in events] == ["feedback", "promotion", "clear"]
        assert events[0]["classified_as"] == "TOOL"
        assert events[0]["note"] == "vendor"
        assert events[1]["kind"] == "TOOL"
        assert events[2]["canonical"] == "*"
        assert all(e["source"] == "review" for e in events)

    @pytest.mark.unit
    def test_event_filters(self, candidate_manager, events_file):
        """Test filtering events by key and type."""
        candidate_manager.store_candidates([candidate("Qwyzzlebot"), candidate("Acme.io")])
        candidate_manager.update_feedback("qwyzzlebot", "accept")
        candidate_manager.remove_candidate(to_canonical_key("Acme.io"))

        assert len(get_recent_events(canonical="qwyzzlebot", events_file=events_file)) == 1
        assert [e["event_type"] for e in get_recent_events(event_type="removal", events_file=events_file)] == ["removal"]
        assert get_recent_events(1, events_file=events_file)[0]["event_type"] == "removal"

    @pytest.mark.unit
    def test_missing_log(self, tmp_path):
        """Test that a missing log reads as empty."""
        assert get_recent_events(events_file=tmp_path / "none.log") == []
