"""
Candidate review data structures.

A Candidate is a phrase the classifier could not confidently place. It stays
in the store until a reviewer gives feedback or removes it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

ACTION_ACCEPT = "accept"
ACTION_REJECT = "reject"
ACTION_CLASSIFY = "classify"
FEEDBACK_ACTIONS = (ACTION_ACCEPT, ACTION_REJECT, ACTION_CLASSIFY)

# Targets for "classify" feedback; REJECTED adds the phrase to the user noise list
CLASSIFY_TARGETS = ("CORE_SKILL", "TOOL", "REJECTED")

KIND_NOISE = "NOISE"


@dataclass(frozen=True)
class CandidateFeedback:
    """
    Reviewer decision on a candidate.

    Attributes:
        action: "accept", "reject" or "classify"
        classified_as: CORE_SKILL, TOOL or REJECTED (classify only)
        note: Free-text reviewer note
        at: ISO timestamp of the decision
    """

    action: str
    classified_as: Optional[str] = None
    note: Optional[str] = None
    at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action, "classified_as": self.classified_as, "note": self.note, "at": self.at}


@dataclass(frozen=True)
class Candidate:
    """
    A stored review candidate.

    Attributes:
        raw: Phrase as first seen
        canonical: Mechanical canonical key (unique in the store)
        inferred_type: TOOL, CORE_SKILL or UNKNOWN
        confidence: Classifier confidence
        evidence: Why it became a candidate
        context: Posting text around the first sighting
        occurrences: Number of postings it appeared in
        first_seen: Timestamp of the first sighting
        last_seen: Timestamp of the latest sighting
        feedback: Reviewer decision, if any
    """

    raw: str
    canonical: str
    inferred_type: str = "UNKNOWN"
    confidence: float = 0.35
    evidence: str = ""
    context: str = ""
    occurrences: int = 1
    first_seen: Optional[str] = None
    last_seen: Optional[str] = None
    feedback: Optional[CandidateFeedback] = None

    @property
    def needs_review(self) -> bool:
        return self.feedback is None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Candidate":
        feedback = None
        if row.get("feedback_action"):
            feedback = CandidateFeedback(
                action=row["feedback_action"],
                classified_as=row.get("feedback_classified_as"),
                note=row.get("feedback_note"),
                at=row.get("feedback_at"),
            )
        return cls(
            raw=row["raw"],
            canonical=row["canonical"],
            inferred_type=row.get("inferred_type") or "UNKNOWN",
            confidence=float(row.get("confidence") or 0.0),
            evidence=row.get("evidence") or "",
            context=row.get("context") or "",
            occurrences=int(row.get("occurrences") or 1),
            first_seen=row.get("first_seen"),
            last_seen=row.get("last_seen"),
            feedback=feedback,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw": self.raw,
            "canonical": self.canonical,
            "inferred_type": self.inferred_type,
            "confidence": self.confidence,
            "evidence": self.evidence,
            "occurrences": self.occurrences,
            "first_seen": self.first_seen,
            "last_seen": self.last_seen,
            "feedback": self.feedback.to_dict() if self.feedback else None,
        }
