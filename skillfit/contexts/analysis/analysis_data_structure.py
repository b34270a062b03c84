"""
Analysis result data structures.

ExtractionOutcome is the cacheable, profile-independent part of an analysis.
AnalysisResult adds the fit score for one profile and is what hosts receive.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from skillfit.contexts.classification.classification_data_structure import ClassifiedItem, NormalizedBuckets
from skillfit.contexts.extraction.special_requirements import SpecialRequirements
from skillfit.contexts.scoring.scoring_data_structure import FitScoreResult


@dataclass(frozen=True)
class AnalysisQuality:
    """
    How much of the posting the pipeline could place.

    Attributes:
        total_extracted: Phrases after splitting
        soft_skills_rejected: Phrases rejected by the soft-skill rule
        rejected: All rejected phrases
        candidates: Unique phrases sent to review
        classified: Phrases classified as CORE_SKILL or TOOL
    """

    total_extracted: int = 0
    soft_skills_rejected: int = 0
    rejected: int = 0
    candidates: int = 0
    classified: int = 0

    @property
    def extraction_completeness(self) -> float:
        """classified / total_extracted (0 when nothing was extracted)."""
        return self.classified / self.total_extracted if self.total_extracted else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_extracted": self.total_extracted,
            "soft_skills_rejected": self.soft_skills_rejected,
            "rejected": self.rejected,
            "candidates": self.candidates,
            "classified": self.classified,
            "extraction_completeness": round(self.extraction_completeness, 4),
        }


@dataclass
class ExtractionOutcome:
    """
    Profile-independent pipeline output for one posting.

    Attributes:
        text_hash: Cache key (SHA-256 of the normalized text)
        buckets: Normalized requirement buckets and candidates
        rejected: Rejected items, kept for auditability
        special_requirements: Application logistics alerts
        quality: Extraction quality counters
        metadata: Section detection and fallback flags
    """

    text_hash: str
    buckets: NormalizedBuckets
    rejected: List[ClassifiedItem] = field(default_factory=list)
    special_requirements: SpecialRequirements = field(default_factory=SpecialRequirements)
    quality: AnalysisQuality = field(default_factory=AnalysisQuality)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AnalysisResult:
    """
    Result handed to hosts.

    Attributes:
        success: False when input validation failed
        error: Why the analysis failed (success=False only)
        buckets: Normalized requirement buckets (empty on failure)
        fit_score: Score against the supplied profile, None when no profile was given
        rejected: Rejected items with the rule that rejected them
        special_requirements: Application logistics alerts
        quality: Extraction quality counters
        metadata: Section detection and fallback flags, cache status, job info
    """

    success: bool = True
    error: Optional[str] = None
    buckets: NormalizedBuckets = field(default_factory=NormalizedBuckets)
    fit_score: Optional[FitScoreResult] = None
    rejected: List[ClassifiedItem] = field(default_factory=list)
    special_requirements: SpecialRequirements = field(default_factory=SpecialRequirements)
    quality: AnalysisQuality = field(default_factory=AnalysisQuality)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: str, metadata: Optional[Dict[str, Any]] = None) -> "AnalysisResult":
        """Typed error result with a zero score."""
        return cls(
            success=False,
            error=error,
            fit_score=FitScoreResult(overall_score=0.0, error=error),
            metadata=dict(metadata or {}),
        )

    @property
    def overall_score(self) -> float:
        return self.fit_score.overall_score if self.fit_score else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "buckets": self.buckets.to_dict(),
            "fit_score": self.fit_score.to_dict() if self.fit_score else None,
            "rejected": [r.to_dict() for r in self.rejected],
            "special_requirements": self.special_requirements.to_dict(),
            "quality": self.quality.to_dict(),
            "metadata": dict(self.metadata),
        }
