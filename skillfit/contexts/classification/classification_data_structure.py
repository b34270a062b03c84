"""
Classification data structures.

Stage records for the classification pipeline:

    ExtractedPhrase -> ClassifiedItem (Classifier) -> NormalizedItem (SkillNormalizer)

Each record carries non-optional fields for everything its stage guarantees.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from skillfit.config import ClassificationSettings, ExtractionSettings
from skillfit.contexts.extraction.phrase_data_structure import REQUIRED, RequirementAssessment
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore


class ItemType(str, Enum):
    """Classifier output type."""

    CORE_SKILL = "CORE_SKILL"
    TOOL = "TOOL"
    CANDIDATE = "CANDIDATE"
    REJECTED = "REJECTED"


class InferredType(str, Enum):
    """Best guess for a CANDIDATE, shown to the reviewer."""

    CORE_SKILL = "CORE_SKILL"
    TOOL = "TOOL"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class RuleContext:
    """
    Everything a classification rule may consult.

    Attributes:
        store: Taxonomy, tools dictionary and vocabulary
        settings: Per-rule confidences
        bounds: Phrase length and word bounds for the candidate fallback
        context: Text surrounding the phrase in the posting
    """

    store: TaxonomyStore
    settings: ClassificationSettings = field(default_factory=ClassificationSettings)
    bounds: ExtractionSettings = field(default_factory=ExtractionSettings)
    context: str = ""


@dataclass(frozen=True)
class RuleMatch:
    """
    A rule's verdict on a phrase.

    Attributes:
        item_type: Classification
        confidence: Rule confidence in [0, 1]
        evidence: Human-readable reason
        rule: Name of the rule that fired
        entry: Matched TaxonomyEntry or ToolEntry, if any
        canonical_hint: Term the normalizer should canonicalize instead of the raw phrase
        inferred_type: Reviewer hint for CANDIDATE items
    """

    item_type: ItemType
    confidence: float
    evidence: str
    rule: str
    entry: Any = None
    canonical_hint: Optional[str] = None
    inferred_type: Optional[InferredType] = None


@dataclass(frozen=True)
class ClassifiedItem:
    """
    A phrase after classification.

    Attributes:
        raw: Phrase as extracted
        canonical: Provisional canonical key (matched entry's key or mechanical key)
        item_type: CORE_SKILL, TOOL, CANDIDATE or REJECTED
        confidence: Classifier confidence in [0, 1]
        evidence: Why the rule fired
        rule: Name of the rule that fired
        requirement_level: "required" or "desired"
        multiplier: Requirement weight multiplier
        language_signal: Intensity language near the phrase, if any
        requirement_evidence: Why the requirement level was chosen
        entry: Matched TaxonomyEntry or ToolEntry, if any
        canonical_hint: Term to canonicalize instead of raw (deny-list term)
        inferred_type: Reviewer hint for CANDIDATE items
        context: Text surrounding the phrase
    """

    raw: str
    canonical: str
    item_type: ItemType
    confidence: float
    evidence: str
    rule: str
    requirement_level: str = REQUIRED
    multiplier: float = 2.0
    language_signal: Optional[str] = None
    requirement_evidence: str = ""
    entry: Any = None
    canonical_hint: Optional[str] = None
    inferred_type: Optional[InferredType] = None
    context: str = ""

    def with_requirement(self, assessment: RequirementAssessment) -> "ClassifiedItem":
        """Copy with the requirement level from a RequirementDetector assessment."""
        return replace(
            self,
            requirement_level=assessment.level,
            multiplier=assessment.multiplier,
            language_signal=assessment.language_signal,
            requirement_evidence=assessment.evidence,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw": self.raw,
            "canonical": self.canonical,
            "type": self.item_type.value,
            "confidence": round(self.confidence, 4),
            "evidence": self.evidence,
            "rule": self.rule,
            "requirement_level": self.requirement_level,
            "multiplier": self.multiplier,
            "language_signal": self.language_signal,
            "inferred_type": self.inferred_type.value if self.inferred_type else None,
        }


@dataclass(frozen=True)
class NormalizedItem:
    """
    A deduplicated, canonicalized item in one requirement bucket.

    Attributes:
        name: Display name (matched entry name, or the raw phrase)
        canonical: Final canonical key
        item_type: CORE_SKILL or TOOL
        confidence: Final confidence (classifier confidence and match quality combined)
        match_method: How the canonical key was resolved
            ("canonical_rule", "synonym", "exact", "fuzzy", "mechanical")
        match_quality: Quality of the canonical resolution in [0, 1]
        category: Taxonomy category or tool type
        evidence: Classifier evidence
        rule: Rule that classified the item
        raw: Phrase as extracted
        requirement_level: "required" or "desired"
        multiplier: Requirement weight multiplier
        language_signal: Intensity language near the phrase, if any
    """

    name: str
    canonical: str
    item_type: ItemType
    confidence: float
    match_method: str
    match_quality: float
    category: str
    evidence: str
    rule: str
    raw: str
    requirement_level: str = REQUIRED
    multiplier: float = 2.0
    language_signal: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "canonical": self.canonical,
            "type": self.item_type.value,
            "confidence": round(self.confidence, 4),
            "match_method": self.match_method,
            "category": self.category,
            "evidence": self.evidence,
            "rule": self.rule,
            "raw": self.raw,
            "requirement_level": self.requirement_level,
            "multiplier": self.multiplier,
            "language_signal": self.language_signal,
        }


@dataclass
class ClassificationBatch:
    """Classified items grouped by type (see Classifier.classify_batch)."""

    core_skills: List[ClassifiedItem] = field(default_factory=list)
    tools: List[ClassifiedItem] = field(default_factory=list)
    candidates: List[ClassifiedItem] = field(default_factory=list)
    rejected: List[ClassifiedItem] = field(default_factory=list)

    def add(self, item: ClassifiedItem) -> None:
        bucket = {
            ItemType.CORE_SKILL: self.core_skills,
            ItemType.TOOL: self.tools,
            ItemType.CANDIDATE: self.candidates,
            ItemType.REJECTED: self.rejected,
        }[item.item_type]
        bucket.append(item)

    @property
    def total(self) -> int:
        return len(self.core_skills) + len(self.tools) + len(self.candidates) + len(self.rejected)

    def counts(self) -> Dict[str, int]:
        return {
            "core_skills": len(self.core_skills),
            "tools": len(self.tools),
            "candidates": len(self.candidates),
            "rejected": len(self.rejected),
        }


@dataclass
class NormalizedBuckets:
    """
    The four requirement buckets plus review candidates.

    Invariants: canonical keys are unique within a bucket, and no key in a
    required bucket appears in the matching desired bucket.
    """

    required_core_skills: List[NormalizedItem] = field(default_factory=list)
    desired_core_skills: List[NormalizedItem] = field(default_factory=list)
    required_tools: List[NormalizedItem] = field(default_factory=list)
    desired_tools: List[NormalizedItem] = field(default_factory=list)
    candidates: List[ClassifiedItem] = field(default_factory=list)
    dropped_low_confidence: int = 0

    @property
    def all_items(self) -> List[NormalizedItem]:
        return self.required_core_skills + self.desired_core_skills + self.required_tools + self.desired_tools

    @property
    def total(self) -> int:
        return len(self.all_items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "required_core_skills": [i.to_dict() for i in self.required_core_skills],
            "desired_core_skills": [i.to_dict() for i in self.desired_core_skills],
            "required_tools": [i.to_dict() for i in self.required_tools],
            "desired_tools": [i.to_dict() for i in self.desired_tools],
            "candidates": [c.to_dict() for c in self.candidates],
        }
