"""
Scoring data structures.

UserProfile is supplied by the host per analysis; everything else is produced
by FitScoreCalculator and carries enough detail to explain the score.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _string_list(value: Any) -> Tuple[str, ...]:
    """Keep non-empty strings from a list-like value; anything else yields ()."""
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    return tuple(v.strip() for v in value if isinstance(v, str) and v.strip())


@dataclass(frozen=True)
class UserProfile:
    """
    A candidate's declared inventory.

    Attributes:
        core_skills: Competencies (e.g., "SQL", "Lifecycle Marketing")
        tools: Named products (e.g., "Salesforce", "Tableau")
    """

    core_skills: Tuple[str, ...] = ()
    tools: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserProfile":
        """
        Build a profile from a loosely-typed dict.

        Accepts "coreSkills" or "core_skills". Missing keys, non-list values
        and non-string entries are ignored.
        """
        if not isinstance(data, dict):
            return cls()
        core = data.get("core_skills", data.get("coreSkills"))
        return cls(core_skills=_string_list(core), tools=_string_list(data.get("tools")))

    @property
    def is_empty(self) -> bool:
        return not (self.core_skills or self.tools)

    @property
    def size(self) -> int:
        return len(self.core_skills) + len(self.tools)

    def to_dict(self) -> Dict[str, Any]:
        return {"core_skills": list(self.core_skills), "tools": list(self.tools)}


@dataclass(frozen=True)
class CanonicalProfile:
    """UserProfile with every entry resolved to a canonical key."""

    core_skill_keys: frozenset = frozenset()
    tool_keys: frozenset = frozenset()
    source: UserProfile = field(default_factory=UserProfile)


@dataclass(frozen=True)
class BucketItem:
    """One job requirement as scored against the profile."""

    name: str
    canonical: str
    requirement_level: str
    multiplier: float
    matched: bool
    language_signal: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "canonical": self.canonical,
            "requirement_level": self.requirement_level,
            "multiplier": self.multiplier,
            "matched": self.matched,
            "language_signal": self.language_signal,
        }


@dataclass
class BucketScore:
    """
    Score for one bucket (core skills or tools).

    score = (required_matched * Wr + desired_matched * Wd) / (required_total * Wr + desired_total * Wd),
    or 1.0 when the bucket has no requirements.
    """

    score: float = 1.0
    required_matched: int = 0
    required_total: int = 0
    desired_matched: int = 0
    desired_total: int = 0
    items: List[BucketItem] = field(default_factory=list)

    @property
    def matched(self) -> List[BucketItem]:
        return [i for i in self.items if i.matched]

    @property
    def required_missing(self) -> List[BucketItem]:
        return [i for i in self.items if not i.matched and i.requirement_level == "required"]

    @property
    def desired_missing(self) -> List[BucketItem]:
        return [i for i in self.items if not i.matched and i.requirement_level == "desired"]

    @property
    def total(self) -> int:
        return self.required_total + self.desired_total

    @property
    def matched_count(self) -> int:
        return self.required_matched + self.desired_matched

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 4),
            "required_matched": self.required_matched,
            "required_total": self.required_total,
            "desired_matched": self.desired_matched,
            "desired_total": self.desired_total,
            "matched": [i.name for i in self.matched],
            "required_missing": [i.name for i in self.required_missing],
            "desired_missing": [i.name for i in self.desired_missing],
        }


@dataclass(frozen=True)
class Penalty:
    """A deduction for a missing item, with its rationale."""

    item: str
    item_type: str
    requirement_level: str
    amount: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item,
            "type": self.item_type,
            "requirement_level": self.requirement_level,
            "penalty": self.amount,
            "reason": self.reason,
        }


@dataclass
class ValidationReport:
    """Non-fatal input problems found before scoring."""

    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "warnings": list(self.warnings), "errors": list(self.errors)}


@dataclass
class FitScoreResult:
    """
    Fit score with its full breakdown.

    Attributes:
        overall_score: clamp(raw_score + total_penalty, 0, 1)
        label: Fit band ("Strong Match", ...)
        core_skills: Core-skill bucket details
        tools: Tool bucket details
        raw_score: Weighted bucket scores before penalties
        total_penalty: Sum of penalties after the floor is applied
        penalty_capped: True when the floor limited the penalty
        penalties: Individual deductions
        weights: Weights and multipliers used
        recommendations: Advice derived from the breakdown
        warnings: Input validation warnings
        error: Set when scoring could not run (overall_score is 0)
    """

    overall_score: float = 0.0
    label: str = "Weak Match"
    core_skills: BucketScore = field(default_factory=BucketScore)
    tools: BucketScore = field(default_factory=BucketScore)
    raw_score: float = 0.0
    total_penalty: float = 0.0
    penalty_capped: bool = False
    penalties: List[Penalty] = field(default_factory=list)
    weights: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def percent(self) -> int:
        return int(round(self.overall_score * 100))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": round(self.overall_score, 4),
            "label": self.label,
            "breakdown": {
                "core_skills": self.core_skills.to_dict(),
                "tools": self.tools.to_dict(),
                "raw_score": round(self.raw_score, 4),
                "total_penalty": round(self.total_penalty, 4),
                "penalty_capped": self.penalty_capped,
            },
            "penalties": [p.to_dict() for p in self.penalties],
            "weights": dict(self.weights),
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
            "error": self.error,
        }
