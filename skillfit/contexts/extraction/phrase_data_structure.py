"""
Extraction data structures.

One record per pipeline stage boundary: ExtractedPhrase leaves the extractor
and splitter, RequirementAssessment leaves the requirement detector.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

REQUIRED = "required"
DESIRED = "desired"

# Strategy tags
STRATEGY_BULLET = "bullet"
STRATEGY_INDICATOR = "indicator"
STRATEGY_TAXONOMY = "taxonomy"
STRATEGY_LIST = "list"
STRATEGY_NOUN_PHRASE = "noun_phrase"

STRATEGIES = (
    STRATEGY_BULLET,
    STRATEGY_INDICATOR,
    STRATEGY_TAXONOMY,
    STRATEGY_LIST,
    STRATEGY_NOUN_PHRASE,
)


@dataclass(frozen=True)
class ExtractedPhrase:
    """
    A phrase pulled out of posting text.

    Attributes:
        text: Cleaned phrase text
        strategy: Strategy tag that produced it
        start: Offset of the first occurrence in the normalized text
        end: End offset of that occurrence
        context: Surrounding text of the first occurrence
        parent: Pre-split phrase this fragment came from (None if unsplit)
    """

    text: str
    strategy: str
    start: int = 0
    end: int = 0
    context: str = ""
    parent: Optional[str] = None

    @property
    def key(self) -> str:
        """Case-insensitive dedup key."""
        return self.text.lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "strategy": self.strategy,
            "start": self.start,
            "end": self.end,
            "context": self.context,
            "parent": self.parent,
        }


@dataclass(frozen=True)
class SectionSpan:
    """
    A recognized header and the text it governs.

    Attributes:
        kind: "required", "desired" or "boundary" (any other recognized header)
        header: Header text as written
        start: Offset of the header line
        content_start: Offset where the section body begins (after the header)
        end: Offset of the next recognized header, or end of text
    """

    kind: str
    header: str
    start: int
    content_start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.content_start <= offset < self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "header": self.header,
            "start": self.start,
            "content_start": self.content_start,
            "end": self.end,
        }


@dataclass(frozen=True)
class RequirementAssessment:
    """
    Requirement level for one phrase.

    Attributes:
        phrase: The assessed phrase
        level: "required" or "desired"
        multiplier: Weight multiplier for this level and language intensity
        evidence: Why this level was chosen
        language_signal: Local intensity language found ("expert required", "3 years required", ...)
        section: Header of the section the phrase sits in, if any
    """

    phrase: ExtractedPhrase
    level: str
    multiplier: float
    evidence: str
    language_signal: Optional[str] = None
    section: Optional[str] = None


@dataclass
class RequirementResult:
    """
    Output of RequirementDetector.detect().

    Attributes:
        assessments: One assessment per input phrase, in input order
        has_required_section: A required-style header was found
        has_desired_section: A desired-style header was found
        default_to_required: No required/desired headers, every phrase defaulted to required
        sections: All recognized sections, in text order
    """

    assessments: List[RequirementAssessment] = field(default_factory=list)
    has_required_section: bool = False
    has_desired_section: bool = False
    default_to_required: bool = False
    sections: List[SectionSpan] = field(default_factory=list)

    @property
    def required(self) -> List[RequirementAssessment]:
        return [a for a in self.assessments if a.level == REQUIRED]

    @property
    def desired(self) -> List[RequirementAssessment]:
        return [a for a in self.assessments if a.level == DESIRED]

    def for_text(self, text: str) -> Optional[RequirementAssessment]:
        """Assessment for a phrase text (case-insensitive), or None."""
        key = text.lower()
        for assessment in self.assessments:
            if assessment.phrase.key == key:
                return assessment
        return None

    def metadata(self) -> Dict[str, Any]:
        return {
            "has_required_section": self.has_required_section,
            "has_desired_section": self.has_desired_section,
            "default_to_required": self.default_to_required,
            "sections": [s.to_dict() for s in self.sections],
        }


@dataclass
class PhraseExtractionResult:
    """
    Output of PhraseExtractor.extract().

    Attributes:
        phrases: Deduplicated phrases, first strategy to produce a phrase wins
        strategy_counts: Accepted phrases per strategy
        dropped: Phrases rejected by the length/word bounds
        noun_phrase_fallback: True if noun phrases came from regex patterns instead of the tagger
    """

    phrases: List[ExtractedPhrase] = field(default_factory=list)
    strategy_counts: Dict[str, int] = field(default_factory=dict)
    dropped: int = 0
    noun_phrase_fallback: bool = False

    @property
    def texts(self) -> List[str]:
        return [p.text for p in self.phrases]
