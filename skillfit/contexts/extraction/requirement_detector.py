"""
Required vs desired detection.

Labels each extracted phrase "required" or "desired" and assigns a weight
multiplier:

1. Section headers ("Requirements", "Must have", "Preferred", "Nice to have",
   ...) split the text into sections; a section runs to the next recognized
   header or the end of the text.
2. If no required/desired header exists anywhere, every phrase is required
   with the required multiplier and default_to_required is set.
3. Otherwise each occurrence of a phrase takes its section's level, then the
   context window around it (clipped to that section) is scanned for
   intensity language, which overrides section membership:
   expert/advanced > must have/required > "N+ years" > preferred/nice to have.
   A phrase is required if any of its occurrences is.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from skillfit.config import RequirementSettings, ScoringSettings
from skillfit.contexts.extraction.extraction_patterns import REQUIREMENT_LANGUAGE, trim_at_clause_break
from skillfit.contexts.extraction.logger import log_sections_detected
from skillfit.contexts.extraction.phrase_data_structure import (
    DESIRED,
    REQUIRED,
    ExtractedPhrase,
    RequirementAssessment,
    RequirementResult,
    SectionSpan,
)
from skillfit.contexts.extraction.section_patterns import match_header_line
from skillfit.utils.text_processing import find_occurrences

BOUNDARY = "boundary"


@dataclass(frozen=True)
class LanguageSignals:
    """Intensity language found in a context window."""

    expert_required: bool = False
    must_have: bool = False
    years_required: bool = False
    years_count: int = 0
    preferred: bool = False

    @property
    def any(self) -> bool:
        return self.expert_required or self.must_have or self.years_required or self.preferred


def detect_language_signals(context: str) -> LanguageSignals:
    """
    Scan a context window for intensity language.

    Example:
        >>> detect_language_signals("5+ years of experience with").years_count
        5
    """
    years = REQUIREMENT_LANGUAGE.YEARS.search(context)
    return LanguageSignals(
        expert_required=bool(REQUIREMENT_LANGUAGE.EXPERT.search(context)),
        must_have=bool(REQUIREMENT_LANGUAGE.MUST_HAVE.search(context)),
        years_required=years is not None,
        years_count=int(years.group(1)) if years else 0,
        preferred=bool(REQUIREMENT_LANGUAGE.PREFERRED.search(context)),
    )


def get_penalty(
    level: str,
    item_type: str,
    language_signal: Optional[str] = None,
    settings: Optional[ScoringSettings] = None,
) -> float:
    """
    Penalty for a missing item.

    Args:
        level: "required" or "desired"
        item_type: "CORE_SKILL" or "TOOL"
        language_signal: Local intensity language recorded for the item
        settings: Penalty values (defaults to ScoringSettings())

    Returns:
        Penalty (zero or negative)
    """
    settings = settings or ScoringSettings()

    if level == REQUIRED:
        if item_type == "CORE_SKILL":
            return settings.missing_required_skill_penalty
        if item_type == "TOOL":
            if language_signal and "expert" in language_signal:
                return settings.missing_expert_tool_penalty
            return settings.missing_required_tool_penalty

    if level == DESIRED and item_type == "TOOL":
        return settings.missing_desired_tool_penalty

    return 0.0


class RequirementDetector:
    """Section and language based requirement-level detection."""

    def __init__(self, settings: Optional[RequirementSettings] = None):
        self.settings = settings or RequirementSettings()

    # =========================================================================
    # SECTIONS
    # =========================================================================

    def parse_sections(self, text: str) -> List[SectionSpan]:
        """
        Find every recognized header line and the span it governs.

        Args:
            text: Normalized posting text

        Returns:
            Sections in text order; each ends where the next header starts
        """
        headers: List[Tuple[str, str, int, int]] = []
        offset = 0
        for line in text.split("\n"):
            match = match_header_line(line)
            if match:
                kind, name, body_offset = match
                headers.append((kind, name, offset, offset + body_offset))
            offset += len(line) + 1

        sections = []
        for index, (kind, name, start, content_start) in enumerate(headers):
            end = headers[index + 1][2] if index + 1 < len(headers) else len(text)
            sections.append(SectionSpan(kind=kind, header=name, start=start, content_start=content_start, end=end))
        return sections

    @staticmethod
    def _section_at(sections: Sequence[SectionSpan], offset: int) -> Optional[SectionSpan]:
        for section in sections:
            if section.contains(offset):
                return section
        return None

    # =========================================================================
    # DETECTION
    # =========================================================================

    def detect(self, text: str, phrases: Sequence[ExtractedPhrase]) -> RequirementResult:
        """
        Assess every phrase.

        Args:
            text: Normalized posting text the phrases came from
            phrases: Extracted (and split) phrases

        Returns:
            RequirementResult with one assessment per phrase, in input order
        """
        sections = self.parse_sections(text or "")
        result = RequirementResult(
            has_required_section=any(s.kind == REQUIRED for s in sections),
            has_desired_section=any(s.kind == DESIRED for s in sections),
            sections=sections,
        )

        if not result.has_required_section and not result.has_desired_section:
            result.default_to_required = True
            result.assessments = [
                RequirementAssessment(
                    phrase=phrase,
                    level=REQUIRED,
                    multiplier=self.settings.required_multiplier,
                    evidence="No explicit sections - defaulted to required",
                )
                for phrase in phrases
            ]
            log_sections_detected(sections, default_to_required=True)
            return result

        log_sections_detected(sections, default_to_required=False)
        result.assessments = [self.assess_phrase(text, phrase, sections) for phrase in phrases]
        return result

    def assess_phrase(
        self, text: str, phrase: ExtractedPhrase, sections: Sequence[SectionSpan]
    ) -> RequirementAssessment:
        """
        Assess one phrase across all of its occurrences.

        Required wins if any occurrence is required; among required
        occurrences the highest multiplier wins.
        """
        occurrences = find_occurrences(text, phrase.text) or [(phrase.start, phrase.end)]
        assessments = [self._assess_occurrence(text, phrase, start, end, sections) for start, end in occurrences]

        required = [a for a in assessments if a.level == REQUIRED]
        if required:
            return max(required, key=lambda a: a.multiplier)
        return assessments[0]

    def _assess_occurrence(
        self, text: str, phrase: ExtractedPhrase, start: int, end: int, sections: Sequence[SectionSpan]
    ) -> RequirementAssessment:
        section = self._section_at(sections, start)

        if section is not None and section.kind == DESIRED:
            level, evidence = DESIRED, f"Found in desired section '{section.header}'"
        elif section is not None and section.kind == REQUIRED:
            level, evidence = REQUIRED, f"Found in required section '{section.header}'"
        else:
            level, evidence = REQUIRED, "Outside requirement sections - defaulted to required"
        multiplier = self.get_multiplier(level)
        language_signal = None

        # Window is clipped to the governing section, or to the preamble before the first header
        if section is not None:
            lower, upper = section.content_start, section.end
        else:
            lower, upper = 0, sections[0].start if sections and start < sections[0].start else len(text)
        radius = self.settings.context_radius
        before = text[max(lower, start - radius) : start]
        after = text[end : min(upper, end + radius)]
        signals = detect_language_signals(f"{before} {after}")

        if signals.expert_required:
            level, language_signal = REQUIRED, "expert required"
            evidence = "Expert level explicitly required"
        elif signals.must_have:
            level, language_signal = REQUIRED, "required"
            evidence = "Must have language detected"
        elif signals.years_required:
            level, language_signal = REQUIRED, f"{signals.years_count} years required"
            evidence = f"{signals.years_count}+ years required"
        elif signals.preferred:
            level, language_signal = DESIRED, "preferred"
            evidence = "Preferred/nice-to-have language detected"

        if language_signal is not None:
            multiplier = self.get_multiplier(level, language_signal)

        return RequirementAssessment(
            phrase=phrase,
            level=level,
            multiplier=multiplier,
            evidence=evidence,
            language_signal=language_signal,
            section=section.header if section is not None else None,
        )

    def detect_batch(self, jobs: Iterable[Tuple[str, Sequence[ExtractedPhrase]]]) -> List[RequirementResult]:
        """Run detect() over (text, phrases) pairs."""
        return [self.detect(text, phrases) for text, phrases in jobs]

    # =========================================================================
    # MULTIPLIERS
    # =========================================================================

    def analyze_section(self, section_text: str) -> Dict[str, float]:
        """
        Multipliers for phrases stated with explicit intensity in a section.

        Example:
            >>> RequirementDetector().analyze_section("Expert in SQL. Must have Looker.")
            {'SQL': 3.0, 'Looker': 2.0}
        """
        multipliers: Dict[str, float] = {}
        if not section_text:
            return multipliers

        for pattern, signal in REQUIREMENT_LANGUAGE.SECTION_INTENSITY:
            for match in pattern.finditer(section_text):
                phrase = trim_at_clause_break(match.group(1)).strip()
                if phrase:
                    multipliers[phrase] = self.get_multiplier(REQUIRED, signal)
        return multipliers

    def get_multiplier(self, level: str, language_signal: Optional[str] = None) -> float:
        """
        Multiplier for a requirement level and optional intensity signal.

        Expert language gets the maximum multiplier, "advanced" the next step.
        """
        if level != REQUIRED:
            return self.settings.desired_multiplier
        if language_signal and "expert" in language_signal:
            return max(self.settings.expert_multiplier, self.settings.required_multiplier)
        if language_signal and "advanced" in language_signal:
            return max(self.settings.advanced_multiplier, self.settings.required_multiplier)
        return self.settings.required_multiplier
