"""
Classification rules.

Each rule is a small, independently testable predicate: apply(text, context)
returns a RuleMatch when the rule claims the phrase, otherwise None. The
Classifier evaluates DEFAULT_RULES in order and the first match wins.

Rule order:
    1. SoftSkillRule          soft-skill or filler pattern      -> REJECTED
    2. ForcedCoreSkillRule    always-a-skill allow-list         -> CORE_SKILL
    3. DenyListRule           vendor/product names              -> TOOL
    4. TaxonomyFuzzyRule      skill taxonomy match              -> CORE_SKILL
    5. ToolsDictionaryRule    tools dictionary match            -> TOOL
    6. CandidateFallbackRule  survives noise and length filters -> CANDIDATE
    7. RejectRule             everything else                   -> REJECTED
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from skillfit.contexts.classification.classification_data_structure import (
    InferredType,
    ItemType,
    RuleContext,
    RuleMatch,
)
from skillfit.contexts.extraction.extraction_patterns import DOMAIN_HEAD_NOUNS
from skillfit.contexts.extraction.skill_splitter import SINGLE_CHAR_SKILLS
from skillfit.contexts.taxonomy.fuzzy_matcher import FuzzyMatch, FuzzyMatcher
from skillfit.utils.text_processing import word_count

# =============================================================================
# CANDIDATE SHAPE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class CandidateShapePatterns:
    """Surface cues used to guess what an unrecognized phrase is."""

    # Dots, dashes, slashes or digits suggest a product name ("Acme.io", "Tool360")
    PRODUCT_LIKE = re.compile(r"[._\-/\\]|\d")

    # Internal capital ("HubSpot", "LiveRamp")
    CAMEL_CASE = re.compile(r"^[A-Z][a-z]+[A-Z][A-Za-z]*$")

    # Phrase ending in a competency head noun ("retention modeling", "pricing strategy")
    SKILL_HEAD = re.compile(r"\b(?:" + "|".join(DOMAIN_HEAD_NOUNS) + r")$", re.IGNORECASE)

    # Gerund-led activity ("forecasting revenue", "building dashboards")
    GERUND_LEAD = re.compile(r"^[a-z]{3,}ing\s+\w+", re.IGNORECASE)


CANDIDATE_SHAPES = CandidateShapePatterns()

SHORT_ACRONYM_LENGTH = 4


# =============================================================================
# RULES
# =============================================================================


class ClassificationRule:
    """Base class: a named predicate over (text, context)."""

    name = "rule"

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        raise NotImplementedError

    def _match(self, item_type: ItemType, confidence: float, evidence: str, **kwargs) -> RuleMatch:
        return RuleMatch(
            item_type=item_type,
            confidence=max(0.0, min(1.0, confidence)),
            evidence=evidence,
            rule=self.name,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SoftSkillRule(ClassificationRule):
    """Rejects soft skills, personality traits and generic "X skills" phrases."""

    name = "soft_skill"

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        pattern = context.store.soft_skill_match(text)
        if pattern is None:
            return None
        return self._match(
            ItemType.REJECTED,
            context.settings.soft_skill_confidence,
            f"Soft skill or filler pattern: {pattern}",
        )


class ForcedCoreSkillRule(ClassificationRule):
    """Languages and named methodologies are always core skills, even if a vendor shares the name."""

    name = "forced_core_skill"

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        store = context.store
        if not store.is_forced_core_skill(text):
            return None
        expanded = store.expand_alias(text)
        entry = store.find_skill(text) or (store.find_skill(expanded) if expanded else None)
        evidence = "Forced core skill"
        if expanded and entry is None:
            evidence += f" (abbreviation of '{expanded}')"
        return self._match(
            ItemType.CORE_SKILL,
            context.settings.forced_core_confidence,
            evidence,
            entry=entry,
        )


class DenyListRule(ClassificationRule):
    """Vendor and product names are tools, matched exactly or as a bounded word inside the phrase."""

    name = "deny_list"

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        store = context.store
        hit = store.deny_list_match(text)
        if hit is None:
            return None
        term, is_exact = hit

        expanded = store.expand_alias(term)
        entry = store.find_tool(term) or (store.find_tool(expanded) if expanded else None)

        if is_exact:
            return self._match(
                ItemType.TOOL,
                context.settings.deny_exact_confidence,
                f"Tools deny-list exact match: {term}",
                entry=entry,
            )
        return self._match(
            ItemType.TOOL,
            context.settings.deny_boundary_confidence,
            f"Tools deny-list term '{term}' in phrase",
            entry=entry,
            canonical_hint=term,
        )


class _MatcherRule(ClassificationRule):
    """Shared lookup for rules backed by a FuzzyMatcher."""

    item_type = ItemType.CORE_SKILL
    label = "index"

    def _matcher(self, context: RuleContext) -> FuzzyMatcher:
        raise NotImplementedError

    def _exact_confidence(self, context: RuleContext) -> float:
        raise NotImplementedError

    def _lookup(self, text: str, context: RuleContext) -> Optional[FuzzyMatch]:
        matcher = self._matcher(context)
        match = matcher.best_match(text)
        if match is not None and match.is_exact:
            return match

        expanded = context.store.expand_alias(text)
        if expanded:
            expanded_match = matcher.best_match(expanded)
            if expanded_match is not None and (match is None or expanded_match.score < match.score):
                return expanded_match
        return match

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        match = self._lookup(text, context)
        if match is None:
            return None

        if match.is_exact:
            return self._match(
                self.item_type,
                self._exact_confidence(context),
                f"Exact {self.label} match: {match.entry.name}",
                entry=match.entry,
            )
        return self._match(
            self.item_type,
            match.confidence,
            f"{match.match_type.capitalize()} {self.label} match: {match.entry.name} (distance {match.score:.2f})",
            entry=match.entry,
        )


class TaxonomyFuzzyRule(_MatcherRule):
    """Skill concepts from the taxonomy; confidence falls with edit distance."""

    name = "taxonomy_fuzzy"
    item_type = ItemType.CORE_SKILL
    label = "taxonomy"

    def _matcher(self, context: RuleContext) -> FuzzyMatcher:
        return context.store.skill_matcher

    def _exact_confidence(self, context: RuleContext) -> float:
        return context.settings.taxonomy_exact_confidence


class ToolsDictionaryRule(_MatcherRule):
    """Named products from the external tools dictionary (separate index from skills)."""

    name = "tools_dictionary"
    item_type = ItemType.TOOL
    label = "tools dictionary"

    def _matcher(self, context: RuleContext) -> FuzzyMatcher:
        return context.store.tool_matcher

    def _exact_confidence(self, context: RuleContext) -> float:
        return context.settings.tools_exact_confidence


class CandidateFallbackRule(ClassificationRule):
    """
    Unrecognized phrases that look like real skills or tools go to human review.

    Confidence reflects how much the surface shape tells us:
        short acronym ("CDP")            -> candidate_acronym_confidence
        product-like ("Acme.io", "X360") -> candidate_product_confidence
        anything else                    -> candidate_default_confidence
    """

    name = "candidate_fallback"

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        store = context.store
        stripped = text.strip()
        if store.is_generic_phrase(stripped) or store.is_candidate_noise(stripped):
            return None
        if not self.within_bounds(stripped, context):
            return None

        confidence, inferred, reason = infer_candidate_type(stripped, context)
        return self._match(
            ItemType.CANDIDATE,
            confidence,
            reason,
            inferred_type=inferred,
        )

    @staticmethod
    def within_bounds(text: str, context: RuleContext) -> bool:
        bounds = context.bounds
        if text.lower() in SINGLE_CHAR_SKILLS:
            return True
        return (
            bounds.min_phrase_length <= len(text) <= bounds.max_phrase_length
            and word_count(text) <= bounds.max_phrase_words
        )


class RejectRule(ClassificationRule):
    """Terminal rule: generic noise, filler and out-of-bounds phrases."""

    name = "reject"

    def apply(self, text: str, context: RuleContext) -> Optional[RuleMatch]:
        store = context.store
        if store.is_generic_phrase(text):
            reason = "Generic business phrase"
        elif store.is_candidate_noise(text):
            reason = "Matches candidate noise pattern"
        else:
            reason = "Outside phrase length or word-count bounds"
        return self._match(ItemType.REJECTED, context.settings.rejection_confidence, reason)


def infer_candidate_type(text: str, context: RuleContext) -> Tuple[float, InferredType, str]:
    """
    Guess the type and confidence of an unrecognized phrase from its shape.

    Returns:
        (confidence, inferred type, reason)
    """
    settings = context.settings

    if len(text) < SHORT_ACRONYM_LENGTH:
        return settings.candidate_acronym_confidence, InferredType.UNKNOWN, "Short acronym - needs verification"

    if CANDIDATE_SHAPES.PRODUCT_LIKE.search(text):
        return (
            settings.candidate_product_confidence,
            InferredType.TOOL,
            "Contains special chars/numbers - likely tool",
        )

    if CANDIDATE_SHAPES.CAMEL_CASE.match(text):
        return (
            settings.candidate_default_confidence,
            InferredType.TOOL,
            "Brand-style capitalization - likely tool",
        )

    if CANDIDATE_SHAPES.SKILL_HEAD.search(text) or CANDIDATE_SHAPES.GERUND_LEAD.match(text):
        return (
            settings.candidate_default_confidence,
            InferredType.CORE_SKILL,
            "Competency-style phrase - likely skill",
        )

    return settings.candidate_default_confidence, InferredType.UNKNOWN, "No clear classification - human review needed"


DEFAULT_RULES: Tuple[ClassificationRule, ...] = (
    SoftSkillRule(),
    ForcedCoreSkillRule(),
    DenyListRule(),
    TaxonomyFuzzyRule(),
    ToolsDictionaryRule(),
    CandidateFallbackRule(),
    RejectRule(),
)
