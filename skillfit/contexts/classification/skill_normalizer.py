"""
Canonicalization and deduplication of classified items.

Canonical-key resolution order:
    0. Known canonical key       ("ab_testing" -> ab_testing)
    1. Explicit canonical rule   ("cro" -> conversion_rate_optimization)
    2. Synonym group             ("conv optimization" -> conversion_rate_optimization)
    3. FuzzyMatcher              (skill index for core skills, tools index for tools)
    4. Mechanical fallback       ("Acme Orbit" -> acme_orbit)

Final confidence is the mean of the classifier's confidence and the quality
of the canonical resolution. Items below the configured minimum are dropped,
duplicates within a requirement bucket are merged, and a key in a required
bucket removes the same key from the matching desired bucket.
"""

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from skillfit.config import ClassificationSettings
from skillfit.contexts.classification.classification_data_structure import (
    ClassifiedItem,
    ItemType,
    NormalizedBuckets,
    NormalizedItem,
)
from skillfit.contexts.classification.logger import log_normalization_summary
from skillfit.contexts.extraction.phrase_data_structure import DESIRED, REQUIRED
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore
from skillfit.utils.text_processing import to_canonical_key

METHOD_CANONICAL_RULE = "canonical_rule"
METHOD_SYNONYM = "synonym"
METHOD_EXACT = "exact"
METHOD_FUZZY = "fuzzy"
METHOD_MECHANICAL = "mechanical"

_LEADING_QUALIFIER = re.compile(
    r"^(?:experience\s+(?:in|with)|proficiency\s+(?:in|with)|knowledge\s+of|skill(?:ed|s)?\s+(?:in|at|with))\s+",
    re.IGNORECASE,
)
_TRAILING_QUALIFIER = re.compile(r"\s+(?:experience|skills?|expertise|knowledge|proficiency)$", re.IGNORECASE)
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")


def clean_skill_phrase(phrase: str) -> str:
    """
    Strip qualifiers and parentheticals that don't change which concept a phrase names.

    Example:
        >>> clean_skill_phrase("Experience with SQL (advanced)")
        'SQL'
        >>> clean_skill_phrase("data visualization skills")
        'data visualization'
    """
    if not phrase:
        return ""
    cleaned = _WHITESPACE.sub(" ", phrase).strip()
    cleaned = _LEADING_QUALIFIER.sub("", cleaned)
    cleaned = _PARENTHETICAL.sub("", cleaned)
    cleaned = _TRAILING_QUALIFIER.sub("", cleaned)
    return cleaned.strip(" ,;:.")


def confidence_label(confidence: float) -> str:
    """
    Human-readable band for a confidence value.

    Bands: exact >= 0.95, high >= 0.85, medium >= 0.70, low >= 0.50, else uncertain.
    """
    if confidence >= 0.95:
        return "exact"
    if confidence >= 0.85:
        return "high"
    if confidence >= 0.70:
        return "medium"
    if confidence >= 0.50:
        return "low"
    return "uncertain"


@dataclass(frozen=True)
class Resolution:
    """Outcome of canonical-key resolution for one term."""

    canonical: str
    method: str
    quality: float
    entry: Any = None

    @property
    def name(self) -> Optional[str]:
        return self.entry.name if self.entry is not None else None

    @property
    def category(self) -> Optional[str]:
        return self.entry.category if self.entry is not None else None


class SkillNormalizer:
    """
    Resolves canonical keys and builds deduplicated requirement buckets.

    Attributes:
        store: TaxonomyStore providing rules, synonyms and matchers
        settings: Resolution qualities and the minimum final confidence
    """

    def __init__(self, store: TaxonomyStore, settings: Optional[ClassificationSettings] = None):
        self.store = store
        self.settings = settings or ClassificationSettings()

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve(self, term: str, item_type: ItemType = ItemType.CORE_SKILL) -> Resolution:
        """
        Resolve a term to its canonical key.

        Args:
            term: Surface phrase or an existing canonical key
            item_type: TOOL searches the tools index, anything else the skill index

        Returns:
            Resolution (canonical key, method, quality, matched entry)
        """
        cleaned = clean_skill_phrase(term) or (term or "").strip()

        # Existing canonical keys map to themselves
        entry = self._entry_for(cleaned, item_type)
        if entry is not None:
            return Resolution(entry.canonical, METHOD_EXACT, 1.0, entry)

        key = self.store.canonical_rule(cleaned)
        if key:
            return Resolution(key, METHOD_CANONICAL_RULE, self.settings.canonical_rule_quality, self._entry_for(key, item_type))

        key = self.store.synonym_key(cleaned)
        if key:
            return Resolution(key, METHOD_SYNONYM, self.settings.synonym_quality, self._entry_for(key, item_type))

        matcher = self.store.tool_matcher if item_type == ItemType.TOOL else self.store.skill_matcher
        match = matcher.best_match(cleaned)
        if match is not None:
            method = METHOD_EXACT if match.is_exact else METHOD_FUZZY
            return Resolution(match.entry.canonical, method, match.confidence, match.entry)

        return Resolution(to_canonical_key(cleaned), METHOD_MECHANICAL, self.settings.mechanical_quality)

    def canonical_key(self, term: str, item_type: ItemType = ItemType.CORE_SKILL) -> str:
        """Canonical key for a term (see resolve)."""
        return self.resolve(term, item_type).canonical

    def _entry_for(self, key: str, item_type: ItemType) -> Any:
        if item_type == ItemType.TOOL:
            return self.store.get_tool(key) or self.store.get_skill(key)
        return self.store.get_skill(key) or self.store.get_tool(key)

    # =========================================================================
    # ITEMS AND BUCKETS
    # =========================================================================

    def normalize_item(self, item: ClassifiedItem) -> Optional[NormalizedItem]:
        """
        Canonicalize one CORE_SKILL or TOOL item.

        Returns:
            NormalizedItem, or None for other types or when the final
            confidence falls below the minimum
        """
        if item.item_type not in (ItemType.CORE_SKILL, ItemType.TOOL):
            return None

        resolution = self.resolve(item.canonical_hint or item.raw, item.item_type)
        entry = resolution.entry or item.entry
        if resolution.method == METHOD_MECHANICAL and item.entry is not None:
            # The classifier already matched an entry; its key beats a mechanical guess
            resolution = Resolution(item.entry.canonical, METHOD_EXACT, 1.0, item.entry)

        confidence = max(0.0, min(1.0, (item.confidence + resolution.quality) / 2))
        if confidence < self.settings.min_confidence:
            return None

        return NormalizedItem(
            name=entry.name if entry is not None else item.raw,
            canonical=resolution.canonical,
            item_type=item.item_type,
            confidence=confidence,
            match_method=resolution.method,
            match_quality=resolution.quality,
            category=entry.category if entry is not None else "Other",
            evidence=item.evidence,
            rule=item.rule,
            raw=item.raw,
            requirement_level=item.requirement_level,
            multiplier=item.multiplier,
            language_signal=item.language_signal,
        )

    def normalize(self, items: Iterable[ClassifiedItem]) -> NormalizedBuckets:
        """
        Build the four requirement buckets plus the candidate list.

        Args:
            items: Classified items (REJECTED items are ignored)

        Returns:
            NormalizedBuckets with unique canonical keys per bucket
        """
        buckets: Dict[Tuple[ItemType, str], Dict[str, NormalizedItem]] = {
            (ItemType.CORE_SKILL, REQUIRED): {},
            (ItemType.CORE_SKILL, DESIRED): {},
            (ItemType.TOOL, REQUIRED): {},
            (ItemType.TOOL, DESIRED): {},
        }
        candidates: Dict[str, ClassifiedItem] = {}
        dropped = 0
        duplicates = 0

        for item in items:
            if item.item_type == ItemType.CANDIDATE:
                if item.canonical in candidates:
                    duplicates += 1
                else:
                    candidates[item.canonical] = item
                continue

            if item.item_type == ItemType.REJECTED:
                continue

            normalized = self.normalize_item(item)
            if normalized is None:
                dropped += 1
                continue

            bucket = buckets[(normalized.item_type, normalized.requirement_level)]
            existing = bucket.get(normalized.canonical)
            if existing is None:
                bucket[normalized.canonical] = normalized
                continue

            duplicates += 1
            bucket[normalized.canonical] = self._merge(existing, normalized)

        # Required membership suppresses the same key in the desired bucket
        for item_type in (ItemType.CORE_SKILL, ItemType.TOOL):
            required = buckets[(item_type, REQUIRED)]
            desired = buckets[(item_type, DESIRED)]
            for key in [k for k in desired if k in required]:
                del desired[key]
                duplicates += 1

        result = NormalizedBuckets(
            required_core_skills=_by_confidence(buckets[(ItemType.CORE_SKILL, REQUIRED)]),
            desired_core_skills=_by_confidence(buckets[(ItemType.CORE_SKILL, DESIRED)]),
            required_tools=_by_confidence(buckets[(ItemType.TOOL, REQUIRED)]),
            desired_tools=_by_confidence(buckets[(ItemType.TOOL, DESIRED)]),
            candidates=list(candidates.values()),
            dropped_low_confidence=dropped,
        )

        log_normalization_summary(
            {
                "required_core_skills": len(result.required_core_skills),
                "desired_core_skills": len(result.desired_core_skills),
                "required_tools": len(result.required_tools),
                "desired_tools": len(result.desired_tools),
                "candidates": len(result.candidates),
            },
            dropped,
            duplicates,
        )
        return result

    @staticmethod
    def _merge(existing: NormalizedItem, incoming: NormalizedItem) -> NormalizedItem:
        """Keep the more confident item, carrying the stronger multiplier and signal."""
        winner, other = (incoming, existing) if incoming.confidence > existing.confidence else (existing, incoming)
        if other.multiplier > winner.multiplier:
            winner = replace(winner, multiplier=other.multiplier, language_signal=other.language_signal)
        return winner


def _by_confidence(bucket: Dict[str, NormalizedItem]) -> List[NormalizedItem]:
    return sorted(bucket.values(), key=lambda item: -item.confidence)
