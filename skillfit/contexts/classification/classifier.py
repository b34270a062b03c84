"""
Rule-chain classifier.

Routes each phrase to CORE_SKILL / TOOL / CANDIDATE / REJECTED by evaluating
an ordered tuple of ClassificationRule objects; the first rule to return a
RuleMatch decides. Every ClassifiedItem records the rule that fired.
"""

from collections import Counter
from typing import Iterable, Optional, Sequence

from skillfit.config import ClassificationSettings, ExtractionSettings
from skillfit.contexts.classification.classification_data_structure import (
    ClassificationBatch,
    ClassifiedItem,
    ItemType,
    RuleContext,
    RuleMatch,
)
from skillfit.contexts.classification.logger import log_classification_summary, log_item_classified
from skillfit.contexts.classification.rules import DEFAULT_RULES, ClassificationRule
from skillfit.contexts.extraction.phrase_data_structure import ExtractedPhrase, RequirementResult
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore
from skillfit.utils.text_processing import to_canonical_key


class Classifier:
    """
    Classifies phrases against the taxonomy, tools dictionary and vocabulary.

    Attributes:
        store: TaxonomyStore consulted by the rules
        settings: Per-rule confidences
        bounds: Phrase bounds used by the candidate fallback
        rules: Ordered rule chain (first match wins)
    """

    def __init__(
        self,
        store: TaxonomyStore,
        settings: Optional[ClassificationSettings] = None,
        bounds: Optional[ExtractionSettings] = None,
        rules: Sequence[ClassificationRule] = DEFAULT_RULES,
    ):
        self.store = store
        self.settings = settings or ClassificationSettings()
        self.bounds = bounds or ExtractionSettings()
        self.rules = tuple(rules)

    def classify(self, text: str, context: str = "") -> ClassifiedItem:
        """
        Classify one phrase.

        Args:
            text: Phrase to classify
            context: Surrounding posting text, if known

        Returns:
            ClassifiedItem with the requirement level left at its default (required)
        """
        text = (text or "").strip()
        rule_context = RuleContext(store=self.store, settings=self.settings, bounds=self.bounds, context=context)

        match = self.evaluate(text, rule_context)
        item = self._to_item(text, match, context)
        log_item_classified(item.raw, item.item_type.value, item.rule, item.confidence)
        return item

    def evaluate(self, text: str, context: RuleContext) -> RuleMatch:
        """Run the rule chain and return the first match."""
        for rule in self.rules:
            match = rule.apply(text, context)
            if match is not None:
                return match
        # Custom chains without a terminal rule
        return RuleMatch(
            item_type=ItemType.REJECTED,
            confidence=self.settings.rejection_confidence,
            evidence="No rule matched",
            rule="none",
        )

    def classify_phrase(self, phrase: ExtractedPhrase, requirements: Optional[RequirementResult] = None) -> ClassifiedItem:
        """Classify an extracted phrase and attach its requirement level."""
        item = self.classify(phrase.text, phrase.context)
        if requirements is not None:
            assessment = requirements.for_text(phrase.text)
            if assessment is not None:
                item = item.with_requirement(assessment)
        return item

    def classify_batch(
        self,
        phrases: Iterable[ExtractedPhrase],
        requirements: Optional[RequirementResult] = None,
    ) -> ClassificationBatch:
        """
        Classify many phrases, grouping the results by type.

        Args:
            phrases: Extracted (and split) phrases
            requirements: RequirementDetector output for the same phrases

        Returns:
            ClassificationBatch with core_skills, tools, candidates and rejected lists
        """
        batch = ClassificationBatch()
        rule_counts: Counter = Counter()
        for phrase in phrases:
            item = self.classify_phrase(phrase, requirements)
            batch.add(item)
            rule_counts[item.rule] += 1

        log_classification_summary(batch.counts(), dict(rule_counts))
        return batch

    @staticmethod
    def _to_item(text: str, match: RuleMatch, context: str) -> ClassifiedItem:
        if match.entry is not None:
            canonical = match.entry.canonical
        else:
            canonical = to_canonical_key(match.canonical_hint or text)
        return ClassifiedItem(
            raw=text,
            canonical=canonical,
            item_type=match.item_type,
            confidence=match.confidence,
            evidence=match.evidence,
            rule=match.rule,
            entry=match.entry,
            canonical_hint=match.canonical_hint,
            inferred_type=match.inferred_type,
            context=context,
        )
