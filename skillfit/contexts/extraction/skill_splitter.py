"""
Compound phrase splitting.

Fractures multi-skill phrases into atomic skill strings:

    "SQL, Python, and R"                    -> ["SQL", "Python", "R"]
    "HubSpot; Salesforce; Marketo"          -> ["HubSpot", "Salesforce", "Marketo"]
    "lifecycle marketing and segmentation"  -> ["lifecycle marketing", "segmentation"]
    "GA4 (Google Analytics 4)"              -> ["GA4", "Google Analytics 4"]
    "Test and Learn"                        -> ["Test and Learn"]  (known compound)

Separator precedence, highest wins, single pass: ";" > "," > " and " > " or ".
Parenthetical content is expanded into its own variant before splitting.
"""

import re
from typing import Iterable, List, Optional

from skillfit.contexts.extraction.phrase_data_structure import ExtractedPhrase
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore
from skillfit.utils.text_processing import context_window, find_occurrences

# Single-character fragments that are real skills (programming languages)
SINGLE_CHAR_SKILLS = frozenset({"r", "c"})

CONJUNCTIONS = frozenset({"and", "or", "with", "using"})

_YEARS = re.compile(r"\d+\+?\s*years?\s*(?:of\s+)?", re.IGNORECASE)
_PROFICIENCY = re.compile(
    r"\s*\((?:advanced|intermediate|basic|beginner|expert|proficient|required|preferred|a\s+plus|nice\s+to\s+have)\)",
    re.IGNORECASE,
)
_AND_OR = re.compile(r"(?:^|\s+)and/or(?:\s+|$)", re.IGNORECASE)
_PARENTHETICAL = re.compile(r"^([^()]+?)\s*\(([^()]+)\)$")
_AND = re.compile(r"\s+and\s+", re.IGNORECASE)
_OR = re.compile(r"\s+or\s+", re.IGNORECASE)
_LEADING_AND_OR = re.compile(r"^(?:and|or)\s+", re.IGNORECASE)
_LEADING_CONJUNCTION = re.compile(r"^(?:and|or|with|using)\s+", re.IGNORECASE)
_TRAILING_CONJUNCTION = re.compile(r"\s+(?:and|or|with|using)$", re.IGNORECASE)
_EDGE_PUNCTUATION = re.compile(r"^[,.\s\-*:;]+|[,.\s\-*:;]+$")
_WHITESPACE = re.compile(r"\s+")


def handle_edge_cases(phrase: str) -> str:
    """
    Normalize phrasing that would confuse separator splitting.

    Example:
        >>> handle_edge_cases("3+ years of SQL and/or Python")
        'SQL, Python'
        >>> handle_edge_cases("Excel (advanced)")
        'Excel'
    """
    cleaned = _YEARS.sub("", phrase)
    cleaned = _PROFICIENCY.sub("", cleaned)
    return _AND_OR.sub(", ", cleaned)


def parenthetical_variants(text: str) -> List[str]:
    """
    Expand "X (Y)" into ["X", "Y"]; anything else is returned as [text].

    Example:
        >>> parenthetical_variants("GA4 (Google Analytics 4)")
        ['GA4', 'Google Analytics 4']
    """
    match = _PARENTHETICAL.match(text)
    if not match:
        return [text]
    return [part.strip() for part in match.groups() if part.strip()]


def clean_fragment(fragment: str) -> str:
    """Trim conjunctions, punctuation and unbalanced parentheses from a split fragment."""
    cleaned = _WHITESPACE.sub(" ", fragment).strip()

    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = _LEADING_CONJUNCTION.sub("", cleaned)
        cleaned = _TRAILING_CONJUNCTION.sub("", cleaned)
        cleaned = _EDGE_PUNCTUATION.sub("", cleaned)
        if cleaned.startswith("(") and ")" not in cleaned:
            cleaned = cleaned[1:]
        if cleaned.endswith(")") and "(" not in cleaned:
            cleaned = cleaned[:-1]
        cleaned = cleaned.strip()

    return cleaned


def deduplicate(skills: Iterable[str]) -> List[str]:
    """Case-insensitive dedup keeping the first-seen casing."""
    seen = set()
    result = []
    for skill in skills:
        key = skill.lower().strip()
        if key not in seen:
            seen.add(key)
            result.append(skill)
    return result


class SkillSplitter:
    """
    Splits compound phrases, protecting known multi-word taxonomy names.

    Attributes:
        store: Taxonomy consulted for known compounds (None disables the check)
        context_radius: Characters of context attached to located fragments
    """

    def __init__(self, store: Optional[TaxonomyStore] = None, context_radius: int = 100):
        self.store = store
        self.context_radius = context_radius

    def split(self, phrase: str) -> List[str]:
        """
        Split one phrase into atomic skill strings.

        Args:
            phrase: Raw or extracted phrase

        Returns:
            Non-empty, trimmed, deduplicated fragments in first-seen order
        """
        if not phrase or not phrase.strip():
            return []

        cleaned = clean_fragment(handle_edge_cases(phrase))
        if not cleaned:
            return []

        fragments = []
        for variant in parenthetical_variants(cleaned):
            for part in self._split_variant(variant):
                # A fragment can itself be "X (Y)" once its list is split apart
                fragments.extend(parenthetical_variants(part.strip()))

        results = []
        for fragment in fragments:
            fragment = clean_fragment(fragment)
            if fragment.lower() in CONJUNCTIONS:
                continue
            if len(fragment) >= 2 or fragment.lower() in SINGLE_CHAR_SKILLS:
                results.append(fragment)

        return deduplicate(results)

    def _split_variant(self, variant: str) -> List[str]:
        """Apply the highest-precedence separator present, once."""
        if ";" in variant:
            return [p for p in variant.split(";") if p.strip()]

        if "," in variant:
            parts = (_LEADING_AND_OR.sub("", p.strip()) for p in variant.split(","))
            return [p for p in parts if p]

        if self.is_known_compound(variant):
            return [variant]

        if _AND.search(variant):
            return [p for p in _AND.split(variant) if p.strip()]

        if _OR.search(variant):
            return [p for p in _OR.split(variant) if p.strip()]

        return [variant]

    def is_known_compound(self, text: str) -> bool:
        """True if text exactly names a multi-word taxonomy skill or tool."""
        return self.store is not None and self.store.is_known_compound(text)

    def split_batch(self, phrases: Iterable[str]) -> List[str]:
        """Split many phrases and deduplicate across all of them."""
        fragments = []
        for phrase in phrases:
            fragments.extend(self.split(phrase))
        return deduplicate(fragments)

    def split_phrase(self, phrase: ExtractedPhrase, text: str) -> List[ExtractedPhrase]:
        """
        Split an extracted phrase, locating each fragment in the source text.

        Fragments are positioned at their first occurrence at or after the
        parent phrase, else their first occurrence anywhere, else the parent's
        own position.

        Args:
            phrase: Phrase produced by PhraseExtractor
            text: The normalized text the phrase was extracted from

        Returns:
            One ExtractedPhrase per fragment (the phrase itself when unsplit)
        """
        fragments = self.split(phrase.text)
        if fragments == [phrase.text]:
            return [phrase]

        located = []
        for fragment in fragments:
            occurrences = find_occurrences(text, fragment)
            after = [o for o in occurrences if o[0] >= phrase.start]
            if after:
                start, end = after[0]
            elif occurrences:
                start, end = occurrences[0]
            else:
                start, end = phrase.start, phrase.start + len(fragment)

            located.append(
                ExtractedPhrase(
                    text=fragment,
                    strategy=phrase.strategy,
                    start=start,
                    end=end,
                    context=context_window(text, start, end, self.context_radius),
                    parent=phrase.text,
                )
            )
        return located
