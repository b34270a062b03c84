"""
Approximate term matching over an inverted term index.

Every name, canonical key and alias of every entry is normalized and mapped back
to its owning entry. A query is answered in three passes:

1. Exact index hit (score 0.0), returned immediately
2. Normalized edit distance (distance / longer length) within the threshold
3. For multi-word queries, token overlap: the fraction of query tokens that are
   a substring of (or contain) some token of an indexed term; accepted when
   1 - overlap is within the threshold

Scores are "lower is better" and results are deduplicated by owning entry,
keeping each entry's best score.

Usage:
    from skillfit.contexts.taxonomy.fuzzy_matcher import FuzzyMatcher

    matcher = FuzzyMatcher(store.skills, threshold=0.42)
    matches = matcher.search("conversion optimisation")
    matches[0].entry.canonical  # "conversion_rate_optimization"
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from skillfit.utils.text_processing import normalize_term

_TOKEN_SPLIT = re.compile(r"[\s_]+")

DEFAULT_THRESHOLD = 0.42
MIN_TERM_LENGTH = 2
MIN_FUZZY_LENGTH = 4
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class FuzzyMatch:
    """
    One search hit.

    Attributes:
        entry: Owning TaxonomyEntry or ToolEntry
        score: 0.0 for exact hits, otherwise normalized distance (lower is better)
        term: The normalized index term that matched
        match_type: "exact", "fuzzy" or "token"
    """

    entry: Any
    score: float
    term: str
    match_type: str

    @property
    def is_exact(self) -> bool:
        return self.match_type == "exact"

    @property
    def confidence(self) -> float:
        """Match quality in [0, 1], inversely proportional to score."""
        return max(0.0, min(1.0, 1.0 - self.score))


class FuzzyMatcher:
    """
    Inverted-index matcher over entries exposing .canonical, .category and .terms.

    Works for both the skill taxonomy and the tools dictionary, which keep
    separate matcher instances.
    """

    def __init__(
        self,
        entries: Iterable[Any],
        threshold: float = DEFAULT_THRESHOLD,
        min_term_length: int = MIN_TERM_LENGTH,
        min_fuzzy_length: int = MIN_FUZZY_LENGTH,
    ):
        """
        Build the index.

        Args:
            entries: TaxonomyEntry or ToolEntry records
            threshold: Maximum accepted score for fuzzy and token passes
            min_term_length: Terms and queries shorter than this are ignored
            min_fuzzy_length: Queries shorter than this only match exactly
        """
        self.threshold = threshold
        self.min_term_length = min_term_length
        self.min_fuzzy_length = min_fuzzy_length

        self._entries: List[Any] = list(entries)
        self._by_canonical: Dict[str, Any] = {}
        self._index: Dict[str, Any] = {}
        self._term_tokens: Dict[str, List[str]] = {}

        for entry in self._entries:
            self._by_canonical.setdefault(entry.canonical, entry)
            for term in entry.terms:
                normalized = normalize_term(term)
                if len(normalized) < self.min_term_length:
                    continue
                # First entry to claim a term keeps it
                if normalized not in self._index:
                    self._index[normalized] = entry
                    self._term_tokens[normalized] = [
                        t for t in _TOKEN_SPLIT.split(normalized) if len(t) >= self.min_term_length
                    ]

        self._terms: List[str] = list(self._index.keys())

    # =========================================================================
    # SEARCH
    # =========================================================================

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[FuzzyMatch]:
        """
        Search the index.

        Args:
            query: Free-text phrase
            limit: Maximum number of results

        Returns:
            Matches sorted by ascending score, one per owning entry
        """
        normalized = normalize_term(query)
        if len(normalized) < self.min_term_length:
            return []

        exact = self._index.get(normalized)
        if exact is not None:
            return [FuzzyMatch(entry=exact, score=0.0, term=normalized, match_type="exact")]

        best: Dict[str, FuzzyMatch] = {}

        if len(normalized) >= self.min_fuzzy_length:
            for term, score, _ in process.extract(
                normalized,
                self._terms,
                scorer=Levenshtein.normalized_distance,
                score_cutoff=self.threshold,
                limit=None,
            ):
                self._keep_best(best, FuzzyMatch(self._index[term], float(score), term, "fuzzy"))

        query_words = normalized.split()
        query_tokens = [t for t in query_words if len(t) >= self.min_term_length]
        if len(query_words) > 1 and query_tokens:
            for term, term_tokens in self._term_tokens.items():
                entry = self._index[term]
                if entry.canonical in best or not term_tokens:
                    continue
                matched = sum(
                    1 for qt in query_tokens if any(qt in tt or tt in qt for tt in term_tokens)
                )
                score = 1.0 - matched / len(query_tokens)
                if score <= self.threshold:
                    self._keep_best(best, FuzzyMatch(entry, score, term, "token"), allow_replace=False)

        results = sorted(best.values(), key=lambda m: (m.score, m.term))
        return results[:limit]

    def best_match(self, query: str) -> Optional[FuzzyMatch]:
        """Best hit for query, or None."""
        results = self.search(query, limit=1)
        return results[0] if results else None

    def exact_match(self, query: str) -> Optional[Any]:
        """Entry whose normalized term equals the normalized query, or None."""
        return self._index.get(normalize_term(query))

    @staticmethod
    def _keep_best(best: Dict[str, FuzzyMatch], match: FuzzyMatch, allow_replace: bool = True) -> None:
        key = match.entry.canonical
        current = best.get(key)
        if current is None or (allow_replace and match.score < current.score):
            best[key] = match

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    @property
    def entries(self) -> List[Any]:
        return list(self._entries)

    def find_by_canonical(self, canonical: str) -> Optional[Any]:
        return self._by_canonical.get(canonical)

    def get_by_category(self, category: str) -> List[Any]:
        return [e for e in self._entries if e.category == category]

    def has_term(self, term: str) -> bool:
        return normalize_term(term) in self._index

    def stats(self) -> dict:
        """Index size summary."""
        return {
            "entries": len(self._entries),
            "indexed_terms": len(self._index),
            "categories": dict(Counter(e.category for e in self._entries)),
            "threshold": self.threshold,
        }


# =============================================================================
# PAIRWISE SIMILARITY
# =============================================================================


def calculate_similarity(a: str, b: str) -> float:
    """
    Blend of edit similarity and token Jaccard similarity, in [0, 1].

    0.6 * (1 - normalized edit distance) + 0.4 * |tokens(a) & tokens(b)| / |tokens(a) | tokens(b)|

    Example:
        >>> calculate_similarity("data analysis", "data analysis")
        1.0
    """
    left, right = normalize_term(a), normalize_term(b)
    if not left or not right:
        return 0.0

    edit_similarity = 1.0 - Levenshtein.normalized_distance(left, right)

    left_tokens, right_tokens = set(left.split()), set(right.split())
    union = left_tokens | right_tokens
    jaccard = len(left_tokens & right_tokens) / len(union) if union else 0.0

    return 0.6 * edit_similarity + 0.4 * jaccard


def is_similar_match(a: str, b: str, threshold: float = 0.7) -> bool:
    """True when calculate_similarity(a, b) reaches threshold."""
    return calculate_similarity(a, b) >= threshold
