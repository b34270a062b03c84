"""
Multi-strategy phrase extraction from job posting text.

Strategies run independently over the same normalized text and are unioned:

1. bullet: bullet and numbered list items ("short label: list" yields both parts)
2. indicator: phrases after "experience with", "knowledge of", "proficient in", ...
3. taxonomy: word-boundary scan for every known skill and tool term
4. list: comma/and/or lists after cues ("including", "such as", "tools include:")
5. noun_phrase: domain noun phrases and acronyms via POS tagging, with a
   deterministic regex fallback when the tagger model is unavailable

Every phrase is cleaned, bounded to 2-50 characters and at most 7 words, and
deduplicated case-insensitively (the first strategy to produce it wins).

Usage:
    from skillfit.contexts.extraction.phrase_extractor import PhraseExtractor

    extractor = PhraseExtractor(store)
    result = extractor.extract(text)
    [p.text for p in result.phrases]
"""

import re
from collections import Counter
from typing import List, Optional, Tuple

from skillfit.config import ExtractionSettings
from skillfit.contexts.extraction.extraction_patterns import (
    BULLET_PATTERNS,
    DOMAIN_HEAD_NOUNS,
    INDICATOR_PATTERNS,
    LIST_CUE_PATTERNS,
    NOUN_CHUNK_TAGS,
    NOUN_PHRASE_PATTERNS,
    NOUN_PHRASE_STOP_MODIFIERS,
    clean_extracted_phrase,
    trim_at_clause_break,
)
from skillfit.contexts.extraction.logger import log_phrases_extracted
from skillfit.contexts.extraction.phrase_data_structure import (
    STRATEGY_BULLET,
    STRATEGY_INDICATOR,
    STRATEGY_LIST,
    STRATEGY_NOUN_PHRASE,
    STRATEGY_TAXONOMY,
    ExtractedPhrase,
    PhraseExtractionResult,
)
from skillfit.contexts.extraction.pos_tagger import PosTagger
from skillfit.contexts.extraction.skill_splitter import SINGLE_CHAR_SKILLS
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore
from skillfit.utils.text_processing import boundary_pattern, context_window, find_occurrences, word_count

# (phrase, offset in text)
RawPhrase = Tuple[str, int]

DEFAULT_CONTEXT_RADIUS = 100
_HEAD_NOUNS = frozenset(DOMAIN_HEAD_NOUNS)


def _is_acronym(term: str) -> bool:
    """Short all-caps terms ("PR", "SEO", "B2B") that must match case-sensitively."""
    letters = [c for c in term if c.isalpha()]
    return bool(letters) and len(term) <= 5 and " " not in term and all(c.isupper() for c in letters)


class PhraseExtractor:
    """Runs every extraction strategy over a posting and unions the results."""

    def __init__(
        self,
        store: TaxonomyStore,
        settings: Optional[ExtractionSettings] = None,
        tagger: Optional[PosTagger] = None,
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
    ):
        """
        Args:
            store: Taxonomy used by the direct-match strategy
            settings: Phrase bounds (defaults to ExtractionSettings())
            tagger: POS tagger for noun phrases (defaults to a lazily-probed nltk tagger)
            context_radius: Characters of context kept around each phrase
        """
        self.store = store
        self.settings = settings or ExtractionSettings()
        self.tagger = tagger if tagger is not None else PosTagger()
        self.context_radius = context_radius
        self._term_patterns = self._compile_term_patterns()

    def _compile_term_patterns(self) -> List[Tuple[re.Pattern, str]]:
        """One boundary pattern per skill/tool surface term, longest first."""
        terms = {}
        surface_terms = [term for term, _ in self.store.iter_skill_terms()]
        surface_terms += [term for term, _ in self.store.iter_tool_terms()]

        for term in surface_terms:
            stripped = term.strip()
            if len(stripped) < 2 or stripped.lower() in self.store.ambiguous_tool_names:
                continue
            # Acronyms keep their case; everything else collapses case-insensitively
            key = stripped if _is_acronym(stripped) else stripped.lower()
            terms.setdefault(key, stripped)

        patterns = []
        for key, term in sorted(terms.items(), key=lambda kv: len(kv[0]), reverse=True):
            flags = 0 if _is_acronym(term) else re.IGNORECASE
            patterns.append((boundary_pattern(term, flags), term))
        return patterns

    # =========================================================================
    # MAIN ENTRY POINT
    # =========================================================================

    def extract(self, text: str) -> PhraseExtractionResult:
        """
        Extract candidate phrases from normalized posting text.

        Args:
            text: Posting text (see normalizer.preprocess_job_text)

        Returns:
            PhraseExtractionResult with deduplicated, bounded phrases
        """
        result = PhraseExtractionResult()
        if not text or not text.strip():
            return result

        noun_phrases, fallback = self.extract_noun_phrases(text)
        result.noun_phrase_fallback = fallback

        strategies = (
            (STRATEGY_BULLET, self.extract_bullet_items(text)),
            (STRATEGY_INDICATOR, self.extract_indicator_phrases(text)),
            (STRATEGY_TAXONOMY, self.extract_taxonomy_matches(text)),
            (STRATEGY_LIST, self.extract_list_items(text)),
            (STRATEGY_NOUN_PHRASE, noun_phrases),
        )

        seen = set()
        counts: Counter = Counter()
        for strategy, raw_phrases in strategies:
            for raw, offset in raw_phrases:
                cleaned = clean_extracted_phrase(raw)
                if not self.within_bounds(cleaned):
                    if cleaned:
                        result.dropped += 1
                    continue
                key = cleaned.lower()
                if key in seen:
                    continue
                seen.add(key)
                result.phrases.append(self._build_phrase(text, cleaned, strategy, offset))
                counts[strategy] += 1

        result.strategy_counts = {name: counts.get(name, 0) for name, _ in strategies}
        log_phrases_extracted(result.strategy_counts, len(result.phrases))
        return result

    def within_bounds(self, phrase: str) -> bool:
        """True if phrase respects the character and word bounds."""
        if not phrase:
            return False
        if phrase.lower() in SINGLE_CHAR_SKILLS:
            return True
        if not self.settings.min_phrase_length <= len(phrase) <= self.settings.max_phrase_length:
            return False
        return word_count(phrase) <= self.settings.max_phrase_words

    def _build_phrase(self, text: str, phrase: str, strategy: str, offset: int) -> ExtractedPhrase:
        """Locate phrase in text (falling back to the strategy's offset) and attach context."""
        occurrences = find_occurrences(text, phrase)
        start, end = occurrences[0] if occurrences else (offset, offset + len(phrase))
        return ExtractedPhrase(
            text=phrase,
            strategy=strategy,
            start=start,
            end=end,
            context=context_window(text, start, end, self.context_radius),
        )

    # =========================================================================
    # STRATEGIES
    # =========================================================================

    def extract_bullet_items(self, text: str) -> List[RawPhrase]:
        """
        Bullet and numbered list items.

        An item with one colon and a short label before it yields the label and
        the text after the colon separately ("Analytics: SQL, Looker").
        """
        items = []
        for match in BULLET_PATTERNS.BULLET_LINE.finditer(text):
            item = match.group(1).strip()
            offset = match.start(1)
            if len(item) < 2 and item.lower() not in SINGLE_CHAR_SKILLS:
                continue

            parts = item.split(":")
            if len(parts) == 2 and len(parts[0]) < self.settings.bullet_label_max_length:
                label, rest = parts[0].strip(), parts[1].strip()
                if label:
                    items.append((label, offset))
                if rest:
                    items.append((rest, offset + item.index(":") + 1))
            else:
                items.append((item, offset))
        return items

    def extract_indicator_phrases(self, text: str) -> List[RawPhrase]:
        """Phrases following skill indicator words, trimmed at clause breaks."""
        phrases = []
        for pattern in INDICATOR_PATTERNS.INDICATORS:
            for match in pattern.finditer(text):
                phrase = trim_at_clause_break(match.group(1)).strip()
                if phrase:
                    phrases.append((phrase, match.start(1)))
        return phrases

    def extract_taxonomy_matches(self, text: str) -> List[RawPhrase]:
        """Known skill and tool terms found anywhere in the text, as written."""
        matches = []
        for pattern, _term in self._term_patterns:
            match = pattern.search(text)
            if match:
                matches.append((match.group(0), match.start()))
        # Text order keeps phrase order stable across runs
        return sorted(matches, key=lambda m: m[1])

    def extract_list_items(self, text: str) -> List[RawPhrase]:
        """Items of comma/and/or lists introduced by a listing cue."""
        items = []
        for pattern in LIST_CUE_PATTERNS.LIST_CUES:
            for match in pattern.finditer(text):
                list_text = match.group(1)
                cursor = match.start(1)
                for item in LIST_CUE_PATTERNS.LIST_SEPARATOR.split(list_text):
                    cleaned = LIST_CUE_PATTERNS.ENCLOSING.sub("", item.strip())
                    cleaned = LIST_CUE_PATTERNS.LEADING_CONJUNCTION.sub("", cleaned).strip()
                    if 2 <= len(cleaned) <= LIST_CUE_PATTERNS.MAX_ITEM_LENGTH:
                        position = text.find(cleaned, cursor)
                        items.append((cleaned, position if position >= 0 else cursor))
        return items

    def extract_noun_phrases(self, text: str) -> Tuple[List[RawPhrase], bool]:
        """
        Domain noun phrases and acronyms.

        Returns:
            (phrases, used_fallback). used_fallback is True when the POS tagger
            was unavailable and regex patterns were used instead.
        """
        tokens = [(m.group(0), m.start()) for m in NOUN_PHRASE_PATTERNS.TOKEN.finditer(text)]
        tagged = self.tagger.tag([t for t, _ in tokens])
        if tagged is None:
            return self._regex_noun_phrases(text), True
        return self._tagged_noun_phrases(text, tokens, tagged), False

    def _tagged_noun_phrases(
        self, text: str, tokens: List[Tuple[str, int]], tagged: List[Tuple[str, str]]
    ) -> List[RawPhrase]:
        """Chunk runs of adjective/noun/gerund tags, keep chunks ending in a domain head noun."""
        phrases = []

        def flush(run: List[int]) -> None:
            for position, index in enumerate(run):
                word = tokens[index][0]
                if word.lower() in _HEAD_NOUNS and position > 0:
                    start = max(0, position - 2)
                    chunk = run[start : position + 1]
                    while chunk and tokens[chunk[0]][0].lower() in NOUN_PHRASE_STOP_MODIFIERS:
                        chunk = chunk[1:]
                    if len(chunk) >= 2:
                        first, last = tokens[chunk[0]], tokens[chunk[-1]]
                        phrases.append((text[first[1] : last[1] + len(last[0])], first[1]))

        run: List[int] = []
        for index, (word, tag) in enumerate(tagged):
            if tag in ("NNP", "NNPS", "NN") and _is_acronym(word) and len(word) >= 2:
                phrases.append((word, tokens[index][1]))
            if tag in NOUN_CHUNK_TAGS:
                run.append(index)
            else:
                flush(run)
                run = []
        flush(run)

        return phrases

    def _regex_noun_phrases(self, text: str) -> List[RawPhrase]:
        """Deterministic fallback: acronyms, compound nouns and gerund + noun."""
        phrases = [(m.group(0), m.start()) for m in NOUN_PHRASE_PATTERNS.ACRONYM.finditer(text)]

        for pattern in (NOUN_PHRASE_PATTERNS.COMPOUND_NOUN, NOUN_PHRASE_PATTERNS.GERUND_NOUN):
            for match in pattern.finditer(text):
                words = match.group(1).split()
                offset = match.start(1)
                while len(words) > 1 and words[0].lower() in NOUN_PHRASE_STOP_MODIFIERS:
                    offset += len(words[0]) + 1
                    words = words[1:]
                if len(words) >= 2:
                    phrases.append((" ".join(words), offset))

        return phrases

