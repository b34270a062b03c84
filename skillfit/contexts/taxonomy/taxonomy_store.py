"""
Static taxonomy dataset and vocabulary lookups.

The store is immutable once built. User-promoted vocabulary is applied by
building a new store with with_extension(), so analyses that already hold a
store keep a consistent view.

Datasets (YAML, loaded with OmegaConf) live in SKILLFIT_DATA_PATH, which
defaults to the package's data/ directory:
- skills.yaml: categories and skill concepts
- tools.yaml: external tools dictionary (optional)
- vocabulary.yaml: canonical rules, synonym groups, allow/deny lists, patterns
"""

import os
import re
from functools import cached_property
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from skillfit.contexts.taxonomy.exceptions import DuplicateCanonicalKeyError, TaxonomyLoadError
from skillfit.contexts.taxonomy.fuzzy_matcher import (
    DEFAULT_THRESHOLD,
    MIN_FUZZY_LENGTH,
    FuzzyMatcher,
)
from skillfit.contexts.taxonomy.logger import log_extension_merged, log_store_loaded
from skillfit.contexts.taxonomy.taxonomy_data_structure import (
    DictionaryExtension,
    SkillCategory,
    TaxonomyEntry,
    ToolEntry,
)
from skillfit.utils.text_processing import normalize_phrase, normalize_term

load_dotenv()
DEFAULT_DATA_PATH = Path(__file__).parent / "data"
DATA_PATH = Path(os.getenv("SKILLFIT_DATA_PATH", str(DEFAULT_DATA_PATH)))

SKILLS_FILE = "skills.yaml"
TOOLS_FILE = "tools.yaml"
VOCABULARY_FILE = "vocabulary.yaml"


def _load_yaml(path: Path) -> dict:
    """Load a YAML dataset into plain containers."""
    if not path.exists():
        raise TaxonomyLoadError("Dataset file not found", path=path)
    try:
        return OmegaConf.to_container(OmegaConf.load(path), resolve=True) or {}
    except Exception as e:
        raise TaxonomyLoadError(f"Could not parse dataset: {e}", path=path) from e


def _check_unique(entries: Iterable, path: Optional[Path] = None) -> None:
    """Raise if two entries share a canonical key."""
    seen: Dict[str, str] = {}
    for entry in entries:
        if entry.canonical in seen:
            raise DuplicateCanonicalKeyError(entry.canonical, (seen[entry.canonical], entry.name), path)
        seen[entry.canonical] = entry.name


class TaxonomyStore:
    """
    Skill concepts, tools dictionary and classification vocabulary.

    Attributes:
        skills: Skill concept entries (canonical keys unique)
        tools: Tools dictionary entries (canonical keys unique)
        categories: Category display metadata
        version: Dataset version
        tools_dictionary_loaded: False when no tools dictionary was available
    """

    def __init__(
        self,
        skills: Iterable[TaxonomyEntry],
        tools: Iterable[ToolEntry] = (),
        categories: Iterable[SkillCategory] = (),
        canonical_rules: Optional[Dict[str, str]] = None,
        synonym_groups: Optional[Dict[str, List[str]]] = None,
        skill_aliases: Optional[Dict[str, str]] = None,
        forced_core_skills: Iterable[str] = (),
        soft_skill_patterns: Iterable[str] = (),
        generic_phrases: Iterable[str] = (),
        tools_deny_list: Iterable[str] = (),
        ambiguous_tool_names: Iterable[str] = (),
        candidate_noise_patterns: Iterable[str] = (),
        version: int = 0,
        tools_dictionary_loaded: bool = True,
        fuzzy_threshold: float = DEFAULT_THRESHOLD,
        min_fuzzy_length: int = MIN_FUZZY_LENGTH,
    ):
        self.skills: Tuple[TaxonomyEntry, ...] = tuple(skills)
        self.tools: Tuple[ToolEntry, ...] = tuple(tools)
        self.categories: Tuple[SkillCategory, ...] = tuple(categories)
        self.version = version
        self.tools_dictionary_loaded = tools_dictionary_loaded
        self.fuzzy_threshold = fuzzy_threshold
        self.min_fuzzy_length = min_fuzzy_length

        _check_unique(self.skills)
        _check_unique(self.tools)

        self.canonical_rules = {normalize_phrase(k): v for k, v in (canonical_rules or {}).items()}
        self.synonym_groups = {k: list(v) for k, v in (synonym_groups or {}).items()}
        self.skill_aliases = {normalize_phrase(k): v for k, v in (skill_aliases or {}).items()}
        self.forced_core_skills = frozenset(normalize_phrase(s) for s in forced_core_skills)
        self.generic_phrases = frozenset(normalize_phrase(p) for p in generic_phrases)
        self.tools_deny_list = frozenset(normalize_phrase(t) for t in tools_deny_list)
        self.ambiguous_tool_names = frozenset(normalize_phrase(t) for t in ambiguous_tool_names)

        self._soft_skill_sources = tuple(soft_skill_patterns)
        self._noise_sources = tuple(candidate_noise_patterns)
        self.soft_skill_patterns = [re.compile(p, re.IGNORECASE) for p in self._soft_skill_sources]
        self.candidate_noise_patterns = [re.compile(p, re.IGNORECASE) for p in self._noise_sources]

        # Variant -> canonical key, including each key itself
        self._synonym_lookup: Dict[str, str] = {}
        for canonical, variants in self.synonym_groups.items():
            self._synonym_lookup.setdefault(normalize_phrase(canonical), canonical)
            for variant in variants:
                self._synonym_lookup.setdefault(normalize_phrase(variant), canonical)

        # Longest terms first so the alternation prefers "google analytics 4" over "google analytics"
        anchored = sorted(self.tools_deny_list - self.ambiguous_tool_names, key=len, reverse=True)
        self._deny_pattern = (
            re.compile(r"(?<![\w])(" + "|".join(re.escape(t) for t in anchored) + r")(?![\w])", re.IGNORECASE)
            if anchored
            else None
        )

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def load(
        cls,
        data_path: Optional[Path] = None,
        extension: Optional[DictionaryExtension] = None,
        fuzzy_threshold: float = DEFAULT_THRESHOLD,
        min_fuzzy_length: int = MIN_FUZZY_LENGTH,
    ) -> "TaxonomyStore":
        """
        Load the datasets from YAML.

        Args:
            data_path: Directory holding the dataset files (defaults to SKILLFIT_DATA_PATH)
            extension: Optional user dictionary extension to merge
            fuzzy_threshold: Threshold for the skill and tool matchers
            min_fuzzy_length: Queries shorter than this only match exactly

        Returns:
            TaxonomyStore

        Raises:
            TaxonomyLoadError: If skills.yaml or vocabulary.yaml is missing or malformed
            DuplicateCanonicalKeyError: If a dataset repeats a canonical key
        """
        data_path = Path(data_path) if data_path else DATA_PATH

        skills_path = data_path / SKILLS_FILE
        skills_data = _load_yaml(skills_path)
        vocabulary = _load_yaml(data_path / VOCABULARY_FILE)

        tools_path = data_path / TOOLS_FILE
        tools_loaded = tools_path.exists()
        tools_data = _load_yaml(tools_path) if tools_loaded else {}

        try:
            skills = [TaxonomyEntry.from_dict(d) for d in skills_data.get("skills") or []]
        except (KeyError, TypeError) as e:
            raise TaxonomyLoadError(f"Malformed skill entry: {e}", path=skills_path, field_name="skills") from e

        try:
            tools = [ToolEntry.from_dict(d) for d in tools_data.get("tools") or []]
        except (KeyError, TypeError) as e:
            raise TaxonomyLoadError(f"Malformed tool entry: {e}", path=tools_path, field_name="tools") from e

        categories = [
            SkillCategory(id=c["id"], label=c.get("label", c["id"]), color=c.get("color", "#6B7280"))
            for c in skills_data.get("categories") or []
        ]

        _check_unique(skills, skills_path)
        _check_unique(tools, tools_path)

        try:
            store = cls(
                skills=skills,
                tools=tools,
                categories=categories,
                canonical_rules=vocabulary.get("canonical_rules"),
                synonym_groups=vocabulary.get("synonym_groups"),
                skill_aliases=vocabulary.get("skill_aliases"),
                forced_core_skills=vocabulary.get("forced_core_skills") or (),
                soft_skill_patterns=vocabulary.get("soft_skill_patterns") or (),
                generic_phrases=vocabulary.get("generic_phrases") or (),
                tools_deny_list=vocabulary.get("tools_deny_list") or (),
                ambiguous_tool_names=vocabulary.get("ambiguous_tool_names") or (),
                candidate_noise_patterns=vocabulary.get("candidate_noise_patterns") or (),
                version=int(skills_data.get("version", 0)),
                tools_dictionary_loaded=tools_loaded,
                fuzzy_threshold=fuzzy_threshold,
                min_fuzzy_length=min_fuzzy_length,
            )
        except re.error as e:
            raise TaxonomyLoadError(
                f"Invalid regex: {e}", path=data_path / VOCABULARY_FILE, field_name="patterns"
            ) from e

        log_store_loaded(data_path, store.stats())

        if extension is not None and not extension.is_empty:
            store = store.with_extension(extension)
        return store

    def with_extension(self, extension: DictionaryExtension) -> "TaxonomyStore":
        """
        Build a new store with user-promoted vocabulary merged in.

        Promoted entries whose canonical key already exists are skipped.

        Args:
            extension: Skills, tools and noise phrases from candidate review

        Returns:
            New TaxonomyStore (self is unchanged)
        """
        skill_keys = {e.canonical for e in self.skills}
        tool_keys = {e.canonical for e in self.tools}
        skipped = []

        added_skills = []
        for entry in extension.skills:
            if entry.canonical in skill_keys:
                skipped.append(entry.canonical)
                continue
            skill_keys.add(entry.canonical)
            added_skills.append(entry)

        added_tools = []
        for entry in extension.tools:
            if entry.canonical in tool_keys:
                skipped.append(entry.canonical)
                continue
            tool_keys.add(entry.canonical)
            added_tools.append(entry)

        log_extension_merged(len(added_skills), len(added_tools), len(extension.noise), skipped)

        return TaxonomyStore(
            skills=self.skills + tuple(added_skills),
            tools=self.tools + tuple(added_tools),
            categories=self.categories,
            canonical_rules=self.canonical_rules,
            synonym_groups=self.synonym_groups,
            skill_aliases=self.skill_aliases,
            forced_core_skills=self.forced_core_skills,
            soft_skill_patterns=self._soft_skill_sources,
            generic_phrases=self.generic_phrases | {normalize_phrase(n) for n in extension.noise},
            tools_deny_list=self.tools_deny_list,
            ambiguous_tool_names=self.ambiguous_tool_names,
            candidate_noise_patterns=self._noise_sources,
            version=self.version,
            tools_dictionary_loaded=self.tools_dictionary_loaded or bool(added_tools),
            fuzzy_threshold=self.fuzzy_threshold,
            min_fuzzy_length=self.min_fuzzy_length,
        )

    # =========================================================================
    # MATCHERS
    # =========================================================================

    @cached_property
    def skill_matcher(self) -> FuzzyMatcher:
        """Fuzzy index over skill concepts."""
        return FuzzyMatcher(self.skills, threshold=self.fuzzy_threshold, min_fuzzy_length=self.min_fuzzy_length)

    @cached_property
    def tool_matcher(self) -> FuzzyMatcher:
        """Fuzzy index over the tools dictionary (separate from skills)."""
        return FuzzyMatcher(self.tools, threshold=self.fuzzy_threshold, min_fuzzy_length=self.min_fuzzy_length)

    # =========================================================================
    # VOCABULARY LOOKUPS
    # =========================================================================

    def expand_alias(self, phrase: str) -> Optional[str]:
        """Expanded surface form for an abbreviation (e.g., "js" -> "javascript")."""
        return self.skill_aliases.get(normalize_phrase(phrase))

    def is_forced_core_skill(self, phrase: str) -> bool:
        """True if phrase, or its expanded abbreviation, is on the forced core-skill list."""
        normalized = normalize_phrase(phrase)
        if normalized in self.forced_core_skills:
            return True
        expanded = self.skill_aliases.get(normalized)
        return expanded is not None and normalize_phrase(expanded) in self.forced_core_skills

    def soft_skill_match(self, phrase: str) -> Optional[str]:
        """Source of the first soft-skill pattern found in phrase, or None."""
        for pattern, source in zip(self.soft_skill_patterns, self._soft_skill_sources):
            if pattern.search(phrase):
                return source
        return None

    def is_generic_phrase(self, phrase: str) -> bool:
        """True if phrase is a generic business phrase or user-marked noise."""
        return normalize_phrase(phrase) in self.generic_phrases

    def is_candidate_noise(self, phrase: str) -> bool:
        """True if phrase matches a candidate noise pattern."""
        stripped = phrase.strip()
        return any(p.search(stripped) for p in self.candidate_noise_patterns)

    def deny_list_match(self, phrase: str) -> Optional[Tuple[str, bool]]:
        """
        Match phrase against the tools deny-list.

        Returns:
            (matched term, is_exact) or None. Exact means the whole phrase is a
            deny-list term; otherwise a non-ambiguous term appears in the phrase
            with word boundaries on both sides.
        """
        normalized = normalize_phrase(phrase)
        if normalized in self.tools_deny_list:
            return normalized, True
        if self._deny_pattern is None:
            return None
        match = self._deny_pattern.search(normalized)
        if match:
            return match.group(1).lower(), False
        return None

    def canonical_rule(self, term: str) -> Optional[str]:
        """Canonical key from the explicit rule table, or None."""
        return self.canonical_rules.get(normalize_phrase(term))

    def synonym_key(self, term: str) -> Optional[str]:
        """Canonical key of the synonym group containing term, or None."""
        return self._synonym_lookup.get(normalize_phrase(term))

    def is_known_compound(self, phrase: str) -> bool:
        """
        True if phrase is exactly a multi-word name, canonical key or alias.

        Used to keep compound concept names ("Test and Learn") from being split.
        """
        normalized = normalize_term(phrase)
        if len(normalized.split()) < 2:
            return False
        return self.skill_matcher.has_term(normalized) or self.tool_matcher.has_term(normalized)

    def find_skill(self, term: str) -> Optional[TaxonomyEntry]:
        """Skill entry whose name, canonical key or alias equals term."""
        return self.skill_matcher.exact_match(term)

    def find_tool(self, term: str) -> Optional[ToolEntry]:
        """Tool entry whose name, canonical key or alias equals term."""
        return self.tool_matcher.exact_match(term)

    def get_skill(self, canonical: str) -> Optional[TaxonomyEntry]:
        return self.skill_matcher.find_by_canonical(canonical)

    def get_tool(self, canonical: str) -> Optional[ToolEntry]:
        return self.tool_matcher.find_by_canonical(canonical)

    def get_category(self, category_id: str) -> Optional[SkillCategory]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def iter_skill_terms(self) -> Iterable[Tuple[str, TaxonomyEntry]]:
        """(surface term, entry) for every skill name and alias."""
        for entry in self.skills:
            yield entry.name, entry
            for alias in entry.aliases:
                yield alias, entry

    def iter_tool_terms(self) -> Iterable[Tuple[str, ToolEntry]]:
        """(surface term, entry) for every tool name and alias."""
        for entry in self.tools:
            yield entry.name, entry
            for alias in entry.aliases:
                yield alias, entry

    def stats(self) -> dict:
        """Dataset size summary."""
        return {
            "version": self.version,
            "skills": len(self.skills),
            "tools": len(self.tools),
            "categories": len(self.categories),
            "canonical_rules": len(self.canonical_rules),
            "synonym_groups": len(self.synonym_groups),
            "forced_core_skills": len(self.forced_core_skills),
            "soft_skill_patterns": len(self.soft_skill_patterns),
            "generic_phrases": len(self.generic_phrases),
            "deny_list_terms": len(self.tools_deny_list),
            "tools_dictionary_loaded": self.tools_dictionary_loaded,
        }
