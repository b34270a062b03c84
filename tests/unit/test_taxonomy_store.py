"""Unit tests for TaxonomyStore loading and vocabulary lookups."""

import pytest

from skillfit.contexts.taxonomy.exceptions import DuplicateCanonicalKeyError, TaxonomyLoadError
from skillfit.contexts.taxonomy.taxonomy_data_structure import (
    USER_ADDED_CATEGORY,
    DictionaryExtension,
    TaxonomyEntry,
    ToolEntry,
)
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore

SKILLS_YAML = """\
version: 3
categories:
  - {id: 'Data', label: 'Data & Analytics', color: '#000000'}
skills:
  - {name: 'SQL', canonical: 'sql', category: 'Data', aliases: ['structured query language']}
  - {name: 'Cohort Analysis', canonical: 'cohort_analysis', category: 'Data'}
"""

VOCABULARY_YAML = """\
version: 1
canonical_rules:
  'cohorts': 'cohort_analysis'
soft_skill_patterns:
  - '\\bteamwork\\b'
tools_deny_list:
  - 'tableau'
"""


def write_dataset(path, skills=SKILLS_YAML, vocabulary=VOCABULARY_YAML, tools=None):
    path.mkdir(parents=True, exist_ok=True)
    if skills is not None:
        (path / "skills.yaml").write_text(skills)
    if vocabulary is not None:
        (path / "vocabulary.yaml").write_text(vocabulary)
    if tools is not None:
        (path / "tools.yaml").write_text(tools)
    return path


class TestLoading:
    """Test dataset loading and validation."""

    @pytest.mark.unit
    def test_packaged_dataset_loads(self, store):
        """Test that the packaged datasets load with the tools dictionary."""
        assert store.skills
        assert store.tools
        assert store.tools_dictionary_loaded
        assert store.version >= 1
        assert store.get_category(store.categories[0].id) is store.categories[0]

    @pytest.mark.unit
    def test_packaged_canonical_keys_are_unique(self, store):
        """Test canonical key uniqueness across the packaged skills and tools."""
        skill_keys = [e.canonical for e in store.skills]
        tool_keys = [e.canonical for e in store.tools]
        assert len(skill_keys) == len(set(skill_keys))
        assert len(tool_keys) == len(set(tool_keys))

    @pytest.mark.unit
    def test_minimal_dataset_without_tools(self, tmp_path):
        """Test that a missing tools.yaml loads with the tools dictionary flagged absent."""
        store = TaxonomyStore.load(write_dataset(tmp_path / "data"))

        assert store.version == 3
        assert not store.tools_dictionary_loaded
        assert store.tool_matcher.entries == []
        assert store.find_skill("structured query language").canonical == "sql"
        assert store.canonical_rule("Cohorts") == "cohort_analysis"
        assert store.get_category("Data").label == "Data & Analytics"

    @pytest.mark.unit
    def test_missing_skills_file(self, tmp_path):
        """Test that a missing skills.yaml is a load error."""
        with pytest.raises(TaxonomyLoadError):
            TaxonomyStore.load(write_dataset(tmp_path / "data", skills=None))

    @pytest.mark.unit
    def test_missing_vocabulary_file(self, tmp_path):
        """Test that a missing vocabulary.yaml is a load error."""
        with pytest.raises(TaxonomyLoadError) as exc_info:
            TaxonomyStore.load(write_dataset(tmp_path / "data", vocabulary=None))
        assert "vocabulary.yaml" in str(exc_info.value)

    @pytest.mark.unit
    def test_duplicate_canonical_key(self, tmp_path):
        """Test that two skills sharing a canonical key fail the load."""
        skills = (
            "skills:\n"
            "  - {name: 'First', canonical: 'dup', category: 'Data'}\n"
            "  - {name: 'Second', canonical: 'dup', category: 'Data'}\n"
        )
        with pytest.raises(DuplicateCanonicalKeyError) as exc_info:
            TaxonomyStore.load(write_dataset(tmp_path / "data", skills=skills, vocabulary="version: 1\n"))

        assert exc_info.value.canonical == "dup"
        assert exc_info.value.names == ("First", "Second")

    @pytest.mark.unit
    def test_malformed_entry(self, tmp_path):
        """Test that an entry without a canonical key is a load error."""
        skills = "skills:\n  - {name: 'Orphan', category: 'Data'}\n"
        with pytest.raises(TaxonomyLoadError):
            TaxonomyStore.load(write_dataset(tmp_path / "data", skills=skills))

    @pytest.mark.unit
    def test_invalid_pattern(self, tmp_path):
        """Test that a broken soft-skill regex is a load error."""
        vocabulary = "soft_skill_patterns:\n  - '(unclosed'\n"
        with pytest.raises(TaxonomyLoadError):
            TaxonomyStore.load(write_dataset(tmp_path / "data", vocabulary=vocabulary))


class TestVocabulary:
    """Test lookups against the packaged vocabulary."""

    @pytest.mark.unit
    def test_canonical_rules_and_synonyms(self, store):
        """Test explicit rules and synonym groups."""
        assert store.canonical_rule("CRO") == "conversion_rate_optimization"
        assert store.canonical_rule("R") == "r_programming"
        assert store.canonical_rule("SQL") == "sql"
        assert store.synonym_key("Conv Optimization") == "conversion_rate_optimization"
        assert store.synonym_key("conversion_rate_optimization") == "conversion_rate_optimization"

    @pytest.mark.unit
    def test_aliases_and_forced_core_skills(self, store):
        """Test abbreviation expansion and the forced core-skill list."""
        assert store.expand_alias("GA4") == "google analytics 4"
        assert store.is_forced_core_skill("Python")
        assert store.is_forced_core_skill("py")
        assert store.is_forced_core_skill("R")
        assert not store.is_forced_core_skill("Salesforce")

    @pytest.mark.unit
    def test_soft_skills_generic_phrases_and_noise(self, store):
        """Test the rejection vocabulary."""
        assert store.soft_skill_match("Strong communication skills") is not None
        assert store.soft_skill_match("SQL") is None
        assert store.is_generic_phrase("Team Player")
        assert store.is_candidate_noise("5+ years")
        assert not store.is_candidate_noise("Qwyzzlebot")

    @pytest.mark.unit
    def test_deny_list_exact_and_boundary(self, store):
        """Test exact and word-bounded deny-list matches."""
        assert store.deny_list_match("Salesforce") == ("salesforce", True)
        assert store.deny_list_match("Salesforce administration") == ("salesforce", False)
        assert store.deny_list_match("Tableau dashboards") == ("tableau", False)
        assert store.deny_list_match("SQL") is None

    @pytest.mark.unit
    def test_ambiguous_tool_names_match_only_whole_phrase(self, store):
        """Test that ambiguous names never match inside a longer phrase."""
        assert store.deny_list_match("Segment") == ("segment", True)
        assert store.deny_list_match("segment the audience") is None

    @pytest.mark.unit
    def test_known_compounds(self, store):
        """Test multi-word concept names recognized as compounds."""
        assert store.is_known_compound("Test and Learn")
        assert store.is_known_compound("Go-to-Market Strategy")
        assert not store.is_known_compound("SQL")
        assert not store.is_known_compound("SQL and Python")

    @pytest.mark.unit
    def test_find_skill_and_tool(self, store):
        """Test exact entry lookups across the separate indexes."""
        assert store.find_skill("test and learn").canonical == "ab_testing"
        assert store.find_tool("Appboy").canonical == "braze"
        assert store.find_tool("ab testing") is None
        assert store.get_tool("salesforce").name == "Salesforce"


class TestExtension:
    """Test merging the user dictionary extension."""

    @pytest.mark.unit
    def test_with_extension_adds_entries(self, store):
        """Test that promoted skills, tools and noise land in a new store."""
        extension = DictionaryExtension(
            skills=(TaxonomyEntry("Qwyzzle Modeling", "qwyzzle_modeling", USER_ADDED_CATEGORY),),
            tools=(ToolEntry("Qwyzzlebot", "qwyzzlebot", USER_ADDED_CATEGORY),),
            noise=("Synergy Stuff",),
        )

        extended = store.with_extension(extension)

        assert extended.find_tool("qwyzzlebot").category == USER_ADDED_CATEGORY
        assert extended.find_skill("Qwyzzle Modeling").canonical == "qwyzzle_modeling"
        assert extended.is_generic_phrase("synergy stuff")
        assert extended.tools_dictionary_loaded

    @pytest.mark.unit
    def test_with_extension_leaves_original_unchanged(self, store):
        """Test that the base store is not mutated."""
        extension = DictionaryExtension(tools=(ToolEntry("Qwyzzlebot", "qwyzzlebot", USER_ADDED_CATEGORY),))
        store.with_extension(extension)

        assert store.find_tool("qwyzzlebot") is None

    @pytest.mark.unit
    def test_with_extension_skips_existing_keys(self, store):
        """Test that a promotion cannot shadow a packaged canonical key."""
        extension = DictionaryExtension(skills=(TaxonomyEntry("My SQL", "sql", USER_ADDED_CATEGORY),))
        extended = store.with_extension(extension)

        assert extended.get_skill("sql").name == store.get_skill("sql").name
        assert len(extended.skills) == len(store.skills)

    @pytest.mark.unit
    def test_extension_size(self):
        """Test DictionaryExtension size accounting."""
        assert DictionaryExtension().is_empty
        extension = DictionaryExtension(noise=("a", "b"), tools=(ToolEntry("X", "x"),))
        assert extension.size == 3
        assert not extension.is_empty
