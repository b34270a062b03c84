"""Shared fixtures for skillfit tests."""

import pytest

from skillfit.config import PipelineConfig
from skillfit.contexts.analysis.analyzer import SkillAnalyzer
from skillfit.contexts.analysis.result_cache import ResultCache
from skillfit.contexts.classification.skill_normalizer import SkillNormalizer
from skillfit.contexts.extraction.pos_tagger import PosTagger
from skillfit.contexts.review.candidate_manager import CandidateManager
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore


@pytest.fixture(scope="session")
def store():
    """Packaged taxonomy, loaded once per session."""
    return TaxonomyStore.load()


@pytest.fixture
def normalizer(store):
    return SkillNormalizer(store)


@pytest.fixture
def events_file(tmp_path):
    return tmp_path / "review_events.log"


@pytest.fixture
def candidate_manager(tmp_path, events_file):
    """Candidate store backed by a throwaway database."""
    manager = CandidateManager(db_path=tmp_path / "candidates.db", events_file=events_file)
    yield manager
    manager.close()


@pytest.fixture
def analyzer(store, candidate_manager):
    """Analyzer with the regex noun-phrase fallback so results don't depend on nltk data."""
    return SkillAnalyzer(
        store=store,
        config=PipelineConfig(),
        candidate_manager=candidate_manager,
        cache=ResultCache(),
        tagger=PosTagger(enabled=False),
    )
