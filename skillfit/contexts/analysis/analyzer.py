"""
Skill analysis service.

Pipeline:
    raw text -> preprocess_job_text -> PhraseExtractor -> SkillSplitter
             -> RequirementDetector -> Classifier -> SkillNormalizer
             -> FitScoreCalculator (per profile)

The profile-independent part is cached by text hash and extension signature.
When a CandidateManager is attached, the effective vocabulary is the static
taxonomy plus the user dictionary extension; promotions are picked up on the
next analysis.

Usage:
    from skillfit.contexts.analysis.analyzer import SkillAnalyzer

    analyzer = SkillAnalyzer()
    result = analyzer.analyze(job_text, {"core_skills": ["SQL"], "tools": ["Tableau"]})
    result.fit_score.overall_score
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from skillfit.config import PipelineConfig, load_pipeline_config
from skillfit.contexts.analysis.analysis_data_structure import AnalysisQuality, AnalysisResult, ExtractionOutcome
from skillfit.contexts.analysis.exceptions import AnalysisInputError
from skillfit.contexts.analysis.logger import (
    log_analysis_complete,
    log_analysis_failed,
    log_stale_result_skipped,
    log_vocabulary_refreshed,
)
from skillfit.contexts.analysis.result_cache import ResultCache
from skillfit.contexts.classification.classifier import Classifier
from skillfit.contexts.classification.skill_normalizer import SkillNormalizer
from skillfit.contexts.extraction.normalizer import preprocess_job_text
from skillfit.contexts.extraction.phrase_data_structure import ExtractedPhrase
from skillfit.contexts.extraction.phrase_extractor import PhraseExtractor
from skillfit.contexts.extraction.pos_tagger import PosTagger
from skillfit.contexts.extraction.requirement_detector import RequirementDetector
from skillfit.contexts.extraction.skill_splitter import SkillSplitter
from skillfit.contexts.extraction.special_requirements import detect_special_requirements
from skillfit.contexts.review.candidate_manager import CandidateManager
from skillfit.contexts.scoring.fit_score_calculator import FitScoreCalculator
from skillfit.contexts.scoring.scoring_data_structure import UserProfile
from skillfit.contexts.taxonomy.taxonomy_store import TaxonomyStore
from skillfit.utils.timestamp import now_exact

ProfileInput = Union[UserProfile, Dict[str, Any], None]
VocabularySignature = Optional[Tuple[int, int]]


def validate_text(text: Any) -> str:
    """
    Check posting text.

    Raises:
        AnalysisInputError: If text is missing, not a string, or blank
    """
    if text is None:
        raise AnalysisInputError("Job description text is missing", field_name="text")
    if not isinstance(text, str):
        raise AnalysisInputError(f"Job description must be text, got {type(text).__name__}", field_name="text")
    if not text.strip():
        raise AnalysisInputError("Job description text is empty", field_name="text")
    return text


def validate_profile(profile: Any) -> UserProfile:
    """
    Check a user profile.

    Raises:
        AnalysisInputError: If profile is missing, not a UserProfile/dict, or lists no skills
    """
    if profile is None:
        raise AnalysisInputError("User profile is missing", field_name="profile")
    if isinstance(profile, UserProfile):
        user_profile = profile
    elif isinstance(profile, dict):
        user_profile = UserProfile.from_dict(profile)
    else:
        raise AnalysisInputError(f"User profile must be a mapping, got {type(profile).__name__}", field_name="profile")

    if user_profile.is_empty:
        raise AnalysisInputError("User profile has no skills or tools", field_name="profile")
    return user_profile


@dataclass(frozen=True)
class PipelineComponents:
    """One vocabulary and every pipeline stage built from it."""

    store: TaxonomyStore
    extractor: PhraseExtractor
    splitter: SkillSplitter
    detector: RequirementDetector
    classifier: Classifier
    normalizer: SkillNormalizer
    calculator: FitScoreCalculator
    signature: VocabularySignature = None

    def cache_key(self, text_hash: str) -> str:
        """Cache key for a text under this vocabulary."""
        if self.signature is None:
            return text_hash
        count, last_id = self.signature
        return f"{text_hash}:{count}.{last_id}"


class SkillAnalyzer:
    """
    End-to-end analysis with an injectable cache and candidate store.

    Each analysis runs against the PipelineComponents current when it
    started. A vocabulary refresh swaps in a new set; runs already in flight
    finish on the old one and are not cached.

    Attributes:
        config: Pipeline settings
        base_store: Static taxonomy (no user extension)
        candidate_manager: Optional review store supplying the dictionary extension
        cache: Extraction cache
        components: Current vocabulary and pipeline stages
    """

    def __init__(
        self,
        store: Optional[TaxonomyStore] = None,
        config: Optional[PipelineConfig] = None,
        candidate_manager: Optional[CandidateManager] = None,
        cache: Optional[ResultCache] = None,
        tagger: Optional[PosTagger] = None,
    ):
        """
        Args:
            store: Taxonomy (defaults to TaxonomyStore.load() with the configured matcher settings)
            config: Pipeline settings (defaults to load_pipeline_config())
            candidate_manager: Review store; enables candidate persistence and vocabulary extension
            cache: Result cache (defaults to a new ResultCache sized from config)
            tagger: POS tagger for noun phrases (defaults to the nltk tagger, probed lazily)
        """
        self.config = config or load_pipeline_config()
        classification = self.config.classification
        self.base_store = store or TaxonomyStore.load(
            fuzzy_threshold=classification.fuzzy_threshold,
            min_fuzzy_length=classification.min_fuzzy_length,
        )
        self.candidate_manager = candidate_manager
        self.cache = cache if cache is not None else ResultCache(self.config.cache.max_entries)
        self.tagger = tagger if tagger is not None else PosTagger()

        self._lock = threading.Lock()
        self.components = self._build_components(self.base_store)

    # =========================================================================
    # VOCABULARY
    # =========================================================================

    def _build_components(self, store: TaxonomyStore, signature: VocabularySignature = None) -> PipelineComponents:
        radius = self.config.requirements.context_radius
        normalizer = SkillNormalizer(store, self.config.classification)
        return PipelineComponents(
            store=store,
            extractor=PhraseExtractor(store, self.config.extraction, tagger=self.tagger, context_radius=radius),
            splitter=SkillSplitter(store, context_radius=radius),
            detector=RequirementDetector(self.config.requirements),
            classifier=Classifier(store, self.config.classification, self.config.extraction),
            normalizer=normalizer,
            calculator=FitScoreCalculator(normalizer, self.config.scoring),
            signature=signature,
        )

    def refresh_vocabulary(self) -> bool:
        """
        Rebuild the effective store if the dictionary extension changed.

        Returns:
            True if the vocabulary was rebuilt
        """
        if self.candidate_manager is None:
            return False

        with self._lock:
            refreshed, cleared = self._refresh_locked()

        if refreshed:
            log_vocabulary_refreshed(self.components.signature, cleared)
        return refreshed

    def _refresh_locked(self) -> Tuple[bool, int]:
        signature = self.candidate_manager.extension_signature()
        if signature == self.components.signature:
            return False, 0

        extension = self.candidate_manager.get_extension()
        store = self.base_store.with_extension(extension) if not extension.is_empty else self.base_store
        self.components = self._build_components(store, signature)
        return True, self.cache.clear()

    def current_components(self) -> PipelineComponents:
        """Refresh if needed and return the components to run one analysis with."""
        if self.candidate_manager is None:
            return self.components

        with self._lock:
            refreshed, cleared = self._refresh_locked()
            components = self.components

        if refreshed:
            log_vocabulary_refreshed(components.signature, cleared)
        return components

    # =========================================================================
    # PIPELINE
    # =========================================================================

    def extract(self, text: str) -> Tuple[ExtractionOutcome, bool, PipelineComponents]:
        """
        Run the profile-independent pipeline, using the cache.

        Args:
            text: Raw posting text (validated)

        Returns:
            (ExtractionOutcome, whether it came from the cache, components used)
        """
        components = self.current_components()

        normalized = preprocess_job_text(text)
        text_hash = ResultCache.key_for(normalized)
        key = components.cache_key(text_hash)
        cached = self.cache.get(key)
        if cached is not None:
            log_analysis_complete(text_hash, _bucket_counts(cached), cached=True)
            return cached, True, components

        outcome = self._run_pipeline(components, normalized, text_hash)
        if self.components is components:
            self.cache.put(key, outcome)
        else:
            log_stale_result_skipped(text_hash)
        log_analysis_complete(text_hash, _bucket_counts(outcome), cached=False)
        return outcome, False, components

    def _run_pipeline(self, components: PipelineComponents, text: str, key: str) -> ExtractionOutcome:
        extraction = components.extractor.extract(text)
        phrases = _split_phrases(components.splitter, extraction.phrases, text)

        requirements = components.detector.detect(text, phrases)
        batch = components.classifier.classify_batch(phrases, requirements)
        buckets = components.normalizer.normalize(batch.core_skills + batch.tools + batch.candidates)

        quality = AnalysisQuality(
            total_extracted=len(phrases),
            soft_skills_rejected=sum(1 for item in batch.rejected if item.rule == "soft_skill"),
            rejected=len(batch.rejected),
            candidates=len(buckets.candidates),
            classified=len(batch.core_skills) + len(batch.tools),
        )

        metadata = {
            **requirements.metadata(),
            "noun_phrase_fallback": extraction.noun_phrase_fallback,
            "tools_dictionary_loaded": components.store.tools_dictionary_loaded,
            "taxonomy_version": components.store.version,
            "strategy_counts": dict(extraction.strategy_counts),
            "phrases_dropped": extraction.dropped,
            "dropped_low_confidence": buckets.dropped_low_confidence,
            "text_hash": key,
        }

        return ExtractionOutcome(
            text_hash=key,
            buckets=buckets,
            rejected=batch.rejected,
            special_requirements=detect_special_requirements(text),
            quality=quality,
            metadata=metadata,
        )

    # =========================================================================
    # PUBLIC ENTRY POINTS
    # =========================================================================

    def analyze(
        self,
        text: Any,
        profile: ProfileInput,
        job_info: Optional[Dict[str, Any]] = None,
        store_candidates: bool = False,
    ) -> AnalysisResult:
        """
        Analyze a posting and score it against a profile.

        Never raises for bad input: an empty or missing text or profile
        yields AnalysisResult.failure() with a zero score.

        Args:
            text: Raw posting text
            profile: UserProfile or dict with core_skills/coreSkills and tools
            job_info: Optional host metadata (job_id, job_title, company) copied into metadata
            store_candidates: Persist CANDIDATE items (needs a candidate_manager)

        Returns:
            AnalysisResult
        """
        try:
            validate_text(text)
            user_profile = validate_profile(profile)
        except AnalysisInputError as e:
            log_analysis_failed(e.message)
            return AnalysisResult.failure(e.message, metadata=_job_metadata(job_info))

        result, components = self._result_for(text, job_info, store_candidates)
        result.fit_score = components.calculator.calculate(result.buckets, user_profile)
        return result

    def analyze_requirements(
        self,
        text: Any,
        job_info: Optional[Dict[str, Any]] = None,
        store_candidates: bool = False,
    ) -> AnalysisResult:
        """Extract and classify requirements without scoring (fit_score is None)."""
        try:
            validate_text(text)
        except AnalysisInputError as e:
            log_analysis_failed(e.message)
            return AnalysisResult.failure(e.message, metadata=_job_metadata(job_info))

        result, _ = self._result_for(text, job_info, store_candidates)
        return result

    def analyze_batch(self, jobs: Iterable[Dict[str, Any]], profile: ProfileInput) -> List[AnalysisResult]:
        """
        Analyze many postings against one profile.

        Args:
            jobs: Dicts with "text" and optional job_id / job_title / company

        Returns:
            One AnalysisResult per job, in order
        """
        return [self.analyze(job.get("text"), profile, job_info=job) for job in jobs]

    def _result_for(
        self, text: str, job_info: Optional[Dict[str, Any]], store_candidates: bool
    ) -> Tuple[AnalysisResult, PipelineComponents]:
        outcome, cached, components = self.extract(text)

        if store_candidates and self.candidate_manager is not None and outcome.buckets.candidates:
            self.candidate_manager.store_candidates(outcome.buckets.candidates)

        metadata = {**outcome.metadata, **_job_metadata(job_info), "cached": cached, "analyzed_at": now_exact()}
        result = AnalysisResult(
            success=True,
            buckets=outcome.buckets,
            rejected=list(outcome.rejected),
            special_requirements=outcome.special_requirements,
            quality=outcome.quality,
            metadata=metadata,
        )
        return result, components


def _split_phrases(splitter: SkillSplitter, phrases: Iterable[ExtractedPhrase], text: str) -> List[ExtractedPhrase]:
    """Split every phrase, keeping the first fragment seen for each text."""
    seen = set()
    result = []
    for phrase in phrases:
        for fragment in splitter.split_phrase(phrase, text):
            if fragment.key in seen:
                continue
            seen.add(fragment.key)
            result.append(fragment)
    return result


def _job_metadata(job_info: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(job_info, dict):
        return {}
    return {k: job_info.get(k) for k in ("job_id", "job_title", "company") if job_info.get(k) is not None}


def _bucket_counts(outcome: ExtractionOutcome) -> Dict[str, int]:
    buckets = outcome.buckets
    return {
        "required_core_skills": len(buckets.required_core_skills),
        "desired_core_skills": len(buckets.desired_core_skills),
        "required_tools": len(buckets.required_tools),
        "desired_tools": len(buckets.desired_tools),
        "candidates": len(buckets.candidates),
    }
