"""
Structured pipeline settings.

Defaults live on the dataclasses; pipeline.yaml (or SKILLFIT_CONFIG_PATH)
overrides them. OmegaConf validates override types against the dataclass
fields, so a typo'd key or a non-numeric threshold fails at load time.

Usage:
    from skillfit.config import load_pipeline_config

    config = load_pipeline_config()
    config.scoring.penalty_floor  # -0.5
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
DEFAULT_CONFIG_PATH = Path(__file__).parent / "pipeline.yaml"
CONFIG_PATH = Path(os.getenv("SKILLFIT_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)))


@dataclass
class ExtractionSettings:
    """Phrase bounds for PhraseExtractor."""

    min_phrase_length: int = 2
    max_phrase_length: int = 50
    max_phrase_words: int = 7
    bullet_label_max_length: int = 50


@dataclass
class ClassificationSettings:
    """Matcher threshold and per-rule confidences for Classifier and SkillNormalizer."""

    fuzzy_threshold: float = 0.42
    min_fuzzy_length: int = 4
    min_confidence: float = 0.45

    soft_skill_confidence: float = 0.9
    rejection_confidence: float = 0.8
    forced_core_confidence: float = 0.95
    deny_exact_confidence: float = 0.95
    deny_boundary_confidence: float = 0.85
    taxonomy_exact_confidence: float = 0.95
    tools_exact_confidence: float = 0.9

    candidate_acronym_confidence: float = 0.4
    candidate_product_confidence: float = 0.5
    candidate_default_confidence: float = 0.35

    canonical_rule_quality: float = 0.95
    synonym_quality: float = 0.85
    mechanical_quality: float = 0.3


@dataclass
class RequirementSettings:
    """Context window and multipliers for RequirementDetector."""

    context_radius: int = 100
    required_multiplier: float = 2.0
    desired_multiplier: float = 1.0
    expert_multiplier: float = 3.0
    advanced_multiplier: float = 2.5


@dataclass
class ScoringSettings:
    """Weights and penalties for FitScoreCalculator."""

    core_weight: float = 0.70
    tools_weight: float = 0.30
    required_weight: float = 2.0
    desired_weight: float = 1.0

    missing_required_skill_penalty: float = -0.10
    missing_expert_tool_penalty: float = -0.15
    missing_required_tool_penalty: float = -0.12
    missing_desired_tool_penalty: float = -0.05
    penalty_floor: float = -0.50

    max_items_warning: int = 100


@dataclass
class CacheSettings:
    max_entries: int = 50


@dataclass
class PipelineConfig:
    """All pipeline settings, grouped by component."""

    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    classification: ClassificationSettings = field(default_factory=ClassificationSettings)
    requirements: RequirementSettings = field(default_factory=RequirementSettings)
    scoring: ScoringSettings = field(default_factory=ScoringSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)


def load_pipeline_config(config_path: Optional[Path] = None) -> PipelineConfig:
    """
    Load pipeline settings with YAML overrides.

    Args:
        config_path: Optional YAML file (defaults to SKILLFIT_CONFIG_PATH env variable).
            A missing file yields the dataclass defaults.

    Returns:
        PipelineConfig instance

    Raises:
        omegaconf.errors.ValidationError: If an override has the wrong type
        omegaconf.errors.ConfigKeyError: If an override names an unknown key
    """
    if config_path is None:
        config_path = CONFIG_PATH

    schema = OmegaConf.structured(PipelineConfig)
    if Path(config_path).exists():
        schema = OmegaConf.merge(schema, OmegaConf.load(config_path))

    return OmegaConf.to_object(schema)
