"""
Pipeline configuration.

Tunable constants (thresholds, multipliers, weights, penalties) as OmegaConf
structured dataclasses, with YAML overrides from pipeline.yaml.
"""

from skillfit.config.settings import (
    CacheSettings,
    ClassificationSettings,
    ExtractionSettings,
    PipelineConfig,
    RequirementSettings,
    ScoringSettings,
    load_pipeline_config,
)

__all__ = [
    "CacheSettings",
    "ClassificationSettings",
    "ExtractionSettings",
    "PipelineConfig",
    "RequirementSettings",
    "ScoringSettings",
    "load_pipeline_config",
]
