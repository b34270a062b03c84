"""
User profile canonicalization.

Profile entries go through the same SkillNormalizer resolver as job items,
so "CRO" in a profile matches "Conversion Rate Optimization" in a posting.
"""

from typing import Any, Dict, Union

from skillfit.contexts.classification.classification_data_structure import ItemType
from skillfit.contexts.classification.skill_normalizer import SkillNormalizer
from skillfit.contexts.scoring.scoring_data_structure import CanonicalProfile, UserProfile


def coerce_profile(profile: Union[UserProfile, Dict[str, Any], None]) -> UserProfile:
    """Accept a UserProfile or a loosely-typed dict."""
    if isinstance(profile, UserProfile):
        return profile
    return UserProfile.from_dict(profile)


def canonicalize_profile(profile: Union[UserProfile, Dict[str, Any], None], normalizer: SkillNormalizer) -> CanonicalProfile:
    """
    Resolve every profile entry to a canonical key.

    Args:
        profile: UserProfile or dict with core_skills/coreSkills and tools
        normalizer: Resolver shared with the job-side pipeline

    Returns:
        CanonicalProfile with core-skill and tool key sets
    """
    profile = coerce_profile(profile)
    core_keys = frozenset(normalizer.canonical_key(s, ItemType.CORE_SKILL) for s in profile.core_skills)
    tool_keys = frozenset(normalizer.canonical_key(t, ItemType.TOOL) for t in profile.tools)
    return CanonicalProfile(core_skill_keys=core_keys - {""}, tool_keys=tool_keys - {""}, source=profile)
