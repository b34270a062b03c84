"""
Fit score calculator.

Dual-bucket scoring:

    bucket_score  = (required_matched * Wr + desired_matched * Wd) / (required_total * Wr + desired_total * Wd)
                    (1.0 when the bucket has no requirements)
    raw_score     = core_skills_score * core_weight + tools_score * tools_weight
    total_penalty = max(sum(penalties), penalty_floor)
    overall_score = clamp(raw_score + total_penalty, 0, 1)

Penalties per missing item: required core skill -0.10, required tool -0.12
(-0.15 under "expert" language), desired tool -0.05.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from skillfit.config import ScoringSettings
from skillfit.contexts.classification.classification_data_structure import NormalizedBuckets, NormalizedItem
from skillfit.contexts.classification.skill_normalizer import SkillNormalizer
from skillfit.contexts.extraction.phrase_data_structure import DESIRED, REQUIRED
from skillfit.contexts.extraction.requirement_detector import get_penalty
from skillfit.contexts.scoring.logger import log_fit_score, log_penalty_capped, log_validation_warnings
from skillfit.contexts.scoring.profile import canonicalize_profile
from skillfit.contexts.scoring.scoring_data_structure import (
    BucketItem,
    BucketScore,
    FitScoreResult,
    Penalty,
    UserProfile,
    ValidationReport,
)

ProfileInput = Union[UserProfile, Dict[str, Any], None]

# (threshold, label, color), highest first
FIT_BANDS = (
    (0.90, "Excellent Match", "#22c55e"),
    (0.75, "Strong Match", "#22c55e"),
    (0.60, "Good Match", "#84cc16"),
    (0.45, "Moderate Match", "#eab308"),
    (0.30, "Partial Match", "#f97316"),
)
WEAK_BAND = ("Weak Match", "#ef4444")

RECOMMENDATION_THRESHOLD = 0.60
STRONG_FIT_THRESHOLD = 0.75
MANY_GAPS = 5


def fit_label(score: float) -> str:
    """Fit band for a 0-1 score."""
    for threshold, label, _ in FIT_BANDS:
        if score >= threshold:
            return label
    return WEAK_BAND[0]


def score_color(score: float) -> str:
    """Display color for a 0-1 score."""
    for threshold, _, color in FIT_BANDS:
        if score >= threshold:
            return color
    return WEAK_BAND[1]


def recommendations(result: FitScoreResult) -> List[str]:
    """Advice derived from a score breakdown."""
    advice = []

    if result.core_skills.score < RECOMMENDATION_THRESHOLD:
        missing = len(result.core_skills.required_missing)
        if missing:
            plural = "s" if missing > 1 else ""
            advice.append(
                f"You're missing {missing} required core skill{plural}. Consider highlighting transferable skills."
            )

    if result.tools.score < RECOMMENDATION_THRESHOLD:
        missing = len(result.tools.required_missing)
        if missing:
            plural = "s" if missing > 1 else ""
            advice.append(f"You're missing {missing} required tool{plural}. Mention similar platforms you've used.")

    if len(result.penalties) > MANY_GAPS:
        advice.append("Multiple gaps detected. Focus applications on roles with stronger alignment.")

    if result.overall_score >= STRONG_FIT_THRESHOLD:
        advice.append("Strong fit! Prioritize this application and tailor your resume to highlight matched skills.")

    return advice


class FitScoreCalculator:
    """
    Scores normalized job requirements against a user profile.

    Attributes:
        normalizer: Resolver used to canonicalize profile entries
        settings: Weights, penalties and floor
    """

    def __init__(self, normalizer: SkillNormalizer, settings: Optional[ScoringSettings] = None):
        self.normalizer = normalizer
        self.settings = settings or ScoringSettings()

    def calculate(self, buckets: Optional[NormalizedBuckets], profile: ProfileInput) -> FitScoreResult:
        """
        Compute the fit score.

        Args:
            buckets: Normalized requirement buckets for one posting
            profile: UserProfile or loosely-typed dict

        Returns:
            FitScoreResult. When inputs are unusable, overall_score is 0 and
            error explains why.
        """
        report = self.validate_inputs(buckets, profile)
        log_validation_warnings(report.warnings)
        if not report.valid:
            return FitScoreResult(error="; ".join(report.errors), warnings=report.warnings)

        canonical = canonicalize_profile(profile, self.normalizer)

        core = self.bucket_score(buckets.required_core_skills, buckets.desired_core_skills, canonical.core_skill_keys)
        tools = self.bucket_score(buckets.required_tools, buckets.desired_tools, canonical.tool_keys)

        penalties, total_penalty, capped = self.calculate_penalties(core, tools)

        raw_score = core.score * self.settings.core_weight + tools.score * self.settings.tools_weight
        overall = max(0.0, min(1.0, raw_score + total_penalty))

        result = FitScoreResult(
            overall_score=overall,
            label=fit_label(overall),
            core_skills=core,
            tools=tools,
            raw_score=raw_score,
            total_penalty=total_penalty,
            penalty_capped=capped,
            penalties=penalties,
            weights={
                "core_weight": self.settings.core_weight,
                "tools_weight": self.settings.tools_weight,
                "required_weight": self.settings.required_weight,
                "desired_weight": self.settings.desired_weight,
            },
            warnings=report.warnings,
        )
        result.recommendations = recommendations(result)

        log_fit_score(overall, result.label, core.score, tools.score, total_penalty)
        return result

    def bucket_score(
        self,
        required: Sequence[NormalizedItem],
        desired: Sequence[NormalizedItem],
        user_keys: Iterable[str],
    ) -> BucketScore:
        """
        Score one bucket.

        Args:
            required: Required items for this bucket
            desired: Desired items for this bucket
            user_keys: Canonical keys the user holds for this bucket

        Returns:
            BucketScore (1.0 when there are no requirements)
        """
        user_keys = set(user_keys)
        result = BucketScore(required_total=len(required), desired_total=len(desired))

        for level, items in ((REQUIRED, required), (DESIRED, desired)):
            weight = self.settings.required_weight if level == REQUIRED else self.settings.desired_weight
            for item in items:
                matched = item.canonical in user_keys
                result.items.append(
                    BucketItem(
                        name=item.name,
                        canonical=item.canonical,
                        requirement_level=level,
                        multiplier=weight,
                        matched=matched,
                        language_signal=item.language_signal,
                    )
                )
                if matched and level == REQUIRED:
                    result.required_matched += 1
                elif matched:
                    result.desired_matched += 1

        numerator = (
            result.required_matched * self.settings.required_weight
            + result.desired_matched * self.settings.desired_weight
        )
        denominator = (
            result.required_total * self.settings.required_weight + result.desired_total * self.settings.desired_weight
        )
        result.score = numerator / denominator if denominator > 0 else 1.0
        return result

    def calculate_penalties(self, core: BucketScore, tools: BucketScore) -> Tuple[List[Penalty], float, bool]:
        """
        Penalties for missing items.

        Returns:
            (penalties, total after the floor, whether the floor applied)
        """
        penalties = []

        for item in core.required_missing:
            amount = get_penalty(REQUIRED, "CORE_SKILL", item.language_signal, self.settings)
            penalties.append(Penalty(item.name, "CORE_SKILL", REQUIRED, amount, "Missing required core skill"))

        for item in tools.required_missing:
            amount = get_penalty(REQUIRED, "TOOL", item.language_signal, self.settings)
            expert = amount == self.settings.missing_expert_tool_penalty
            reason = "Missing required tool (expert level)" if expert else "Missing required tool"
            penalties.append(Penalty(item.name, "TOOL", REQUIRED, amount, reason))

        for item in tools.desired_missing:
            amount = get_penalty(DESIRED, "TOOL", item.language_signal, self.settings)
            penalties.append(Penalty(item.name, "TOOL", DESIRED, amount, "Missing desired tool"))

        raw_total = sum(p.amount for p in penalties)
        if raw_total < self.settings.penalty_floor:
            log_penalty_capped(raw_total, self.settings.penalty_floor)
            return penalties, self.settings.penalty_floor, True
        return penalties, raw_total, False

    def validate_inputs(self, buckets: Optional[NormalizedBuckets], profile: ProfileInput) -> ValidationReport:
        """
        Check inputs before scoring.

        Errors (scoring is skipped): missing buckets, missing profile.
        Warnings: nothing extracted, implausibly many items, empty profile.
        """
        report = ValidationReport()

        if buckets is None:
            report.errors.append("Missing extracted requirements")
        else:
            total = buckets.total
            if total == 0:
                report.warnings.append("No skills extracted from job description")
            if total > self.settings.max_items_warning:
                report.warnings.append("Unusually high number of extracted skills - may indicate extraction issues")

        if profile is None:
            report.errors.append("Missing user profile")
        else:
            user_profile = profile if isinstance(profile, UserProfile) else UserProfile.from_dict(profile)
            if user_profile.is_empty:
                report.warnings.append("User profile has no skills - score will be 0")

        return report

    def score_batch(self, jobs: Iterable[Dict[str, Any]], profile: ProfileInput) -> List[Dict[str, Any]]:
        """
        Score many postings against one profile.

        Args:
            jobs: Dicts with "buckets" (NormalizedBuckets) and optional
                "job_id", "job_title", "company"
            profile: UserProfile or dict

        Returns:
            One dict per job with its identifiers and FitScoreResult
        """
        results = []
        for job in jobs:
            results.append(
                {
                    "job_id": job.get("job_id"),
                    "job_title": job.get("job_title"),
                    "company": job.get("company"),
                    "fit_score": self.calculate(job.get("buckets"), profile),
                }
            )
        return results
