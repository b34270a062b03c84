"""
Heuristic detection of special application requirements.

Surfaces conditions a candidate should know before applying: emailed
applications, video introductions, travel, office days, portfolios, cover
letters, background checks / drug tests, security clearance and relocation.
Pure pattern matching; no extraction or classification dependencies.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from skillfit.contexts.extraction.extraction_patterns import SPECIAL_REQUIREMENT_PATTERNS

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITY_LOW = "low"
SEVERITY_INFO = "info"

# Travel above this percentage is high severity
HIGH_TRAVEL_PERCENT = 25
# Office days at or above this count are high severity
HIGH_OFFICE_DAYS = 4
WORK_WEEK_DAYS = 5


@dataclass(frozen=True)
class SpecialRequirementAlert:
    """
    One detected application condition.

    Attributes:
        type: Alert type (e.g., "TRAVEL_REQUIRED")
        severity: "high", "medium", "low" or "info"
        message: Human-readable summary
        details: Extracted values (email address, travel percentage, ...)
    """

    type: str
    severity: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "severity": self.severity, "message": self.message, "details": dict(self.details)}


@dataclass
class SpecialRequirements:
    """All alerts detected in one posting."""

    alerts: List[SpecialRequirementAlert] = field(default_factory=list)

    @property
    def has_special_requirements(self) -> bool:
        return bool(self.alerts)

    @property
    def alert_count(self) -> int:
        return len(self.alerts)

    @property
    def high_severity_count(self) -> int:
        return sum(1 for a in self.alerts if a.severity == SEVERITY_HIGH)

    def by_type(self, alert_type: str) -> Optional[SpecialRequirementAlert]:
        for alert in self.alerts:
            if alert.type == alert_type:
                return alert
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_special_requirements": self.has_special_requirements,
            "alert_count": self.alert_count,
            "high_severity_count": self.high_severity_count,
            "alerts": [a.to_dict() for a in self.alerts],
        }


def detect_special_requirements(text: str) -> SpecialRequirements:
    """
    Detect special application requirements in posting text.

    Args:
        text: Posting text

    Returns:
        SpecialRequirements (empty when text is empty)
    """
    result = SpecialRequirements()
    if not text:
        return result

    detectors = (
        _detect_email_submission,
        _detect_video,
        _detect_travel,
        _detect_office_days,
        _detect_portfolio,
        _detect_cover_letter,
        _detect_background_check,
        _detect_security_clearance,
        _detect_relocation,
    )
    for detector in detectors:
        alert = detector(text)
        if alert is not None:
            result.alerts.append(alert)

    return result


def _first_match(patterns, text: str):
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def _detect_email_submission(text: str) -> Optional[SpecialRequirementAlert]:
    match = _first_match(SPECIAL_REQUIREMENT_PATTERNS.EMAIL_SUBMISSION, text)
    if not match:
        return None
    email = match.group(1)
    return SpecialRequirementAlert(
        type="EMAIL_SUBMISSION",
        severity=SEVERITY_HIGH,
        message=f"Email application required: {email}",
        details={"email": email},
    )


def _detect_video(text: str) -> Optional[SpecialRequirementAlert]:
    if not _first_match(SPECIAL_REQUIREMENT_PATTERNS.VIDEO, text):
        return None
    return SpecialRequirementAlert(type="VIDEO_REQUIRED", severity=SEVERITY_MEDIUM, message="Video submission required")


def _detect_travel(text: str) -> Optional[SpecialRequirementAlert]:
    match = _first_match(SPECIAL_REQUIREMENT_PATTERNS.TRAVEL, text)
    if not match:
        return None

    percentage = int(match.group(1)) if match.groups() and match.group(1) else None
    severity = SEVERITY_HIGH if percentage is not None and percentage > HIGH_TRAVEL_PERCENT else SEVERITY_MEDIUM
    return SpecialRequirementAlert(
        type="TRAVEL_REQUIRED",
        severity=severity,
        message=f"Travel required: {percentage}%" if percentage is not None else "Travel required",
        details={"travel_percentage": percentage},
    )


def _detect_office_days(text: str) -> Optional[SpecialRequirementAlert]:
    days = None

    match = _first_match(SPECIAL_REQUIREMENT_PATTERNS.OFFICE_DAYS, text)
    if match:
        days = int(match.group(1))
    else:
        remote = SPECIAL_REQUIREMENT_PATTERNS.REMOTE_DAYS.search(text)
        if remote:
            days = WORK_WEEK_DAYS - int(remote.group(1))
        elif SPECIAL_REQUIREMENT_PATTERNS.FULLY_IN_OFFICE.search(text):
            return SpecialRequirementAlert(
                type="OFFICE_DAYS",
                severity=SEVERITY_HIGH,
                message="Full-time in office required",
                details={"office_days_per_week": WORK_WEEK_DAYS},
            )

    if days is None or not 0 < days <= WORK_WEEK_DAYS:
        return None

    return SpecialRequirementAlert(
        type="OFFICE_DAYS",
        severity=SEVERITY_HIGH if days >= HIGH_OFFICE_DAYS else SEVERITY_MEDIUM,
        message=f"Office: {days} days/week",
        details={"office_days_per_week": days},
    )


def _detect_portfolio(text: str) -> Optional[SpecialRequirementAlert]:
    if not _first_match(SPECIAL_REQUIREMENT_PATTERNS.PORTFOLIO, text):
        return None
    return SpecialRequirementAlert(
        type="PORTFOLIO_REQUIRED", severity=SEVERITY_MEDIUM, message="Portfolio/samples required"
    )


def _detect_cover_letter(text: str) -> Optional[SpecialRequirementAlert]:
    if not _first_match(SPECIAL_REQUIREMENT_PATTERNS.COVER_LETTER, text):
        return None
    return SpecialRequirementAlert(type="COVER_LETTER_REQUIRED", severity=SEVERITY_LOW, message="Cover letter required")


def _detect_background_check(text: str) -> Optional[SpecialRequirementAlert]:
    checks = []
    if _first_match(SPECIAL_REQUIREMENT_PATTERNS.BACKGROUND_CHECK, text):
        checks.append("background check")
    if _first_match(SPECIAL_REQUIREMENT_PATTERNS.DRUG_TEST, text):
        checks.append("drug test")
    if not checks:
        return None
    return SpecialRequirementAlert(
        type="BACKGROUND_CHECK",
        severity=SEVERITY_INFO,
        message=f"Requires: {', '.join(checks)}",
        details={"checks": checks},
    )


def _detect_security_clearance(text: str) -> Optional[SpecialRequirementAlert]:
    if not _first_match(SPECIAL_REQUIREMENT_PATTERNS.SECURITY_CLEARANCE, text):
        return None
    return SpecialRequirementAlert(
        type="SECURITY_CLEARANCE", severity=SEVERITY_HIGH, message="Security clearance required"
    )


def _detect_relocation(text: str) -> Optional[SpecialRequirementAlert]:
    if not _first_match(SPECIAL_REQUIREMENT_PATTERNS.RELOCATION, text):
        return None
    return SpecialRequirementAlert(type="RELOCATION", severity=SEVERITY_HIGH, message="Relocation may be required")
