"""Custom exceptions for analysis input validation."""

from typing import Optional


class AnalysisInputError(ValueError):
    """
    Exception raised when analysis input is unusable.

    SkillAnalyzer converts it into an error AnalysisResult; callers of the
    public entry points never see it.

    Attributes:
        message: Error description
        field_name: Input that failed validation ("text", "profile")
    """

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.message = message
        self.field_name = field_name

        parts = [message]

        if field_name:
            parts.append(f"Input: {field_name}")

        super().__init__("\n".join(parts))
