"""Custom exceptions for the candidate review surface."""

from typing import Iterable, Optional


class CandidateNotFoundError(KeyError):
    """
    Exception raised when a canonical key has no stored candidate.

    Attributes:
        canonical: The missing key
    """

    def __init__(self, canonical: str):
        self.canonical = canonical
        super().__init__(f"No candidate with canonical key '{canonical}'")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class InvalidFeedbackError(ValueError):
    """
    Exception raised for feedback with an unknown action or classification.

    Attributes:
        message: Error description
        value: The rejected value
        allowed: Accepted values
    """

    def __init__(self, message: str, value: Optional[str] = None, allowed: Optional[Iterable[str]] = None):
        self.message = message
        self.value = value
        self.allowed = tuple(allowed or ())

        parts = [message]

        if value is not None:
            parts.append(f"Got: {value!r}")

        if self.allowed:
            parts.append(f"Allowed: {', '.join(self.allowed)}")

        super().__init__("\n".join(parts))


class ClearNotConfirmedError(ValueError):
    """Exception raised when a bulk clear is requested without confirmation."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Refusing to clear {count} candidates without confirmation")
