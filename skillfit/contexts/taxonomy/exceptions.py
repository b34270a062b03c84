"""Custom exceptions for taxonomy loading with dataset references."""

from pathlib import Path
from typing import Optional


class TaxonomyLoadError(ValueError):
    """
    Exception raised when a taxonomy dataset is missing or malformed.

    Attributes:
        message: Error description
        path: Dataset file that failed to load
        field_name: Top-level field being read when the error occurred
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        field_name: Optional[str] = None,
    ):
        self.message = message
        self.path = path
        self.field_name = field_name

        parts = [message]

        if path:
            parts.append(f"Dataset: {path}")

        if field_name:
            parts.append(f"Field: {field_name}")

        super().__init__("\n".join(parts))


class DuplicateCanonicalKeyError(TaxonomyLoadError):
    """
    Exception raised when two entries in one dataset share a canonical key.

    Attributes:
        canonical: The duplicated key
        names: Names of the colliding entries
    """

    def __init__(self, canonical: str, names: tuple, path: Optional[Path] = None):
        self.canonical = canonical
        self.names = names
        super().__init__(
            f"Duplicate canonical key '{canonical}' shared by {', '.join(names)}",
            path=path,
        )
