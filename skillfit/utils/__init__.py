"""
Shared utilities for skillfit.

Common functionality used across contexts:
- Logger setup and provenance
- Review event log
- Term normalization and canonical keys
- Timestamps
"""

from skillfit.utils.text_processing import normalize_term, to_canonical_key
from skillfit.utils.timestamp import now, now_exact

__all__ = ["normalize_term", "to_canonical_key", "now", "now_exact"]
