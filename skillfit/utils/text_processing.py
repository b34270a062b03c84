"""
Text processing utilities shared across contexts.

Term normalization, canonical-key fallback, occurrence lookup and display helpers.
"""

import hashlib
import re
from typing import List, Optional, Tuple

# Characters kept by normalize_term besides word characters and whitespace
_TERM_STRIP = re.compile(r"[^\w\s/&-]")
_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_term(text: str) -> str:
    """
    Normalize a term for index lookup.

    Lowercases, strips punctuation except "/", "&" and "-", and collapses whitespace.

    Example:
        >>> normalize_term("  Go-to-Market   Strategy! ")
        'go-to-market strategy'
        >>> normalize_term("Messaging & Positioning")
        'messaging & positioning'
    """
    if not text:
        return ""
    normalized = _TERM_STRIP.sub("", text.lower())
    return _WHITESPACE.sub(" ", normalized).strip()


def normalize_phrase(text: str) -> str:
    """
    Light normalization for exact-list membership (lowercase, collapsed whitespace).

    Unlike normalize_term, keeps symbols so "c++" and "c#" stay distinct.
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.lower()).strip(" \t\n.,;:")


def to_canonical_key(text: str) -> str:
    """
    Mechanical canonical key: lowercase, non-alphanumeric runs become underscores.

    "+" and "#" are spelled out so C, C++ and C# get distinct keys.
    Idempotent on its own output.

    Example:
        >>> to_canonical_key("Lifecycle Marketing")
        'lifecycle_marketing'
        >>> to_canonical_key("C++")
        'c_plus_plus'
        >>> to_canonical_key("lifecycle_marketing")
        'lifecycle_marketing'
    """
    if not text:
        return ""
    spelled = text.lower().replace("+", " plus ").replace("#", " sharp ")
    return _NON_ALNUM.sub("_", spelled).strip("_")


def word_count(text: str) -> int:
    """Number of whitespace-separated words."""
    return len(text.split()) if text else 0


def boundary_pattern(term: str, flags: int = re.IGNORECASE) -> re.Pattern:
    """
    Compile a pattern matching term with word-ish boundaries on both sides.

    Uses lookarounds instead of \\b so terms that start or end with symbols
    ("c++", "a/b testing") still anchor correctly.
    """
    return re.compile(r"(?<![\w])" + re.escape(term) + r"(?![\w])", flags)


def find_occurrences(text: str, term: str) -> List[Tuple[int, int]]:
    """
    Find all boundary-anchored, case-insensitive occurrences of term in text.

    Returns:
        List of (start, end) character offsets, in text order
    """
    if not text or not term:
        return []
    return [(m.start(), m.end()) for m in boundary_pattern(term).finditer(text)]


def context_window(
    text: str, start: int, end: int, radius: int, lower: int = 0, upper: Optional[int] = None
) -> str:
    """
    Slice text around [start, end) by radius characters, clipped to [lower, upper).

    Example:
        >>> context_window("abcdefghij", 4, 5, 2)
        'cdefg'
    """
    upper = len(text) if upper is None else upper
    return text[max(lower, start - radius) : min(upper, end + radius)]


def hash_text(text: str) -> str:
    """SHA-256 hex digest of text (utf-8)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("short", 10)
        'short'
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."
