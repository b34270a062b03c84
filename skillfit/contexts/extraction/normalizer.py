"""
Job text normalizer for the Extraction context.

Preprocesses raw posting text before phrase extraction and section detection.
Scraped postings arrive with smart quotes, non-breaking spaces, exotic bullets
and markdown emphasis; all downstream offsets refer to the normalized text.
"""

import re
import unicodedata

# Unicode replacements: problematic char → ASCII equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space → space
    "\u202f": " ",  # narrow no-break space
    "\u2009": " ",  # thin space
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM / zero-width no-break space
    # Quotes
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote
    "\u201c": '"',  # left double quote
    "\u201d": '"',  # right double quote
    # Dashes
    "\u2013": "-",  # en dash
    "\u2014": "-",  # em dash
    "\u2212": "-",  # minus sign
    # Bullets and misc
    "\u2022": "*",  # bullet
    "\u25e6": "*",  # white bullet
    "\u25aa": "*",  # small black square
    "\u25cf": "*",  # black circle
    "\u2023": "*",  # triangular bullet
    "\u2043": "*",  # hyphen bullet
    "\u00b7": "*",  # middle dot (used as bullet)
    "\u2026": "...",  # ellipsis
}

_BOLD_MARKERS = re.compile(r"\*\*|__")
_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")


def normalize_unicode(text: str) -> str:
    """
    Normalize unicode characters that cause parsing issues.

    Applies NFKC normalization and replaces common problematic characters
    with ASCII equivalents.

    Args:
        text: Raw text possibly containing problematic unicode

    Returns:
        Text with normalized unicode
    """
    # NFKC normalization handles many compatibility characters
    text = unicodedata.normalize("NFKC", text)

    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)

    return text


def strip_markdown_emphasis(text: str) -> str:
    """
    Remove bold markers so "**Requirements:**" reads as a plain header line.

    Single "*" is left alone; it doubles as a bullet marker.
    """
    return _BOLD_MARKERS.sub("", text)


def preprocess_job_text(text: str) -> str:
    """
    Preprocess job posting text before extraction.

    This is the main entry point for text normalization.
    Handles:
    - Line endings (CRLF / CR → LF)
    - Unicode normalization (non-breaking spaces, smart quotes, bullets)
    - Markdown bold markers around headers
    - Trailing whitespace and runs of blank lines

    Args:
        text: Raw job description text

    Returns:
        Normalized text ready for extraction
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = normalize_unicode(text)
    text = strip_markdown_emphasis(text)
    text = _TRAILING_SPACE.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)

    return text.strip()
