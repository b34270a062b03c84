"""
Reusable patterns and constants for phrase extraction.

This module provides the regex patterns used by the phrase extractor, the
requirement detector and the special-requirements detector.

Pattern classes follow the project convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass

# =============================================================================
# VOCABULARY CONSTANTS
# =============================================================================

# Head nouns that make a noun phrase worth keeping ("email marketing", "cohort analysis")
DOMAIN_HEAD_NOUNS = (
    "acquisition",
    "analysis",
    "analytics",
    "architecture",
    "attribution",
    "automation",
    "design",
    "development",
    "engineering",
    "experimentation",
    "forecasting",
    "governance",
    "learning",
    "management",
    "marketing",
    "modeling",
    "modelling",
    "monetization",
    "operations",
    "optimization",
    "pipelines",
    "planning",
    "pricing",
    "reporting",
    "research",
    "retention",
    "science",
    "segmentation",
    "strategy",
    "testing",
    "visualization",
)

# Leading modifiers dropped from noun phrases ("strong data analysis" -> "data analysis")
NOUN_PHRASE_STOP_MODIFIERS = frozenset(
    {
        "a",
        "an",
        "and",
        "any",
        "our",
        "the",
        "their",
        "this",
        "your",
        "strong",
        "solid",
        "excellent",
        "great",
        "good",
        "proven",
        "deep",
        "new",
        "other",
        "overall",
        "various",
        "key",
        "general",
        "related",
        "relevant",
        "similar",
        "across",
        "as",
        "at",
        "by",
        "for",
        "from",
        "in",
        "into",
        "is",
        "of",
        "on",
        "or",
        "to",
        "we",
        "will",
        "with",
        "you",
    }
)

# POS tags that may appear inside a noun-phrase chunk
NOUN_CHUNK_TAGS = frozenset({"JJ", "NN", "NNS", "NNP", "NNPS", "VBG"})

_HEAD_NOUN_PATTERN = "|".join(DOMAIN_HEAD_NOUNS)

# =============================================================================
# PHRASE EXTRACTION PATTERNS
# =============================================================================


@dataclass(frozen=True)
class BulletPatterns:
    """
    Patterns for bullet and numbered list items.

    Bullets arrive normalized to "*" or "-" by the text normalizer.
    """

    # "* item", "- item", "+ item", "1. item", "2) item", "a) item"
    BULLET_LINE: re.Pattern = re.compile(r"^[ \t]*(?:[*+\-]|\d{1,2}[.)]|[a-z][.)])[ \t]+(.+)$", re.MULTILINE)


@dataclass(frozen=True)
class IndicatorPatterns:
    """
    Phrases introduced by skill indicator words.

    Captures run to the end of the sentence; the extractor trims at clause
    breaks before applying the phrase bounds.
    """

    INDICATORS: tuple = (
        re.compile(r"\bexperience\s+(?:in|with)\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bproficien(?:cy|t)\s+(?:in|with)\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bexpertise\s+(?:in|with)\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bknowledge\s+of\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bfamiliar(?:ity)?\s+with\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bskilled?\s+(?:in|at|with)\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bbackground\s+in\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bunderstanding\s+of\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
        re.compile(r"\bfluen(?:cy|t)\s+in\s+([A-Za-z][^\n.;:!?]{1,70})", re.IGNORECASE),
    )

    # Clause boundaries that end an indicator capture
    CLAUSE_BREAK: re.Pattern = re.compile(
        r"\s+(?:to|for|that|which|who|where|while|across|within|in order|so that|is|are|as)\s",
        re.IGNORECASE,
    )


@dataclass(frozen=True)
class ListCuePatterns:
    """Comma/list extraction after listing cues."""

    LIST_CUES: tuple = (
        re.compile(
            r"\b(?:skills?|technologies|tools|platforms|languages|stack)\s*(?:include[sd]?\s*:?|:)\s*([^.\n]+)",
            re.IGNORECASE,
        ),
        re.compile(r"\b(?:including|such\s+as|e\.g\.,?)\s*([^.\n]+)", re.IGNORECASE),
    )

    LIST_SEPARATOR: re.Pattern = re.compile(r"\s*[,;]\s*|\s+and\s+|\s+or\s+", re.IGNORECASE)
    LEADING_CONJUNCTION: re.Pattern = re.compile(r"^(?:and|or|etc)\b\s*", re.IGNORECASE)
    ENCLOSING: re.Pattern = re.compile(r"^[(\[\s]+|[)\]\s]+$")

    MAX_ITEM_LENGTH: int = 40


@dataclass(frozen=True)
class NounPhrasePatterns:
    """
    Deterministic regex fallback for noun-phrase extraction.

    Used when the POS tagger model is not installed.
    """

    # 2-8 character all-caps tokens: SQL, CRM, B2B, A/B, SEO
    ACRONYM: re.Pattern = re.compile(r"(?<![\w/])[A-Z][A-Z0-9&/+]{1,7}(?![\w/])")

    # One or two modifiers followed by a domain head noun: "email marketing", "media mix modeling"
    COMPOUND_NOUN: re.Pattern = re.compile(
        rf"\b((?:[A-Za-z][A-Za-z0-9/-]*[ \t]+){{1,2}}(?:{_HEAD_NOUN_PATTERN}))\b",
        re.IGNORECASE,
    )

    # Gerund followed by a domain noun: "building pipelines", "running experimentation"
    GERUND_NOUN: re.Pattern = re.compile(
        rf"\b([A-Za-z]+ing[ \t]+(?:{_HEAD_NOUN_PATTERN}))\b",
        re.IGNORECASE,
    )

    TOKEN: re.Pattern = re.compile(r"[A-Za-z][A-Za-z0-9+#/&-]*")


@dataclass(frozen=True)
class CleanupPatterns:
    """Phrase cleanup applied to every extracted phrase."""

    EDGE_PUNCTUATION: re.Pattern = re.compile(r"^[\s,.\-*:;!?\"']+|[\s,.\-*:;!?\"']+$")
    YEARS_PREFIX: re.Pattern = re.compile(
        r"\b\d+\s*(?:\+|-\s*\d+)?\s*years?\s+(?:of\s+)?(?:(?:hands-on|professional|proven|relevant)\s+)?"
        r"(?:experience\s+(?:in|with)\s+)?",
        re.IGNORECASE,
    )
    LEADING_QUALIFIER: re.Pattern = re.compile(
        r"^(?:(?:strong|solid|proven|deep|excellent|advanced|demonstrated|hands-on|working|good|basic)\s+)?"
        r"(?:experience|knowledge|understanding|proficiency|expertise|background|familiarity)\s+(?:in|with|of)\s+",
        re.IGNORECASE,
    )
    TRAILING_QUALIFIER: re.Pattern = re.compile(
        r"\s+(?:experience|skills?|required|preferred|(?:is\s+)?a\s+plus|is\s+preferred|is\s+required|a\s+must)$",
        re.IGNORECASE,
    )
    WHITESPACE: re.Pattern = re.compile(r"\s+")


# =============================================================================
# REQUIREMENT LANGUAGE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class RequirementLanguagePatterns:
    """Intensity language scanned in the context window around a phrase."""

    EXPERT: re.Pattern = re.compile(r"\b(?:expert|advanced|mastery|deep\s+expertise)\b", re.IGNORECASE)
    MUST_HAVE: re.Pattern = re.compile(
        r"\b(?:must[\s-]have|must\s+be|required|requires?|mandatory|essential)\b", re.IGNORECASE
    )
    YEARS: re.Pattern = re.compile(
        r"(\d+)\+?\s*years?\s+(?:of\s+)?(?:experience|background|track\s+record)", re.IGNORECASE
    )
    PREFERRED: re.Pattern = re.compile(
        r"\b(?:preferred|nice[\s-]to[\s-]have|a\s+plus|bonus|desirable|ideally|would\s+be\s+great)\b",
        re.IGNORECASE,
    )

    # analyze_section(): phrases stated with explicit intensity
    SECTION_INTENSITY: tuple = (
        (re.compile(r"expert(?:ise)?\s+(?:in|with)\s+([a-z][a-z0-9\s/&-]{2,50})", re.IGNORECASE), "expert required"),
        (re.compile(r"advanced\s+(?:in|with)\s+([a-z][a-z0-9\s/&-]{2,50})", re.IGNORECASE), "advanced required"),
        (re.compile(r"must\s+have\s+([a-z][a-z0-9\s/&-]{2,50})", re.IGNORECASE), "required"),
    )


# =============================================================================
# SPECIAL APPLICATION REQUIREMENT PATTERNS
# =============================================================================

_EMAIL = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
_IN_OFFICE = r"(?:in[\s-]?(?:the\s+)?office|on[\s-]?site|onsite)"


@dataclass(frozen=True)
class SpecialRequirementPatterns:
    """Application conditions worth surfacing before a candidate applies."""

    EMAIL_SUBMISSION: tuple = (
        re.compile(rf"(?:send|submit|email|forward)\s+(?:your\s+)?(?:resume|cv|application)\s+(?:to\s+)?({_EMAIL})", re.IGNORECASE),
        re.compile(rf"({_EMAIL})\s*(?:with|include|along)", re.IGNORECASE),
        re.compile(rf"apply\s+(?:by\s+)?(?:sending|emailing)\s+(?:to\s+)?({_EMAIL})", re.IGNORECASE),
        re.compile(rf"email\s+(?:applications?\s+)?(?:to\s+)?({_EMAIL})", re.IGNORECASE),
    )

    VIDEO: tuple = (
        re.compile(r"(?:video|recording|recorded)\s+(?:introduction|intro|cover\s+letter|application|presentation)", re.IGNORECASE),
        re.compile(r"(?:include|submit|send)\s+(?:a\s+)?(?:short\s+)?video", re.IGNORECASE),
        re.compile(r"(?:loom|youtube|vimeo)\s+(?:video|link|recording)", re.IGNORECASE),
        re.compile(r"video\s+(?:is\s+)?(?:required|mandatory|expected)", re.IGNORECASE),
        re.compile(r"record\s+(?:a\s+)?(?:short\s+)?(?:video|introduction|yourself)", re.IGNORECASE),
    )

    # Patterns with a percentage group come first
    TRAVEL: tuple = (
        re.compile(r"(\d{1,3})\s*%\s*(?:travel|traveling|travelling)", re.IGNORECASE),
        re.compile(r"(?:travel|traveling|travelling)\s+(?:up\s+to\s+)?(\d{1,3})\s*%", re.IGNORECASE),
        re.compile(r"(?:travel|traveling|travelling)\s+(?:is\s+)?(?:required|expected|necessary)", re.IGNORECASE),
        re.compile(r"(?:frequent|regular|occasional|extensive)\s+travel", re.IGNORECASE),
        re.compile(r"(?:domestic|international|regional)\s+travel\s+(?:required|expected)", re.IGNORECASE),
    )

    OFFICE_DAYS: tuple = (
        re.compile(rf"(\d)\s*(?:days?|x)\s*(?:per|a|/)\s*week\s*{_IN_OFFICE}", re.IGNORECASE),
        re.compile(rf"(\d)\s*days?\s+{_IN_OFFICE}", re.IGNORECASE),
        re.compile(rf"{_IN_OFFICE}\s*(\d)\s*(?:days?|x)\s*(?:per|a|/)\s*week", re.IGNORECASE),
        re.compile(rf"hybrid\s*(?:\(|:)?\s*(\d)\s*(?:days?|x)\s*{_IN_OFFICE}", re.IGNORECASE),
        re.compile(rf"(?:must|required\s+to)\s+(?:be\s+)?{_IN_OFFICE}\s*(\d)\s*days?", re.IGNORECASE),
    )
    REMOTE_DAYS: re.Pattern = re.compile(r"(\d)\s*days?\s+(?:remote|wfh|work\s+from\s+home)", re.IGNORECASE)
    FULLY_IN_OFFICE: re.Pattern = re.compile(
        rf"\b(?:fully?\s+)?{_IN_OFFICE}\s+(?:only|required|position|role)\b", re.IGNORECASE
    )

    PORTFOLIO: tuple = (
        re.compile(r"(?:portfolio|work\s+samples?|writing\s+samples?)\s+(?:is\s+)?(?:required|mandatory|expected)", re.IGNORECASE),
        re.compile(r"(?:include|submit|send|share)\s+(?:your\s+|a\s+)?(?:portfolio|work\s+samples?|writing\s+samples?)", re.IGNORECASE),
        re.compile(r"(?:link\s+to|provide)\s+(?:your\s+|a\s+)?(?:portfolio|samples?|previous\s+work)", re.IGNORECASE),
        re.compile(r"portfolio\s+(?:is\s+)?(?:a\s+)?must", re.IGNORECASE),
    )

    COVER_LETTER: tuple = (
        re.compile(r"cover\s+letter\s+(?:is\s+)?(?:required|mandatory|expected)", re.IGNORECASE),
        re.compile(r"(?:include|submit|send|attach)\s+(?:a\s+)?cover\s+letter", re.IGNORECASE),
        re.compile(r"cover\s+letter\s+(?:that|explaining|describing)", re.IGNORECASE),
    )

    BACKGROUND_CHECK: tuple = (
        re.compile(r"background\s+(?:check|screening|investigation)", re.IGNORECASE),
        re.compile(r"(?:pre[\s-]?employment|criminal)\s+(?:background|screening)", re.IGNORECASE),
        re.compile(r"subject\s+to\s+(?:a\s+)?background", re.IGNORECASE),
    )
    DRUG_TEST: tuple = (
        re.compile(r"(?:drug|substance)\s+(?:test|testing|screen|screening)", re.IGNORECASE),
        re.compile(r"subject\s+to\s+(?:a\s+)?drug", re.IGNORECASE),
    )

    SECURITY_CLEARANCE: tuple = (
        re.compile(r"(?:security|government)\s+clearance\s+(?:is\s+)?(?:required|necessary|needed)", re.IGNORECASE),
        re.compile(r"(?:must|required\s+to)\s+(?:have|obtain|hold)\s+(?:an?\s+)?(?:active\s+)?(?:security|government)\s+clearance", re.IGNORECASE),
        re.compile(r"(?:secret|top\s+secret|ts/sci)\s+clearance", re.IGNORECASE),
        re.compile(r"clearance\s+(?:is\s+)?(?:required|mandatory)", re.IGNORECASE),
    )

    RELOCATION: tuple = (
        re.compile(r"(?:must\s+(?:be\s+)?(?:willing\s+to\s+)?|willing\s+to\s+)relocate", re.IGNORECASE),
        re.compile(r"relocation\s+(?:is\s+)?(?:required|necessary|expected)", re.IGNORECASE),
        re.compile(r"local\s+candidates?\s+only", re.IGNORECASE),
        re.compile(r"must\s+(?:be\s+)?(?:located|based)\s+in", re.IGNORECASE),
    )


# Convenience instances
BULLET_PATTERNS = BulletPatterns()
INDICATOR_PATTERNS = IndicatorPatterns()
LIST_CUE_PATTERNS = ListCuePatterns()
NOUN_PHRASE_PATTERNS = NounPhrasePatterns()
CLEANUP_PATTERNS = CleanupPatterns()
REQUIREMENT_LANGUAGE = RequirementLanguagePatterns()
SPECIAL_REQUIREMENT_PATTERNS = SpecialRequirementPatterns()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def clean_extracted_phrase(phrase: str) -> str:
    """
    Clean an extracted phrase.

    Removes "N+ years of" prefixes, "experience with" style lead-ins, trailing
    "experience/skills/required/preferred/a plus" and edge punctuation.

    Example:
        >>> clean_extracted_phrase("5+ years of experience with SQL")
        'SQL'
        >>> clean_extracted_phrase("Lifecycle marketing experience.")
        'Lifecycle marketing'
    """
    if not phrase:
        return ""

    cleaned = CLEANUP_PATTERNS.WHITESPACE.sub(" ", phrase).strip()
    cleaned = CLEANUP_PATTERNS.YEARS_PREFIX.sub("", cleaned)
    cleaned = CLEANUP_PATTERNS.EDGE_PUNCTUATION.sub("", cleaned)
    cleaned = CLEANUP_PATTERNS.LEADING_QUALIFIER.sub("", cleaned)

    # Trailing qualifiers can stack ("SQL skills required")
    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = CLEANUP_PATTERNS.TRAILING_QUALIFIER.sub("", cleaned)
        cleaned = CLEANUP_PATTERNS.EDGE_PUNCTUATION.sub("", cleaned)

    return CLEANUP_PATTERNS.WHITESPACE.sub(" ", cleaned).strip()


def trim_at_clause_break(capture: str) -> str:
    """Cut an indicator capture at the first clause boundary."""
    match = INDICATOR_PATTERNS.CLAUSE_BREAK.search(capture)
    return capture[: match.start()] if match else capture
