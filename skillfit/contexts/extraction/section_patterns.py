"""
Pattern matching for requirement section headers.

A line is a header when its text (markdown hashes, bullets and a trailing
colon removed) fully matches one of the archetype patterns below, or when the
text before its first colon does ("Nice to have: Looker, Mode").

Pattern classes follow the frozen-dataclass convention used across the project:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

# =============================================================================
# SECTION ARCHETYPE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SectionArchetypePatterns:
    """
    Full-match patterns for header text, lowercased and whitespace-normalized.

    Desired patterns are checked before required ones so "Preferred
    Qualifications" is not swallowed by the bare "qualifications" pattern.
    """

    DESIRED: tuple = (
        r"(?:preferred|desired|bonus|additional|nice[\s-]to[\s-]have|plus)(?: (?:skills?|qualifications?|requirements?|experience|points?))?",
        r"nice[\s-]to[\s-]haves?",
        r"(?:it'?s )?a plus(?: if(?: you have)?)?",
        r"ideal(?:ly)?(?: (?:qualifications?|candidates?|skills?|you(?:'ll| will)? (?:have|bring)))?",
        r"bonus points?(?: if(?: you(?: have)?)?)?",
        r"(?:ways to |you'll )?stand out(?: if(?: you have)?)?",
        r"(?:it would be |even better if |great if )you(?: also)? have",
        r"what would make you stand out",
    )

    REQUIRED: tuple = (
        r"(?:required|minimum|essential|must[\s-]have|basic)(?: (?:skills?|qualifications?|requirements?|experience))?",
        r"must[\s-]haves",
        r"what (?:you(?:'ll| will)?|we(?:'re| are)?) (?:need|looking for|require)(?: to succeed)?",
        r"what you(?:'ll| will)? bring(?: to the (?:role|team))?",
        r"you (?:should|must|will) have",
        r"(?:key |core |job |your )?qualifications?",
        r"(?:key |core |job |minimum |the )?requirements?",
        r"(?:key |core |technical )?skills(?: (?:and|&) (?:experience|qualifications))?",
        r"experience (?:and|&) (?:skills|qualifications)",
        r"(?:who|what) we(?:'re| are) looking for",
        r"who you are",
        r"about you",
    )

    BOUNDARY: tuple = (
        r"about(?: .{1,40})?",
        r"(?:the |your )?(?:role|position|opportunity|team)",
        r"(?:job |role |position )?(?:summary|overview|description)",
        r"(?:key |your |main )?responsibilities",
        r"what you(?:'ll| will)? (?:be )?do(?:ing)?",
        r"(?:the )?benefits(?: (?:and|&) perks)?",
        r"perks(?: (?:and|&) benefits)?",
        r"what we offer",
        r"why (?:join|work).{0,40}",
        r"(?:compensation|salary|pay range|pay)(?: .{0,30})?",
        r"location",
        r"how to apply",
        r"(?:application|interview) process",
        r"equal (?:opportunity|employment).{0,40}",
        r"eeo(?: statement)?",
        r"(?:our )?(?:company|mission|culture|values)",
        r"who we are",
    )


REQUIRED_HEADER_PATTERNS = [re.compile(p) for p in SectionArchetypePatterns.REQUIRED]
DESIRED_HEADER_PATTERNS = [re.compile(p) for p in SectionArchetypePatterns.DESIRED]
BOUNDARY_HEADER_PATTERNS = [re.compile(p) for p in SectionArchetypePatterns.BOUNDARY]

# Checked in order; first full match wins
ARCHETYPE_PATTERNS = (
    ("desired", DESIRED_HEADER_PATTERNS),
    ("required", REQUIRED_HEADER_PATTERNS),
    ("boundary", BOUNDARY_HEADER_PATTERNS),
)

# Header lines longer than this are prose, not headers
MAX_HEADER_LENGTH = 60

_HEADER_DECORATION = re.compile(r"^[#*\-=\s]+|[#*\-=:\s]+$")

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def normalize_section_name(name: str) -> str:
    """
    Normalize header text for matching.

    Args:
        name: Raw header text

    Returns:
        Lowercased text with decoration stripped and whitespace normalized
    """
    normalized = _HEADER_DECORATION.sub("", name.lower())
    return re.sub(r"\s+", " ", normalized).strip()


def match_section_archetype(name: str) -> Optional[str]:
    """
    Match header text to "desired", "required" or "boundary".

    Args:
        name: Candidate header text

    Returns:
        Archetype name, or None if the text is not a recognized header
    """
    normalized = normalize_section_name(name)
    if not normalized:
        return None

    for archetype, patterns in ARCHETYPE_PATTERNS:
        if any(p.fullmatch(normalized) for p in patterns):
            return archetype

    return None


def match_header_line(line: str) -> Optional[Tuple[str, str, int]]:
    """
    Decide whether a line is a section header.

    Args:
        line: One line of normalized posting text (no newline)

    Returns:
        (archetype, header text, body offset within the line) or None.
        The body offset is len(line) for stand-alone headers, or the position
        just past the colon for inline headers like "Required: SQL, Python".
    """
    stripped = line.strip()
    if not stripped or (len(stripped) > MAX_HEADER_LENGTH and ":" not in stripped):
        return None

    if len(stripped) <= MAX_HEADER_LENGTH:
        archetype = match_section_archetype(stripped)
        if archetype:
            return archetype, normalize_section_name(stripped), len(line)

    if ":" in stripped:
        label = line.split(":", 1)[0]
        if len(label.strip()) <= MAX_HEADER_LENGTH:
            archetype = match_section_archetype(label)
            if archetype:
                return archetype, normalize_section_name(label), len(label) + 1

    return None
