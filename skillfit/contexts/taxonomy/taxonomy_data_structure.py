"""
Taxonomy data structures.

Immutable records for skill concepts, tools and categories, plus the
user-scoped dictionary extension produced by candidate review.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

USER_ADDED_CATEGORY = "User Added"


@dataclass(frozen=True)
class TaxonomyEntry:
    """
    A skill concept.

    Attributes:
        name: Human-readable skill name (e.g., "Conversion Rate Optimization")
        canonical: Unique deduplication key (e.g., "conversion_rate_optimization")
        category: Category id (e.g., "Growth")
        aliases: Alternative names and abbreviations
    """

    name: str
    canonical: str
    category: str
    aliases: Tuple[str, ...] = ()

    @property
    def terms(self) -> Tuple[str, ...]:
        """Every surface form that identifies this entry."""
        return (self.name, self.canonical, *self.aliases)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaxonomyEntry":
        return cls(
            name=data["name"],
            canonical=data["canonical"],
            category=data.get("category") or "Other",
            aliases=tuple(data.get("aliases") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "canonical": self.canonical,
            "category": self.category,
            "aliases": list(self.aliases),
        }


@dataclass(frozen=True)
class ToolEntry:
    """
    A named software product or platform from the tools dictionary.

    Attributes:
        name: Product name (e.g., "Google Analytics 4")
        canonical: Unique deduplication key (e.g., "google_analytics_4")
        tool_type: Product type (e.g., "Analytics")
        aliases: Alternative names
    """

    name: str
    canonical: str
    tool_type: str = "Other"
    aliases: Tuple[str, ...] = ()

    @property
    def terms(self) -> Tuple[str, ...]:
        return (self.name, self.canonical, *self.aliases)

    @property
    def category(self) -> str:
        return self.tool_type

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolEntry":
        return cls(
            name=data["name"],
            canonical=data["canonical"],
            tool_type=data.get("type") or "Other",
            aliases=tuple(data.get("aliases") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "canonical": self.canonical,
            "type": self.tool_type,
            "aliases": list(self.aliases),
        }


@dataclass(frozen=True)
class SkillCategory:
    """Display metadata for a taxonomy category."""

    id: str
    label: str
    color: str = "#6B7280"


@dataclass(frozen=True)
class DictionaryExtension:
    """
    User-scoped additions to the vocabulary, produced by "classify" feedback.

    Attributes:
        skills: Skill concepts promoted from candidates
        tools: Tools promoted from candidates
        noise: Phrases the user marked as never-a-skill (normalized)
    """

    skills: Tuple[TaxonomyEntry, ...] = ()
    tools: Tuple[ToolEntry, ...] = ()
    noise: Tuple[str, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        return not (self.skills or self.tools or self.noise)

    @property
    def size(self) -> int:
        return len(self.skills) + len(self.tools) + len(self.noise)
