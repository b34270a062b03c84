"""
Taxonomy Context

Responsibilities:
- Loads the versioned skill taxonomy, tools dictionary and classification vocabulary
- Answers exact and approximate term lookups through an inverted index
- Merges user-promoted dictionary extensions into an effective vocabulary

Owns: TaxonomyEntry / ToolEntry data, deny-lists, canonical and synonym maps
Never: Extracts phrases from postings or decides requirement levels
"""
