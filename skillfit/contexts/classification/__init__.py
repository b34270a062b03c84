"""
Classification Context

Responsibilities:
- Routes each phrase to CORE_SKILL / TOOL / CANDIDATE / REJECTED through an
  ordered chain of named rules, recording which rule fired
- Canonicalizes and deduplicates classified items into requirement buckets
- Combines classifier confidence with canonical match quality

Owns: Classification rules, canonical-key resolution, bucket deduplication
Never: Extracts phrases from raw text, scores profiles, or persists candidates
"""
