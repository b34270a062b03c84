"""
Scoring Context

Responsibilities:
- Canonicalizes a user's declared skills and tools with the same resolver used for job items
- Computes the weighted, penalty-adjusted fit score with a per-bucket breakdown
- Produces fit labels, recommendations, input warnings and a plain-text report

Owns: Fit-score formula, penalty rationale, report template
Never: Extracts or classifies job text, or stores profiles
"""
