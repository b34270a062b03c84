"""
skillfit - skill and tool extraction with explainable job fit scoring

Reads unstructured job postings, pulls out the skills and tools they ask for,
decides which are required and which are nice to have, and scores a candidate's
declared inventory against them.

Architecture:
- Taxonomy Context: versioned skill/tool datasets and approximate matching
- Extraction Context: phrase extraction, splitting, requirement detection
- Classification Context: ordered rule chain and canonicalization
- Scoring Context: weighted, penalized fit score with explanations
- Review Context: persisted candidates and the user dictionary extension
- Analysis Context: the end-to-end service and its result cache
"""

__version__ = "0.1.0"
