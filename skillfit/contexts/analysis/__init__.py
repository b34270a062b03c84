"""
Analysis Context

Responsibilities:
- Runs the full pipeline: preprocess, extract, split, detect requirements,
  classify, normalize, score
- Presents a pure (text, config, profile) -> AnalysisResult boundary that
  turns bad input into a typed error result instead of raising
- Caches extraction results by text hash and refreshes the vocabulary when
  reviewers promote candidates

Owns: SkillAnalyzer, ResultCache, AnalysisResult
Never: Talks to the network, renders UI, or stores user profiles
"""
