"""
Review Context

Responsibilities:
- Persists CANDIDATE items across analyses, counting recurrences
- Records accept / reject / classify feedback from a human reviewer
- Turns "classify" feedback into the user dictionary extension read by future analyses

Owns: Candidate store (SQLite), dictionary extension rows, review event log entries
Never: Classifies text itself, or mutates the static taxonomy datasets
"""
