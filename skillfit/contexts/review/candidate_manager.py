"""
Persistent SQLite store for review candidates and the user dictionary extension.

Tables:
- candidates: one row per canonical key, with recurrence count and feedback
- dictionary_extensions: skills, tools and noise phrases promoted by "classify"
  feedback; read by SkillAnalyzer to build the effective vocabulary

The store is append-mostly and shared between analyses. Concurrent writers
are serialized per manager instance; across processes the last write wins.
"""

import os
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dotenv import load_dotenv

from skillfit.contexts.classification.classification_data_structure import ClassifiedItem, ItemType
from skillfit.contexts.review.candidate_data_structure import (
    ACTION_CLASSIFY,
    ACTION_REJECT,
    CLASSIFY_TARGETS,
    FEEDBACK_ACTIONS,
    KIND_NOISE,
    Candidate,
)
from skillfit.contexts.review.exceptions import (
    CandidateNotFoundError,
    ClearNotConfirmedError,
    InvalidFeedbackError,
)
from skillfit.contexts.review.logger import (
    log_candidate_demoted,
    log_candidate_feedback,
    log_candidate_promoted,
    log_candidate_removed,
    log_candidates_cleared,
    log_candidates_stored,
)
from skillfit.contexts.taxonomy.taxonomy_data_structure import (
    USER_ADDED_CATEGORY,
    DictionaryExtension,
    TaxonomyEntry,
    ToolEntry,
)
from skillfit.utils.event_logging import log_review_event
from skillfit.utils.timestamp import now_exact

load_dotenv()
CANDIDATE_DB_PATH = Path(os.getenv("CANDIDATE_DB_PATH", "outs/candidates.db"))

EXPORT_VERSION = "1.0"
DEFAULT_REVIEW_LIMIT = 50

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS candidates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        canonical TEXT NOT NULL UNIQUE,
        raw TEXT NOT NULL,
        inferred_type TEXT NOT NULL DEFAULT 'UNKNOWN',
        confidence REAL NOT NULL DEFAULT 0.0,
        evidence TEXT,
        context TEXT,
        occurrences INTEGER NOT NULL DEFAULT 1,
        first_seen TEXT NOT NULL,
        last_seen TEXT NOT NULL,

        feedback_action TEXT,
        feedback_classified_as TEXT,
        feedback_note TEXT,
        feedback_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS dictionary_extensions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        kind TEXT NOT NULL,
        canonical TEXT NOT NULL,
        name TEXT NOT NULL,
        added_at TEXT NOT NULL,
        UNIQUE(kind, canonical)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_candidates_confidence ON candidates(confidence)",
)


class CandidateManager:
    """
    Candidate store with feedback and promotion.

    Creates the database (and its parent directory) on first use.

    Attributes:
        db_path: SQLite file
        events_file: Review event log override (defaults to REVIEW_EVENTS_FILE)
    """

    def __init__(self, db_path: Optional[Path] = None, events_file: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else CANDIDATE_DB_PATH
        self.events_file = events_file
        self._lock = threading.Lock()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row  # Enable column access by name
        for statement in _SCHEMA:
            self.conn.execute(statement)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "CandidateManager":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        cursor = self.conn.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def _log_event(self, event_type: str, canonical: str, **fields) -> None:
        log_review_event(event_type, canonical, source="review", events_file=self.events_file, **fields)

    # =========================================================================
    # STORE AND READ
    # =========================================================================

    def store_candidates(self, items: Iterable[ClassifiedItem]) -> int:
        """
        Store CANDIDATE items from one analysis.

        Keys already in the store get their occurrence count incremented;
        other item types are ignored.

        Args:
            items: Classified items (typically NormalizedBuckets.candidates)

        Returns:
            Number of newly stored candidates
        """
        timestamp = now_exact()
        new = recurring = 0
        seen = set()

        with self._lock:
            for item in items:
                if item.item_type != ItemType.CANDIDATE or item.canonical in seen:
                    continue
                seen.add(item.canonical)

                inferred = item.inferred_type.value if item.inferred_type else "UNKNOWN"
                cursor = self.conn.execute(
                    "UPDATE candidates SET occurrences = occurrences + 1, last_seen = ? WHERE canonical = ?",
                    (timestamp, item.canonical),
                )
                if cursor.rowcount:
                    recurring += 1
                    continue

                self.conn.execute(
                    """
                    INSERT INTO candidates
                        (canonical, raw, inferred_type, confidence, evidence, context, first_seen, last_seen)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (item.canonical, item.raw, inferred, item.confidence, item.evidence, item.context, timestamp, timestamp),
                )
                new += 1
            self.conn.commit()

        log_candidates_stored(new, recurring, self.count())
        return new

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM candidates").fetchone()[0]

    def get_candidates(self) -> List[Candidate]:
        """All candidates in insertion order."""
        return [Candidate.from_row(r) for r in self._query("SELECT * FROM candidates ORDER BY id")]

    def get_candidate(self, canonical: str) -> Candidate:
        """
        Look up one candidate.

        Raises:
            CandidateNotFoundError: If the key is not stored
        """
        rows = self._query("SELECT * FROM candidates WHERE canonical = ?", (canonical,))
        if not rows:
            raise CandidateNotFoundError(canonical)
        return Candidate.from_row(rows[0])

    # =========================================================================
    # FEEDBACK
    # =========================================================================

    def update_feedback(
        self,
        canonical: str,
        action: str,
        classified_as: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Candidate:
        """
        Record reviewer feedback.

        "classify" feedback also promotes the candidate into the dictionary
        extension (CORE_SKILL, TOOL, or REJECTED as user noise).

        Args:
            canonical: Candidate key
            action: "accept", "reject" or "classify"
            classified_as: Required for "classify"
            note: Optional reviewer note

        Returns:
            Updated Candidate

        Raises:
            InvalidFeedbackError: Unknown action, or classify without a valid target
            CandidateNotFoundError: If the key is not stored
        """
        action = (action or "").strip().lower()
        if action not in FEEDBACK_ACTIONS:
            raise InvalidFeedbackError("Unknown feedback action", action, FEEDBACK_ACTIONS)

        if classified_as is not None:
            classified_as = classified_as.strip().upper()
        if action == ACTION_CLASSIFY and classified_as not in CLASSIFY_TARGETS:
            raise InvalidFeedbackError("classify feedback needs a target type", classified_as, CLASSIFY_TARGETS)
        if action != ACTION_CLASSIFY:
            classified_as = None

        candidate = self.get_candidate(canonical)
        timestamp = now_exact()

        with self._lock:
            self.conn.execute(
                """
                UPDATE candidates
                SET feedback_action = ?, feedback_classified_as = ?, feedback_note = ?, feedback_at = ?
                WHERE canonical = ?
                """,
                (action, classified_as, note, timestamp, canonical),
            )
            self.conn.commit()

        log_candidate_feedback(canonical, action, classified_as)
        self._log_event("feedback", canonical, action=action, classified_as=classified_as, note=note)

        if action == ACTION_CLASSIFY:
            self.promote(candidate, classified_as)

        return self.get_candidate(canonical)

    def promote(self, candidate: Candidate, kind: str) -> bool:
        """
        Put a candidate into the dictionary extension, replacing any earlier promotion.

        A key holds at most one extension row, so re-classifying a candidate
        (CORE_SKILL -> TOOL, CORE_SKILL -> REJECTED, ...) takes effect on the
        next analysis.

        Args:
            candidate: Stored candidate
            kind: CORE_SKILL, TOOL, or REJECTED (stored as noise)

        Returns:
            True if the extension changed
        """
        stored_kind = KIND_NOISE if kind == "REJECTED" else kind
        with self._lock:
            kinds = [
                row[0]
                for row in self.conn.execute(
                    "SELECT kind FROM dictionary_extensions WHERE canonical = ?", (candidate.canonical,)
                )
            ]
            if kinds == [stored_kind]:
                return False

            self.conn.execute("DELETE FROM dictionary_extensions WHERE canonical = ?", (candidate.canonical,))
            self.conn.execute(
                "INSERT INTO dictionary_extensions (kind, canonical, name, added_at) VALUES (?, ?, ?, ?)",
                (stored_kind, candidate.canonical, candidate.raw, now_exact()),
            )
            self.conn.commit()

        log_candidate_promoted(candidate.canonical, stored_kind)
        self._log_event("promotion", candidate.canonical, kind=stored_kind, name=candidate.raw, replaced=kinds)
        return True

    def demote(self, canonical: str) -> int:
        """
        Drop a key from the dictionary extension.

        Works whether or not the candidate row still exists, so promotions
        survive clear_candidates() but can still be undone.

        Returns:
            Number of extension rows deleted
        """
        with self._lock:
            cursor = self.conn.execute("DELETE FROM dictionary_extensions WHERE canonical = ?", (canonical,))
            self.conn.commit()

        if cursor.rowcount:
            log_candidate_demoted(canonical, cursor.rowcount)
            self._log_event("demotion", canonical, rows=cursor.rowcount)
        return cursor.rowcount

    def remove_candidate(self, canonical: str) -> None:
        """
        Delete one candidate and any promotion made from it.

        Raises:
            CandidateNotFoundError: If the key is not stored
        """
        with self._lock:
            cursor = self.conn.execute("DELETE FROM candidates WHERE canonical = ?", (canonical,))
            self.conn.commit()
        if cursor.rowcount == 0:
            raise CandidateNotFoundError(canonical)

        self.demote(canonical)
        log_candidate_removed(canonical)
        self._log_event("removal", canonical)

    def clear_candidates(self, confirmed: bool = False) -> int:
        """
        Delete every candidate. Dictionary extensions are kept.

        Args:
            confirmed: Must be True

        Returns:
            Number of deleted candidates

        Raises:
            ClearNotConfirmedError: If confirmed is not True
        """
        count = self.count()
        if confirmed is not True:
            raise ClearNotConfirmedError(count)

        with self._lock:
            self.conn.execute("DELETE FROM candidates")
            self.conn.commit()

        log_candidates_cleared(count)
        self._log_event("clear", "*", count=count)
        return count

    # =========================================================================
    # REVIEW VIEWS
    # =========================================================================

    def get_candidates_grouped(self) -> Dict[str, Any]:
        """Candidates grouped by inferred type, with review stats."""
        candidates = self.get_candidates()
        grouped: Dict[str, Any] = {
            "inferred_tools": [c for c in candidates if c.inferred_type == "TOOL"],
            "inferred_skills": [c for c in candidates if c.inferred_type == "CORE_SKILL"],
            "unknown": [c for c in candidates if c.inferred_type not in ("TOOL", "CORE_SKILL")],
        }
        grouped["stats"] = {
            "total": len(candidates),
            "with_feedback": sum(1 for c in candidates if not c.needs_review),
            "needs_review": sum(1 for c in candidates if c.needs_review),
        }
        return grouped

    def get_candidates_by_confidence(self, limit: int = DEFAULT_REVIEW_LIMIT) -> List[Candidate]:
        """Unreviewed candidates, lowest confidence first."""
        rows = self._query(
            "SELECT * FROM candidates WHERE feedback_action IS NULL ORDER BY confidence ASC, id ASC LIMIT ?",
            (limit,),
        )
        return [Candidate.from_row(r) for r in rows]

    def get_candidates_by_frequency(self) -> List[Candidate]:
        """Candidates ordered by how many postings they appeared in, most first."""
        rows = self._query("SELECT * FROM candidates ORDER BY occurrences DESC, id ASC")
        return [Candidate.from_row(r) for r in rows]

    def export_candidates(self, include_rejected: bool = False) -> Dict[str, Any]:
        """
        Export candidates for offline dictionary updates.

        Args:
            include_rejected: Also export candidates with "reject" feedback

        Returns:
            Dict with exported_at, version, candidates and stats
        """
        candidates = self.get_candidates()
        if not include_rejected:
            candidates = [c for c in candidates if c.feedback is None or c.feedback.action != ACTION_REJECT]

        return {
            "exported_at": now_exact(),
            "version": EXPORT_VERSION,
            "candidates": [c.to_dict() for c in candidates],
            "stats": {
                "total": len(candidates),
                "classified": sum(1 for c in candidates if c.feedback and c.feedback.classified_as),
                "rejected": sum(1 for c in candidates if c.feedback and c.feedback.action == ACTION_REJECT),
                "pending": sum(1 for c in candidates if c.needs_review),
            },
        }

    # =========================================================================
    # DICTIONARY EXTENSION
    # =========================================================================

    def list_extensions(self) -> List[Dict[str, Any]]:
        """Raw extension rows, oldest first."""
        return self._query("SELECT kind, canonical, name, added_at FROM dictionary_extensions ORDER BY id")

    def get_extension(self) -> DictionaryExtension:
        """Current user dictionary extension."""
        skills, tools, noise = [], [], []
        for row in self.list_extensions():
            if row["kind"] == "CORE_SKILL":
                skills.append(TaxonomyEntry(name=row["name"], canonical=row["canonical"], category=USER_ADDED_CATEGORY))
            elif row["kind"] == "TOOL":
                tools.append(ToolEntry(name=row["name"], canonical=row["canonical"], tool_type=USER_ADDED_CATEGORY))
            elif row["kind"] == KIND_NOISE:
                noise.append(row["name"])
        return DictionaryExtension(skills=tuple(skills), tools=tuple(tools), noise=tuple(noise))

    def extension_signature(self) -> Tuple[int, int]:
        """(row count, highest row id) of the extension table; changes whenever a promotion lands."""
        row = self.conn.execute("SELECT COUNT(*), COALESCE(MAX(id), 0) FROM dictionary_extensions").fetchone()
        return int(row[0]), int(row[1])
