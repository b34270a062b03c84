"""
Review event logging utilities for skillfit (Tier 2 logging).

Appends candidate-review events (feedback, promotions, bulk clears) to a
JSON Lines audit log. One JSON object per line, oldest first.

For detailed within-context logging (Tier 1), use skillfit.utils.logger instead.

Usage:
    from skillfit.utils.event_logging import log_review_event, get_recent_events

    log_review_event(
        event_type="feedback",
        canonical="acme_orbit",
        source="cli",
        action="classify",
        classified_as="TOOL",
    )

    events = get_recent_events(20, event_type="promotion")
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from skillfit.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
REVIEW_EVENTS_FILE = Path(os.getenv("REVIEW_EVENTS_FILE", str(LOGS_PATH / "review_events.log")))


def log_review_event(
    event_type: str,
    canonical: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Append an event to the review event log.

    Args:
        event_type: Type of event (e.g., "feedback", "promotion", "removal", "clear")
        canonical: Canonical key of the candidate the event concerns ("*" for bulk events)
        source: Event source (e.g., "cli", "analysis", "manual")
        events_file: Log file override (defaults to REVIEW_EVENTS_FILE)
        **extra_fields: Additional event-specific fields

    Example:
        log_review_event(
            event_type="promotion",
            canonical="acme_orbit",
            source="review",
            kind="TOOL",
        )
    """
    events_file = events_file or REVIEW_EVENTS_FILE
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "canonical": canonical,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    n: int = 10,
    canonical: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> list[dict]:
    """
    Get the last n events from the review log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        canonical: Filter to only events for this canonical key (optional)
        event_type: Filter to only events of this type (optional)
        events_file: Log file override (defaults to REVIEW_EVENTS_FILE)

    Returns:
        List of event dicts (most recent last)
    """
    events_file = events_file or REVIEW_EVENTS_FILE
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if canonical:
        events = [e for e in events if e.get("canonical") == canonical]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events

