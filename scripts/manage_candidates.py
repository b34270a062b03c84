#!/usr/bin/env python3
"""
Candidate review CLI

Lists, reviews and exports phrases the classifier could not place, and shows
the user dictionary extension built from "classify" feedback.

Usage:
    # Review queue, lowest confidence first
    python manage_candidates.py list --by confidence

    # Promote a candidate to a tool
    python manage_candidates.py feedback quintrix classify --as TOOL

    # Undo a promotion
    python manage_candidates.py demote quintrix

    # Export for offline dictionary updates
    python manage_candidates.py export candidates.json
"""

import json
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from skillfit.contexts.review.candidate_data_structure import Candidate
from skillfit.contexts.review.candidate_manager import CANDIDATE_DB_PATH, DEFAULT_REVIEW_LIMIT, CandidateManager
from skillfit.contexts.review.exceptions import (
    CandidateNotFoundError,
    ClearNotConfirmedError,
    InvalidFeedbackError,
)
from skillfit.contexts.review.logger import setup_review_logger
from skillfit.utils.text_processing import truncate_display
from skillfit.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(help="Review and promote extraction candidates", add_completion=False)


class ListOrder(str, Enum):
    grouped = "grouped"
    confidence = "confidence"
    frequency = "frequency"


DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", help="Candidate database (defaults to CANDIDATE_DB_PATH)"),
]


def _open(db_path: Optional[Path]) -> CandidateManager:
    setup_review_logger(
        LOGS_PATH / f"review_{now().replace(' ', '_').replace(':', '')}",
        inputs={"Candidate DB": db_path or CANDIDATE_DB_PATH},
    )
    return CandidateManager(db_path=db_path)


def _print_candidates(candidates: List[Candidate]) -> None:
    for c in candidates:
        status = c.feedback.action if c.feedback else "pending"
        seen = format_timestamp(c.last_seen, relative=True) if c.last_seen else "-"
        typer.echo(
            f"  {truncate_display(c.canonical, 30):<30} {c.inferred_type:<11} {c.confidence:>5.2f}  "
            f"x{c.occurrences:<3} {seen:<8} [{status}]  {c.evidence}"
        )


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Show help if no command provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("list")
def list_candidates(
    by: Annotated[ListOrder, typer.Option("--by", help="View to show")] = ListOrder.grouped,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Max rows for the confidence view")] = DEFAULT_REVIEW_LIMIT,
    db: DbOption = None,
):
    """
    Show stored candidates.

    Examples:\n

        $ manage_candidates.py list                        # Grouped by inferred type

        $ manage_candidates.py list --by confidence        # Review queue

        $ manage_candidates.py list --by frequency         # Most recurring first
    """
    with _open(db) as manager:
        if by == ListOrder.confidence:
            _print_candidates(manager.get_candidates_by_confidence(limit))
            return
        if by == ListOrder.frequency:
            _print_candidates(manager.get_candidates_by_frequency())
            return

        grouped = manager.get_candidates_grouped()
        for group in ("inferred_tools", "inferred_skills", "unknown"):
            typer.secho(f"\n{group} ({len(grouped[group])})", bold=True)
            _print_candidates(grouped[group])

        stats = grouped["stats"]
        typer.echo(f"\nTotal: {stats['total']}  reviewed: {stats['with_feedback']}  pending: {stats['needs_review']}")


@app.command()
def feedback(
    canonical: Annotated[str, typer.Argument(help="Candidate key")],
    action: Annotated[str, typer.Argument(help="accept, reject or classify")],
    classified_as: Annotated[
        Optional[str],
        typer.Option("--as", help="CORE_SKILL, TOOL or REJECTED (classify only)"),
    ] = None,
    note: Annotated[Optional[str], typer.Option("--note", help="Reviewer note")] = None,
    db: DbOption = None,
):
    """Record reviewer feedback; classify also promotes into the dictionary extension."""
    with _open(db) as manager:
        try:
            candidate = manager.update_feedback(canonical, action, classified_as=classified_as, note=note)
        except (CandidateNotFoundError, InvalidFeedbackError) as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    target = f" as {candidate.feedback.classified_as}" if candidate.feedback.classified_as else ""
    typer.secho(f"✓ {candidate.canonical}: {candidate.feedback.action}{target}", fg=typer.colors.GREEN)


@app.command()
def remove(
    canonical: Annotated[str, typer.Argument(help="Candidate key")],
    db: DbOption = None,
):
    """Delete one candidate."""
    with _open(db) as manager:
        try:
            manager.remove_candidate(canonical)
        except CandidateNotFoundError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    typer.secho(f"✓ Removed {canonical}", fg=typer.colors.GREEN)


@app.command()
def demote(
    canonical: Annotated[str, typer.Argument(help="Extension key")],
    db: DbOption = None,
):
    """Drop a key from the dictionary extension, undoing a classify promotion."""
    with _open(db) as manager:
        rows = manager.demote(canonical)

    if not rows:
        typer.secho(f"Error: '{canonical}' is not in the dictionary extension", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"✓ Demoted {canonical}", fg=typer.colors.GREEN)


@app.command()
def clear(
    yes: Annotated[bool, typer.Option("--yes", help="Confirm deleting every candidate")] = False,
    db: DbOption = None,
):
    """Delete every candidate. Dictionary extensions are kept (see demote)."""
    with _open(db) as manager:
        try:
            count = manager.clear_candidates(confirmed=yes)
        except ClearNotConfirmedError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    typer.secho(f"✓ Cleared {count} candidates", fg=typer.colors.GREEN)


@app.command()
def export(
    output: Annotated[Path, typer.Argument(help="JSON file to write")],
    include_rejected: Annotated[bool, typer.Option("--include-rejected", help="Also export rejected candidates")] = False,
    db: DbOption = None,
):
    """Export candidates as JSON."""
    with _open(db) as manager:
        data = manager.export_candidates(include_rejected=include_rejected)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(data, indent=2), encoding="utf-8")
    typer.secho(f"✓ Exported {data['stats']['total']} candidates to {output}", fg=typer.colors.GREEN)


@app.command()
def extensions(db: DbOption = None):
    """List skills, tools and noise phrases added through review."""
    with _open(db) as manager:
        rows = manager.list_extensions()

    if not rows:
        typer.echo("No dictionary extensions")
        return
    for row in rows:
        typer.echo(f"  {row['kind']:<11} {row['canonical']:<30} {row['name']:<30} {format_timestamp(row['added_at'])}")


if __name__ == "__main__":
    app()
