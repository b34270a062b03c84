#!/usr/bin/env python3
"""
Job posting analysis CLI

Extracts required/desired core skills and tools from a job posting and,
when a profile is given, scores the posting against it.

Usage:
    # Requirements only
    python analyze_job.py posting.txt

    # Fit score against a profile YAML (core_skills: [...], tools: [...])
    python analyze_job.py posting.txt --profile profile.yaml

    # Machine-readable output, persisting review candidates
    python analyze_job.py posting.txt --profile profile.yaml --json --store
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from skillfit.config import load_pipeline_config
from skillfit.config.settings import CONFIG_PATH
from skillfit.contexts.analysis.analyzer import SkillAnalyzer
from skillfit.contexts.analysis.logger import setup_analysis_logger
from skillfit.contexts.extraction.pos_tagger import PosTagger
from skillfit.contexts.review.candidate_manager import CandidateManager
from skillfit.contexts.scoring.report import render_report
from skillfit.contexts.taxonomy.exceptions import TaxonomyLoadError
from skillfit.contexts.taxonomy.taxonomy_store import DATA_PATH
from skillfit.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Analyze a job posting and score it against a skills profile",
    add_completion=False,
)


def load_profile(profile_path: Path) -> dict:
    """Read a profile YAML into a plain dict."""
    if not profile_path.exists():
        typer.secho(f"Profile not found: {profile_path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    data = OmegaConf.to_container(OmegaConf.load(profile_path), resolve=True)
    return data if isinstance(data, dict) else {}


@app.command()
def main(
    job_file: Annotated[Path, typer.Argument(help="Plain-text job posting")],
    profile_path: Annotated[
        Optional[Path],
        typer.Option("--profile", "-p", help="Profile YAML with core_skills and tools lists"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full result as JSON")] = False,
    store: Annotated[bool, typer.Option("--store", help="Persist review candidates")] = False,
    no_tagger: Annotated[
        bool,
        typer.Option("--no-tagger", help="Skip the POS tagger and use regex noun phrases"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="Pipeline settings YAML (defaults to SKILLFIT_CONFIG_PATH)"),
    ] = None,
):
    """
    Analyze one job posting.

    Examples:\n

        $ analyze_job.py posting.txt                          # Requirements only

        $ analyze_job.py posting.txt -p me.yaml               # With fit score

        $ analyze_job.py posting.txt -p me.yaml --json        # JSON output
    """
    if not job_file.exists():
        typer.secho(f"Job file not found: {job_file}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    log_dir = LOGS_PATH / f"analyze_{now().replace(' ', '_').replace(':', '')}"
    setup_analysis_logger(
        log_dir,
        inputs={
            "Job file": job_file,
            "Profile": profile_path,
            "Pipeline config": config_path or CONFIG_PATH,
            "Taxonomy data": DATA_PATH,
        },
    )

    text = job_file.read_text(encoding="utf-8")
    profile = load_profile(profile_path) if profile_path else None

    try:
        analyzer = SkillAnalyzer(
            config=load_pipeline_config(config_path),
            candidate_manager=CandidateManager() if store else None,
            tagger=PosTagger(enabled=not no_tagger),
        )
    except TaxonomyLoadError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    job_info = {"job_id": job_file.stem}
    if profile is None:
        result = analyzer.analyze_requirements(text, job_info=job_info, store_candidates=store)
    else:
        result = analyzer.analyze(text, profile, job_info=job_info, store_candidates=store)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo(render_report(result.to_dict()))

    if not result.success:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
