#!/usr/bin/env python3
"""
Download the NLTK data used by the noun-phrase strategy.

The library never downloads anything itself; without this data the
extractor falls back to regex noun-phrase patterns.

Usage:
    python fetch_nltk_data.py
    python fetch_nltk_data.py --download-dir ~/nltk_data
"""

from pathlib import Path
from typing import Optional

import nltk
import typer
from typing_extensions import Annotated

# Older and newer NLTK releases name the tagger model differently
TAGGER_PACKAGES = ("averaged_perceptron_tagger", "averaged_perceptron_tagger_eng")

app = typer.Typer(help="Download the POS tagger model for noun-phrase extraction", add_completion=False)


@app.command()
def main(
    download_dir: Annotated[
        Optional[Path],
        typer.Option("--download-dir", "-d", help="Target directory (defaults to NLTK's search path)"),
    ] = None,
):
    """Download the averaged perceptron tagger."""
    failed = []
    for package in TAGGER_PACKAGES:
        ok = nltk.download(package, download_dir=str(download_dir) if download_dir else None, quiet=True)
        status = "ok" if ok else "unavailable"
        typer.echo(f"{package}: {status}")
        if not ok:
            failed.append(package)

    if len(failed) == len(TAGGER_PACKAGES):
        typer.secho("No tagger model could be downloaded", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
