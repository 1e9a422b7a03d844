"""static-export CLI — entry-point for all export operations.

Usage:
    python cli/main.py --help

Commands:
    export   → fetch, rewrite and repair a site in one run
    rewrite  → re-run only the URL rewrite over an already-fetched tree
    repair   → re-run only the mojibake repair over an already-fetched tree
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

# Ensure the project root is on sys.path so that `from static_export.xxx
# import ...` works when the CLI is invoked as `python cli/main.py` from any
# working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Iterator, Optional

import typer

from static_export.config import settings
from static_export.errors import ExportError
from static_export.models import SiteUrls
from static_export.pipeline import ExportPipeline, Stage, run_export

app = typer.Typer(
    name="static-export",
    help="Mirror a locally served site and rewrite it for a new host and base path.",
    no_args_is_help=True,
)


def _parse_urls(origin: str, target: str) -> SiteUrls:
    try:
        return SiteUrls.normalise(origin, target)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@contextmanager
def _abort_on_export_error() -> Iterator[None]:
    """Turn a pipeline failure into a phase-tagged message and exit status 1."""
    try:
        yield
    except ExportError as exc:
        typer.echo(f"[{exc.phase}] error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


# ---------------------------------------------------------------------------
# Full export
# ---------------------------------------------------------------------------
@app.command("export")
def export(
    origin: str = typer.Argument(..., help="Origin URL of the locally served site."),
    target: str = typer.Argument(..., help="Target URL the mirror will be deployed under."),
    output_dir: Optional[Path] = typer.Argument(
        None, help="Output directory (default: static-site-export)."
    ),
    wget: Optional[str] = typer.Option(None, "--wget", help="wget executable to use."),
    depth: Optional[int] = typer.Option(None, "--depth", help="Recursion depth for wget."),
    probe: bool = typer.Option(
        True, "--probe/--no-probe", help="Check the origin responds before fetching."
    ),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parallel file workers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every changed file."),
) -> None:
    """Fetch ORIGIN, rewrite it to TARGET, and repair mojibake in its HTML."""
    urls = _parse_urls(origin, target)
    with _abort_on_export_error():
        run_export(
            urls.origin,
            urls.target,
            output_dir or settings.output_dir,
            wget_binary=wget,
            depth=depth,
            probe=probe and settings.probe_origin,
            workers=workers,
            verbose=verbose,
        )


# ---------------------------------------------------------------------------
# Single stages against an existing tree
# ---------------------------------------------------------------------------
@app.command("rewrite")
def rewrite(
    root: Path = typer.Argument(..., help="Root of an already-fetched site."),
    origin: str = typer.Argument(..., help="Origin URL to replace."),
    target: str = typer.Argument(..., help="Target URL to substitute."),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parallel file workers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every changed file."),
) -> None:
    """Replace every ORIGIN reference with TARGET in HTML/CSS/JS/XML under ROOT."""
    urls = _parse_urls(origin, target)
    with _abort_on_export_error():
        pipeline = ExportPipeline.from_existing_tree(
            root, urls, workers=workers, verbose=verbose
        )
        pipeline.run_stage(Stage.REWRITE)
    typer.echo(f"[rewrite] Done: {root}")


@app.command("repair")
def repair(
    root: Path = typer.Argument(..., help="Root of an already-fetched site (or a subtree)."),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parallel file workers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every changed file."),
) -> None:
    """Fix known UTF-8-as-Windows-1252 punctuation in every .html file under ROOT."""
    with _abort_on_export_error():
        pipeline = ExportPipeline.from_existing_tree(
            root, workers=workers, verbose=verbose
        )
        pipeline.run_stage(Stage.REPAIR)
    typer.echo(f"[repair] Done: {root}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
