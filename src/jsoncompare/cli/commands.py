from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from jsoncompare.core.constants import (
    EXIT_DIFFERENCES,
    EXIT_INTERNAL_ERROR,
    EXIT_SUCCESS,
    VIEWER_IDS,
    VIEWER_LEFT,
)
from jsoncompare.core.diff.models import CompareResult
from jsoncompare.core.diff.structural import compare
from jsoncompare.core.ignore import filter_ignored
from jsoncompare.core.paths.converter import PathContext, identity_to_index, index_to_identity
from jsoncompare.core.settings import DEFAULT_COMPARE_SETTINGS
from jsoncompare.report import render_markdown, write_reports
from jsoncompare.settings import load_settings

_CONVERT_TARGETS = ("index", "identity")


def _version_callback(value: bool) -> None:
    if value:
        from jsoncompare import __version__

        typer.echo(f"jsoncompare {__version__}")
        raise typer.Exit()


app = typer.Typer(add_completion=False, help="Identity-aware structural diff for JSON documents")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detection and diff decisions to stderr."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"ERROR: {exc}", err=True)
    raise typer.Exit(EXIT_INTERNAL_ERROR) from exc


@app.command()
def diff(
    left: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, help="Left (before) JSON file"),
    right: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, help="Right (after) JSON file"),
    settings_path: Path | None = typer.Option(None, "--settings", help="YAML settings file"),
    json_output: Path | None = typer.Option(None, "--json-output", help="Write the JSON report here"),
    markdown_output: Path | None = typer.Option(None, "--markdown-output", help="Write the Markdown report here"),
) -> None:
    """Compare two JSON documents and report added, removed and changed values."""
    try:
        settings = load_settings(settings_path) if settings_path is not None else DEFAULT_COMPARE_SETTINGS
        left_tree = _load_json(left)
        right_tree = _load_json(right)
    except (OSError, ValueError) as exc:
        _fail(exc)

    result = compare(left_tree, right_tree, settings=settings)
    if settings.ignore_patterns:
        kept = filter_ignored(result.diffs, settings.ignore_patterns)
        result = CompareResult(diffs=tuple(kept), identity_keys=result.identity_keys)

    title = f"{left.name} vs {right.name}"
    try:
        write_reports(result, json_path=json_output, md_path=markdown_output, title=title)
    except OSError as exc:
        _fail(exc)

    typer.echo(render_markdown(result, title=title))
    raise typer.Exit(EXIT_DIFFERENCES if result.has_differences else EXIT_SUCCESS)


@app.command()
def convert(
    path: str = typer.Argument(..., help="Path to convert"),
    tree: Path = typer.Option(..., "--tree", exists=True, dir_okay=False, help="JSON document the path points into"),
    other: Path = typer.Option(
        ..., "--other", exists=True, dir_okay=False, help="JSON document on the other side of the comparison"
    ),
    side: str = typer.Option(VIEWER_LEFT, "--side", help="Which side --tree is: left | right"),
    to: str = typer.Option("index", "--to", help="Target dialect: index | identity"),
) -> None:
    """Translate a path between index and identity addressing for one side of a comparison."""
    if side not in VIEWER_IDS:
        typer.echo(f"ERROR: --side must be one of: {', '.join(VIEWER_IDS)}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR)
    if to not in _CONVERT_TARGETS:
        typer.echo(f"ERROR: --to must be one of: {', '.join(_CONVERT_TARGETS)}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR)

    try:
        tree_value = _load_json(tree)
        other_value = _load_json(other)
        if side == VIEWER_LEFT:
            catalog = compare(tree_value, other_value).identity_keys
        else:
            catalog = compare(other_value, tree_value).identity_keys
        context = PathContext(tree=tree_value, identity_keys=catalog)
        converted = identity_to_index(path, context) if to == "index" else index_to_identity(path, context)
    except (OSError, ValueError) as exc:
        _fail(exc)

    if converted is None:
        typer.echo(f"Path does not resolve in {tree}: {path}", err=True)
        raise typer.Exit(EXIT_DIFFERENCES)
    typer.echo(converted.value)
    raise typer.Exit(EXIT_SUCCESS)
