"""Command-line interface for sheetcalc."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import click
import yaml

from sheetcalc import __version__
from sheetcalc.config import DEFAULT_CONFIG, load_config
from sheetcalc.formulas import FormulaEvaluator, FormulaError, describe_error, tokenize
from sheetcalc.logging.events import EventType, emit_error, emit_info, set_project_dir
from sheetcalc.sheet import SheetMemory, load_sheet


def format_value(value: float) -> str:
    """Display-friendly number: integral floats without the ``.0``."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == int(value):
        return str(int(value))
    return f"{value:.10g}"


def _json_value(value: float) -> float | None:
    """JSON has no inf or nan; non-finite values are written as null."""
    return value if math.isfinite(value) else None


def _load(sheet_path: str | None, config: dict[str, Any]) -> SheetMemory:
    if sheet_path is None:
        return SheetMemory(n_cols=int(config["n_cols"]), n_rows=int(config["n_rows"]))
    try:
        return load_sheet(Path(sheet_path))
    except (FormulaError, ValueError, TypeError, yaml.YAMLError) as e:
        emit_error(
            EventType.sheet_load_failed,
            f"could not load {sheet_path}: {e}",
            {"path": sheet_path},
            error_code=type(e).__name__,
        )
        raise click.ClickException(f"{sheet_path}: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="sheetcalc")
@click.option(
    "--project",
    "project_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False),
    help="Project directory holding sheetcalc.yaml; also enables the event log.",
)
@click.pass_context
def main(ctx: click.Context, project_dir: str | None) -> None:
    """sheetcalc -- spreadsheet formula evaluator."""
    ctx.ensure_object(dict)
    if project_dir is None:
        ctx.obj["config"] = dict(DEFAULT_CONFIG)
        return
    try:
        ctx.obj["config"] = load_config(Path(project_dir))
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))
    set_project_dir(Path(project_dir))


@main.command("tokens")
@click.argument("text")
def tokens_cmd(text: str) -> None:
    """Print the tokens of a formula."""
    try:
        tokens = tokenize(text)
    except FormulaError as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps(tokens))


@main.command("eval")
@click.argument("text")
@click.option("--sheet", "sheet_path", default=None, type=click.Path(exists=True, dir_okay=False), help="Sheet file to resolve references against.")
@click.option("--origin", default=None, help="Label of the cell owning the formula (enables cycle checks).")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def eval_cmd(ctx: click.Context, text: str, sheet_path: str | None, origin: str | None, as_json: bool) -> None:
    """Evaluate one formula, e.g. ``sheetcalc eval "(A1 + 2) * 3"``."""
    config = ctx.obj["config"]
    sheet = _load(sheet_path, config)
    try:
        tokens = tokenize(text)
    except FormulaError as e:
        raise click.ClickException(str(e))

    evaluator = FormulaEvaluator.from_config(sheet, config)
    outcome = evaluator.evaluate(tokens, origin=origin.upper() if origin else None)

    if as_json:
        payload = {"tokens": tokens, "value": _json_value(outcome.value), "error": outcome.error}
        click.echo(json.dumps(payload, allow_nan=False))
    elif outcome.ok:
        click.echo(format_value(outcome.value))
    else:
        click.echo(f"{outcome.error} ({describe_error(outcome.error)})")
    if not outcome.ok:
        ctx.exit(1)


@main.command("cells")
@click.argument("sheet_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cells_cmd(ctx: click.Context, sheet_path: str, as_json: bool) -> None:
    """Evaluate every cell formula of a sheet against its stored state.

    Stored values are not updated; each formula sees the cached values of
    the cells it references.
    """
    config = ctx.obj["config"]
    sheet = _load(sheet_path, config)
    evaluator = FormulaEvaluator.from_config(sheet, config)

    rows: list[dict[str, Any]] = []
    for label in sheet.labels():
        cell = sheet.get_cell_by_label(label)
        if not cell.formula:
            continue
        outcome = evaluator.evaluate(cell.formula, origin=label)
        rows.append({"label": label, "value": outcome.value, "error": outcome.error})

    n_errors = sum(1 for r in rows if r["error"])
    emit_info(
        EventType.formula_evaluated,
        f"evaluated {len(rows)} cells, {n_errors} with errors",
        {"path": sheet_path, "cells": len(rows), "errors": n_errors},
    )

    if as_json:
        out = [{**r, "value": _json_value(r["value"])} for r in rows]
        click.echo(json.dumps(out, indent=2, allow_nan=False))
        return
    if not rows:
        click.echo("No formulas found.")
        return
    for r in rows:
        shown = r["error"] if r["error"] else format_value(r["value"])
        click.echo(f"  {r['label']:8s} {shown}")
