"""In-memory cell storage that the evaluator resolves references against.

A sheet is a grid of ``n_cols`` x ``n_rows`` cells addressed by A1-style
labels.  Each cell holds a token formula, a cached value and an error
string.  Labels never stored read as empty cells; reading never adds
them to the sheet.

Sheet files are YAML::

    n_cols: 4
    n_rows: 10
    cells:
      A1: {formula: "2 + 3", value: 5}
      B1: {formula: "A1 * 2", value: 10}
      C1: {formula: "1 / 0", value: .inf, error: "#DIV/0!"}
      D1: "7 - 2"

A bare scalar such as ``D1`` is shorthand for ``{formula: ...}`` with a
cached value of 0.  Cached values are stored as given; loading never
recalculates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sheetcalc.formulas.errors import EMPTY_FORMULA, CellLabelError
from sheetcalc.formulas.tokenizer import tokenize
from sheetcalc.logging.events import EventType, emit_info

_LABEL_RE = re.compile(r"^([A-Z]+)([1-9][0-9]*)$")


# ---------------------------------------------------------------------------
# Label helpers
# ---------------------------------------------------------------------------


def col_letter_to_index(letters: str) -> int:
    """Convert column letter(s) to 0-based index.  A=0, B=1, ..., Z=25, AA=26."""
    idx = 0
    for ch in letters:
        idx = idx * 26 + (ord(ch) - ord("A") + 1)
    return idx - 1


def index_to_col_letter(idx: int) -> str:
    """Convert 0-based column index to letter(s).  0=A, 25=Z, 26=AA."""
    result = ""
    n = idx + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        result = chr(65 + rem) + result
    return result


def parse_label(label: str) -> tuple[int, int]:
    """Parse 'A1' -> (row_0based, col_0based).

    Raises CellLabelError on a malformed label.
    """
    m = _LABEL_RE.match(label)
    if not m:
        raise CellLabelError(label)
    return int(m.group(2)) - 1, col_letter_to_index(m.group(1))


def make_label(row: int, col: int) -> str:
    """Build a cell label from 0-based row/col."""
    return f"{index_to_col_letter(col)}{row + 1}"


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------


@dataclass
class Cell:
    """One sheet cell.  A cell without a formula carries the empty-formula error."""

    label: str
    formula: list[str] = field(default_factory=list)
    value: float = 0.0
    error: str = EMPTY_FORMULA


class SheetMemory:
    """Grid of cells implementing the evaluator's ``CellResolver`` protocol.

    Parameters
    ----------
    n_cols : int
        Number of columns (A.. up to ``n_cols``).
    n_rows : int
        Number of rows (1.. up to ``n_rows``).
    """

    def __init__(self, n_cols: int = 26, n_rows: int = 100) -> None:
        if n_cols < 1 or n_rows < 1:
            raise ValueError("a sheet needs at least one row and one column")
        self.n_cols = n_cols
        self.n_rows = n_rows
        self._cells: dict[str, Cell] = {}

    def _check(self, label: str) -> None:
        row, col = parse_label(label)
        if row >= self.n_rows or col >= self.n_cols:
            raise CellLabelError(
                label,
                f"Cell label {label!r} is outside the {self.n_cols}x{self.n_rows} sheet",
            )

    def get_cell_by_label(self, label: str) -> Cell:
        """Return the cell at *label*, or a detached empty cell if none is stored.

        Raises:
            CellLabelError: If *label* is malformed or out of range.
        """
        cell = self._cells.get(label)
        if cell is None:
            self._check(label)
            return Cell(label)
        return cell

    def set_cell(
        self,
        label: str,
        formula: list[str],
        value: float = 0.0,
        error: str | None = None,
    ) -> Cell:
        """Store a cell's formula, cached value and error.

        When *error* is omitted it defaults to ``""`` for a non-empty formula
        and to the empty-formula sentinel otherwise.
        """
        self._check(label)
        if error is None:
            error = "" if formula else EMPTY_FORMULA
        cell = Cell(label, list(formula), float(value), error)
        self._cells[label] = cell
        return cell

    def labels(self) -> list[str]:
        """Labels of all stored cells, in row-major order."""
        return sorted(self._cells, key=parse_label)

    def __contains__(self, label: object) -> bool:
        return label in self._cells

    def __len__(self) -> int:
        return len(self._cells)


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def sheet_from_dict(spec: dict[str, Any]) -> SheetMemory:
    """Build a sheet from a parsed sheet-file mapping."""
    sheet = SheetMemory(
        n_cols=int(spec.get("n_cols", 26)),
        n_rows=int(spec.get("n_rows", 100)),
    )
    for label, cell in (spec.get("cells") or {}).items():
        label = str(label).upper()
        if not isinstance(cell, dict):
            cell = {"formula": cell}
        raw = cell.get("formula", "")
        formula = tokenize(str(raw)) if raw is not None else []
        sheet.set_cell(
            label,
            formula,
            value=cell.get("value", 0.0),
            error=cell.get("error"),
        )
    return sheet


def load_sheet(path: Path) -> SheetMemory:
    """Load a sheet from a YAML file.

    Raises:
        ValueError: If the file does not hold a mapping.
        FormulaParseError: If a cell formula cannot be tokenized.
        CellLabelError: If a cell label is malformed or out of range.
    """
    path = Path(path)
    spec = yaml.safe_load(path.read_text()) or {}
    if not isinstance(spec, dict):
        raise ValueError(f"{path} must contain a mapping")
    sheet = sheet_from_dict(spec)
    emit_info(
        EventType.sheet_loaded,
        f"loaded {len(sheet)} cells from {path.name}",
        {"path": str(path), "n_cols": sheet.n_cols, "n_rows": sheet.n_rows},
    )
    return sheet
