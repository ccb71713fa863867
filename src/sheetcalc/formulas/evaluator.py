"""Recursive-descent evaluator for tokenized cell formulas.

Grammar (left-associative, ``* /`` binding tighter than ``+ -``)::

    expression := term { ("+" | "-") term }
    term       := factor { ("*" | "/") factor }
    factor     := number | "(" expression ")" | cellReference

Each grammar rule is a pure function of ``(tokens, position, error)``
returning a ``_Step``.  Errors are sticky but do not stop the parse: the
folds keep consuming tokens and computing values after an error, and a
later error replaces the recorded one.  ``evaluate`` never raises; callers
must check ``error`` before trusting ``result``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple, Protocol

from sheetcalc.formulas.errors import (
    CIRCULAR_REFERENCE,
    DIVIDE_BY_ZERO,
    EMPTY_FORMULA,
    INVALID_CELL,
    INVALID_FORMULA,
    MISSING_PARENTHESES,
    PARTIAL_FORMULA,
    FormulaError,
)
from sheetcalc.formulas.tokens import (
    ADDITIVE_OPERATORS,
    CLOSE_PAREN,
    MULTIPLICATIVE_OPERATORS,
    OPEN_PAREN,
    is_cell_label,
    parse_number,
)
from sheetcalc.logging.events import EventType, emit_warning


# ---------------------------------------------------------------------------
# Resolver protocol
# ---------------------------------------------------------------------------


class CellLike(Protocol):
    """What the evaluator reads from a referenced cell."""

    formula: Sequence[str]
    value: float
    error: str


class CellResolver(Protocol):
    """Protocol for looking up a referenced cell by label."""

    def get_cell_by_label(self, label: str) -> CellLike:
        """Return the cell for *label*; may raise ``FormulaError``."""
        ...


# ---------------------------------------------------------------------------
# Outcome types
# ---------------------------------------------------------------------------


class EvalOutcome(NamedTuple):
    """Snapshot of one evaluation: the value and the error string."""

    value: float
    error: str

    @property
    def ok(self) -> bool:
        return self.error == ""


class _Step(NamedTuple):
    value: float
    pos: int
    error: str


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class FormulaEvaluator:
    """Evaluate token sequences against cells supplied by a resolver.

    Usage::

        ev = FormulaEvaluator(sheet)
        ev.evaluate(["A1", "+", "2"])
        if not ev.error:
            print(ev.result)

    Parameters
    ----------
    resolver : CellResolver
        Looks up referenced cells.  Only read during evaluation.
    is_label : Callable[[str], bool]
        Predicate deciding whether a token is a cell reference.
    blank_is_zero : bool
        Accept blank tokens as the number ``0``.
    check_cycles : bool
        When ``evaluate`` is given an ``origin`` label, report references
        that lead back to it as ``CIRCULAR_REFERENCE``.
    """

    def __init__(
        self,
        resolver: CellResolver,
        *,
        is_label: Callable[[str], bool] = is_cell_label,
        blank_is_zero: bool = False,
        check_cycles: bool = True,
    ) -> None:
        self._resolver = resolver
        self._is_label = is_label
        self._blank_is_zero = blank_is_zero
        self._check_cycles = check_cycles
        self.reset()

    @classmethod
    def from_config(cls, resolver: CellResolver, config: dict[str, Any]) -> FormulaEvaluator:
        """Build an evaluator from a config dict (see ``load_config``)."""
        return cls(
            resolver,
            blank_is_zero=bool(config.get("blank_is_zero", False)),
            check_cycles=bool(config.get("check_cycles", True)),
        )

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Clear all per-evaluation state."""
        self._tokens: tuple[str, ...] = ()
        self._pos = 0
        self._origin: str | None = None
        self._error_occurred = False
        self._error = ""
        self._result = 0.0

    def evaluate(self, formula: Sequence[str], *, origin: str | None = None) -> EvalOutcome:
        """Evaluate *formula* and record the outcome on the evaluator.

        Args:
            formula: Token sequence, e.g. ``["(", "2", "+", "3", ")", "*", "A1"]``.
                Not modified.
            origin: Label of the cell that owns *formula*, enabling the
                circular-reference check.

        Returns:
            The same value/error pair exposed by ``result`` and ``error``.
        """
        self.reset()
        self._tokens = tuple(str(tok) for tok in formula)
        self._origin = origin

        if not self._tokens:
            self._fail(EMPTY_FORMULA)
            return self._outcome()

        try:
            step = self._expression(0, "")
        except RecursionError:
            self._fail(INVALID_FORMULA)
            return self._outcome()

        self._result = step.value
        self._pos = step.pos
        if step.error:
            self._fail(step.error)
            return self._outcome()

        if self._pos < len(self._tokens):
            self._fail(INVALID_FORMULA)
        return self._outcome()

    @property
    def result(self) -> float:
        """Last computed value; meaningful only when ``error`` is empty."""
        return self._result

    @property
    def error(self) -> str:
        """Empty string on success, otherwise the recorded error."""
        return self._error

    @property
    def error_occurred(self) -> bool:
        return self._error_occurred

    @property
    def remaining(self) -> int:
        """Tokens left unconsumed by the last evaluation."""
        return len(self._tokens) - self._pos

    def _fail(self, error: str) -> None:
        self._error_occurred = True
        self._error = error
        emit_warning(
            EventType.formula_error,
            f"formula evaluation failed: {error}",
            {
                "formula": " ".join(self._tokens),
                "origin": self._origin,
                "position": self._pos,
            },
            error_code=error,
        )

    def _outcome(self) -> EvalOutcome:
        return EvalOutcome(self._result, self._error)

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def _peek(self, pos: int) -> str | None:
        if pos < len(self._tokens):
            return self._tokens[pos]
        return None

    def _expression(self, pos: int, error: str) -> _Step:
        """expression := term { ("+" | "-") term }"""
        value, pos, error = self._term(pos, error)
        while self._peek(pos) in ADDITIVE_OPERATORS:
            operator = self._tokens[pos]
            rhs, pos, error = self._term(pos + 1, error)
            if operator == "+":
                value += rhs
            else:
                value -= rhs
        return _Step(value, pos, error)

    def _term(self, pos: int, error: str) -> _Step:
        """term := factor { ("*" | "/") factor }"""
        value, pos, error = self._factor(pos, error)
        while self._peek(pos) in MULTIPLICATIVE_OPERATORS:
            operator = self._tokens[pos]
            rhs, pos, error = self._factor(pos + 1, error)
            if operator == "*":
                value *= rhs
            else:
                if rhs == 0:
                    # Abandons the rest of this term's chain only.
                    return _Step(math.inf, pos, DIVIDE_BY_ZERO)
                value /= rhs
        return _Step(value, pos, error)

    def _factor(self, pos: int, error: str) -> _Step:
        """factor := number | "(" expression ")" | cellReference"""
        token = self._peek(pos)
        if token is None:
            return _Step(0.0, pos, PARTIAL_FORMULA)
        pos += 1

        number = parse_number(token, blank_is_zero=self._blank_is_zero)
        if number is not None:
            return _Step(number, pos, error)

        if token == OPEN_PAREN:
            value, pos, error = self._expression(pos, error)
            if self._peek(pos) != CLOSE_PAREN:
                # A mismatched token is consumed along with the check.
                if pos < len(self._tokens):
                    pos += 1
                return _Step(value, pos, MISSING_PARENTHESES)
            return _Step(value, pos + 1, error)

        if self._is_label(token):
            value, cell_error = self._cell_value(token)
            return _Step(value, pos, cell_error or error)

        return _Step(0.0, pos, INVALID_FORMULA)

    # ------------------------------------------------------------------
    # Cell references
    # ------------------------------------------------------------------

    def _cell_value(self, label: str) -> tuple[float, str]:
        """Resolve *label* to ``(value, error)``; error is ``""`` on success."""
        if self._check_cycles and self._origin is not None:
            if label == self._origin or self._reaches(label, self._origin):
                emit_warning(
                    EventType.circular_reference,
                    f"circular reference from {self._origin} through {label}",
                    {"origin": self._origin, "label": label},
                    error_code=CIRCULAR_REFERENCE,
                )
                return 0.0, CIRCULAR_REFERENCE

        try:
            cell = self._resolver.get_cell_by_label(label)
        except FormulaError:
            return 0.0, INVALID_CELL

        error = cell.error
        if error != "" and error != EMPTY_FORMULA:
            return 0.0, error
        if len(cell.formula) == 0:
            return 0.0, INVALID_CELL
        return float(cell.value), ""

    def _reaches(self, start: str, target: str) -> bool:
        """True if *target* is referenced, directly or not, by *start*'s formula."""
        visited: set[str] = set()
        stack = [start]
        while stack:
            label = stack.pop()
            if label in visited:
                continue
            visited.add(label)
            try:
                cell = self._resolver.get_cell_by_label(label)
            except FormulaError:
                continue
            for token in cell.formula:
                if not self._is_label(token):
                    continue
                if token == target:
                    return True
                if token not in visited:
                    stack.append(token)
        return False
