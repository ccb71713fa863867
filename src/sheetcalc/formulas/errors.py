"""Error catalog and exception types for formula tokenizing and evaluation.

The evaluator never raises: it reports failures through the catalog strings
below.  The exception classes are for the collaborators around it (the
tokenizer and the sheet storage).
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Error catalog
# ---------------------------------------------------------------------------

EMPTY_FORMULA = "#EMPTY!"
INVALID_FORMULA = "#ERR!"
PARTIAL_FORMULA = "#PARTIAL!"
MISSING_PARENTHESES = "#PAREN!"
DIVIDE_BY_ZERO = "#DIV/0!"
INVALID_CELL = "#REF!"
CIRCULAR_REFERENCE = "#CIRC!"

ERROR_MESSAGES: dict[str, str] = {
    EMPTY_FORMULA: "formula is empty",
    INVALID_FORMULA: "formula is not valid",
    PARTIAL_FORMULA: "formula ends before an operand",
    MISSING_PARENTHESES: "unbalanced parentheses",
    DIVIDE_BY_ZERO: "division by zero",
    INVALID_CELL: "referenced cell has no formula",
    CIRCULAR_REFERENCE: "circular cell reference",
}


def describe_error(error: str) -> str:
    """Human-readable description of an error string.

    Strings outside the catalog (propagated verbatim from a referenced
    cell) are returned unchanged.
    """
    return ERROR_MESSAGES.get(error, error)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class FormulaParseError(FormulaError):
    """Raw formula text could not be split into tokens.

    Attributes:
        position: Character position where the error was detected.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        full = f"Formula parse error: {message}"
        if position is not None:
            full += f" (at position {position})"
        super().__init__(full)


class CellLabelError(FormulaError):
    """A malformed or out-of-range cell label was given to the sheet.

    Attributes:
        label: The offending label.
    """

    def __init__(self, label: str, message: str | None = None) -> None:
        self.label = label
        super().__init__(message or f"Invalid cell label: {label!r}")
