"""Spreadsheet cell formula tokenizing and evaluation.

Public API::

    from sheetcalc.formulas import FormulaEvaluator, tokenize
"""

from sheetcalc.formulas.errors import (
    CIRCULAR_REFERENCE,
    DIVIDE_BY_ZERO,
    EMPTY_FORMULA,
    ERROR_MESSAGES,
    INVALID_CELL,
    INVALID_FORMULA,
    MISSING_PARENTHESES,
    PARTIAL_FORMULA,
    CellLabelError,
    FormulaError,
    FormulaParseError,
    describe_error,
)
from sheetcalc.formulas.evaluator import (
    CellLike,
    CellResolver,
    EvalOutcome,
    FormulaEvaluator,
)
from sheetcalc.formulas.tokenizer import detokenize, tokenize
from sheetcalc.formulas.tokens import is_cell_label, is_number, is_operator, parse_number

__all__ = [
    "CIRCULAR_REFERENCE",
    "DIVIDE_BY_ZERO",
    "EMPTY_FORMULA",
    "ERROR_MESSAGES",
    "INVALID_CELL",
    "INVALID_FORMULA",
    "MISSING_PARENTHESES",
    "PARTIAL_FORMULA",
    "CellLabelError",
    "CellLike",
    "CellResolver",
    "EvalOutcome",
    "FormulaError",
    "FormulaEvaluator",
    "FormulaParseError",
    "describe_error",
    "detokenize",
    "is_cell_label",
    "is_number",
    "is_operator",
    "parse_number",
    "tokenize",
]
