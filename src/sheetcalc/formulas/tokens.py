"""Token classification predicates.

Tokens are plain strings; their kind is decided here by predicate rather
than carried as a tag from the tokenizer.
"""

from __future__ import annotations

import math
import re

OPEN_PAREN = "("
CLOSE_PAREN = ")"
ADDITIVE_OPERATORS = frozenset({"+", "-"})
MULTIPLICATIVE_OPERATORS = frozenset({"*", "/"})
OPERATORS = ADDITIVE_OPERATORS | MULTIPLICATIVE_OPERATORS

# Column letters followed by a row number without leading zeros: A1, AA10.
_LABEL_RE = re.compile(r"^[A-Z]+[1-9][0-9]*$")


def parse_number(token: str, *, blank_is_zero: bool = False) -> float | None:
    """Parse a numeric token, or return ``None`` if it is not a number.

    Accepts anything ``float()`` accepts that yields a finite value, with
    surrounding whitespace tolerated.  ``"inf"``, ``"nan"`` and digit
    separators (``"1_000"``) are rejected.
    Blank tokens are rejected unless *blank_is_zero* is set, in which case
    they parse as ``0.0``.
    """
    text = token.strip()
    if not text:
        return 0.0 if blank_is_zero else None
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def is_number(token: str, *, blank_is_zero: bool = False) -> bool:
    return parse_number(token, blank_is_zero=blank_is_zero) is not None


def is_operator(token: str) -> bool:
    return token in OPERATORS


def is_cell_label(token: str) -> bool:
    """True if *token* is a well-formed cell label such as ``B12``."""
    return bool(_LABEL_RE.match(token))
