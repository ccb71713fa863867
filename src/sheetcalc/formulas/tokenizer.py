"""Lark-based tokenizer for raw formula text.

Splits text such as ``"=(A1 + 2.5) * B3"`` into the flat token list the
evaluator consumes.  Only lexing happens here; the structure of the
formula is checked by the evaluator.
"""

from __future__ import annotations

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from sheetcalc.formulas.errors import FormulaParseError

# Token kinds (highest priority wins on equal-length matches):
#   CELL    column letters + row number: A1, aa10 (uppercased on output)
#   NUMBER  12, 3.5, .5, 1e3
#   OP      + - * /
#   LPAR/RPAR
#   WORD    any other identifier; passed through so the evaluator can
#           report it as an invalid formula
GRAMMAR = r"""
start: _token*

_token: CELL | NUMBER | OP | LPAR | RPAR | WORD

CELL.3: /[A-Za-z]+[0-9]+/
NUMBER.2: /(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?/
OP: /[-+*\/]/
LPAR: "("
RPAR: ")"
WORD.1: /[A-Za-z_][A-Za-z0-9_.]*/

%import common.WS
%ignore WS
"""

_lexer = Lark(GRAMMAR, parser="lalr", lexer="basic")


def tokenize(text: str) -> list[str]:
    """Split formula text (optionally starting with ``=``) into tokens.

    Args:
        text: Raw formula text, e.g. ``"=A1 * (2 + B2)"``.

    Returns:
        List of token strings; empty for blank text.

    Raises:
        FormulaParseError: If the text contains a character that cannot
            start any token.
    """
    stripped = text.strip()
    offset = len(text) - len(text.lstrip())
    if stripped.startswith("="):
        stripped = stripped[1:]
        offset += 1
    tokens: list[str] = []
    try:
        for tok in _lexer.lex(stripped):
            if tok.type == "CELL":
                tokens.append(str(tok).upper())
            else:
                tokens.append(str(tok))
    except UnexpectedCharacters as exc:
        raise FormulaParseError(
            f"unexpected character {stripped[exc.pos_in_stream]!r}",
            position=exc.pos_in_stream + offset,
        ) from exc
    return tokens


def detokenize(tokens: list[str]) -> str:
    """Join tokens back into display text, e.g. ``"A1 + 2"``."""
    return " ".join(tokens)
