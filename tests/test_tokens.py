"""Tests for token classification and the text tokenizer."""

from __future__ import annotations

import pytest

from sheetcalc.formulas import (
    FormulaParseError,
    detokenize,
    is_cell_label,
    is_number,
    is_operator,
    parse_number,
    tokenize,
)


class TestNumberClassification:
    @pytest.mark.parametrize("token,expected", [
        ("0", 0.0),
        ("12", 12.0),
        ("3.5", 3.5),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("-4", -4.0),
        (" 7 ", 7.0),
    ])
    def test_accepted(self, token: str, expected: float) -> None:
        assert parse_number(token) == expected
        assert is_number(token)

    @pytest.mark.parametrize("token", ["", "   ", "abc", "1.2.3", "inf", "-Infinity", "nan", "1_000", "+", "("])
    def test_rejected(self, token: str) -> None:
        assert parse_number(token) is None
        assert not is_number(token)

    def test_blank_is_zero(self) -> None:
        assert parse_number("", blank_is_zero=True) == 0.0
        assert parse_number("  ", blank_is_zero=True) == 0.0
        assert parse_number("x", blank_is_zero=True) is None


class TestOtherPredicates:
    @pytest.mark.parametrize("token", ["+", "-", "*", "/"])
    def test_operators(self, token: str) -> None:
        assert is_operator(token)

    @pytest.mark.parametrize("token", ["(", ")", "^", "A1", "1"])
    def test_non_operators(self, token: str) -> None:
        assert not is_operator(token)

    @pytest.mark.parametrize("token", ["A1", "Z99", "AA10", "ABC123"])
    def test_cell_labels(self, token: str) -> None:
        assert is_cell_label(token)

    @pytest.mark.parametrize("token", ["a1", "A0", "A01", "1A", "A", "A1B", "", "$A$1"])
    def test_non_labels(self, token: str) -> None:
        assert not is_cell_label(token)


class TestTokenize:
    def test_simple(self) -> None:
        assert tokenize("2 + 3") == ["2", "+", "3"]

    def test_leading_equals_stripped(self) -> None:
        assert tokenize("=A1*2") == ["A1", "*", "2"]

    def test_no_whitespace_needed(self) -> None:
        assert tokenize("(1+2)*B3/4-.5") == ["(", "1", "+", "2", ")", "*", "B3", "/", "4", "-", ".5"]

    def test_labels_uppercased(self) -> None:
        assert tokenize("a1 + bc22") == ["A1", "+", "BC22"]

    def test_exponent_number(self) -> None:
        assert tokenize("1.5e3 * 2") == ["1.5e3", "*", "2"]

    def test_words_pass_through(self) -> None:
        assert tokenize("SUM + 1") == ["SUM", "+", "1"]

    def test_blank_text(self) -> None:
        assert tokenize("") == []
        assert tokenize("   ") == []
        assert tokenize("=") == []

    def test_unknown_character(self) -> None:
        with pytest.raises(FormulaParseError) as exc_info:
            tokenize("=1 + #")
        assert exc_info.value.position == 5

    def test_detokenize(self) -> None:
        assert detokenize(["(", "A1", "+", "2", ")"]) == "( A1 + 2 )"

    def test_round_trip_through_detokenize(self) -> None:
        tokens = tokenize("=(A1+2)*3")
        assert tokenize(detokenize(tokens)) == tokens
