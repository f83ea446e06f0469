"""
Tests for parsing rendered values.
"""

import pytest

from symval import (
    Operation, Concrete, Variable, Equation,
    U8, U16, I8, ParseError, parse, render, concrete, symbolic
)
from symval.core._lexer import Lexer


class TestLexer:
    """Test tokenization"""

    def test_tokens(self):
        tokens = Lexer("(ADD 10 <x:8>)").tokens
        assert [t.type for t in tokens] == ["LPAREN", "TAG", "NUMBER", "VAR", "RPAREN"]

    def test_negative_number(self):
        tokens = Lexer("-12").tokens
        assert tokens[0].type == "NUMBER" and tokens[0].value == "-12"

    def test_invalid_character(self):
        with pytest.raises(ParseError, match="position 5"):
            Lexer("(ADD $ 1)")


class TestParseLeaves:
    """Test parsing concrete and symbolic leaves"""

    def test_number(self):
        value = parse("42", U8)
        assert isinstance(value, Concrete)
        assert value.value == U8(42)

    def test_negative_number(self):
        value = parse("-3", I8)
        assert value.value == I8(-3)

    def test_variable(self):
        value = parse("<x:8>", U8)
        assert isinstance(value, Variable)
        assert value.name == "x" and value.bit_width == 8

    def test_variable_name_with_colon(self):
        value = parse("<mem:0x10:16>", U16)
        assert value.name == "mem:0x10"


class TestParseEquations:
    """Test parsing equations"""

    def test_scenario(self):
        text = "(MUL (ADD 10 <x:8>) (XOR 50 <y:8>))"
        value = parse(text, U8)
        assert isinstance(value, Equation)
        assert value.op is Operation.MUL
        assert value.left.op is Operation.ADD
        assert value.right.op is Operation.XOR
        assert str(value) == text

    def test_no_folding(self):
        value = parse("(ADD 1 2)", U8)
        assert isinstance(value, Equation)
        assert str(value) == "(ADD 1 2)"

    def test_round_trip(self):
        value = (symbolic("a", U16) - concrete(300, U16)) & (concrete(7, U16) | symbolic("b", U16))
        assert str(parse(str(value), U16)) == str(value)

    def test_whitespace_is_ignored(self):
        value = parse("  ( OR\n<x:8>   1 )", U8)
        assert str(value) == "(OR <x:8> 1)"


class TestParseErrors:
    """Test rejection of malformed input"""

    def test_empty(self):
        with pytest.raises(ParseError):
            parse("", U8)

    def test_unknown_tag(self):
        with pytest.raises(ParseError, match="Unknown operation"):
            parse("(MOD 1 2)", U8)

    def test_too_few_operands(self):
        with pytest.raises(ParseError, match="exactly 2 operands"):
            parse("(ADD 1)", U8)

    def test_too_many_operands(self):
        with pytest.raises(ParseError, match="exactly 2 operands"):
            parse("(ADD 1 2 3)", U8)

    def test_unclosed(self):
        with pytest.raises(ParseError):
            parse("(ADD 1 2", U8)

    def test_trailing_input(self):
        with pytest.raises(ParseError, match="trailing"):
            parse("1 2", U8)

    def test_width_mismatch(self):
        with pytest.raises(ParseError, match="width"):
            parse("<x:16>", U8)

    def test_literal_out_of_range(self):
        with pytest.raises(ParseError, match="out of range"):
            parse("256", U8)

    def test_negative_unsigned_literal(self):
        with pytest.raises(ParseError, match="out of range"):
            parse("-1", U8)

    def test_unsized_scalar_type(self):
        with pytest.raises(TypeError):
            parse("1", int)


class TestDeepInput:
    """Parsing is not limited by nesting depth"""

    DEPTH = 5000

    def test_round_trip_left_deep(self):
        acc = symbolic("x", U8)
        for _ in range(self.DEPTH):
            acc = acc + concrete(1, U8)
        text = render(acc)
        value = parse(text, U8)
        assert isinstance(value, Equation)
        assert render(value) == text

    def test_round_trip_right_deep(self):
        text = "(XOR 1 " * self.DEPTH + "<x:8>" + ")" * self.DEPTH
        assert render(parse(text, U8)) == text

    def test_unclosed_deep_input(self):
        text = "(ADD 1 " * self.DEPTH + "<x:8>"
        with pytest.raises(ParseError, match="EOF"):
            parse(text, U8)

    def test_arity_error_deep_inside(self):
        text = "(ADD 1 " * self.DEPTH + "(OR 1)" + ")" * self.DEPTH
        with pytest.raises(ParseError, match="exactly 2 operands"):
            parse(text, U8)
