"""
Parser for rendered values

Reads the prefix notation produced by rendering a Value back into a tree.

Syntax:
    - 10, -3: concrete scalar (decimal, converted to the scalar type)
    - <x:8>: variable x of width 8
    - (ADD a b): equation; tags are ADD, SUB, MUL, DIV, AND, OR, XOR

Equations are rebuilt node for node without folding, so parsing and then
rendering reproduces the input up to whitespace.
"""

from typing import Optional

from symval.core._lexer import Lexer, Token
from symval.core._scalar import bit_width
from symval.core._value import Concrete, Equation, Operation, Value, Variable
from symval.errors import ParseError


class Parser:
    """Parser for rendered values over one scalar type"""

    def __init__(self, text: str, scalar_type):
        self.lexer = Lexer(text)
        self.tokens = self.lexer.tokens
        self.pos = 0
        self.scalar_type = scalar_type
        self.width = bit_width(scalar_type)

    def current_token(self) -> Optional[Token]:
        """Get the current token"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self):
        """Move to the next token"""
        self.pos += 1

    def expect(self, token_type: str) -> Token:
        """Expect a specific token type"""
        token = self.current_token()
        if token is None:
            raise ParseError(f"Expected {token_type}, got EOF")
        if token.type != token_type:
            raise ParseError(f"Expected {token_type}, got {token.type} at position {token.pos}")
        self.advance()
        return token

    def parse(self) -> Value:
        """Parse a complete value; trailing tokens are an error"""
        value = self.parse_value()
        token = self.current_token()
        if token is not None:
            raise ParseError(f"Unexpected trailing input at position {token.pos}: {token.value!r}")
        return value

    def parse_value(self) -> Value:
        # Equations whose operands are still being read, innermost last
        pending = []
        while True:
            token = self.current_token()
            if token is None:
                raise ParseError("Unexpected end of input")

            if token.type == 'LPAREN':
                self.advance()
                op = self._parse_tag()
                pending.append((op, []))
                self._expect_operand(op)
                continue

            if token.type == 'NUMBER':
                self.advance()
                value = self._parse_number(token)
            elif token.type == 'VAR':
                self.advance()
                value = self._parse_variable(token)
            else:
                raise ParseError(f"Unexpected token at position {token.pos}: {token.value!r}")

            # Hand the finished value to its equation, closing every
            # equation it completes
            while pending:
                op, operands = pending[-1]
                operands.append(value)
                if len(operands) < op.arity:
                    self._expect_operand(op)
                    break
                pending.pop()
                closing = self.current_token()
                if closing is not None and closing.type != 'RPAREN':
                    raise ParseError(f"{op.name} takes exactly 2 operands (position {closing.pos})")
                self.expect('RPAREN')
                value = Equation(op, *operands)

            if not pending:
                return value

    def _parse_tag(self) -> Operation:
        tag = self.expect('TAG')
        try:
            return Operation[tag.value]
        except KeyError:
            raise ParseError(f"Unknown operation {tag.value!r} at position {tag.pos}") from None

    def _expect_operand(self, op: Operation):
        token = self.current_token()
        if token is not None and token.type == 'RPAREN':
            raise ParseError(f"{op.name} takes exactly 2 operands (position {token.pos})")

    def _parse_number(self, token: Token) -> Concrete:
        number = int(token.value)
        low = getattr(self.scalar_type, "min_value", None)
        high = getattr(self.scalar_type, "max_value", None)
        if low is not None and high is not None and not low() <= number <= high():
            raise ParseError(
                f"Literal {number} at position {token.pos} is out of range for "
                f"{self.scalar_type.__name__}"
            )
        return Concrete(self.scalar_type(number))

    def _parse_variable(self, token: Token) -> Variable:
        name, _, width = token.value[1:-1].rpartition(':')
        if int(width) != self.width:
            raise ParseError(
                f"Variable {name!r} at position {token.pos} has width {width}, "
                f"expected {self.width} for {self.scalar_type.__name__}"
            )
        return Variable(name, self.width)


def parse(text: str, scalar_type) -> Value:
    """Parse rendered value text

    Args:
        text: Rendered value, e.g. "(MUL (ADD 10 <x:8>) (XOR 50 <y:8>))"
        scalar_type: Sized scalar type for literals and variable widths

    Returns:
        The parsed value tree
    """
    parser = Parser(text, scalar_type)
    return parser.parse()
