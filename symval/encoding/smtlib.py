"""
SMT-LIB 2 encoding (QF_BV)

Turns value trees and constraints over them into query text:

    (set-logic QF_BV)
    (declare-fun x () (_ BitVec 8))
    (assert (= (bvadd #x0a x) #x0f))
    (check-sat)

Every distinct variable is declared once, keyed by name and bit width.
"""

import re
from typing import Dict, Iterable, List, Tuple

from symval.core.value import (
    Value, Concrete, Variable, Equation, Operation, FixedInt, bit_width,
    reduce_tree
)
from symval.encoding.constraints import Constraint, Eq, Neq
from symval.errors import EncodingError


_SIMPLE_SYMBOL = re.compile(r"[A-Za-z~!@$%^&*_\-+=<>.?/][A-Za-z0-9~!@$%^&*_\-+=<>.?/]*\Z")

_RESERVED = {
    "_", "!", "as", "let", "exists", "forall", "match", "par",
    "BINARY", "DECIMAL", "HEXADECIMAL", "NUMERAL", "STRING",
    "assert", "check-sat", "declare-fun", "declare-const", "define-fun",
    "exit", "pop", "push", "set-logic", "set-option", "set-info",
}


class SmtLibEncoder:
    """Encodes values and constraints as SMT-LIB 2 bit-vector terms"""

    # Operation -> SMT-LIB function for unsigned and signed scalars
    UNSIGNED_OPS: Dict[Operation, str] = {
        Operation.ADD: "bvadd",
        Operation.SUB: "bvsub",
        Operation.MUL: "bvmul",
        Operation.DIV: "bvudiv",
        Operation.AND: "bvand",
        Operation.OR: "bvor",
        Operation.XOR: "bvxor",
    }
    SIGNED_OPS: Dict[Operation, str] = {**UNSIGNED_OPS, Operation.DIV: "bvsdiv"}

    def __init__(self, signed: bool = False):
        """Initialize the encoder

        Args:
            signed: Encode division as bvsdiv instead of bvudiv. Concrete
                scalars must agree with this choice.
        """
        self.signed = signed
        self.ops = self.SIGNED_OPS if signed else self.UNSIGNED_OPS

    def symbol(self, name: str) -> str:
        """SMT-LIB symbol for a variable name, quoted when necessary"""
        if _SIMPLE_SYMBOL.match(name) and name not in _RESERVED:
            return name
        if "|" in name or "\\" in name:
            raise EncodingError(f"Variable name {name!r} cannot be written as an SMT-LIB symbol")
        return f"|{name}|"

    def encode_literal(self, value: Concrete) -> Tuple[str, int]:
        scalar = value.value
        if not isinstance(scalar, FixedInt):
            raise EncodingError(
                f"Cannot encode {type(scalar).__name__} literal {scalar}: "
                f"only fixed-width scalars have a bit width"
            )
        if scalar.signed != self.signed:
            expected = "signed" if self.signed else "unsigned"
            raise EncodingError(f"Literal {scalar!r} does not match a {expected} query")
        width = bit_width(type(scalar))
        if width % 4 == 0:
            return f"#x{scalar.unsigned():0{width // 4}x}", width
        return f"(_ bv{scalar.unsigned()} {width})", width

    def encode_term(self, value: Value) -> str:
        """Encode a value tree as a bit-vector term"""
        term, _ = self._encode(value)
        return term

    def width_of(self, value: Value) -> int:
        """Bit width of an encoded value"""
        _, width = self._encode(value)
        return width

    def _encode(self, value: Value) -> Tuple[str, int]:
        return reduce_tree(value, self._encode_leaf, self._encode_equation)

    def _encode_leaf(self, value: Value) -> Tuple[str, int]:
        if isinstance(value, Concrete):
            return self.encode_literal(value)
        elif isinstance(value, Variable):
            return self.symbol(value.name), value.bit_width
        raise EncodingError(f"Unsupported value: {value!r}")

    def _encode_equation(self, value: Equation, left: Tuple[str, int],
                         right: Tuple[str, int]) -> Tuple[str, int]:
        (left_term, left_width), (right_term, right_width) = left, right
        if left_width != right_width:
            raise EncodingError(
                f"Operand widths differ in {value.op.name}: {left_width} vs {right_width}"
            )
        return f"({self.ops[value.op]} {left_term} {right_term})", left_width

    def encode_constraint(self, constraint: Constraint) -> str:
        left, left_width = self._encode(constraint.left)
        right, right_width = self._encode(constraint.right)
        if left_width != right_width:
            raise EncodingError(f"Cannot compare {left_width}-bit and {right_width}-bit values")
        if isinstance(constraint, Eq):
            return f"(= {left} {right})"
        elif isinstance(constraint, Neq):
            return f"(not (= {left} {right}))"
        raise EncodingError(f"Unsupported constraint: {type(constraint).__name__}")

    def declarations(self, constraints: Iterable[Constraint]) -> List[str]:
        """One declare-fun per distinct variable, in order of first use

        Raises:
            EncodingError: if one name is used with two different widths
        """
        widths: Dict[str, int] = {}
        result = []
        for constraint in constraints:
            for side in (constraint.left, constraint.right):
                for name, width in side.variables():
                    if name in widths:
                        if widths[name] != width:
                            raise EncodingError(
                                f"Variable {name!r} used with widths {widths[name]} and {width}"
                            )
                        continue
                    widths[name] = width
                    result.append(f"(declare-fun {self.symbol(name)} () (_ BitVec {width}))")
        return result

    def encode_query(self, constraints: Iterable[Constraint]) -> str:
        """Encode constraints as a complete QF_BV query ending in check-sat"""
        constraints = list(constraints)
        lines = ["(set-logic QF_BV)"]
        lines.extend(self.declarations(constraints))
        for constraint in constraints:
            lines.append(f"(assert {self.encode_constraint(constraint)})")
        lines.append("(check-sat)")
        return "\n".join(lines) + "\n"


def encode_query(constraints: Iterable[Constraint], signed: bool = False) -> str:
    """Encode constraints as SMT-LIB 2 query text"""
    return SmtLibEncoder(signed=signed).encode_query(constraints)
