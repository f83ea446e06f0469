"""
Value algebra

A Value is exactly one of:
- Concrete: a fully known scalar
- Variable: a named unknown of a fixed bit width
- Equation: a deferred binary operation over two Values

Combining two Values folds to a Concrete when both operands are concrete and
otherwise builds an Equation that keeps the operands in the order given.
No other simplification is performed.

Values are immutable and render themselves in prefix notation:
    Concrete  -> the scalar's own text, e.g. 10
    Variable  -> <name:width>
    Equation  -> (TAG left right)
"""

import operator
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, List, Set, Tuple

from symval.core._scalar import Scalar, bit_width


class Operation(Enum):
    """Binary operations; the value is the tag used when rendering"""
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    AND = "AND"
    OR = "OR"
    XOR = "XOR"

    @property
    def arity(self) -> int:
        return 2


class Value(ABC):
    """Base class for concrete, symbolic and compound values"""

    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @abstractmethod
    def __str__(self) -> str:
        pass

    @abstractmethod
    def free_vars(self) -> Set[str]:
        """Return the names of all variables in this value"""
        pass

    def is_concrete(self) -> bool:
        return False

    def is_symbolic(self) -> bool:
        """True if the value depends on at least one variable"""
        return not self.is_concrete()

    def variables(self) -> List[Tuple[str, int]]:
        """Distinct (name, bit_width) pairs in left-to-right order of first use"""
        seen = set()
        result = []
        stack = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Variable):
                key = (node.name, node.bit_width)
                if key not in seen:
                    seen.add(key)
                    result.append(key)
            elif isinstance(node, Equation):
                stack.append(node.right)
                stack.append(node.left)
        return result

    def _binary(self, other, op: "Operation"):
        if not isinstance(other, Value):
            return NotImplemented
        return combine(self, other, op)

    def __add__(self, other):
        return self._binary(other, Operation.ADD)

    def __sub__(self, other):
        return self._binary(other, Operation.SUB)

    def __mul__(self, other):
        return self._binary(other, Operation.MUL)

    def __truediv__(self, other):
        return self._binary(other, Operation.DIV)

    def __floordiv__(self, other):
        return self._binary(other, Operation.DIV)

    def __and__(self, other):
        return self._binary(other, Operation.AND)

    def __or__(self, other):
        return self._binary(other, Operation.OR)

    def __xor__(self, other):
        return self._binary(other, Operation.XOR)


class Concrete(Value):
    """A fully known scalar value"""

    __slots__ = ("value",)

    def __init__(self, value):
        if isinstance(value, Value) or not isinstance(value, Scalar):
            raise TypeError(f"{type(value).__name__} does not support the scalar operations")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Concrete({self.value!r})"

    def free_vars(self) -> Set[str]:
        return set()

    def is_concrete(self) -> bool:
        return True


class Variable(Value):
    """A free unknown, identified by name and carrying its bit width

    Name uniqueness within a session is the caller's responsibility.
    """

    __slots__ = ("name", "bit_width")

    def __init__(self, name: str, bit_width: int):
        if not isinstance(name, str) or not name:
            raise ValueError("Variable name must be a non-empty string")
        if isinstance(bit_width, bool) or not isinstance(bit_width, int) or bit_width <= 0:
            raise ValueError(f"Variable bit width must be a positive integer, got {bit_width!r}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "bit_width", bit_width)

    def __str__(self) -> str:
        return f"<{self.name}:{self.bit_width}>"

    def __repr__(self) -> str:
        return f"Variable({self.name!r}, {self.bit_width})"

    def free_vars(self) -> Set[str]:
        return {self.name}


class Equation(Value):
    """A deferred binary operation: (op left right)"""

    __slots__ = ("op", "operands")

    def __init__(self, op: Operation, left: Value, right: Value):
        if not isinstance(op, Operation):
            raise TypeError(f"Expected an Operation, got {op!r}")
        if not isinstance(left, Value) or not isinstance(right, Value):
            raise TypeError("Equation operands must be Values")
        object.__setattr__(self, "op", op)
        object.__setattr__(self, "operands", (left, right))

    @property
    def left(self) -> Value:
        return self.operands[0]

    @property
    def right(self) -> Value:
        return self.operands[1]

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return reduce_tree(
            self, repr,
            lambda node, left, right: f"Equation({node.op.name}, {left}, {right})"
        )

    def free_vars(self) -> Set[str]:
        return {name for name, _ in self.variables()}


def reduce_tree(value: Value, leaf: Callable, node: Callable):
    """Evaluate a value tree bottom-up with an explicit stack

    Args:
        value: Root of the tree
        leaf: Called with each Concrete or Variable
        node: Called as node(equation, left_result, right_result) once both
            operands of an Equation have been reduced

    Returns:
        The result for the root
    """
    results = []
    stack = [(value, False)]
    while stack:
        current, reduced = stack.pop()
        if not isinstance(current, Equation):
            results.append(leaf(current))
        elif reduced:
            right = results.pop()
            left = results.pop()
            results.append(node(current, left, right))
        else:
            stack.append((current, True))
            stack.append((current.right, False))
            stack.append((current.left, False))
    return results.pop()


# Scalar operation used to fold each Operation when both operands are concrete
FOLDS: Dict[Operation, Callable] = {
    Operation.ADD: operator.add,
    Operation.SUB: operator.sub,
    Operation.MUL: operator.mul,
    Operation.DIV: operator.floordiv,
    Operation.AND: operator.and_,
    Operation.OR: operator.or_,
    Operation.XOR: operator.xor,
}


def combine(left: Value, right: Value, op: Operation) -> Value:
    """Combine two values with a binary operation

    Two concretes fold into a new Concrete; the scalar operation's own
    ArithmeticError (e.g. division by zero) propagates to the caller. Every
    other pairing returns Equation(op, left, right) without evaluating
    anything.
    """
    if isinstance(left, Concrete) and isinstance(right, Concrete):
        return Concrete(FOLDS[op](left.value, right.value))
    return Equation(op, left, right)


def render(value: Value) -> str:
    """Render a value in prefix notation, e.g. (ADD 10 <x:8>)

    Iterative; depth is limited only by memory.
    """
    parts = []
    stack = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Equation):
            stack.extend((")", item.right, " ", item.left, f"({item.op.value} "))
        else:
            parts.append(str(item))
    return "".join(parts)


def concrete(value, scalar_type=None) -> Concrete:
    """Wrap a scalar, converting it to `scalar_type` first when one is given"""
    if scalar_type is not None and not isinstance(value, scalar_type):
        value = scalar_type(value)
    return Concrete(value)


def symbolic(name: str, scalar_type) -> Variable:
    """Name a fresh unknown whose width is derived from `scalar_type`"""
    return Variable(name, bit_width(scalar_type))
