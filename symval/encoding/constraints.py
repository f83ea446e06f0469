"""
Constraints over values

Pure relations between two Values that the encoder turns into assertions.
"""

from typing import Set

from symval.core.value import Value


class Constraint:
    """Base class for a binary relation between two values"""

    symbol = "?"

    def __init__(self, left: Value, right: Value):
        if not isinstance(left, Value) or not isinstance(right, Value):
            raise TypeError(f"{type(self).__name__} operands must be Values")
        self.left = left
        self.right = right

    def __str__(self) -> str:
        return f"{self.left} {self.symbol} {self.right}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.left!r}, {self.right!r})"

    def free_vars(self) -> Set[str]:
        return self.left.free_vars().union(self.right.free_vars())


class Eq(Constraint):
    """Equality: v1 = v2"""

    symbol = "="


class Neq(Constraint):
    """Disequality: v1 != v2"""

    symbol = "!="
