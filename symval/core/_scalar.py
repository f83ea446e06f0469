"""
Scalar types

Defines the capability a scalar type needs before it can be the payload of a
Concrete value, and the fixed-width integer types shipped with symval.

Fixed-width arithmetic follows bit-vector semantics: results wrap modulo
2**width, and division truncates toward zero (bvudiv / bvsdiv).
"""

import operator
from typing import Dict, Protocol, Type, runtime_checkable


@runtime_checkable
class Scalar(Protocol):
    """Operations a scalar type must support to be used inside a Value

    Every operation takes and returns the same scalar type.
    """

    def __str__(self) -> str: ...

    def __add__(self, other): ...

    def __sub__(self, other): ...

    def __mul__(self, other): ...

    def __floordiv__(self, other): ...

    def __and__(self, other): ...

    def __or__(self, other): ...

    def __xor__(self, other): ...


def bit_width(scalar_type) -> int:
    """Width in bits of a sized scalar type (8 * its storage size in bytes)

    Raises:
        TypeError: if the type does not declare a storage size
    """
    size = getattr(scalar_type, "size", None)
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        name = getattr(scalar_type, "__name__", type(scalar_type).__name__)
        raise TypeError(f"{name} does not declare a storage size")
    return 8 * size


class FixedInt:
    """Fixed-width two's complement integer

    Subclasses set `size` (bytes) and `signed`. Construction wraps any
    integer into the type's range.
    """

    __slots__ = ("_value",)

    size = 0
    signed = False

    def __init__(self, value):
        if type(self) is FixedInt:
            raise TypeError("FixedInt is abstract; use a sized subclass such as U8")
        bits = 8 * self.size
        wrapped = operator.index(value) & ((1 << bits) - 1)
        if self.signed and wrapped >> (bits - 1):
            wrapped -= 1 << bits
        object.__setattr__(self, "_value", wrapped)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def min_value(cls) -> int:
        if cls.signed:
            return -(1 << (8 * cls.size - 1))
        return 0

    @classmethod
    def max_value(cls) -> int:
        if cls.signed:
            return (1 << (8 * cls.size - 1)) - 1
        return (1 << (8 * cls.size)) - 1

    @property
    def value(self) -> int:
        return self._value

    def unsigned(self) -> int:
        """The bit pattern read as an unsigned integer"""
        return self._value & ((1 << (8 * self.size)) - 1)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value + other._value)

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value - other._value)

    def __mul__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value * other._value)

    def __floordiv__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        if other._value == 0:
            raise ZeroDivisionError(f"{type(self).__name__} division by zero")
        quotient = abs(self._value) // abs(other._value)
        if (self._value < 0) != (other._value < 0):
            quotient = -quotient
        return type(self)(quotient)

    def __and__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value & other._value)

    def __or__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value | other._value)

    def __xor__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value ^ other._value)


class U8(FixedInt):
    __slots__ = ()
    size = 1


class U16(FixedInt):
    __slots__ = ()
    size = 2


class U32(FixedInt):
    __slots__ = ()
    size = 4


class U64(FixedInt):
    __slots__ = ()
    size = 8


class I8(FixedInt):
    __slots__ = ()
    size = 1
    signed = True


class I16(FixedInt):
    __slots__ = ()
    size = 2
    signed = True


class I32(FixedInt):
    __slots__ = ()
    size = 4
    signed = True


class I64(FixedInt):
    __slots__ = ()
    size = 8
    signed = True


# Lookup by the lowercase names used on the command line
SCALAR_TYPES: Dict[str, Type[FixedInt]] = {
    cls.__name__.lower(): cls
    for cls in (U8, U16, U32, U64, I8, I16, I32, I64)
}
