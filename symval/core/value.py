"""
Value algebra public interface

Re-exports the scalar contract, the fixed-width scalar types and the value
variants so callers can import everything from symval.core.value.
"""

from symval.core._scalar import (
    Scalar, FixedInt, bit_width,
    U8, U16, U32, U64, I8, I16, I32, I64,
    SCALAR_TYPES
)

from symval.core._value import (
    Operation, Value, Concrete, Variable, Equation,
    FOLDS, combine, reduce_tree, render, concrete, symbolic
)

__all__ = [
    # Scalar contract
    'Scalar', 'FixedInt', 'bit_width',
    'U8', 'U16', 'U32', 'U64', 'I8', 'I16', 'I32', 'I64',
    'SCALAR_TYPES',

    # Values
    'Operation', 'Value', 'Concrete', 'Variable', 'Equation',

    # Algebra and rendering
    'FOLDS', 'combine', 'reduce_tree', 'render', 'concrete', 'symbolic',
]
