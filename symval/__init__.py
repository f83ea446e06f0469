"""
Symbolic Values with Constant Folding

A Python library for representing program values that are concrete,
symbolic, or built from binary operations over other values, for use as the
value layer of a symbolic execution engine.

The library is organized into logical modules:
- core: scalar types, the value algebra, rendering and parsing
- encoding: SMT-LIB query encoding for value trees
- solving: satisfiability oracle backed by Z3
"""

# Core abstractions
from symval.core.value import (
    Scalar, FixedInt, bit_width,
    U8, U16, U32, U64, I8, I16, I32, I64,
    Operation, Value, Concrete, Variable, Equation,
    combine, render, concrete, symbolic
)
from symval.core.parser import parse

# Encoding
from symval.encoding import Constraint, Eq, Neq, SmtLibEncoder, encode_query

# Oracle
from symval.solving import SolveResult, Oracle, solve, check

# Errors
from symval.errors import (
    SymvalError, ParseError, EncodingError,
    OracleError, MalformedQueryError, ResourceAcquisitionError
)

__version__ = "0.1.0"
__all__ = [
    # Scalars
    "Scalar", "FixedInt", "bit_width",
    "U8", "U16", "U32", "U64", "I8", "I16", "I32", "I64",
    # Values
    "Operation", "Value", "Concrete", "Variable", "Equation",
    "combine", "render", "concrete", "symbolic", "parse",
    # Encoding
    "Constraint", "Eq", "Neq", "SmtLibEncoder", "encode_query",
    # Oracle
    "SolveResult", "Oracle", "solve", "check",
    # Errors
    "SymvalError", "ParseError", "EncodingError",
    "OracleError", "MalformedQueryError", "ResourceAcquisitionError",
]
