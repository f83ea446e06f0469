"""
Core value representation.

This module contains the fundamental building blocks:
- Scalar contract and fixed-width scalar types
- Value algebra (Concrete, Variable, Equation) and rendering
- Parser for rendered values
"""

from symval.core.value import *
from symval.core.parser import *
