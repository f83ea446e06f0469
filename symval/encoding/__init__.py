"""
SMT-LIB encoding for value trees.

This module handles the translation from values and constraints over them
to SMT-LIB 2 query text that the satisfiability oracle can load.
"""

from symval.encoding.constraints import Constraint, Eq, Neq
from symval.encoding.smtlib import SmtLibEncoder, encode_query
