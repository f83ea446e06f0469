"""
Satisfiability oracle bridge to Z3.
"""

from symval.solving.oracle import SolveResult, Z3Session, Oracle, solve, check
