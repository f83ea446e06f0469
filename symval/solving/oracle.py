"""
Satisfiability oracle

Decides whether an SMT-LIB 2 query is satisfiable using Z3. Each query runs
in its own Z3Session (configuration, context and solver) that is created
for that call and released on every exit path, so independent calls can
run concurrently on separate threads.

The verdict is one of SAT, UNSAT or UNDEF. UNDEF is a normal outcome: Z3
gave up (timeout, resource limit, unsupported fragment). A query that Z3
cannot load raises MalformedQueryError instead.
"""

import time
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import z3

from symval.encoding.constraints import Constraint
from symval.encoding.smtlib import encode_query
from symval.errors import MalformedQueryError, OracleError, ResourceAcquisitionError


class SolveResult(Enum):
    """Tri-state satisfiability verdict"""
    SAT = "SAT"
    UNSAT = "UNSAT"
    UNDEF = "UNDEF"

    def __str__(self) -> str:
        return self.value


class Z3Session:
    """One Z3 configuration, context and solver, used for a single query

    Use as a context manager; leaving the block releases the solver and
    then the context whether or not the body raised.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 timeout: Optional[int] = None, rlimit: Optional[int] = None):
        """
        Args:
            config: Z3 configuration parameters for the context
            timeout: Solver timeout in milliseconds
            rlimit: Solver resource limit
        """
        self.config = dict(config or {})
        self.timeout = timeout
        self.rlimit = rlimit
        self.context: Optional[z3.Context] = None
        self.solver: Optional[z3.Solver] = None

    def open(self) -> "Z3Session":
        """Create the context and solver

        Raises:
            ResourceAcquisitionError: if Z3 rejects the configuration or
                cannot create the context or solver
        """
        try:
            self.context = z3.Context(**self.config)
            self.solver = z3.Solver(ctx=self.context)
            if self.timeout is not None:
                self.solver.set("timeout", int(self.timeout))
            if self.rlimit is not None:
                self.solver.set("rlimit", int(self.rlimit))
        except z3.Z3Exception as e:
            self.close()
            raise ResourceAcquisitionError(f"Could not initialize Z3: {e}") from e
        return self

    def close(self):
        """Release the solver, then the context it belongs to

        z3 has no explicit free; Solver.__del__ and Context.__del__ release
        the native objects when the last reference goes. The solver keeps
        its own reference to the context, so the context is never freed
        first.
        """
        solver, self.solver = self.solver, None
        del solver
        context, self.context = self.context, None
        del context

    @property
    def is_open(self) -> bool:
        return self.solver is not None

    def __enter__(self) -> "Z3Session":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _require_open(self):
        if not self.is_open:
            raise OracleError("Z3 session is not open")

    def load_file(self, path: Union[str, Path]):
        """Add the assertions of an SMT-LIB 2 file to the solver"""
        self._require_open()
        try:
            self.solver.from_file(str(path))
        except z3.Z3Exception as e:
            raise MalformedQueryError(f"Could not load query from {path}: {e}", source=str(path)) from e

    def load_text(self, query: str):
        """Add the assertions of SMT-LIB 2 text to the solver"""
        self._require_open()
        try:
            self.solver.from_string(query)
        except z3.Z3Exception as e:
            raise MalformedQueryError(f"Could not parse query: {e}") from e

    def check(self) -> SolveResult:
        """Run the decision procedure to completion or to its resource limit"""
        self._require_open()
        try:
            result = self.solver.check()
        except z3.Z3Exception as e:
            raise OracleError(f"Z3 check failed: {e}") from e
        if result == z3.sat:
            return SolveResult.SAT
        elif result == z3.unsat:
            return SolveResult.UNSAT
        return SolveResult.UNDEF

    def reason_undefined(self) -> str:
        """Z3's explanation for the last UNDEF verdict"""
        self._require_open()
        return self.solver.reason_unknown()


class Oracle:
    """Satisfiability oracle over SMT-LIB 2 queries"""

    def __init__(self, timeout: Optional[int] = None, rlimit: Optional[int] = None,
                 config: Optional[Dict[str, Any]] = None, verbose: bool = False):
        """Initialize the oracle

        Args:
            timeout: Z3 solver timeout in milliseconds (None for no limit)
            rlimit: Z3 resource limit (None for no limit)
            config: Extra Z3 configuration parameters for each context
            verbose: Print progress for each query
        """
        self.timeout = timeout
        self.rlimit = rlimit
        self.config = dict(config or {})
        self.verbose = verbose

    def session(self) -> Z3Session:
        """A new, unopened session configured like this oracle"""
        return Z3Session(config=self.config, timeout=self.timeout, rlimit=self.rlimit)

    def solve(self, path: Union[str, Path]) -> SolveResult:
        """Decide the satisfiability of the query stored in an SMT-LIB 2 file

        Raises:
            MalformedQueryError: if Z3 cannot load the file
            ResourceAcquisitionError: if the Z3 session cannot be created
        """
        if self.verbose:
            print(f"Solving {path} (timeout={self.timeout}, rlimit={self.rlimit})")
        return self._run(lambda session: session.load_file(path))

    def solve_text(self, query: str) -> SolveResult:
        """Decide the satisfiability of SMT-LIB 2 query text"""
        if self.verbose:
            print(f"Solving {len(query)} bytes of SMT-LIB (timeout={self.timeout}, rlimit={self.rlimit})")
        return self._run(lambda session: session.load_text(query))

    def check(self, constraints: Iterable[Constraint], signed: bool = False) -> SolveResult:
        """Encode constraints over values and decide their satisfiability"""
        return self.solve_text(encode_query(constraints, signed=signed))

    def _run(self, load) -> SolveResult:
        start_time = time.time()
        with self.session() as session:
            load(session)
            result = session.check()
            if self.verbose:
                elapsed_ms = (time.time() - start_time) * 1000
                print(f"  Result: {result} ({elapsed_ms:.2f}ms)")
                if result is SolveResult.UNDEF:
                    print(f"  Reason: {session.reason_undefined()}")
        return result


def solve(path: Union[str, Path], **kwargs) -> SolveResult:
    """Decide the satisfiability of an SMT-LIB 2 file with a fresh Oracle"""
    return Oracle(**kwargs).solve(path)


def check(constraints: Iterable[Constraint], signed: bool = False, **kwargs) -> SolveResult:
    """Encode constraints and decide their satisfiability with a fresh Oracle"""
    return Oracle(**kwargs).check(constraints, signed=signed)
