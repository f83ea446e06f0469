"""
Exception hierarchy

Constant-folding failures are not listed here: they are the scalar type's
own ArithmeticError (e.g. ZeroDivisionError) and propagate unwrapped.
"""


class SymvalError(Exception):
    """Base class for errors raised by symval"""
    pass


class ParseError(SymvalError):
    """Exception raised for errors reading rendered value text"""
    pass


class EncodingError(SymvalError):
    """A value tree cannot be encoded as an SMT-LIB query"""
    pass


class OracleError(SymvalError):
    """Base class for satisfiability oracle failures"""
    pass


class MalformedQueryError(OracleError):
    """The oracle could not load or parse the query it was given"""

    def __init__(self, message: str, source: str = None):
        super().__init__(message)
        self.source = source


class ResourceAcquisitionError(OracleError):
    """The oracle's configuration, context or solver could not be created"""
    pass
