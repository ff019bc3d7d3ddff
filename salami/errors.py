import enum
from typing import List


class ErrorKind(enum.Enum):
    TYPE_MISMATCH = 'TypeMismatch'
    UNBOUND_IDENTIFIER = 'UnboundIdentifier'
    DIVISION_BY_ZERO = 'DivisionByZero'
    NOT_CALLABLE = 'NotCallable'
    ARITY_MISMATCH = 'ArityMismatch'
    RECURSION_LIMIT = 'RecursionLimit'


class EvaluationError(Exception):
    """Fatal runtime error raised by the interpreter."""
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.message = message


class ParseError(Exception):
    """Raised by the convenience API when the parser collected errors."""
    def __init__(self, errors: List[str]):
        super().__init__('; '.join(errors))
        self.errors = list(errors)
