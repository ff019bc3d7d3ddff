# Salami language package
# This package provides a lexer, parser and tree-walking interpreter for Salami.
from .errors import ErrorKind, EvaluationError, ParseError
from .interpreter import Interpreter, compile_module, run_program
from .lexer import Lexer, tokenize
from .parser import Parser, parse_program

__all__ = [
    'run_program',
    'compile_module',
    'parse_program',
    'tokenize',
    'Interpreter',
    'Lexer',
    'Parser',
    'ErrorKind',
    'EvaluationError',
    'ParseError',
]
