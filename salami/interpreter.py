"""Tree-walking interpreter for the Salami language.

The interpreter evaluates a parsed ``Program`` directly. Scopes are chained
``Environment`` objects; the interpreter keeps a cursor on the current one
and swaps it around blocks and calls. Function values close over the
environment active where they were created.

Control flow is carried by ``Signal`` values returned from every
evaluation step: ``ReturnSignal`` unwinds to the nearest call,
``ExitSignal`` unwinds the whole run. Any step that consumes a
sub-result hands a signal straight back to its caller.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from .ast import (
    Block, BooleanLiteral, CallExpression, ExitStatement, FunctionLiteral,
    FunctionStatement, Identifier, IfExpression, InfixExpression,
    IntegerLiteral, Node, Program, ReturnStatement, VarStatement,
)
from .environment import Environment
from .errors import ErrorKind, EvaluationError
from .parser import parse_program
from .types import (
    BooleanVal, ExitSignal, FunctionVal, IntegerVal, ReturnSignal, Signal,
    inspect, type_name,
)

# each Salami call costs a handful of Python frames
RECURSION_LIMIT = 10000
if sys.getrecursionlimit() < RECURSION_LIMIT:
    sys.setrecursionlimit(RECURSION_LIMIT)


class Interpreter:
    """Core interpreter that executes a Salami AST.

    ``strict_calls`` selects what calling a non-function does: raise
    ``NotCallable`` (the default) or quietly yield no value.
    """
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt',
                 strict_calls: bool = True):
        self.global_env = Environment()
        self.env = self.global_env
        self.exited = False
        self.exit_code: Optional[int] = None
        self.strict_calls = strict_calls
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    @contextmanager
    def scope(self, env: Environment) -> Iterator[Environment]:
        previous = self.env
        self.env = env
        try:
            yield env
        finally:
            self.env = previous

    # Public API
    def run(self, program: Program) -> Any:
        """Evaluate a program and return its final value.

        If an ``exit`` statement fired, ``exited`` and ``exit_code`` are set
        and the exit code is returned as an ``IntegerVal``.
        """
        if self.exited:
            return IntegerVal(self.exit_code)
        try:
            if self.debug_level >= 1:
                self.debug(f"run: {len(program.statements)} top-level statements")
            try:
                result = self.execute_block(program.statements, self.global_env)
            except RecursionError:
                raise EvaluationError(ErrorKind.RECURSION_LIMIT, "maximum call depth exceeded") from None
            if isinstance(result, ExitSignal):
                self.exited = True
                self.exit_code = result.code
                if self.debug_level >= 1:
                    self.debug(f"exit with code {result.code}")
                return IntegerVal(result.code)
            if isinstance(result, ReturnSignal):
                result = result.value
            if self.debug_level >= 1:
                self.debug(f"result: {inspect(result) or 'no value'}")
            return result
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_block(self, statements: List[Node], env: Environment) -> Any:
        result = None
        with self.scope(env):
            for stmt in statements:
                result = self.execute(stmt)
                if isinstance(result, Signal):
                    return result
        return result

    def execute(self, node: Node) -> Any:
        if self.debug_level >= 4:
            self.debug(f"{type(node).__name__}: {node}")
        if isinstance(node, VarStatement):
            value = self.evaluate(node.value)
            if isinstance(value, Signal):
                return value
            self.require_value(value, f"initializer of {node.name.name}")
            self.env.declare(node.name.name, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.name}: {type_name(value)} = {inspect(value)}")
            return value
        if isinstance(node, FunctionStatement):
            # bound before the body ever runs, so the function can call itself
            func = FunctionVal(node.parameters, node.body, self.env, node.name.name)
            self.env.declare(node.name.name, func)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.name}/{func.arity}")
            return func
        if isinstance(node, ReturnStatement):
            value = self.evaluate(node.value)
            if isinstance(value, Signal):
                return value
            return ReturnSignal(value)
        if isinstance(node, ExitStatement):
            value = self.evaluate(node.value)
            if isinstance(value, Signal):
                return value
            if not isinstance(value, IntegerVal):
                raise EvaluationError(ErrorKind.TYPE_MISMATCH, f'exit expects Integer, got {type_name(value)}')
            return ExitSignal(value.value)
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(parent=self.env))
        return self.evaluate(node)

    def evaluate(self, node: Node) -> Any:
        if isinstance(node, IntegerLiteral):
            return IntegerVal(node.value)
        if isinstance(node, BooleanLiteral):
            return BooleanVal(node.value)
        if isinstance(node, Identifier):
            return self.env.get(node.name)
        if isinstance(node, InfixExpression):
            left = self.evaluate(node.left)
            if isinstance(left, Signal):
                return left
            right = self.evaluate(node.right)
            if isinstance(right, Signal):
                return right
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, IfExpression):
            cond = self.evaluate(node.condition)
            if isinstance(cond, Signal):
                return cond
            if not isinstance(cond, BooleanVal):
                raise EvaluationError(ErrorKind.TYPE_MISMATCH, f'if condition must be Boolean, got {type_name(cond)}')
            if self.debug_level >= 3:
                self.debug(f"if ({node.condition}) -> {inspect(cond)}")
            if cond.value:
                return self.execute(node.consequence)
            if node.alternative is not None:
                return self.execute(node.alternative)
            return None
        if isinstance(node, FunctionLiteral):
            return FunctionVal(node.parameters, node.body, self.env)
        if isinstance(node, CallExpression):
            func = self.evaluate(node.callee)
            if isinstance(func, Signal):
                return func
            if not isinstance(func, FunctionVal):
                if self.strict_calls:
                    raise EvaluationError(ErrorKind.NOT_CALLABLE, f'{node.callee} is {type_name(func)}, not a function')
                if self.debug_level >= 3:
                    self.debug(f"call of non-function {node.callee} ignored")
                return None
            args: List[Any] = []
            for arg_node in node.arguments:
                arg = self.evaluate(arg_node)
                if isinstance(arg, Signal):
                    return arg
                self.require_value(arg, f"argument {len(args) + 1} of {node.callee}")
                args.append(arg)
            return self.call_function(func, args)
        if isinstance(node, (VarStatement, FunctionStatement, ReturnStatement, ExitStatement, Block)):
            return self.execute(node)
        raise TypeError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, func: FunctionVal, args: List[Any]) -> Any:
        if len(args) != func.arity:
            raise EvaluationError(
                ErrorKind.ARITY_MISMATCH,
                f"{func!r} expects {func.arity} arguments, got {len(args)}",
            )
        if self.debug_level >= 3:
            self.debug(f"call {func!r}({', '.join(inspect(a) for a in args)})")
        # the new scope hangs off the closure, not the caller
        call_env = Environment(parent=func.env)
        for param, arg in zip(func.parameters, args):
            call_env.declare(param.name, arg)
        result = self.execute_block(func.body.statements, call_env)
        if isinstance(result, ReturnSignal):
            return result.value
        return result

    def require_value(self, value: Any, what: str):
        if value is None:
            raise EvaluationError(ErrorKind.TYPE_MISMATCH, f'{what} has no value')

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if not isinstance(a, IntegerVal) or not isinstance(b, IntegerVal):
            raise EvaluationError(
                ErrorKind.TYPE_MISMATCH,
                f'unsupported {op} for {type_name(a)} and {type_name(b)}',
            )
        x, y = a.value, b.value
        if op == '+':
            return IntegerVal(x + y)
        if op == '-':
            return IntegerVal(x - y)
        if op == '*':
            return IntegerVal(x * y)
        if op == '/':
            if y == 0:
                raise EvaluationError(ErrorKind.DIVISION_BY_ZERO, f'division by zero in {x} / {y}')
            # truncate toward zero; Python's // floors
            quotient = abs(x) // abs(y)
            return IntegerVal(quotient if (x < 0) == (y < 0) else -quotient)
        if op == '>':
            return BooleanVal(x > y)
        if op == '<':
            return BooleanVal(x < y)
        raise EvaluationError(ErrorKind.TYPE_MISMATCH, f'unknown operator {op}')


def run_program(source, debug_level: int = 0, **options) -> Any:
    """Convenience function to parse and run a Salami program from source."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, **options)
    return interpreter.run(program)


def compile_module(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a Salami file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        program = parse_program(f)
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run(program)
    return interpreter
