"""Abstract Syntax Tree (AST) definitions for the Salami language.

The parser produces these nodes and the interpreter walks them. The set is
closed: every statement and expression is one of the classes below. Any
expression may also stand on its own in statement position, and
``IfExpression`` is used both ways.

Each node renders back to source-like text through ``str()``; infix
expressions are fully parenthesised so the rendering shows how precedence
was resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class Program(Node):
    statements: List[Node] = field(default_factory=list)

    def __str__(self) -> str:
        return ''.join(_statement_str(s) for s in self.statements)


@dataclass(frozen=True)
class Identifier(Expression):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class InfixExpression(Expression):
    operator: str
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class Block(Statement):
    statements: List[Node] = field(default_factory=list)

    def __str__(self) -> str:
        inner = ''.join(_statement_str(s) for s in self.statements)
        return '{ ' + inner + '}' if inner else '{ }'


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: Block
    alternative: Optional[Block] = None

    def __str__(self) -> str:
        text = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: List[Identifier]
    body: Block

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"func({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    callee: Expression
    arguments: List[Expression]

    def __str__(self) -> str:
        args = ', '.join(str(a) for a in self.arguments)
        return f"{self.callee}({args})"


@dataclass(frozen=True)
class VarStatement(Statement):
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"var {self.name} = {self.value};"


@dataclass(frozen=True)
class FunctionStatement(Statement):
    name: Identifier
    parameters: List[Identifier]
    body: Block

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"func {self.name}({params}) {self.body}"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass(frozen=True)
class ExitStatement(Statement):
    value: Expression

    def __str__(self) -> str:
        return f"exit {self.value};"


def _statement_str(node: Node) -> str:
    text = str(node)
    if isinstance(node, Expression) and not isinstance(node, IfExpression):
        text += ';'
    return text + ' '
