"""Parser for the Salami language.

A Pratt (top-down operator precedence) parser. Each token kind has at most
one prefix handler and at most one infix handler, and every infix operator
has a binding strength. Expressions are built by pulling in infix operators
for as long as the next one binds tighter than the current floor.

The parser keeps the current token plus one token of lookahead (``peek``)
and pulls new tokens from the lexer on demand. It never raises on bad
input. Every mismatch is appended to ``errors`` as a human-readable string
and the construct being parsed comes back as ``None``; parsing then carries
on with the following tokens. This can produce follow-up errors for the
same mistake, which is accepted.

Grammar summary::

    program    := statement*
    statement  := "var" IDENT "=" expr [";"]
                | "func" IDENT params block [";"]
                | "return" expr [";"]
                | "exit" expr [";"]
                | if [";"]
                | ";"
                | expr [";"]
    expr       := prefix (infix)*
    prefix     := INT | IDENT | "true" | "false" | "-" expr
                | "(" expr ")" | if | "func" params block
    if         := "if" "(" expr ")" block ["else" block]
    infix      := ("+" | "-" | "*" | "/" | ">" | "<") expr
                | "(" [expr ("," expr)*] ")"
    params     := "(" [IDENT ("," IDENT)*] ")"
    block      := "{" statement* "}"
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .ast import (
    Block, BooleanLiteral, CallExpression, ExitStatement, Expression,
    FunctionLiteral, FunctionStatement, Identifier, IfExpression,
    InfixExpression, IntegerLiteral, Node, Program, ReturnStatement,
    VarStatement,
)
from .errors import ParseError
from .lexer import Lexer
from .tokens import Token, TokenKind
from .types import INT64_MAX

# Precedence tiers, loosest first.
LOWEST = 1
COMPARE = 2   # > <
SUM = 3       # + -
PRODUCT = 4   # * /
PREFIX = 5    # -x
CALL = 6      # f(x)

PRECEDENCES: Dict[TokenKind, int] = {
    TokenKind.GT: COMPARE,
    TokenKind.LT: COMPARE,
    TokenKind.PLUS: SUM,
    TokenKind.MINUS: SUM,
    TokenKind.ASTERISK: PRODUCT,
    TokenKind.SLASH: PRODUCT,
    TokenKind.LPAREN: CALL,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []
        self.cur_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()

        self.prefix_parse_fns: Dict[TokenKind, PrefixParseFn] = {
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.TRUE: self.parse_boolean_literal,
            TokenKind.FALSE: self.parse_boolean_literal,
            TokenKind.MINUS: self.parse_negation,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
        }
        self.infix_parse_fns: Dict[TokenKind, InfixParseFn] = {
            TokenKind.PLUS: self.parse_infix_expression,
            TokenKind.MINUS: self.parse_infix_expression,
            TokenKind.ASTERISK: self.parse_infix_expression,
            TokenKind.SLASH: self.parse_infix_expression,
            TokenKind.GT: self.parse_infix_expression,
            TokenKind.LT: self.parse_infix_expression,
            TokenKind.LPAREN: self.parse_call_expression,
        }

    # Token handling

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind: TokenKind) -> bool:
        return self.cur_token.kind is kind

    def peek_token_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind is kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advance if the peek token has the given kind, else record an error."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.expected_error(kind, self.peek_token)
        return False

    def expected_error(self, expected: TokenKind, got: Token) -> None:
        self.errors.append(
            f"expected next token to be {expected}, got {got.kind} instead"
            f" (line {got.line}, column {got.column})"
        )

    def no_prefix_parse_fn_error(self, token: Token) -> None:
        if token.kind is TokenKind.ILLEGAL:
            msg = f"illegal character {token.literal!r}"
        else:
            msg = f"no prefix parse function for {token.kind} found"
        self.errors.append(f"{msg} (line {token.line}, column {token.column})")

    def peek_precedence(self) -> int:
        return PRECEDENCES.get(self.peek_token.kind, LOWEST)

    def cur_precedence(self) -> int:
        return PRECEDENCES.get(self.cur_token.kind, LOWEST)

    def skip_semicolon(self) -> None:
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

    # Statements

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.cur_token_is(TokenKind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(statements)

    def parse_statement(self) -> Optional[Node]:
        kind = self.cur_token.kind
        if kind is TokenKind.VAR:
            return self.parse_var_statement()
        if kind is TokenKind.EXIT:
            return self.parse_exit_statement()
        if kind is TokenKind.RETURN:
            return self.parse_return_statement()
        if kind is TokenKind.FUNCTION and self.peek_token_is(TokenKind.IDENT):
            return self.parse_function_statement()
        if kind is TokenKind.IF:
            # stops at the closing brace; a following "(" or "-" starts a new statement
            stmt = self.parse_if_expression()
            if stmt is None:
                return None
            self.skip_semicolon()
            return stmt
        if kind is TokenKind.SEMICOLON:
            return None
        return self.parse_expression_statement()

    def parse_var_statement(self) -> Optional[VarStatement]:
        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.cur_token.literal)
        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None
        self.skip_semicolon()
        return VarStatement(name, value)

    def parse_function_statement(self) -> Optional[FunctionStatement]:
        self.next_token()
        name = Identifier(self.cur_token.literal)
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block()
        if body is None:
            return None
        self.skip_semicolon()
        return FunctionStatement(name, parameters, body)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None
        self.skip_semicolon()
        return ReturnStatement(value)

    def parse_exit_statement(self) -> Optional[ExitStatement]:
        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None
        self.skip_semicolon()
        return ExitStatement(value)

    def parse_expression_statement(self) -> Optional[Expression]:
        expr = self.parse_expression(LOWEST)
        if expr is None:
            return None
        self.skip_semicolon()
        return expr

    def parse_block(self) -> Optional[Block]:
        """Parse statements up to the closing brace; cur_token is '{'."""
        statements: List[Node] = []
        self.next_token()
        while not self.cur_token_is(TokenKind.RBRACE):
            if self.cur_token_is(TokenKind.EOF):
                self.expected_error(TokenKind.RBRACE, self.cur_token)
                return None
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Block(statements)

    # Expressions

    def parse_expression(self, precedence: int) -> Optional[Expression]:
        prefix = self.prefix_parse_fns.get(self.cur_token.kind)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token)
            return None
        left = prefix()
        if left is None:
            return None

        while not self.peek_token_is(TokenKind.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
            if left is None:
                return None
        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        literal = self.cur_token.literal
        value = int(literal)
        if value > INT64_MAX:
            self.errors.append(
                f'could not parse "{literal}" as integer'
                f" (line {self.cur_token.line}, column {self.cur_token.column})"
            )
            return None
        return IntegerLiteral(value)

    def parse_boolean_literal(self) -> Expression:
        return BooleanLiteral(self.cur_token_is(TokenKind.TRUE))

    def parse_negation(self) -> Optional[Expression]:
        # no unary operators in the AST: -x is read as 0 - x
        self.next_token()
        operand = self.parse_expression(PREFIX)
        if operand is None:
            return None
        return InfixExpression('-', IntegerLiteral(0), operand)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()
        expr = self.parse_expression(LOWEST)
        if expr is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return expr

    def parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        operator = self.cur_token.literal
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(operator, left, right)

    def parse_if_expression(self) -> Optional[Expression]:
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block()
            if alternative is None:
                return None
        return IfExpression(condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[Expression]:
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block()
        if body is None:
            return None
        return FunctionLiteral(parameters, body)

    def parse_function_parameters(self) -> Optional[List[Identifier]]:
        """Parse ``(a, b, ...)``; cur_token is '('."""
        identifiers: List[Identifier] = []
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return identifiers
        if not self.expect_peek(TokenKind.IDENT):
            return None
        identifiers.append(Identifier(self.cur_token.literal))
        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            identifiers.append(Identifier(self.cur_token.literal))
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return identifiers

    def parse_call_expression(self, callee: Expression) -> Optional[Expression]:
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(callee, arguments)

    def parse_call_arguments(self) -> Optional[List[Expression]]:
        args: List[Expression] = []
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return args
        self.next_token()
        arg = self.parse_expression(LOWEST)
        if arg is None:
            return None
        args.append(arg)
        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(LOWEST)
            if arg is None:
                return None
            args.append(arg)
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return args


def parse_program(source) -> Program:
    """Parse Salami source text (a string or text stream) into a Program.

    Raises ``ParseError`` carrying every collected message when the source
    has syntax errors.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    if parser.errors:
        raise ParseError(parser.errors)
    return program
