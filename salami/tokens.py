"""Token definitions shared by the Salami lexer and parser."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, NamedTuple


class TokenKind(enum.Enum):
    """Closed set of lexical categories.

    The enum values double as the display form used in parser error
    messages, e.g. ``expected next token to be ), got { instead``.
    """
    EOF = 'EOF'
    ILLEGAL = 'ILLEGAL'

    IDENT = 'IDENT'
    INT = 'INT'

    ASSIGN = '='
    PLUS = '+'
    MINUS = '-'
    ASTERISK = '*'
    SLASH = '/'
    SEMICOLON = ';'
    GT = '>'
    LT = '<'
    COMMA = ','

    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'

    # Keywords
    VAR = 'VAR'
    IF = 'IF'
    ELSE = 'ELSE'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    EXIT = 'EXIT'
    FUNCTION = 'FUNCTION'
    RETURN = 'RETURN'

    def __str__(self) -> str:
        return self.value


KEYWORDS: Dict[str, TokenKind] = {
    'var': TokenKind.VAR,
    'if': TokenKind.IF,
    'else': TokenKind.ELSE,
    'true': TokenKind.TRUE,
    'false': TokenKind.FALSE,
    'exit': TokenKind.EXIT,
    'func': TokenKind.FUNCTION,
    'return': TokenKind.RETURN,
}

SINGLE_CHAR_TOKENS: Dict[str, TokenKind] = {
    '=': TokenKind.ASSIGN,
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.ASTERISK,
    '/': TokenKind.SLASH,
    ';': TokenKind.SEMICOLON,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    '>': TokenKind.GT,
    '<': TokenKind.LT,
    ',': TokenKind.COMMA,
}


def lookup_ident(literal: str) -> TokenKind:
    """Classify a run of letters as a keyword or a plain identifier."""
    return KEYWORDS.get(literal, TokenKind.IDENT)


class Position(NamedTuple):
    line: int
    column: int


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str
    line: int
    column: int

    @property
    def position(self) -> Position:
        return Position(self.line, self.column)

    def __str__(self) -> str:
        return f"{self.line}:{self.column} {self.kind.name} {self.literal!r}"
