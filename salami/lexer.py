"""Lexer for the Salami language.

The lexer pulls one code point at a time from a text source and turns the
stream into positioned tokens on demand. It never raises on bad input:
characters without a meaning come back as ``ILLEGAL`` tokens and the parser
decides what to do with them.

Position tracking follows a simple rule: the line starts at 1 and the
column starts at 0, the column is bumped for every code point read and
reset to 0 after a newline. A token therefore reports the 1-based column of
its first character.
"""

from __future__ import annotations

import io
from typing import Iterator, List, Optional, TextIO, Tuple, Union

from .tokens import SINGLE_CHAR_TOKENS, Position, Token, TokenKind, lookup_ident


class Lexer:
    def __init__(self, source: Union[str, TextIO]):
        if isinstance(source, str):
            source = io.StringIO(source)
        self.reader = source
        self.line = 1
        self.column = 0
        self._last: str = ''
        self._pushed_back: Optional[str] = None

    @property
    def position(self) -> Position:
        return Position(self.line, self.column)

    def _read(self) -> str:
        """Read one code point, or '' at end of input."""
        if self._pushed_back is not None:
            ch = self._pushed_back
            self._pushed_back = None
        else:
            ch = self.reader.read(1)
        if ch == '':
            return ''
        self.column += 1
        self._last = ch
        return ch

    def _unread(self) -> None:
        # only one code point of pushback is supported
        if self._pushed_back is not None or self._last == '':
            raise RuntimeError('lexer pushback buffer is full')
        self._pushed_back = self._last
        self._last = ''
        self.column -= 1

    def _newline(self) -> None:
        self.line += 1
        self.column = 0

    def _read_run(self, accept) -> str:
        chars: List[str] = []
        while True:
            ch = self._read()
            if ch == '':
                return ''.join(chars)
            if accept(ch):
                chars.append(ch)
            else:
                self._unread()
                return ''.join(chars)

    def lex(self) -> Tuple[Position, TokenKind, str]:
        """Return the next ``(position, kind, literal)`` triple.

        After the input is exhausted every call returns ``EOF``.
        """
        while True:
            ch = self._read()
            if ch == '':
                return self.position, TokenKind.EOF, ''
            if ch == '\n':
                self._newline()
                continue
            kind = SINGLE_CHAR_TOKENS.get(ch)
            if kind is not None:
                return self.position, kind, ch
            if ch.isspace():
                continue
            if ch.isdecimal():
                start = self.position
                self._unread()
                return start, TokenKind.INT, self._read_run(str.isdecimal)
            if ch.isalpha():
                start = self.position
                self._unread()
                literal = self._read_run(str.isalpha)
                return start, lookup_ident(literal), literal
            return self.position, TokenKind.ILLEGAL, ch

    def next_token(self) -> Token:
        pos, kind, literal = self.lex()
        return Token(kind, literal, pos.line, pos.column)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return


def tokenize(source: Union[str, TextIO]) -> List[Token]:
    """Lex the whole source into a list ending with an EOF token."""
    return list(Lexer(source))
