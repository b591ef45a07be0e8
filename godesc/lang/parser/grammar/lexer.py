"""Lexical analyzer (tokenizer) for game-object descriptors.

Converts descriptor text, or the text of an embedded payload, into a stream
of tokens. Whitespace, newlines and ``#`` comments are skipped. A run of
quoted literals separated only by whitespace is joined into one STRING
token, since engines write embedded payloads as a sequence of short quoted
lines.

Lexical problems do not raise. Each is recorded in :attr:`Lexer.errors` and
an INVALID token is emitted in its place, so the parser can abandon the
enclosing block and resynchronise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple
import re

from godesc.diagnostics import DiagnosticCode
from godesc.errors import DescriptorSyntaxError


class TokenType(Enum):
    """Token types for the descriptor grammar."""

    STRING = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    ENUM = auto()

    LBRACE = auto()
    RBRACE = auto()
    COLON = auto()

    INVALID = auto()
    EOF = auto()


@dataclass
class Token:
    """A single token with position information."""

    type: TokenType
    value: str
    line: int
    column: int
    offset: int
    end_line: int
    end_column: int
    end_offset: int
    char_positions: Tuple[Tuple[int, int], ...] = field(default=(), repr=False)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING:
            return "string literal"
        if self.type in (TokenType.LBRACE, TokenType.RBRACE, TokenType.COLON):
            return f"'{self.value}'"
        return f"{self.type.name.lower()} '{self.value}'"


ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "'": "'",
    "\\": "\\",
}

WHITESPACE = " \t\r\n\f\v"

NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
ENUM_PATTERN = re.compile(r"[A-Z][A-Z0-9_]*")

PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ":": TokenType.COLON,
}


class Lexer:
    """Tokenizer for descriptor source text."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[DescriptorSyntaxError] = []

    def error(
        self,
        message: str,
        code: DiagnosticCode,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        """Record a lexer error."""
        self.errors.append(DescriptorSyntaxError(
            message=message,
            line=self.line if line is None else line,
            column=self.column if column is None else column,
            end_line=self.line,
            end_column=self.column,
            diagnostic_code=code,
            reported=True,
        ))

    def peek(self, offset: int = 0) -> Optional[str]:
        """Peek at character without consuming."""
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def advance(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return None

        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def skip_whitespace(self) -> None:
        while self.peek() is not None and self.peek() in WHITESPACE:
            self.advance()

    def skip_comment(self) -> None:
        """Skip an end-of-line comment starting with #."""
        while self.peek() is not None and self.peek() != "\n":
            self.advance()

    def read_string(self, chars: List[str], positions: List[Tuple[int, int]]) -> bool:
        """
        Read one quoted literal, appending its characters to ``chars``.

        Returns False when the literal was malformed; the error is already
        recorded and the lexer is positioned after the literal (or at the end
        of the line for an unterminated one).
        """
        start_line, start_column = self.line, self.column
        quote = self.advance()
        ok = True

        while True:
            char = self.peek()
            if char is None or char == "\n":
                self.error(
                    "Unterminated string literal",
                    DiagnosticCode.LEX_UNTERMINATED_STRING,
                    line=start_line,
                    column=start_column,
                )
                return False
            if char == quote:
                self.advance()
                return ok
            if char == "\\":
                escape_line, escape_column = self.line, self.column
                self.advance()
                escape = self.peek()
                if escape is None or escape == "\n":
                    continue
                self.advance()
                if escape in ESCAPES:
                    chars.append(ESCAPES[escape])
                    positions.append((escape_line, escape_column))
                else:
                    self.error(
                        f"Unknown escape sequence '\\{escape}'",
                        DiagnosticCode.LEX_UNKNOWN_ESCAPE,
                        line=escape_line,
                        column=escape_column,
                    )
                    ok = False
                continue
            positions.append((self.line, self.column))
            chars.append(self.advance())

    def _next_literal_follows(self) -> bool:
        """Whether only whitespace separates the lexer from another quote."""
        pos = self.pos
        while pos < len(self.source) and self.source[pos] in WHITESPACE:
            pos += 1
        return pos < len(self.source) and self.source[pos] in ('"', "'")

    def read_strings(self) -> Token:
        """Read a run of adjacent quoted literals as one logical string."""
        start = (self.line, self.column, self.pos)
        chars: List[str] = []
        positions: List[Tuple[int, int]] = []
        ok = True

        while True:
            if not self.read_string(chars, positions):
                ok = False
                if self.peek() == "\n" or self.peek() is None:
                    break
            if not self._next_literal_follows():
                break
            self.skip_whitespace()

        token_type = TokenType.STRING if ok else TokenType.INVALID
        return self._make_token(
            token_type,
            "".join(chars),
            start,
            char_positions=tuple(positions),
        )

    def read_number(self) -> Token:
        """Read a numeric literal, validating the whole run of number-like characters."""
        start = (self.line, self.column, self.pos)
        chars = []

        if self.peek() in ("+", "-"):
            chars.append(self.advance())

        while True:
            char = self.peek()
            if char is None:
                break
            if char.isalnum() or char in "._":
                chars.append(self.advance())
                continue
            if char in "+-" and chars and chars[-1] in "eE":
                chars.append(self.advance())
                continue
            break

        text = "".join(chars)
        if NUMBER_PATTERN.fullmatch(text):
            return self._make_token(TokenType.NUMBER, text, start)

        self.error(
            f"Malformed number '{text}'",
            DiagnosticCode.LEX_MALFORMED_NUMBER,
            line=start[0],
            column=start[1],
        )
        return self._make_token(TokenType.INVALID, text, start)

    def read_identifier(self) -> Token:
        start = (self.line, self.column, self.pos)
        chars = []
        while self.peek() is not None and (self.peek().isalnum() or self.peek() == "_"):
            chars.append(self.advance())
        value = "".join(chars)
        token_type = TokenType.ENUM if ENUM_PATTERN.fullmatch(value) else TokenType.IDENTIFIER
        return self._make_token(token_type, value, start)

    def _make_token(
        self,
        token_type: TokenType,
        value: str,
        start: Tuple[int, int, int],
        *,
        char_positions: Tuple[Tuple[int, int], ...] = (),
    ) -> Token:
        line, column, offset = start
        return Token(
            type=token_type,
            value=value,
            line=line,
            column=column,
            offset=offset,
            end_line=self.line,
            end_column=self.column,
            end_offset=self.pos,
            char_positions=char_positions,
        )

    def _starts_number(self, char: str) -> bool:
        if char.isdigit():
            return True
        following = self.peek(1)
        if char == "." and following is not None and following.isdigit():
            return True
        if char in "+-" and following is not None:
            if following.isdigit():
                return True
            after = self.peek(2)
            return following == "." and after is not None and after.isdigit()
        return False

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source."""
        while True:
            self.skip_whitespace()

            char = self.peek()
            if char is None:
                break

            if char == "#":
                self.skip_comment()
                continue

            if char in ('"', "'"):
                self.tokens.append(self.read_strings())
                continue

            if self._starts_number(char):
                self.tokens.append(self.read_number())
                continue

            if char.isalpha() or char == "_":
                self.tokens.append(self.read_identifier())
                continue

            if char in PUNCTUATION:
                start = (self.line, self.column, self.pos)
                self.advance()
                self.tokens.append(self._make_token(PUNCTUATION[char], char, start))
                continue

            start = (self.line, self.column, self.pos)
            self.error(
                f"Unexpected character {char!r}",
                DiagnosticCode.LEX_UNEXPECTED_CHARACTER,
            )
            self.advance()
            self.tokens.append(self._make_token(TokenType.INVALID, char, start))

        self.tokens.append(self._make_token(TokenType.EOF, "", (self.line, self.column, self.pos)))
        return self.tokens


def tokenize(source: str) -> List[Token]:
    """Tokenize descriptor source text. Lexer errors are discarded; use :class:`Lexer` to see them."""
    return Lexer(source).tokenize()


__all__ = ["Token", "TokenType", "Lexer", "tokenize", "ESCAPES"]
