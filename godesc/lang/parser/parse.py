"""Recursive descent parser shared by descriptors and embedded payloads.

One parser, one lexer, two entry points:

* :meth:`DescriptorParser.parse` reads a whole descriptor file into top-level
  blocks. A lexical or syntax error abandons the block it occurs in; the
  parser then skips to the next ``components {`` / ``embedded_components {``
  and carries on, so one pass reports as many problems as possible.
* :meth:`DescriptorParser.parse_payload` reads the text of an embedded
  ``data`` payload as a bare field list. Positions are mapped back through
  the payload's character map, so diagnostics point into the descriptor
  file rather than into the decoded payload string.

Grammar::

    Descriptor = { TopBlock } ;
    TopBlock   = NAME , "{" , Body , "}" ;
    Body       = { Field } ;
    Field      = NAME , ":" , Value
               | NAME , [ ":" ] , "{" , Body , "}" ;
    Value      = STRING , { STRING } | NUMBER | ENUM | IDENTIFIER ;
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import logging

from godesc.ast.source_location import SourceSpan
from godesc.ast.syntax import RawBody, RawDocument, RawField, RawScalar, ScalarKind
from godesc.diagnostics import DiagnosticBag, DiagnosticCode
from godesc.errors import DescriptorSyntaxError, create_syntax_error
from godesc.lang.catalog import SYNC_BLOCKS, TOP_LEVEL_BLOCKS, suggest_name

from .grammar.lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)

SCALAR_TOKENS = {
    TokenType.STRING: ScalarKind.STRING,
    TokenType.NUMBER: ScalarKind.NUMBER,
    TokenType.ENUM: ScalarKind.ENUM,
    TokenType.IDENTIFIER: ScalarKind.IDENTIFIER,
}

NAME_TOKENS = (TokenType.IDENTIFIER, TokenType.ENUM)

# Deepest block nesting accepted; engine files nest a handful of levels.
MAX_NESTING_DEPTH = 100


def parse_number(text: str):
    """Integer when the literal has no fraction or exponent, float otherwise."""
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


class DescriptorParser:
    """Parser for descriptor text and embedded payload text."""

    def __init__(
        self,
        source: str,
        *,
        path: Optional[str] = None,
        diagnostics: Optional[DiagnosticBag] = None,
        source_map: Optional[Sequence[Tuple[int, int]]] = None,
        anchor: Optional[SourceSpan] = None,
    ):
        self.source = source
        self.path = path
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticBag(path=path)
        # For payloads: descriptor (line, column) of each payload character.
        self.source_map = source_map
        self.anchor = anchor
        self._line_starts = [0] + [i + 1 for i, char in enumerate(source) if char == "\n"]

        lexer = Lexer(source)
        self.tokens = lexer.tokenize()
        self.pos = 0
        self.depth = 0
        for error in lexer.errors:
            self.report(error)

    # ====================================================================
    # Positions
    # ====================================================================

    def _locate(self, line: int, column: int, offset: int) -> Tuple[int, int]:
        if self.source_map is None:
            return line, column
        if offset < len(self.source_map):
            return self.source_map[offset]
        if self.source_map:
            last_line, last_column = self.source_map[-1]
            return last_line, last_column + 1
        if self.anchor is not None:
            return self.anchor.line, self.anchor.column
        return line, column

    def _offset_of(self, line: int, column: int) -> int:
        """Offset of a payload-local line/column."""
        if not 1 <= line <= len(self._line_starts):
            return len(self.source)
        return self._line_starts[line - 1] + column - 1

    def span(self, start: Token, end: Optional[Token] = None) -> SourceSpan:
        end = end or start
        line, column = self._locate(start.line, start.column, start.offset)
        if self.source_map is None:
            end_line, end_column = end.end_line, end.end_column
        elif end.end_offset > end.offset:
            last_line, last_column = self._locate(end.end_line, end.end_column, end.end_offset - 1)
            end_line, end_column = last_line, last_column + 1
        else:
            end_line, end_column = self._locate(end.line, end.column, end.offset)
        return SourceSpan(line, column, end_line, end_column, self.path)

    def report(self, error: DescriptorSyntaxError) -> None:
        """Turn a syntax error into a diagnostic, mapping payload positions."""
        line, column = error.line or 1, error.column or 1
        end_line, end_column = error.end_line, error.end_column
        if self.source_map is not None:
            start_offset = self._offset_of(line, column)
            line, column = self._locate(line, column, start_offset)
            if end_line is not None and end_column is not None:
                end_offset = self._offset_of(end_line, end_column)
                end_line, end_column = self._locate(end_line, end_column, end_offset)
        span = SourceSpan(line, column, end_line, end_column, self.path)
        self.diagnostics.report(
            error.diagnostic_code,
            error.describe(),
            span,
            hint=error.suggestion,
        )

    # ====================================================================
    # Token Management
    # ====================================================================

    def peek(self, offset: int = 0) -> Token:
        """Peek at token without consuming. Past the end, EOF is returned."""
        pos = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[pos]

    def current(self) -> Token:
        return self.peek(0)

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        return self.current().type in types

    def consume_if(self, *types: TokenType) -> Optional[Token]:
        if self.match(*types):
            return self.advance()
        return None

    def error(
        self,
        message: str,
        token: Optional[Token] = None,
        *,
        code: DiagnosticCode = DiagnosticCode.PARSE_UNEXPECTED_TOKEN,
        expected: Optional[List[str]] = None,
        suggestion: Optional[str] = None,
    ) -> DescriptorSyntaxError:
        """Create a syntax error at a token (the current one by default)."""
        token = token or self.current()
        if token.type == TokenType.INVALID:
            # The lexer has already reported this token.
            error = create_syntax_error(message, line=token.line, column=token.column)
            error.reported = True
            return error
        return create_syntax_error(
            message,
            line=token.line,
            column=token.column,
            end_line=token.end_line,
            end_column=token.end_column,
            expected=expected,
            found=token.describe(),
            suggestion=suggestion,
            diagnostic_code=code,
        )

    def expect(self, token_type: TokenType, what: str, *, code: DiagnosticCode) -> Token:
        if self.match(token_type):
            return self.advance()
        raise self.error("Unexpected token", expected=[what], code=code)

    # ====================================================================
    # Entry points
    # ====================================================================

    def parse(self) -> RawDocument:
        """
        Parse a whole descriptor.

        Grammar:
            Descriptor = { TopBlock } ;
        """
        blocks: List[RawField] = []

        while not self.match(TokenType.EOF):
            start = self.pos
            try:
                blocks.append(self.parse_top_level_block())
            except DescriptorSyntaxError as exc:
                if not exc.reported:
                    self.report(exc)
                if self.pos == start:
                    self.advance()
                self.synchronize()

        logger.debug("Parsed %d top-level block(s) from %s", len(blocks), self.path or "<descriptor>")
        return RawDocument(blocks=tuple(blocks), path=self.path)

    def parse_payload(self) -> RawBody:
        """
        Parse embedded payload text as a field list running to end of input.

        A syntax error ends the payload; fields completed before it are kept.
        """
        fields: List[RawField] = []
        first = self.current()
        try:
            while not self.match(TokenType.EOF):
                if self.match(TokenType.RBRACE):
                    raise self.error(
                        "Unmatched '}' in payload",
                        code=DiagnosticCode.PARSE_UNBALANCED_BRACES,
                    )
                fields.append(self.parse_field())
        except DescriptorSyntaxError as exc:
            if not exc.reported:
                self.report(exc)
        return RawBody(fields=tuple(fields), span=self.span(first, self.peek(-1) if self.pos else first))

    # ====================================================================
    # Blocks and fields
    # ====================================================================

    def parse_top_level_block(self) -> RawField:
        """
        Grammar:
            TopBlock = NAME , "{" , Body , "}" ;
        """
        token = self.current()

        if token.type == TokenType.RBRACE:
            raise self.error("Unmatched '}'", code=DiagnosticCode.PARSE_UNBALANCED_BRACES)

        if token.type not in NAME_TOKENS:
            raise self.error(
                "Expected a block name",
                expected=[f"one of {', '.join(TOP_LEVEL_BLOCKS)}"],
                code=DiagnosticCode.PARSE_MISSING_NAME,
            )

        following = self.peek(1)
        if following.type == TokenType.COLON:
            suggestion = suggest_name(token.value, TOP_LEVEL_BLOCKS)
            raise self.error(
                f"Field '{token.value}' outside of a block",
                token,
                suggestion=f"Did you mean '{suggestion} {{ ... }}'?" if suggestion else
                "Top-level entries must be blocks such as 'components { ... }'",
            )

        name_token = self.advance()
        open_brace = self.expect(TokenType.LBRACE, "'{'", code=DiagnosticCode.PARSE_UNEXPECTED_TOKEN)
        body = self.parse_body(open_brace)
        return RawField(
            name=name_token.value,
            value=body,
            span=self.span(name_token, self.peek(-1)),
            name_span=self.span(name_token),
        )

    def parse_body(self, open_brace: Token) -> RawBody:
        """
        Parse fields up to and including the closing brace.

        Grammar:
            Body = { Field } , "}" ;

        Raises:
            DescriptorSyntaxError: If blocks nest deeper than MAX_NESTING_DEPTH.
        """
        if self.depth >= MAX_NESTING_DEPTH:
            raise self.error(
                f"Blocks nested deeper than {MAX_NESTING_DEPTH} levels",
                open_brace,
                code=DiagnosticCode.PARSE_NESTING_TOO_DEEP,
            )
        self.depth += 1
        try:
            return self._parse_fields(open_brace)
        finally:
            self.depth -= 1

    def _parse_fields(self, open_brace: Token) -> RawBody:
        fields: List[RawField] = []
        while True:
            token = self.current()
            if token.type == TokenType.RBRACE:
                close = self.advance()
                return RawBody(fields=tuple(fields), span=self.span(open_brace, close))
            if token.type == TokenType.EOF:
                line, column = self._locate(open_brace.line, open_brace.column, open_brace.offset)
                raise self.error(
                    f"Missing '}}' for the block opened at line {line}, column {column}",
                    code=DiagnosticCode.PARSE_UNBALANCED_BRACES,
                    expected=["'}'"],
                )
            fields.append(self.parse_field())

    def parse_field(self) -> RawField:
        """
        Grammar:
            Field = NAME , ":" , Value | NAME , [ ":" ] , "{" , Body , "}" ;
        """
        name_token = self.current()
        if name_token.type not in NAME_TOKENS:
            raise self.error(
                "Expected a field name",
                expected=["field name"],
                code=DiagnosticCode.PARSE_MISSING_NAME,
            )
        self.advance()

        if self.match(TokenType.LBRACE):
            open_brace = self.advance()
            body = self.parse_body(open_brace)
            return self._field(name_token, body)

        if not self.match(TokenType.COLON):
            raise self.error(
                f"Missing ':' after field name '{name_token.value}'",
                expected=["':'", "'{'"],
                code=DiagnosticCode.PARSE_MISSING_COLON,
            )
        self.advance()

        if self.match(TokenType.LBRACE):
            open_brace = self.advance()
            body = self.parse_body(open_brace)
            return self._field(name_token, body)

        return self._field(name_token, self.parse_scalar())

    def parse_scalar(self) -> RawScalar:
        """
        Grammar:
            Value = STRING , { STRING } | NUMBER | ENUM | IDENTIFIER ;
        """
        token = self.current()
        kind = SCALAR_TOKENS.get(token.type)
        if kind is None:
            raise self.error(
                "Expected a value",
                expected=["string", "number", "enum", "identifier"],
            )
        self.advance()

        value = parse_number(token.value) if kind is ScalarKind.NUMBER else token.value
        char_positions = token.char_positions
        if self.source_map is not None and char_positions:
            char_positions = tuple(self._remap_positions(token))
        return RawScalar(
            kind=kind,
            value=value,
            span=self.span(token),
            char_positions=char_positions,
        )

    def _remap_positions(self, token: Token) -> List[Tuple[int, int]]:
        # Strings nested inside a payload: map each character through the payload map.
        positions = []
        for line, column in token.char_positions:
            positions.append(self._locate(line, column, self._offset_of(line, column)))
        return positions

    def _field(self, name_token: Token, value) -> RawField:
        return RawField(
            name=name_token.value,
            value=value,
            span=self.span(name_token, self.peek(-1)),
            name_span=self.span(name_token),
        )

    # ====================================================================
    # Error recovery
    # ====================================================================

    def synchronize(self) -> None:
        """Skip tokens up to the next ``components {`` or ``embedded_components {``."""
        skipped = 0
        while not self.match(TokenType.EOF):
            token = self.current()
            if (
                token.type == TokenType.IDENTIFIER
                and token.value in SYNC_BLOCKS
                and self.peek(1).type == TokenType.LBRACE
            ):
                break
            self.advance()
            skipped += 1
        logger.debug("Resynchronised after skipping %d token(s)", skipped)


__all__ = ["DescriptorParser", "MAX_NESTING_DEPTH", "parse_number"]
