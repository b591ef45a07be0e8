"""Structured diagnostics reported by the parser, builder and validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from godesc.ast.source_location import SourceSpan


class Severity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"

    def __str__(self) -> str:
        return self.value


class DiagnosticCategory(Enum):
    """Broad family a diagnostic code belongs to."""
    LEX = "lex"
    PARSE = "parse"
    SCHEMA = "schema"
    REFERENCE = "reference"
    UNIQUENESS = "uniqueness"
    WARNING = "warning"


class DiagnosticCode(str, Enum):
    """Stable diagnostic codes. Values never change between releases."""

    # Lexical
    LEX_UNTERMINATED_STRING = "LEX_UNTERMINATED_STRING"
    LEX_UNKNOWN_ESCAPE = "LEX_UNKNOWN_ESCAPE"
    LEX_MALFORMED_NUMBER = "LEX_MALFORMED_NUMBER"
    LEX_UNEXPECTED_CHARACTER = "LEX_UNEXPECTED_CHARACTER"
    LEX_INVALID_ENCODING = "LEX_INVALID_ENCODING"

    # Syntax
    PARSE_UNEXPECTED_TOKEN = "PARSE_UNEXPECTED_TOKEN"
    PARSE_UNBALANCED_BRACES = "PARSE_UNBALANCED_BRACES"
    PARSE_MISSING_COLON = "PARSE_MISSING_COLON"
    PARSE_MISSING_NAME = "PARSE_MISSING_NAME"
    PARSE_NESTING_TOO_DEEP = "PARSE_NESTING_TOO_DEEP"

    # Schema
    SCHEMA_MISSING_FIELD = "SCHEMA_MISSING_FIELD"
    SCHEMA_UNKNOWN_KIND = "SCHEMA_UNKNOWN_KIND"
    SCHEMA_WRONG_TYPE = "SCHEMA_WRONG_TYPE"
    SCHEMA_NOT_REPEATABLE = "SCHEMA_NOT_REPEATABLE"
    SCHEMA_INVALID_VALUE = "SCHEMA_INVALID_VALUE"
    SCHEMA_SHAPE_DATA_MISMATCH = "SCHEMA_SHAPE_DATA_MISMATCH"

    # References
    REFERENCE_MALFORMED_PATH = "REFERENCE_MALFORMED_PATH"
    REFERENCE_SUFFIX_MISMATCH = "REFERENCE_SUFFIX_MISMATCH"
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"

    # Uniqueness
    UNIQUENESS_DUPLICATE_ID = "UNIQUENESS_DUPLICATE_ID"

    # Warnings
    WARN_UNKNOWN_FIELD = "WARN_UNKNOWN_FIELD"
    WARN_UNKNOWN_ENUM = "WARN_UNKNOWN_ENUM"
    WARN_UNKNOWN_COMPONENT_TYPE = "WARN_UNKNOWN_COMPONENT_TYPE"

    @property
    def category(self) -> DiagnosticCategory:
        prefix = self.value.split("_", 1)[0]
        return _CATEGORY_BY_PREFIX[prefix]

    @property
    def default_severity(self) -> Severity:
        if self is DiagnosticCode.REFERENCE_NOT_FOUND or self.category is DiagnosticCategory.WARNING:
            return Severity.WARNING
        return Severity.ERROR


_CATEGORY_BY_PREFIX = {
    "LEX": DiagnosticCategory.LEX,
    "PARSE": DiagnosticCategory.PARSE,
    "SCHEMA": DiagnosticCategory.SCHEMA,
    "REFERENCE": DiagnosticCategory.REFERENCE,
    "UNIQUENESS": DiagnosticCategory.UNIQUENESS,
    "WARN": DiagnosticCategory.WARNING,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single error or warning anchored to the descriptor source."""
    code: DiagnosticCode
    message: str
    span: Optional[SourceSpan] = None
    severity: Severity = None  # type: ignore[assignment]
    related: Tuple[SourceSpan, ...] = ()
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        if self.severity is None:
            object.__setattr__(self, "severity", self.code.default_severity)

    @property
    def category(self) -> DiagnosticCategory:
        return self.code.category

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        location = str(self.span) if self.span is not None else "<descriptor>"
        text = f"{location}: {self.severity}[{self.code.value}] {self.message}"
        if self.related:
            text += " (see " + ", ".join(str(span) for span in self.related) + ")"
        if self.hint:
            text += f" Hint: {self.hint}"
        return text

    def __str__(self) -> str:
        return self.format()


def _sort_key(diagnostic: Diagnostic) -> Tuple[int, int, str]:
    span = diagnostic.span
    if span is None:
        return (0, 0, diagnostic.code.value)
    return (span.line, span.column, diagnostic.code.value)


@dataclass
class DiagnosticBag:
    """Mutable accumulator used while parsing and validating."""
    path: Optional[str] = None
    items: List[Diagnostic] = field(default_factory=list)

    def report(
        self,
        code: DiagnosticCode,
        message: str,
        span: Optional[SourceSpan] = None,
        *,
        related: Iterable[SourceSpan] = (),
        hint: Optional[str] = None,
    ) -> Diagnostic:
        if span is not None and span.path is None and self.path is not None:
            span = span.with_path(self.path)
        related_spans = tuple(
            r.with_path(self.path) if r.path is None and self.path is not None else r
            for r in related
        )
        diagnostic = Diagnostic(code=code, message=message, span=span, related=related_spans, hint=hint)
        self.items.append(diagnostic)
        return diagnostic

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.items.extend(diagnostics)

    def sorted(self) -> List[Diagnostic]:
        return sorted(self.items, key=_sort_key)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
    """Order diagnostics by source position, then by code."""
    return sorted(diagnostics, key=_sort_key)


__all__ = [
    "Severity",
    "DiagnosticCategory",
    "DiagnosticCode",
    "Diagnostic",
    "DiagnosticBag",
    "sort_diagnostics",
]
