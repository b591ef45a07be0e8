"""Exception types for godesc.

The parser raises :class:`DescriptorSyntaxError` internally and converts it
into a :class:`~godesc.diagnostics.Diagnostic` at the enclosing block
boundary, so malformed descriptors never escape as exceptions from the
public parse functions. The I/O helpers raise :class:`ConfigurationError`
for unusable settings files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from godesc.diagnostics import DiagnosticCode


@dataclass
class GodescError(Exception):
    """Base class for all godesc errors."""

    message: str
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    code: str = "GODESC_ERROR"

    def __str__(self) -> str:
        parts = []
        if self.path:
            parts.append(f"File: {self.path}")
        if self.line is not None:
            if self.column is not None:
                parts.append(f"Line {self.line}:{self.column}")
            else:
                parts.append(f"Line {self.line}")
        parts.append(f"[{self.code}] {self.message}")
        return " | ".join(parts)


@dataclass
class DescriptorSyntaxError(GodescError):
    """Lexical or syntax error with expected/found context."""

    expected: List[str] = field(default_factory=list)
    found: Optional[str] = None
    suggestion: Optional[str] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    diagnostic_code: DiagnosticCode = DiagnosticCode.PARSE_UNEXPECTED_TOKEN
    # Set when the underlying problem has already been reported (lexer errors).
    reported: bool = False
    code: str = "SYNTAX_ERROR"

    def __str__(self) -> str:
        base = super().__str__()
        details = []
        if self.expected:
            if len(self.expected) == 1:
                details.append(f"Expected: {self.expected[0]}")
            else:
                details.append(f"Expected one of: {', '.join(self.expected)}")
        if self.found:
            details.append(f"Found: {self.found}")
        if self.suggestion:
            details.append(f"Suggestion: {self.suggestion}")
        if details:
            return base + "\n  " + "\n  ".join(details)
        return base

    def describe(self) -> str:
        """One-line message used for the diagnostic text."""
        text = self.message
        if self.expected:
            if len(self.expected) == 1:
                text += f": expected {self.expected[0]}"
            else:
                text += f": expected one of {', '.join(self.expected)}"
            if self.found:
                text += f", found {self.found}"
        elif self.found:
            text += f": found {self.found}"
        return text


@dataclass
class ConfigurationError(GodescError):
    """Raised when a settings file cannot be read or fails validation."""

    code: str = "CONFIGURATION_ERROR"


def create_syntax_error(
    message: str,
    *,
    path: Optional[str] = None,
    line: Optional[int] = None,
    column: Optional[int] = None,
    end_line: Optional[int] = None,
    end_column: Optional[int] = None,
    expected: Optional[List[str]] = None,
    found: Optional[str] = None,
    suggestion: Optional[str] = None,
    diagnostic_code: DiagnosticCode = DiagnosticCode.PARSE_UNEXPECTED_TOKEN,
) -> DescriptorSyntaxError:
    """Create a syntax error with context."""
    return DescriptorSyntaxError(
        message=message,
        path=path,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        expected=expected or [],
        found=found,
        suggestion=suggestion,
        diagnostic_code=diagnostic_code,
    )


__all__ = [
    "GodescError",
    "DescriptorSyntaxError",
    "ConfigurationError",
    "create_syntax_error",
]
