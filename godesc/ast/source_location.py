"""Source location information for descriptor nodes and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceSpan:
    """
    A half-open region of descriptor source text.

    Lines and columns are 1-based. ``end_line``/``end_column`` point just past
    the last character of the region. Spans never take part in equality of
    model nodes; they only locate diagnostics.
    """
    line: int
    column: int
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        """Return human-readable location string."""
        file = self.path or "<descriptor>"
        if self.end_line and self.end_line != self.line:
            return f"{file}:{self.line}-{self.end_line}"
        return f"{file}:{self.line}:{self.column}"

    def with_path(self, path: Optional[str]) -> "SourceSpan":
        return SourceSpan(self.line, self.column, self.end_line, self.end_column, path)


__all__ = ["SourceSpan"]
