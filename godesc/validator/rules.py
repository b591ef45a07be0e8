"""Base class and infrastructure for validation rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TYPE_CHECKING

from godesc.ast.source_location import SourceSpan
from godesc.diagnostics import Diagnostic, DiagnosticCode

if TYPE_CHECKING:
    from .core import ValidationContext


class ValidationRule(ABC):
    """Base class for descriptor validation rules."""

    def __init__(self, rule_id: str, description: str):
        self.rule_id = rule_id
        self.description = description

    @abstractmethod
    def check(self, context: "ValidationContext") -> List[Diagnostic]:
        """
        Apply this rule to the given context.

        Args:
            context: The descriptor under validation and the active settings

        Returns:
            Diagnostics found by this rule
        """

    def finding(
        self,
        code: DiagnosticCode,
        message: str,
        span: Optional[SourceSpan] = None,
        *,
        related: Iterable[SourceSpan] = (),
        hint: Optional[str] = None,
    ) -> Diagnostic:
        return Diagnostic(code=code, message=message, span=span, related=tuple(related), hint=hint)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.rule_id!r})"
