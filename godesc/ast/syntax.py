"""Untyped syntax tree produced by the shared parser.

Both entry points of the parser (top-level descriptor and embedded payload)
produce these nodes. Bodies are ordered tuples of fields; a name appearing
more than once is kept as separate, ordered fields rather than merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from .source_location import SourceSpan


class ScalarKind(Enum):
    """Lexical class of a scalar field value."""
    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"
    IDENTIFIER = "identifier"


@dataclass(frozen=True)
class RawScalar:
    kind: ScalarKind
    value: Union[str, int, float]
    span: SourceSpan = field(compare=False)
    # Source (line, column) of every character of a string value, so that
    # payload positions can be traced back into the enclosing descriptor.
    char_positions: Tuple[Tuple[int, int], ...] = field(default=(), compare=False, repr=False)


@dataclass(frozen=True)
class RawBody:
    fields: Tuple["RawField", ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False)

    def __iter__(self) -> Iterator["RawField"]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get_all(self, name: str) -> List["RawField"]:
        return [f for f in self.fields if f.name == name]

    def get(self, name: str) -> Optional["RawField"]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class RawField:
    """``name: value`` or ``name { body }``."""
    name: str
    value: Union[RawScalar, RawBody]
    span: SourceSpan = field(compare=False)
    name_span: SourceSpan = field(compare=False)

    @property
    def is_block(self) -> bool:
        return isinstance(self.value, RawBody)


@dataclass(frozen=True)
class RawDocument:
    """Top-level blocks in source order."""
    blocks: Tuple[RawField, ...] = ()
    path: Optional[str] = field(default=None, compare=False)

    def __iter__(self) -> Iterator[RawField]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


__all__ = ["ScalarKind", "RawScalar", "RawBody", "RawField", "RawDocument"]
