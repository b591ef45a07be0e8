"""Typed attribute trees decoded from embedded component payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .source_location import SourceSpan


class ValueType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    IDENTIFIER = "identifier"


@dataclass(frozen=True)
class Scalar:
    """A leaf value: number, boolean, quoted string, enum or bare identifier."""
    type: ValueType
    value: Union[str, int, float, bool]
    span: Optional[SourceSpan] = field(default=None, compare=False)

    @property
    def is_integer(self) -> bool:
        return self.type is ValueType.NUMBER and isinstance(self.value, int) and not isinstance(self.value, bool)


AttributeValue = Union[Scalar, "AttributeTree"]


@dataclass(frozen=True)
class Attribute:
    name: str
    value: AttributeValue
    span: Optional[SourceSpan] = field(default=None, compare=False)
    name_span: Optional[SourceSpan] = field(default=None, compare=False)

    @property
    def is_block(self) -> bool:
        return isinstance(self.value, AttributeTree)


@dataclass(frozen=True)
class AttributeTree:
    """
    Ordered attributes of one payload level.

    A name that appears several times (``data: 1`` ``data: 2``, or several
    ``shapes { }`` blocks) is a repeated attribute: every occurrence is kept
    in source order.
    """
    attributes: Tuple[Attribute, ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False)

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def __bool__(self) -> bool:
        return bool(self.attributes)

    def names(self) -> List[str]:
        """Distinct attribute names in first-seen order."""
        seen: List[str] = []
        for attribute in self.attributes:
            if attribute.name not in seen:
                seen.append(attribute.name)
        return seen

    def get_all(self, name: str) -> List[Attribute]:
        return [a for a in self.attributes if a.name == name]

    def find(self, name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def get(self, name: str, default: Any = None) -> Any:
        """Python value of the first ``name`` attribute (scalar value or subtree)."""
        attribute = self.find(name)
        if attribute is None:
            return default
        if isinstance(attribute.value, Scalar):
            return attribute.value.value
        return attribute.value

    def values(self, name: str) -> List[Any]:
        """Python values of every ``name`` attribute, in order."""
        result = []
        for attribute in self.get_all(name):
            value = attribute.value
            result.append(value.value if isinstance(value, Scalar) else value)
        return result

    def subtree(self, name: str) -> Optional["AttributeTree"]:
        attribute = self.find(name)
        if attribute is not None and isinstance(attribute.value, AttributeTree):
            return attribute.value
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain-Python view: scalars become their values, subtrees become dicts,
        names that occur more than once become lists.
        """
        result: Dict[str, Any] = {}
        for name in self.names():
            converted = [_plain(a.value) for a in self.get_all(name)]
            result[name] = converted if len(converted) > 1 else converted[0]
        return result


def _plain(value: AttributeValue) -> Any:
    if isinstance(value, AttributeTree):
        return value.to_dict()
    return value.value


EMPTY_TREE = AttributeTree()


__all__ = ["ValueType", "Scalar", "Attribute", "AttributeTree", "AttributeValue", "EMPTY_TREE"]
