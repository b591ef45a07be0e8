"""Typed descriptor model.

A :class:`Descriptor` is built once by the parser and never mutated. Source
spans are carried for diagnostics but do not take part in equality, so two
descriptors parsed from differently formatted text compare equal when they
describe the same game object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from .attributes import EMPTY_TREE, AttributeTree
from .source_location import SourceSpan


class ComponentKind(str, Enum):
    """Recognised embedded component kinds."""
    SPRITE = "sprite"
    COLLISION_OBJECT = "collisionobject"
    FACTORY = "factory"
    COLLECTION_PROXY = "collectionproxy"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["ComponentKind"]:
        for kind in cls:
            if kind.value == name:
                return kind
        return None


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass(frozen=True)
class Transform:
    position: Vector3 = Vector3()
    rotation: Quaternion = Quaternion()
    scale: Vector3 = Vector3(1.0, 1.0, 1.0)

    @property
    def is_identity(self) -> bool:
        return self == IDENTITY


IDENTITY = Transform()


@dataclass(frozen=True)
class Component:
    """Reference to an external script or effect resource."""
    id: str
    component_path: str
    transform: Optional[Transform] = None
    span: Optional[SourceSpan] = field(default=None, compare=False)
    id_span: Optional[SourceSpan] = field(default=None, compare=False)
    path_span: Optional[SourceSpan] = field(default=None, compare=False)


@dataclass(frozen=True)
class EmbeddedComponent:
    """
    Inline component with a declared kind and a decoded payload.

    ``kind`` keeps the declared type text even when it is not one of the
    recognised kinds; the validator reports those.
    """
    id: str
    kind: str
    data: AttributeTree = EMPTY_TREE
    transform: Optional[Transform] = None
    span: Optional[SourceSpan] = field(default=None, compare=False)
    id_span: Optional[SourceSpan] = field(default=None, compare=False)
    kind_span: Optional[SourceSpan] = field(default=None, compare=False)
    data_span: Optional[SourceSpan] = field(default=None, compare=False)

    @property
    def component_kind(self) -> Optional[ComponentKind]:
        return ComponentKind.from_name(self.kind)


Block = Union[Component, EmbeddedComponent]


@dataclass(frozen=True)
class Descriptor:
    """One game-object declaration: components and embedded components in source order."""
    blocks: Tuple[Block, ...] = ()
    path: Optional[str] = field(default=None, compare=False)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def components(self) -> List[Component]:
        return [b for b in self.blocks if isinstance(b, Component)]

    @property
    def embedded_components(self) -> List[EmbeddedComponent]:
        return [b for b in self.blocks if isinstance(b, EmbeddedComponent)]

    def of_kind(self, kind: Union[ComponentKind, str]) -> List[EmbeddedComponent]:
        name = kind.value if isinstance(kind, ComponentKind) else kind
        return [b for b in self.embedded_components if b.kind == name]

    def find(self, block_id: str) -> Optional[Block]:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    @property
    def ids(self) -> List[str]:
        return [block.id for block in self.blocks]


__all__ = [
    "ComponentKind",
    "Vector3",
    "Quaternion",
    "Transform",
    "IDENTITY",
    "Component",
    "EmbeddedComponent",
    "Block",
    "Descriptor",
]
