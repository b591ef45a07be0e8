"""Catalogs of legal block names, component kinds and attribute shapes.

Two catalogs share the one grammar: the outer catalog describes the blocks
of a descriptor file itself, the kind catalog describes the payload of each
embedded component kind. Both are plain data; the builder, payload typer and
validator all read from here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple
import difflib

from godesc.ast.attributes import AttributeTree, Scalar, ValueType


class FieldType(Enum):
    STRING = "string"
    PATH = "path"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    BLOCK = "block"

    def describe(self) -> str:
        return {
            FieldType.STRING: "a quoted string",
            FieldType.PATH: "a quoted resource path",
            FieldType.NUMBER: "a number",
            FieldType.INTEGER: "an integer",
            FieldType.BOOLEAN: "true or false",
            FieldType.ENUM: "an enum value",
            FieldType.BLOCK: "a '{ ... }' block",
        }[self]


@dataclass(frozen=True)
class FieldSpec:
    """Shape of one attribute name within a schema."""
    name: str
    type: FieldType
    repeated: bool = False
    required: bool = False
    enum_values: FrozenSet[str] = frozenset()
    # Unlisted values always warn; closed enums also reject them.
    closed_enum: bool = True
    children: Optional["Schema"] = None
    description: str = ""


@dataclass(frozen=True)
class Schema:
    name: str
    fields: Tuple[FieldSpec, ...] = ()

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    @property
    def required(self) -> List[FieldSpec]:
        return [spec for spec in self.fields if spec.required]


def _axes(name: str, axes: Iterable[str]) -> Schema:
    return Schema(name, tuple(FieldSpec(axis, FieldType.NUMBER) for axis in axes))


POSITION_SCHEMA = _axes("position", "xyz")
ROTATION_SCHEMA = _axes("rotation", "xyzw")
SCALE_SCHEMA = _axes("scale", "xyz")

TRANSFORM_SCHEMAS: Dict[str, Schema] = {
    "position": POSITION_SCHEMA,
    "rotation": ROTATION_SCHEMA,
    "scale": SCALE_SCHEMA,
}


# ============================================================================
# Outer catalog
# ============================================================================

COMPONENTS = "components"
EMBEDDED_COMPONENTS = "embedded_components"

TOP_LEVEL_BLOCKS: Tuple[str, ...] = (COMPONENTS, EMBEDDED_COMPONENTS, "position", "rotation", "scale")

# Names that only ever open a top-level block; the parser resynchronises on them.
SYNC_BLOCKS: FrozenSet[str] = frozenset({COMPONENTS, EMBEDDED_COMPONENTS})

COMPONENT_SCHEMA = Schema(COMPONENTS, (
    FieldSpec("id", FieldType.STRING, required=True),
    FieldSpec("component", FieldType.PATH, required=True),
    FieldSpec("position", FieldType.BLOCK, children=POSITION_SCHEMA),
    FieldSpec("rotation", FieldType.BLOCK, children=ROTATION_SCHEMA),
))

EMBEDDED_COMPONENT_SCHEMA = Schema(EMBEDDED_COMPONENTS, (
    FieldSpec("id", FieldType.STRING, required=True),
    FieldSpec("type", FieldType.STRING, required=True),
    FieldSpec("data", FieldType.STRING),
    FieldSpec("position", FieldType.BLOCK, children=POSITION_SCHEMA),
    FieldSpec("rotation", FieldType.BLOCK, children=ROTATION_SCHEMA),
    FieldSpec("scale", FieldType.BLOCK, children=SCALE_SCHEMA),
))


# ============================================================================
# Kind catalog
# ============================================================================

COLLISION_OBJECT_TYPES = frozenset({
    "COLLISION_OBJECT_TYPE_DYNAMIC",
    "COLLISION_OBJECT_TYPE_KINEMATIC",
    "COLLISION_OBJECT_TYPE_STATIC",
    "COLLISION_OBJECT_TYPE_TRIGGER",
})

SHAPE_TYPES = frozenset({"TYPE_BOX", "TYPE_SPHERE", "TYPE_CAPSULE"})

TEXTURE_SCHEMA = Schema("textures", (
    FieldSpec("sampler", FieldType.STRING),
    FieldSpec("texture", FieldType.PATH),
))

SPRITE_SCHEMA = Schema("sprite", (
    FieldSpec("default_animation", FieldType.STRING),
    FieldSpec("material", FieldType.PATH),
    FieldSpec("textures", FieldType.BLOCK, repeated=True, children=TEXTURE_SCHEMA),
))

SHAPE_SCHEMA = Schema("shapes", (
    FieldSpec("shape_type", FieldType.ENUM, required=True, enum_values=SHAPE_TYPES, closed_enum=False),
    FieldSpec("position", FieldType.BLOCK, children=POSITION_SCHEMA),
    FieldSpec("rotation", FieldType.BLOCK, children=ROTATION_SCHEMA),
    FieldSpec("index", FieldType.INTEGER),
    FieldSpec("count", FieldType.INTEGER, required=True),
    FieldSpec("id", FieldType.STRING),
))

COLLISION_SHAPE_SCHEMA = Schema("embedded_collision_shape", (
    FieldSpec("shapes", FieldType.BLOCK, repeated=True, children=SHAPE_SCHEMA),
    FieldSpec("data", FieldType.NUMBER, repeated=True),
))

COLLISION_OBJECT_SCHEMA = Schema("collisionobject", (
    FieldSpec("type", FieldType.ENUM, required=True, enum_values=COLLISION_OBJECT_TYPES),
    FieldSpec("mass", FieldType.NUMBER),
    FieldSpec("friction", FieldType.NUMBER),
    FieldSpec("restitution", FieldType.NUMBER),
    FieldSpec("group", FieldType.STRING),
    FieldSpec("mask", FieldType.STRING, repeated=True),
    FieldSpec("embedded_collision_shape", FieldType.BLOCK, required=True, children=COLLISION_SHAPE_SCHEMA),
))

FACTORY_SCHEMA = Schema("factory", (
    FieldSpec("prototype", FieldType.PATH, required=True),
))

COLLECTION_PROXY_SCHEMA = Schema("collectionproxy", (
    FieldSpec("collection", FieldType.PATH, required=True),
))

KIND_SCHEMAS: Dict[str, Schema] = {
    "sprite": SPRITE_SCHEMA,
    "collisionobject": COLLISION_OBJECT_SCHEMA,
    "factory": FACTORY_SCHEMA,
    "collectionproxy": COLLECTION_PROXY_SCHEMA,
}

RECOGNIZED_KINDS: Tuple[str, ...] = tuple(KIND_SCHEMAS)


def schema_for_kind(kind: Optional[str]) -> Optional[Schema]:
    """Payload schema of an embedded component kind, or None when unrecognised."""
    if kind is None:
        return None
    return KIND_SCHEMAS.get(kind)


# ============================================================================
# Helpers
# ============================================================================

def value_matches(spec: FieldSpec, value) -> bool:
    """Whether an attribute value has the shape ``spec`` asks for."""
    if spec.type is FieldType.BLOCK:
        return isinstance(value, AttributeTree)
    if not isinstance(value, Scalar):
        return False
    if spec.type in (FieldType.STRING, FieldType.PATH):
        return value.type is ValueType.STRING
    if spec.type is FieldType.NUMBER:
        return value.type is ValueType.NUMBER
    if spec.type is FieldType.INTEGER:
        return value.is_integer
    if spec.type is FieldType.BOOLEAN:
        return value.type is ValueType.BOOLEAN
    if spec.type is FieldType.ENUM:
        return value.type is ValueType.ENUM
    return False


def is_valid_resource_path(path: str) -> bool:
    """Absolute, slash-delimited, with no empty segments."""
    if not path.startswith("/") or len(path) < 2:
        return False
    return all(segment for segment in path[1:].split("/"))


def resource_suffix(path: str) -> str:
    """Suffix of the last path segment, including the dot ('' when none)."""
    last = path.rsplit("/", 1)[-1]
    if "." not in last.lstrip("."):
        return ""
    return "." + last.rsplit(".", 1)[-1]


def suggest_name(unknown: str, candidates: Iterable[str]) -> Optional[str]:
    """
    Suggest the most likely intended name for an unknown one.

    Examples:
        >>> suggest_name('textrues', ['default_animation', 'material', 'textures'])
        'textures'

        >>> suggest_name('xyz', ['prototype']) is None
        True
    """
    matches = difflib.get_close_matches(unknown, list(candidates), n=1, cutoff=0.6)
    return matches[0] if matches else None


__all__ = [
    "FieldType",
    "FieldSpec",
    "Schema",
    "POSITION_SCHEMA",
    "ROTATION_SCHEMA",
    "SCALE_SCHEMA",
    "TRANSFORM_SCHEMAS",
    "COMPONENTS",
    "EMBEDDED_COMPONENTS",
    "TOP_LEVEL_BLOCKS",
    "SYNC_BLOCKS",
    "COMPONENT_SCHEMA",
    "EMBEDDED_COMPONENT_SCHEMA",
    "COLLISION_OBJECT_TYPES",
    "SHAPE_TYPES",
    "SPRITE_SCHEMA",
    "COLLISION_OBJECT_SCHEMA",
    "FACTORY_SCHEMA",
    "COLLECTION_PROXY_SCHEMA",
    "KIND_SCHEMAS",
    "RECOGNIZED_KINDS",
    "schema_for_kind",
    "value_matches",
    "is_valid_resource_path",
    "resource_suffix",
    "suggest_name",
]
