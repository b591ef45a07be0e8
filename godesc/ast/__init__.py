"""In-memory model of parsed game-object descriptors."""

from .source_location import SourceSpan
from .attributes import EMPTY_TREE, Attribute, AttributeTree, AttributeValue, Scalar, ValueType
from .descriptor import (
    IDENTITY,
    Block,
    Component,
    ComponentKind,
    Descriptor,
    EmbeddedComponent,
    Quaternion,
    Transform,
    Vector3,
)
from .syntax import RawBody, RawDocument, RawField, RawScalar, ScalarKind

__all__ = [
    "SourceSpan",
    "ValueType",
    "Scalar",
    "Attribute",
    "AttributeTree",
    "AttributeValue",
    "EMPTY_TREE",
    "ComponentKind",
    "Vector3",
    "Quaternion",
    "Transform",
    "IDENTITY",
    "Component",
    "EmbeddedComponent",
    "Block",
    "Descriptor",
    "ScalarKind",
    "RawScalar",
    "RawBody",
    "RawField",
    "RawDocument",
]
