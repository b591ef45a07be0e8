"""
Descriptor validation.

Validation runs after parsing and never modifies the descriptor. Each
:class:`ValidationRule` inspects the whole descriptor and returns its
findings as diagnostics.
"""

from .builtin_rules import (
    AttributeSchemaRule,
    CollectionProxyRule,
    CollisionShapeRule,
    ComponentResourceRule,
    FactoryPrototypeRule,
    KnownKindRule,
    ResourcePathRule,
    SpriteTexturesRule,
    UniqueIdRule,
    get_default_rules,
)
from .core import DescriptorValidator, ValidationContext, validate_descriptor
from .rules import ValidationRule

__all__ = [
    "ValidationRule",
    "ValidationContext",
    "DescriptorValidator",
    "validate_descriptor",
    "get_default_rules",
    "UniqueIdRule",
    "KnownKindRule",
    "AttributeSchemaRule",
    "ResourcePathRule",
    "FactoryPrototypeRule",
    "CollectionProxyRule",
    "ComponentResourceRule",
    "SpriteTexturesRule",
    "CollisionShapeRule",
]
