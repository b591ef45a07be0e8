"""Descriptor language: catalogs, lexer and parser."""

from .catalog import (
    KIND_SCHEMAS,
    RECOGNIZED_KINDS,
    TOP_LEVEL_BLOCKS,
    FieldSpec,
    FieldType,
    Schema,
    is_valid_resource_path,
    resource_suffix,
    schema_for_kind,
    suggest_name,
)

__all__ = [
    "KIND_SCHEMAS",
    "RECOGNIZED_KINDS",
    "TOP_LEVEL_BLOCKS",
    "FieldSpec",
    "FieldType",
    "Schema",
    "is_valid_resource_path",
    "resource_suffix",
    "schema_for_kind",
    "suggest_name",
]
