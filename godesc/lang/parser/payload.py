"""Embedded payload parsing.

The ``data`` field of an embedded component is a string whose content uses
the descriptor grammar itself. This module re-parses that string with the
shared :class:`~godesc.lang.parser.parse.DescriptorParser` and types the
result against the payload schema of the component's kind.

Typing is lenient: unknown attribute names and unknown enum values are
reported as warnings and kept in the tree. Shape errors (wrong value types,
repeated attributes that are not repeatable, missing required attributes,
values outside a closed enum) are left to the validator.
"""

from __future__ import annotations

from typing import List, Optional
import logging

from godesc.ast.attributes import EMPTY_TREE, Attribute, AttributeTree, Scalar, ValueType
from godesc.ast.syntax import RawBody, RawField, RawScalar, ScalarKind
from godesc.diagnostics import DiagnosticBag, DiagnosticCode
from godesc.lang.catalog import FieldType, Schema, schema_for_kind, suggest_name

from .parse import MAX_NESTING_DEPTH, DescriptorParser

logger = logging.getLogger(__name__)

BOOLEANS = {"true": True, "false": False}


def to_scalar(raw: RawScalar) -> Scalar:
    """Convert a raw scalar into a typed one."""
    if raw.kind is ScalarKind.STRING:
        return Scalar(ValueType.STRING, raw.value, raw.span)
    if raw.kind is ScalarKind.NUMBER:
        return Scalar(ValueType.NUMBER, raw.value, raw.span)
    if raw.kind is ScalarKind.ENUM:
        return Scalar(ValueType.ENUM, raw.value, raw.span)
    if raw.value in BOOLEANS:
        return Scalar(ValueType.BOOLEAN, BOOLEANS[raw.value], raw.span)
    return Scalar(ValueType.IDENTIFIER, raw.value, raw.span)


class PayloadTyper:
    """Builds an :class:`AttributeTree` from a raw body, checking names and enum values."""

    def __init__(self, diagnostics: DiagnosticBag):
        self.diagnostics = diagnostics

    def build(self, body: RawBody, schema: Optional[Schema], depth: int = 0) -> AttributeTree:
        if depth >= MAX_NESTING_DEPTH:
            self.diagnostics.report(
                DiagnosticCode.PARSE_NESTING_TOO_DEEP,
                f"Blocks nested deeper than {MAX_NESTING_DEPTH} levels",
                body.span,
            )
            return EMPTY_TREE
        attributes: List[Attribute] = []
        for raw_field in body:
            attributes.append(self._attribute(raw_field, schema, depth))
        return AttributeTree(attributes=tuple(attributes), span=body.span)

    def _attribute(self, raw_field: RawField, schema: Optional[Schema], depth: int) -> Attribute:
        spec = schema.field(raw_field.name) if schema is not None else None
        if schema is not None and spec is None:
            suggestion = suggest_name(raw_field.name, schema.names)
            self.diagnostics.report(
                DiagnosticCode.WARN_UNKNOWN_FIELD,
                f"Unknown attribute '{raw_field.name}' in {schema.name}",
                raw_field.name_span,
                hint=f"Did you mean '{suggestion}'?" if suggestion else None,
            )

        if isinstance(raw_field.value, RawBody):
            children = spec.children if spec is not None else None
            value = self.build(raw_field.value, children, depth + 1)
        else:
            value = to_scalar(raw_field.value)
            if spec is not None:
                self._check_enum(spec, value)

        return Attribute(
            name=raw_field.name,
            value=value,
            span=raw_field.span,
            name_span=raw_field.name_span,
        )

    def _check_enum(self, spec, value: Scalar) -> None:
        # Closed enums also get SCHEMA_INVALID_VALUE from the validator.
        if spec.type is not FieldType.ENUM:
            return
        if value.type is ValueType.ENUM and value.value not in spec.enum_values:
            known = ", ".join(sorted(spec.enum_values))
            self.diagnostics.report(
                DiagnosticCode.WARN_UNKNOWN_ENUM,
                f"Unknown {spec.name} value '{value.value}' (known: {known})",
                value.span,
            )


def parse_payload(
    payload: Optional[RawScalar],
    kind: Optional[str],
    *,
    diagnostics: DiagnosticBag,
    path: Optional[str] = None,
) -> AttributeTree:
    """
    Parse and type the payload of an embedded component.

    Args:
        payload: The ``data`` string, or None when the block has no ``data``.
        kind: Declared component kind. Unrecognised kinds are parsed
            without a schema, so no name warnings are produced for them.
        diagnostics: Sink for lexical, syntax and warning diagnostics, with
            positions inside the enclosing descriptor.
        path: Descriptor path attached to spans.

    Returns:
        The typed attribute tree; empty for an empty or missing payload.
    """
    if payload is None or not str(payload.value).strip():
        return EMPTY_TREE

    parser = DescriptorParser(
        str(payload.value),
        path=path,
        diagnostics=diagnostics,
        source_map=payload.char_positions,
        anchor=payload.span,
    )
    body = parser.parse_payload()
    schema = schema_for_kind(kind)
    logger.debug("Parsed %s payload with %d attribute(s)", kind, len(body))
    return PayloadTyper(diagnostics).build(body, schema)


def parse_payload_text(
    text: str,
    kind: Optional[str],
    *,
    diagnostics: Optional[DiagnosticBag] = None,
) -> AttributeTree:
    """Parse a payload given as plain text; positions are payload-relative."""
    diagnostics = diagnostics if diagnostics is not None else DiagnosticBag()
    if not text.strip():
        return EMPTY_TREE
    parser = DescriptorParser(text, diagnostics=diagnostics)
    body = parser.parse_payload()
    return PayloadTyper(diagnostics).build(body, schema_for_kind(kind))


__all__ = ["PayloadTyper", "parse_payload", "parse_payload_text", "to_scalar"]
