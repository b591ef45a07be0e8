"""Typed model builder.

Turns the raw top-level blocks produced by the parser into
:class:`~godesc.ast.Component` and :class:`~godesc.ast.EmbeddedComponent`
records, decoding each embedded payload and collecting transforms. Blocks
missing a required field are reported and left out of the descriptor.
"""

from __future__ import annotations

from typing import Dict, List, Optional
import logging

from godesc.ast.descriptor import (
    Block,
    Component,
    Descriptor,
    EmbeddedComponent,
    Quaternion,
    Transform,
    Vector3,
)
from godesc.ast.syntax import RawBody, RawDocument, RawField, RawScalar, ScalarKind
from godesc.diagnostics import DiagnosticBag, DiagnosticCode
from godesc.lang.catalog import (
    COMPONENT_SCHEMA,
    COMPONENTS,
    EMBEDDED_COMPONENT_SCHEMA,
    EMBEDDED_COMPONENTS,
    TOP_LEVEL_BLOCKS,
    TRANSFORM_SCHEMAS,
    Schema,
    suggest_name,
)

from .payload import parse_payload

logger = logging.getLogger(__name__)


class DescriptorBuilder:
    """Builds a :class:`Descriptor` from a :class:`RawDocument`."""

    def __init__(self, diagnostics: DiagnosticBag, *, path: Optional[str] = None):
        self.diagnostics = diagnostics
        self.path = path

    def build(self, document: RawDocument) -> Descriptor:
        blocks: List[Block] = []
        for raw_block in document:
            block = self.build_block(raw_block)
            if block is not None:
                blocks.append(block)
        logger.debug("Built %d block(s) from %d raw block(s)", len(blocks), len(document))
        return Descriptor(blocks=tuple(blocks), path=self.path)

    def build_block(self, raw_block: RawField) -> Optional[Block]:
        if raw_block.name == COMPONENTS:
            return self.build_component(raw_block)
        if raw_block.name == EMBEDDED_COMPONENTS:
            return self.build_embedded_component(raw_block)
        if raw_block.name in TRANSFORM_SCHEMAS:
            self.diagnostics.report(
                DiagnosticCode.WARN_UNKNOWN_FIELD,
                f"'{raw_block.name}' outside of a component is ignored",
                raw_block.name_span,
            )
            return None
        suggestion = suggest_name(raw_block.name, TOP_LEVEL_BLOCKS)
        self.diagnostics.report(
            DiagnosticCode.WARN_UNKNOWN_FIELD,
            f"Unknown top-level block '{raw_block.name}' is ignored",
            raw_block.name_span,
            hint=f"Did you mean '{suggestion}'?" if suggestion else None,
        )
        return None

    # ====================================================================
    # Components
    # ====================================================================

    def build_component(self, raw_block: RawField) -> Optional[Component]:
        fields = self._collect(raw_block, COMPONENT_SCHEMA)
        block_id = self._required_string(raw_block, fields, "id")
        component = self._required_string(raw_block, fields, "component")
        if block_id is None or component is None:
            return None
        return Component(
            id=block_id.value,
            component_path=component.value,
            transform=self._transform(fields),
            span=raw_block.span,
            id_span=block_id.span,
            path_span=component.span,
        )

    def build_embedded_component(self, raw_block: RawField) -> Optional[EmbeddedComponent]:
        fields = self._collect(raw_block, EMBEDDED_COMPONENT_SCHEMA)
        block_id = self._required_string(raw_block, fields, "id")
        kind = self._required_string(raw_block, fields, "type", allow_identifier=True)
        if block_id is None or kind is None:
            return None

        payload = self._optional_string(fields, "data")
        data = parse_payload(
            payload,
            str(kind.value),
            diagnostics=self.diagnostics,
            path=self.path,
        )
        return EmbeddedComponent(
            id=block_id.value,
            kind=str(kind.value),
            data=data,
            transform=self._transform(fields),
            span=raw_block.span,
            id_span=block_id.span,
            kind_span=kind.span,
            data_span=payload.span if payload is not None else None,
        )

    # ====================================================================
    # Helpers
    # ====================================================================

    def _collect(self, raw_block: RawField, schema: Schema) -> Dict[str, RawField]:
        """First occurrence of each known field; unknown and repeated fields are reported."""
        assert isinstance(raw_block.value, RawBody)
        collected: Dict[str, RawField] = {}
        for raw_field in raw_block.value:
            spec = schema.field(raw_field.name)
            if spec is None:
                suggestion = suggest_name(raw_field.name, schema.names)
                self.diagnostics.report(
                    DiagnosticCode.WARN_UNKNOWN_FIELD,
                    f"Unknown field '{raw_field.name}' in {schema.name}",
                    raw_field.name_span,
                    hint=f"Did you mean '{suggestion}'?" if suggestion else None,
                )
                continue
            if raw_field.name in collected:
                self.diagnostics.report(
                    DiagnosticCode.SCHEMA_NOT_REPEATABLE,
                    f"Field '{raw_field.name}' may appear only once in {schema.name}",
                    raw_field.name_span,
                    related=[collected[raw_field.name].name_span],
                )
                continue
            collected[raw_field.name] = raw_field
        return collected

    def _required_string(
        self,
        raw_block: RawField,
        fields: Dict[str, RawField],
        name: str,
        *,
        allow_identifier: bool = False,
    ) -> Optional[RawScalar]:
        if name not in fields:
            label = raw_block.name
            id_field = fields.get("id")
            if id_field is not None and isinstance(id_field.value, RawScalar):
                label = f"{raw_block.name} '{id_field.value.value}'"
            self.diagnostics.report(
                DiagnosticCode.SCHEMA_MISSING_FIELD,
                f"{label} block is missing required field '{name}'",
                raw_block.name_span,
            )
            return None
        return self._string_value(fields[name], allow_identifier=allow_identifier)

    def _optional_string(self, fields: Dict[str, RawField], name: str) -> Optional[RawScalar]:
        if name not in fields:
            return None
        return self._string_value(fields[name])

    def _string_value(self, raw_field: RawField, *, allow_identifier: bool = False) -> Optional[RawScalar]:
        value = raw_field.value
        accepted = (ScalarKind.STRING, ScalarKind.IDENTIFIER) if allow_identifier else (ScalarKind.STRING,)
        if isinstance(value, RawScalar) and value.kind in accepted:
            return value
        self.diagnostics.report(
            DiagnosticCode.SCHEMA_WRONG_TYPE,
            f"Field '{raw_field.name}' must be a quoted string",
            raw_field.span,
        )
        return None

    def _transform(self, fields: Dict[str, RawField]) -> Optional[Transform]:
        present = [name for name in TRANSFORM_SCHEMAS if name in fields]
        if not present:
            return None
        axes = {name: self._axes(fields[name]) for name in present}
        position = axes.get("position", {})
        rotation = axes.get("rotation", {})
        scale = axes.get("scale", {})
        return Transform(
            position=Vector3(
                position.get("x", 0.0),
                position.get("y", 0.0),
                position.get("z", 0.0),
            ),
            rotation=Quaternion(
                rotation.get("x", 0.0),
                rotation.get("y", 0.0),
                rotation.get("z", 0.0),
                rotation.get("w", 1.0),
            ),
            scale=Vector3(
                scale.get("x", 1.0),
                scale.get("y", 1.0),
                scale.get("z", 1.0),
            ),
        )

    def _axes(self, raw_field: RawField) -> Dict[str, float]:
        if not isinstance(raw_field.value, RawBody):
            self.diagnostics.report(
                DiagnosticCode.SCHEMA_WRONG_TYPE,
                f"'{raw_field.name}' must be a block of axis values",
                raw_field.span,
            )
            return {}

        schema = TRANSFORM_SCHEMAS[raw_field.name]
        values: Dict[str, float] = {}
        for axis in raw_field.value:
            if schema.field(axis.name) is None:
                self.diagnostics.report(
                    DiagnosticCode.WARN_UNKNOWN_FIELD,
                    f"Unknown axis '{axis.name}' in {raw_field.name}",
                    axis.name_span,
                    hint=f"Expected one of {', '.join(schema.names)}",
                )
                continue
            if axis.name in values:
                self.diagnostics.report(
                    DiagnosticCode.SCHEMA_NOT_REPEATABLE,
                    f"Axis '{axis.name}' may appear only once in {raw_field.name}",
                    axis.name_span,
                )
                continue
            if not isinstance(axis.value, RawScalar) or axis.value.kind is not ScalarKind.NUMBER:
                self.diagnostics.report(
                    DiagnosticCode.SCHEMA_WRONG_TYPE,
                    f"Axis '{axis.name}' in {raw_field.name} must be a number",
                    axis.span,
                )
                continue
            values[axis.name] = float(axis.value.value)
        return values


def build_descriptor(document: RawDocument, diagnostics: DiagnosticBag, *, path: Optional[str] = None) -> Descriptor:
    """Build the typed descriptor for a parsed document."""
    return DescriptorBuilder(diagnostics, path=path).build(document)


__all__ = ["DescriptorBuilder", "build_descriptor"]
