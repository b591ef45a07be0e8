"""Built-in validation rules."""

from __future__ import annotations

from abc import abstractmethod
from typing import Dict, List, Optional

from godesc.ast import AttributeTree, Block, ComponentKind, EmbeddedComponent, Scalar, ValueType
from godesc.ast.source_location import SourceSpan
from godesc.diagnostics import Diagnostic, DiagnosticCode
from godesc.lang.catalog import (
    RECOGNIZED_KINDS,
    FieldType,
    Schema,
    is_valid_resource_path,
    resource_suffix,
    schema_for_kind,
    suggest_name,
    value_matches,
)

from .core import ValidationContext
from .rules import ValidationRule


def _label(component: EmbeddedComponent) -> str:
    return f"{component.kind} '{component.id}'"


class UniqueIdRule(ValidationRule):
    """Component and embedded component ids must be unique within a descriptor."""

    def __init__(self):
        super().__init__(
            rule_id="unique-id",
            description="Identifiers are unique across components and embedded components",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        by_id: Dict[str, List[Block]] = {}
        for block in context.descriptor:
            by_id.setdefault(block.id, []).append(block)

        findings = []
        for block_id, blocks in by_id.items():
            if len(blocks) < 2:
                continue
            spans = [b.id_span or b.span for b in blocks]
            findings.append(self.finding(
                DiagnosticCode.UNIQUENESS_DUPLICATE_ID,
                f"Duplicate id '{block_id}' used by {len(blocks)} blocks",
                spans[1],
                related=[span for i, span in enumerate(spans) if i != 1 and span is not None],
            ))
        return findings


class KnownKindRule(ValidationRule):
    """Embedded component types must be one of the recognised kinds."""

    def __init__(self):
        super().__init__(
            rule_id="known-kind",
            description="Embedded component kind is sprite, collisionobject, factory or collectionproxy",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        findings = []
        for component in context.descriptor.embedded_components:
            if component.component_kind is not None:
                continue
            suggestion = suggest_name(component.kind, RECOGNIZED_KINDS)
            findings.append(self.finding(
                DiagnosticCode.SCHEMA_UNKNOWN_KIND,
                f"Unrecognised component kind '{component.kind}' for '{component.id}'",
                component.kind_span or component.span,
                hint=f"Did you mean '{suggestion}'?" if suggestion
                else f"Expected one of {', '.join(RECOGNIZED_KINDS)}",
            ))
        return findings


class AttributeSchemaRule(ValidationRule):
    """Payload attributes have the value types, multiplicity and required names of their kind."""

    def __init__(self):
        super().__init__(
            rule_id="attribute-schema",
            description="Payload attributes match the schema of the component kind",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        findings: List[Diagnostic] = []
        for component in context.descriptor.embedded_components:
            schema = schema_for_kind(component.kind)
            if schema is None:
                continue
            owner = component.data_span or component.span
            self._check_level(component.data, schema, owner, _label(component), findings)
        return findings

    def _check_level(
        self,
        tree: AttributeTree,
        schema: Schema,
        owner: Optional[SourceSpan],
        label: str,
        findings: List[Diagnostic],
    ) -> None:
        for name in tree.names():
            spec = schema.field(name)
            if spec is None:
                continue
            occurrences = tree.get_all(name)
            if len(occurrences) > 1 and not spec.repeated:
                findings.append(self.finding(
                    DiagnosticCode.SCHEMA_NOT_REPEATABLE,
                    f"Attribute '{name}' may appear only once in {label}",
                    occurrences[1].name_span,
                    related=[occurrences[0].name_span] if occurrences[0].name_span else [],
                ))
            for attribute in occurrences:
                value = attribute.value
                if not value_matches(spec, value):
                    findings.append(self.finding(
                        DiagnosticCode.SCHEMA_WRONG_TYPE,
                        f"Attribute '{name}' in {label} must be {spec.type.describe()}",
                        attribute.span,
                    ))
                    continue
                if spec.type is FieldType.ENUM and spec.closed_enum and value.value not in spec.enum_values:
                    suggestion = suggest_name(value.value, spec.enum_values)
                    findings.append(self.finding(
                        DiagnosticCode.SCHEMA_INVALID_VALUE,
                        f"'{value.value}' is not a valid {name} for {label}",
                        value.span or attribute.span,
                        hint=f"Did you mean '{suggestion}'?" if suggestion
                        else f"Expected one of {', '.join(sorted(spec.enum_values))}",
                    ))
                if isinstance(value, AttributeTree) and spec.children is not None:
                    self._check_level(value, spec.children, attribute.span, f"{name} of {label}", findings)

        for spec in schema.required:
            if tree.find(spec.name) is None:
                findings.append(self.finding(
                    DiagnosticCode.SCHEMA_MISSING_FIELD,
                    f"{label} is missing required attribute '{spec.name}'",
                    owner,
                ))


class ResourcePathRule(ValidationRule):
    """Resource paths are absolute, slash-delimited and free of empty segments."""

    def __init__(self):
        super().__init__(
            rule_id="resource-path",
            description="Resource paths are well-formed",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        findings = []
        for component in context.descriptor.components:
            if not is_valid_resource_path(component.component_path):
                findings.append(self._malformed(component.component_path, component.path_span or component.span))

        for component in context.descriptor.embedded_components:
            for attribute, schema in context.walk(component):
                spec = schema.field(attribute.name) if schema is not None else None
                if spec is None or spec.type is not FieldType.PATH:
                    continue
                value = attribute.value
                if isinstance(value, Scalar) and value.type is ValueType.STRING:
                    if not is_valid_resource_path(value.value):
                        findings.append(self._malformed(value.value, value.span or attribute.span))
        return findings

    def _malformed(self, path: str, span: Optional[SourceSpan]) -> Diagnostic:
        return self.finding(
            DiagnosticCode.REFERENCE_MALFORMED_PATH,
            f"Malformed resource path '{path}'",
            span,
            hint="Resource paths start with '/' and have no empty segments, e.g. '/main/hero.script'",
        )


class _SuffixRule(ValidationRule):
    """Checks the suffix of one path attribute of one kind."""

    kind: ComponentKind
    attribute: str

    @abstractmethod
    def expected_suffix(self, context: ValidationContext) -> str:
        """Suffix the attribute value must end with."""

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        suffix = self.expected_suffix(context)
        findings = []
        for component in context.embedded_of_kind(self.kind.value):
            for attribute in component.data.get_all(self.attribute):
                value = attribute.value
                if not isinstance(value, Scalar) or value.type is not ValueType.STRING:
                    continue
                if not is_valid_resource_path(value.value):
                    continue
                if not value.value.endswith(suffix):
                    findings.append(self.finding(
                        DiagnosticCode.REFERENCE_SUFFIX_MISMATCH,
                        f"{self.attribute} of {_label(component)} should end with '{suffix}', "
                        f"got '{value.value}'",
                        value.span or attribute.span,
                    ))
        return findings


class FactoryPrototypeRule(_SuffixRule):
    """Factories spawn game-object descriptors."""

    kind = ComponentKind.FACTORY
    attribute = "prototype"

    def __init__(self):
        super().__init__(
            rule_id="factory-prototype",
            description="Factory prototype paths use the descriptor suffix",
        )

    def expected_suffix(self, context: ValidationContext) -> str:
        return context.settings.descriptor_suffix


class CollectionProxyRule(_SuffixRule):
    """Collection proxies load collections."""

    kind = ComponentKind.COLLECTION_PROXY
    attribute = "collection"

    def __init__(self):
        super().__init__(
            rule_id="collection-proxy",
            description="Collection proxy paths use the collection suffix",
        )

    def expected_suffix(self, context: ValidationContext) -> str:
        return context.settings.collection_suffix


class ComponentResourceRule(ValidationRule):
    """Plain components should reference a known component resource type."""

    def __init__(self):
        super().__init__(
            rule_id="component-resource",
            description="Component paths use a recognised resource suffix",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        known = context.settings.component_suffixes
        findings = []
        for component in context.descriptor.components:
            path = component.component_path
            if not is_valid_resource_path(path):
                continue
            suffix = resource_suffix(path)
            if suffix not in known:
                findings.append(self.finding(
                    DiagnosticCode.WARN_UNKNOWN_COMPONENT_TYPE,
                    f"Component '{component.id}' references '{path}' with unrecognised suffix "
                    f"'{suffix or '(none)'}'",
                    component.path_span or component.span,
                ))
        return findings


class SpriteTexturesRule(ValidationRule):
    """Sprites bind at least one texture, each with a sampler and a texture."""

    def __init__(self):
        super().__init__(
            rule_id="sprite-textures",
            description="Sprites have textures blocks with sampler and texture",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        findings = []
        for component in context.embedded_of_kind(ComponentKind.SPRITE.value):
            textures = component.data.get_all("textures")
            if not textures:
                findings.append(self.finding(
                    DiagnosticCode.SCHEMA_MISSING_FIELD,
                    f"{_label(component)} has no textures block",
                    component.data_span or component.span,
                ))
                continue
            for block in textures:
                if not isinstance(block.value, AttributeTree):
                    continue
                for required in ("sampler", "texture"):
                    if block.value.find(required) is None:
                        findings.append(self.finding(
                            DiagnosticCode.SCHEMA_MISSING_FIELD,
                            f"textures block of {_label(component)} is missing '{required}'",
                            block.span,
                        ))
        return findings


class CollisionShapeRule(ValidationRule):
    """
    Embedded collision shapes are consistent.

    The ``data`` vector holds the dimensions of every shape back to back, so
    its length must equal the sum of the shapes' ``count`` values.
    """

    def __init__(self):
        super().__init__(
            rule_id="collision-shape",
            description="Collision shapes exist and their data vector matches the shape counts",
        )

    def check(self, context: ValidationContext) -> List[Diagnostic]:
        findings = []
        for component in context.embedded_of_kind(ComponentKind.COLLISION_OBJECT.value):
            holder = component.data.find("embedded_collision_shape")
            if holder is None or not isinstance(holder.value, AttributeTree):
                continue
            shape_tree = holder.value
            shapes = [a for a in shape_tree.get_all("shapes") if isinstance(a.value, AttributeTree)]
            if not shapes:
                findings.append(self.finding(
                    DiagnosticCode.SCHEMA_MISSING_FIELD,
                    f"embedded_collision_shape of {_label(component)} has no shapes",
                    holder.span,
                ))
                continue

            total = 0
            consistent = True
            for shape in shapes:
                count = shape.value.find("count")
                if count is None or not isinstance(count.value, Scalar) or not count.value.is_integer:
                    consistent = False
                    continue
                if count.value.value < 1:
                    findings.append(self.finding(
                        DiagnosticCode.SCHEMA_INVALID_VALUE,
                        f"Shape count must be at least 1 in {_label(component)}, got {count.value.value}",
                        count.span,
                    ))
                    consistent = False
                    continue
                total += count.value.value

            if not consistent:
                continue
            data_count = len(shape_tree.get_all("data"))
            if data_count != total:
                findings.append(self.finding(
                    DiagnosticCode.SCHEMA_SHAPE_DATA_MISMATCH,
                    f"embedded_collision_shape of {_label(component)} has {data_count} data value(s) "
                    f"but its shapes declare {total}",
                    holder.span,
                ))
        return findings


def get_default_rules() -> List[ValidationRule]:
    """All built-in rules, in reporting order."""
    return [
        UniqueIdRule(),
        KnownKindRule(),
        AttributeSchemaRule(),
        ResourcePathRule(),
        FactoryPrototypeRule(),
        CollectionProxyRule(),
        ComponentResourceRule(),
        SpriteTexturesRule(),
        CollisionShapeRule(),
    ]


__all__ = [
    "UniqueIdRule",
    "KnownKindRule",
    "AttributeSchemaRule",
    "ResourcePathRule",
    "FactoryPrototypeRule",
    "CollectionProxyRule",
    "ComponentResourceRule",
    "SpriteTexturesRule",
    "CollisionShapeRule",
    "get_default_rules",
]
