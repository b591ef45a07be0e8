"""Core validation infrastructure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
import logging

from godesc.ast import AttributeTree, Descriptor, EmbeddedComponent
from godesc.ast.attributes import Attribute
from godesc.config import DEFAULT_SETTINGS, ValidatorSettings
from godesc.diagnostics import Diagnostic, sort_diagnostics
from godesc.lang.catalog import Schema, schema_for_kind

from .rules import ValidationRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationContext:
    """Context provided to validation rules."""
    descriptor: Descriptor
    settings: ValidatorSettings = DEFAULT_SETTINGS

    def embedded_of_kind(self, kind: str) -> List[EmbeddedComponent]:
        return self.descriptor.of_kind(kind)

    def walk(self, component: EmbeddedComponent) -> Iterator[Tuple[Attribute, Optional[Schema]]]:
        """
        Every attribute of a payload with the schema of the level it sits in.

        Attributes under an unknown name are visited with a schema of None.
        """
        yield from _walk(component.data, schema_for_kind(component.kind))


def _walk(tree: AttributeTree, schema: Optional[Schema]) -> Iterator[Tuple[Attribute, Optional[Schema]]]:
    for attribute in tree:
        yield attribute, schema
        if isinstance(attribute.value, AttributeTree):
            spec = schema.field(attribute.name) if schema is not None else None
            yield from _walk(attribute.value, spec.children if spec is not None else None)


class DescriptorValidator:
    """
    Rule-based validator for parsed descriptors.

    Validation is total: every enabled rule sees the whole descriptor and
    all findings are accumulated. The descriptor is never modified, so
    validating twice yields the same diagnostics.
    """

    def __init__(
        self,
        rules: Optional[List[ValidationRule]] = None,
        settings: Optional[ValidatorSettings] = None,
    ):
        if rules is None:
            from .builtin_rules import get_default_rules
            rules = get_default_rules()
        self.rules = rules
        self.settings = settings or DEFAULT_SETTINGS

    def validate(self, descriptor: Descriptor) -> List[Diagnostic]:
        """
        Validate a descriptor.

        Args:
            descriptor: Descriptor produced by the parser

        Returns:
            Diagnostics ordered by source position
        """
        context = ValidationContext(descriptor=descriptor, settings=self.settings)
        findings: List[Diagnostic] = []
        for rule in self.rules:
            if not self.settings.is_rule_enabled(rule.rule_id):
                logger.debug("Skipping disabled rule %s", rule.rule_id)
                continue
            rule_findings = rule.check(context)
            logger.debug("Rule %s produced %d finding(s)", rule.rule_id, len(rule_findings))
            findings.extend(rule_findings)
        return sort_diagnostics(findings)


def validate_descriptor(
    descriptor: Descriptor,
    settings: Optional[ValidatorSettings] = None,
) -> List[Diagnostic]:
    """Validate with the built-in rules."""
    return DescriptorValidator(settings=settings).validate(descriptor)


__all__ = ["ValidationContext", "DescriptorValidator", "validate_descriptor"]
