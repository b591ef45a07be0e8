"""Test individual validation rules."""

import pytest

from godesc.ast import ComponentKind
from godesc.config import ValidatorSettings
from godesc.diagnostics import DiagnosticCode, Severity
from godesc.lang.parser import parse_source
from godesc.validator import (
    AttributeSchemaRule,
    CollectionProxyRule,
    CollisionShapeRule,
    ComponentResourceRule,
    DescriptorValidator,
    FactoryPrototypeRule,
    KnownKindRule,
    ResourcePathRule,
    SpriteTexturesRule,
    UniqueIdRule,
    ValidationContext,
    get_default_rules,
    validate_descriptor,
)


def create_context(source, settings=None):
    """Helper to create a validation context from source."""
    descriptor, diagnostics = parse_source(source, path="test.go")
    assert [d for d in diagnostics if d.is_error] == []
    if settings is None:
        return ValidationContext(descriptor=descriptor)
    return ValidationContext(descriptor=descriptor, settings=settings)


def embedded(kind, payload, block_id="c"):
    quoted = payload.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'embedded_components {{\n  id: "{block_id}"\n  type: "{kind}"\n  data: "{quoted}"\n}}\n'


def codes(findings):
    return [f.code for f in findings]


COLLISION = """type: COLLISION_OBJECT_TYPE_STATIC
embedded_collision_shape {
  shapes {
    shape_type: TYPE_BOX
    index: 0
    count: 3
  }
  data: 10.0
  data: 20.0
  data: 1.0
}
"""


class TestCleanSamples:
    """Engine-written descriptors validate without findings."""

    def test_samples_are_clean(self, sample_source):
        descriptor, diagnostics = parse_source(sample_source)
        assert diagnostics == []
        assert validate_descriptor(descriptor) == []

    def test_validation_is_idempotent(self, star_source):
        descriptor, _ = parse_source(star_source.replace('id: "pickup"', 'id: "script"'))
        validator = DescriptorValidator()
        assert validator.validate(descriptor) == validator.validate(descriptor)


class TestUniqueIdRule:

    def test_duplicate_component_ids(self):
        source = (
            'components {\n  id: "sprite"\n  component: "/main/a.script"\n}\n'
            'components {\n  id: "sprite"\n  component: "/main/b.script"\n}\n'
        )
        findings = UniqueIdRule().check(create_context(source))

        assert codes(findings) == [DiagnosticCode.UNIQUENESS_DUPLICATE_ID]
        finding = findings[0]
        assert finding.severity is Severity.ERROR
        assert finding.span.line == 6
        assert [span.line for span in finding.related] == [2]

    def test_three_way_duplicate_is_one_finding(self):
        block = 'components { id: "x" component: "/main/a.script" }\n'
        findings = UniqueIdRule().check(create_context(block * 3))
        assert len(findings) == 1
        assert len(findings[0].related) == 2

    def test_ids_shared_across_block_types(self):
        source = 'components { id: "a" component: "/main/a.script" }\n' + embedded("factory", 'prototype: "/p.go"', "a")
        assert len(UniqueIdRule().check(create_context(source))) == 1


class TestKnownKindRule:

    def test_unknown_kind(self):
        source = embedded("widget", "size: 1") + 'components { id: "s" component: "/main/a.script" }\n'
        findings = KnownKindRule().check(create_context(source))

        assert codes(findings) == [DiagnosticCode.SCHEMA_UNKNOWN_KIND]
        assert "widget" in findings[0].message
        assert findings[0].span.line == 3

    def test_suggestion_for_misspelled_kind(self):
        findings = KnownKindRule().check(create_context(embedded("spirte", "")))
        assert findings[0].hint == "Did you mean 'sprite'?"


class TestAttributeSchemaRule:

    def test_missing_required_attribute(self):
        findings = AttributeSchemaRule().check(create_context(embedded("factory", "")))
        assert codes(findings) == [DiagnosticCode.SCHEMA_MISSING_FIELD]
        assert "prototype" in findings[0].message

    def test_wrong_type(self):
        findings = AttributeSchemaRule().check(create_context(embedded("factory", "prototype: 3")))
        assert codes(findings) == [DiagnosticCode.SCHEMA_WRONG_TYPE]

    def test_integer_count(self):
        payload = COLLISION.replace("count: 3", "count: 3.5")
        findings = AttributeSchemaRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_WRONG_TYPE]

    def test_not_repeatable(self):
        findings = AttributeSchemaRule().check(
            create_context(embedded("factory", 'prototype: "/a.go"\nprototype: "/b.go"'))
        )
        assert codes(findings) == [DiagnosticCode.SCHEMA_NOT_REPEATABLE]
        assert findings[0].related

    def test_closed_enum(self):
        payload = COLLISION.replace("COLLISION_OBJECT_TYPE_STATIC", "COLLISION_OBJECT_TYPE_STATC")
        findings = AttributeSchemaRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_INVALID_VALUE]
        assert findings[0].hint == "Did you mean 'COLLISION_OBJECT_TYPE_STATIC'?"

    def test_nested_required_attribute(self):
        payload = COLLISION.replace("    count: 3\n", "")
        findings = AttributeSchemaRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_MISSING_FIELD]
        assert "count" in findings[0].message

    def test_missing_collision_type(self):
        payload = COLLISION.replace("type: COLLISION_OBJECT_TYPE_STATIC\n", "")
        findings = AttributeSchemaRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_MISSING_FIELD]

    def test_unknown_kind_is_skipped(self):
        assert AttributeSchemaRule().check(create_context(embedded("widget", "a: 1"))) == []


class TestResourcePathRule:

    @pytest.mark.parametrize("path", ["main/a.script", "/", "/main//a.script", "/main/a.script/", ""])
    def test_malformed_component_path(self, path):
        source = f'components {{ id: "a" component: "{path}" }}'
        findings = ResourcePathRule().check(create_context(source))
        assert codes(findings) == [DiagnosticCode.REFERENCE_MALFORMED_PATH]

    def test_payload_paths(self):
        payload = 'material: "builtins/sprite.material"\ntextures {\n  sampler: "s"\n  texture: "/a//b.atlas"\n}\n'
        findings = ResourcePathRule().check(create_context(embedded("sprite", payload)))
        assert len(findings) == 2
        assert all(f.code is DiagnosticCode.REFERENCE_MALFORMED_PATH for f in findings)

    def test_plain_strings_are_not_paths(self):
        payload = 'default_animation: "not a path"\ntextures {\n  sampler: "texture_sampler"\n  texture: "/a.atlas"\n}\n'
        assert ResourcePathRule().check(create_context(embedded("sprite", payload))) == []


class TestSuffixRules:

    def test_factory_prototype_suffix(self):
        findings = FactoryPrototypeRule().check(
            create_context(embedded("factory", 'prototype: "/main/enemy.collection"'))
        )
        assert codes(findings) == [DiagnosticCode.REFERENCE_SUFFIX_MISMATCH]
        assert "'.go'" in findings[0].message

    def test_collection_proxy_suffix(self):
        findings = CollectionProxyRule().check(
            create_context(embedded("collectionproxy", 'collection: "/main/level.go"'))
        )
        assert codes(findings) == [DiagnosticCode.REFERENCE_SUFFIX_MISMATCH]

    def test_malformed_paths_are_left_to_the_path_rule(self):
        assert FactoryPrototypeRule().check(create_context(embedded("factory", 'prototype: "enemy.txt"'))) == []

    def test_suffix_follows_settings(self):
        settings = ValidatorSettings(descriptor_suffix=".gameobject")
        context = create_context(embedded("factory", 'prototype: "/main/enemy.go"'), settings)
        assert codes(FactoryPrototypeRule().check(context)) == [DiagnosticCode.REFERENCE_SUFFIX_MISMATCH]

    def test_suffix_rule_requires_expected_suffix(self):
        from godesc.validator.builtin_rules import _SuffixRule

        class SpriteMaterialRule(_SuffixRule):
            kind = ComponentKind.SPRITE
            attribute = "material"

        with pytest.raises(TypeError):
            SpriteMaterialRule(rule_id="sprite-material", description="Sprite material paths")


class TestComponentResourceRule:

    def test_unknown_suffix_warns(self):
        findings = ComponentResourceRule().check(
            create_context('components { id: "a" component: "/main/readme.txt" }')
        )
        assert codes(findings) == [DiagnosticCode.WARN_UNKNOWN_COMPONENT_TYPE]
        assert findings[0].severity is Severity.WARNING

    def test_known_suffixes(self):
        source = (
            'components { id: "a" component: "/main/a.script" }\n'
            'components { id: "b" component: "/main/b.particlefx" }\n'
            'components { id: "c" component: "/main/c.sound" }\n'
        )
        assert ComponentResourceRule().check(create_context(source)) == []


class TestSpriteTexturesRule:

    def test_sprite_without_textures(self):
        findings = SpriteTexturesRule().check(create_context(embedded("sprite", 'default_animation: "idle"')))
        assert codes(findings) == [DiagnosticCode.SCHEMA_MISSING_FIELD]

    def test_texture_block_missing_sampler(self):
        payload = 'textures {\n  texture: "/main/a.atlas"\n}\n'
        findings = SpriteTexturesRule().check(create_context(embedded("sprite", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_MISSING_FIELD]
        assert "'sampler'" in findings[0].message


class TestCollisionShapeRule:

    def test_consistent_shape(self):
        assert CollisionShapeRule().check(create_context(embedded("collisionobject", COLLISION))) == []

    def test_missing_data_entry(self):
        payload = COLLISION.replace("  data: 1.0\n", "")
        findings = CollisionShapeRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_SHAPE_DATA_MISMATCH]
        assert "2 data value(s)" in findings[0].message

    def test_counts_are_summed(self):
        payload = COLLISION.replace(
            "  data: 10.0\n",
            "  shapes {\n    shape_type: TYPE_SPHERE\n    count: 1\n  }\n  data: 10.0\n  data: 5.0\n",
        )
        assert CollisionShapeRule().check(create_context(embedded("collisionobject", payload))) == []

    def test_count_below_one(self):
        payload = COLLISION.replace("count: 3", "count: 0")
        findings = CollisionShapeRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_INVALID_VALUE]

    def test_no_shapes(self):
        payload = "type: COLLISION_OBJECT_TYPE_STATIC\nembedded_collision_shape {\n}\n"
        findings = CollisionShapeRule().check(create_context(embedded("collisionobject", payload)))
        assert codes(findings) == [DiagnosticCode.SCHEMA_MISSING_FIELD]


class TestDescriptorValidator:

    def test_default_rule_ids(self):
        assert [rule.rule_id for rule in get_default_rules()] == [
            "unique-id",
            "known-kind",
            "attribute-schema",
            "resource-path",
            "factory-prototype",
            "collection-proxy",
            "component-resource",
            "sprite-textures",
            "collision-shape",
        ]

    def test_disabled_rules_are_skipped(self):
        descriptor, _ = parse_source('components { id: "a" component: "/main/readme.txt" }')
        settings = ValidatorSettings(disabled_rules=("component-resource",))
        assert DescriptorValidator(settings=settings).validate(descriptor) == []
        assert len(DescriptorValidator().validate(descriptor)) == 1

    def test_findings_are_sorted(self):
        source = embedded("widget", "") + 'components { id: "widget" component: "nope" }\n'
        descriptor, _ = parse_source(source)
        diagnostics = validate_descriptor(descriptor)
        lines = [d.span.line for d in diagnostics]
        assert lines == sorted(lines)
