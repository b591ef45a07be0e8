"""Tests for building typed descriptors from parsed blocks."""

from godesc.ast import Component, EmbeddedComponent, Quaternion, Transform, Vector3
from godesc.diagnostics import DiagnosticCode
from godesc.lang.parser import parse_source


def codes(diagnostics):
    return [d.code for d in diagnostics]


class TestBlocks:
    """Components and embedded components."""

    def test_sprite_with_scale(self, explosion_source):
        descriptor, diagnostics = parse_source(explosion_source)

        assert diagnostics == []
        assert len(descriptor.embedded_components) == 1
        sprite = descriptor.embedded_components[0]
        assert sprite.kind == "sprite"
        assert sprite.transform.scale == Vector3(0.5, 0.5, 1e-6)
        assert sprite.transform.position == Vector3()
        assert sprite.data.get("default_animation") == "explode"

    def test_factory_prototype(self, guy_source):
        descriptor, diagnostics = parse_source(guy_source)

        assert diagnostics == []
        factory = descriptor.find("projectile_factory")
        assert isinstance(factory, EmbeddedComponent)
        assert factory.kind == "factory"
        assert factory.data.get("prototype") == "/main/gameobjects/ghgameobjects/projectile.go"
        assert factory.transform is None

    def test_block_order_is_kept(self, star_source):
        descriptor, _ = parse_source(star_source)
        assert descriptor.ids == ["script", "pickup", "collisionobject", "sprite"]
        assert isinstance(descriptor.blocks[0], Component)
        assert descriptor.components[1].component_path == "/main/spaceShooterGame-main/stars/pickup.particlefx"

    def test_type_may_be_bare_identifier(self):
        descriptor, diagnostics = parse_source(
            'embedded_components { id: "f" type: factory data: "prototype: \\"/p.go\\"" }'
        )
        assert diagnostics == []
        assert descriptor.blocks[0].kind == "factory"

    def test_unknown_kind_is_kept(self):
        descriptor, diagnostics = parse_source('embedded_components { id: "w" type: "widget" data: "size: 3" }')
        assert diagnostics == []
        widget = descriptor.blocks[0]
        assert widget.kind == "widget"
        assert widget.component_kind is None
        assert widget.data.get("size") == 3

    def test_missing_data_is_empty_payload(self):
        descriptor, _ = parse_source('embedded_components { id: "f" type: "factory" }')
        assert len(descriptor.blocks[0].data) == 0


class TestTransforms:
    """Outer position/rotation/scale blocks."""

    def test_defaults_fill_missing_axes(self):
        descriptor, diagnostics = parse_source(
            'embedded_components { id: "s" type: "sprite" position { y: -40.0 } rotation { z: 0.7 w: 0.7 } }'
        )
        assert diagnostics == []
        transform = descriptor.blocks[0].transform
        assert transform == Transform(
            position=Vector3(0.0, -40.0, 0.0),
            rotation=Quaternion(0.0, 0.0, 0.7, 0.7),
        )
        assert transform.scale == Vector3(1.0, 1.0, 1.0)

    def test_integer_axes_become_floats(self):
        descriptor, _ = parse_source('embedded_components { id: "s" type: "sprite" position { x: 3 } }')
        assert isinstance(descriptor.blocks[0].transform.position.x, float)

    def test_empty_transform_block_is_identity(self):
        descriptor, _ = parse_source('embedded_components { id: "s" type: "sprite" position { } }')
        assert descriptor.blocks[0].transform.is_identity

    def test_component_position(self):
        descriptor, diagnostics = parse_source(
            'components { id: "fx" component: "/main/a.particlefx" position { z: 0.5 } }'
        )
        assert diagnostics == []
        assert descriptor.blocks[0].transform.position.z == 0.5

    def test_component_scale_is_ignored(self):
        descriptor, diagnostics = parse_source(
            'components { id: "fx" component: "/main/a.particlefx" scale { x: 2 } }'
        )
        assert codes(diagnostics) == [DiagnosticCode.WARN_UNKNOWN_FIELD]
        assert descriptor.blocks[0].transform is None

    def test_unknown_axis(self):
        _, diagnostics = parse_source('embedded_components { id: "s" type: "sprite" scale { q: 2 } }')
        assert codes(diagnostics) == [DiagnosticCode.WARN_UNKNOWN_FIELD]

    def test_non_numeric_axis(self):
        _, diagnostics = parse_source('embedded_components { id: "s" type: "sprite" scale { x: "big" } }')
        assert codes(diagnostics) == [DiagnosticCode.SCHEMA_WRONG_TYPE]

    def test_repeated_axis(self):
        _, diagnostics = parse_source('embedded_components { id: "s" type: "sprite" scale { x: 1 x: 2 } }')
        assert codes(diagnostics) == [DiagnosticCode.SCHEMA_NOT_REPEATABLE]


class TestOuterSchema:
    """Missing, mistyped and unexpected outer fields."""

    def test_missing_id_drops_block(self):
        descriptor, diagnostics = parse_source('components { component: "/main/a.script" }')
        assert codes(diagnostics) == [DiagnosticCode.SCHEMA_MISSING_FIELD]
        assert "'id'" in diagnostics[0].message
        assert len(descriptor) == 0

    def test_missing_type_names_the_block(self):
        _, diagnostics = parse_source('embedded_components { id: "thing" }')
        assert codes(diagnostics) == [DiagnosticCode.SCHEMA_MISSING_FIELD]
        assert "embedded_components 'thing'" in diagnostics[0].message

    def test_id_must_be_a_string(self):
        _, diagnostics = parse_source('components { id: 7 component: "/main/a.script" }')
        assert codes(diagnostics) == [DiagnosticCode.SCHEMA_WRONG_TYPE]

    def test_repeated_field(self):
        descriptor, diagnostics = parse_source(
            'components { id: "a" id: "b" component: "/main/a.script" }'
        )
        assert codes(diagnostics) == [DiagnosticCode.SCHEMA_NOT_REPEATABLE]
        assert diagnostics[0].related
        assert descriptor.blocks[0].id == "a"

    def test_unknown_field_warns_and_keeps_block(self):
        descriptor, diagnostics = parse_source(
            'components { id: "a" componnet: "/x" component: "/main/a.script" }'
        )
        assert codes(diagnostics) == [DiagnosticCode.WARN_UNKNOWN_FIELD]
        assert diagnostics[0].hint == "Did you mean 'component'?"
        assert descriptor.ids == ["a"]

    def test_unknown_top_level_block(self):
        descriptor, diagnostics = parse_source('componets { id: "a" }')
        assert codes(diagnostics) == [DiagnosticCode.WARN_UNKNOWN_FIELD]
        assert diagnostics[0].hint == "Did you mean 'components'?"
        assert len(descriptor) == 0

    def test_top_level_transform(self):
        _, diagnostics = parse_source("position { x: 1 }")
        assert codes(diagnostics) == [DiagnosticCode.WARN_UNKNOWN_FIELD]
        assert "outside of a component" in diagnostics[0].message
