"""Core formatting infrastructure for descriptor printing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union
import math

from godesc.ast import (
    IDENTITY,
    AttributeTree,
    Block,
    Component,
    Descriptor,
    EmbeddedComponent,
    Scalar,
    Transform,
    ValueType,
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


@dataclass
class FormattingOptions:
    """Configuration options for descriptor printing."""

    # The engine writes two-space indentation, both outside and inside payloads.
    indent_size: int = 2
    insert_final_newline: bool = True


def quote(text: str) -> str:
    """Quote a string the way the lexer reads it back."""
    return '"' + "".join(_ESCAPES.get(char, char) for char in text) + '"'


def format_number(value: Union[int, float]) -> str:
    """
    Number text in engine notation.

    Floats use the shortest round-tripping digits. Magnitudes below 1e-3 or
    from 1e7 up are written as ``d.dddE-n``, e.g. ``1.0E-6``.
    """
    if not isinstance(value, float):
        return str(value)
    if value == 0 or not math.isfinite(value) or 1e-3 <= abs(value) < 1e7:
        return repr(value)
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    power = len(digits) - 1 + exponent
    return f"{'-' if sign else ''}{text[0]}.{text[1:] or '0'}E{power}"


def format_scalar(scalar: Scalar) -> str:
    if scalar.type is ValueType.STRING:
        return quote(str(scalar.value))
    if scalar.type is ValueType.BOOLEAN:
        return "true" if scalar.value else "false"
    if scalar.type is ValueType.NUMBER:
        return format_number(scalar.value)
    return str(scalar.value)


class DescriptorFormatter:
    """
    Golden printer for descriptors.

    The output is canonical: parsing it yields a descriptor equal to the one
    printed. Payloads are written one quoted line per payload line followed by
    an empty ``""``, and transforms list only the axes that differ from their
    defaults, which is how the engine itself writes descriptor files.
    """

    def __init__(self, options: Optional[FormattingOptions] = None):
        self.options = options or FormattingOptions()
        self._indent_str = " " * self.options.indent_size

    def format(self, descriptor: Descriptor) -> str:
        lines: List[str] = []
        for block in descriptor:
            lines.extend(self.format_block(block))
        text = "\n".join(lines)
        if lines and self.options.insert_final_newline:
            text += "\n"
        return text

    def format_block(self, block: Block) -> List[str]:
        if isinstance(block, Component):
            return self._format_component(block)
        return self._format_embedded(block)

    def _format_component(self, component: Component) -> List[str]:
        indent = self._indent_str
        lines = [
            "components {",
            f"{indent}id: {quote(component.id)}",
            f"{indent}component: {quote(component.component_path)}",
        ]
        lines.extend(self._format_transform(component.transform, 1))
        lines.append("}")
        return lines

    def _format_embedded(self, component: EmbeddedComponent) -> List[str]:
        indent = self._indent_str
        lines = [
            "embedded_components {",
            f"{indent}id: {quote(component.id)}",
            f"{indent}type: {quote(component.kind)}",
        ]
        payload_lines = self.format_payload(component.data)
        if payload_lines:
            quoted = [quote(line + "\n") for line in payload_lines]
            lines.append(f"{indent}data: {quoted[0]}")
            lines.extend(f"{indent}{line}" for line in quoted[1:])
            lines.append(f'{indent}""')
        else:
            lines.append(f'{indent}data: ""')
        lines.extend(self._format_transform(component.transform, 1))
        lines.append("}")
        return lines

    def format_payload(self, tree: AttributeTree, depth: int = 0) -> List[str]:
        """Payload text as unquoted lines."""
        indent = self._indent_str * depth
        lines: List[str] = []
        for attribute in tree:
            if isinstance(attribute.value, AttributeTree):
                lines.append(f"{indent}{attribute.name} {{")
                lines.extend(self.format_payload(attribute.value, depth + 1))
                lines.append(f"{indent}}}")
            else:
                lines.append(f"{indent}{attribute.name}: {format_scalar(attribute.value)}")
        return lines

    def _format_transform(self, transform: Optional[Transform], depth: int) -> List[str]:
        if transform is None:
            return []
        if transform.is_identity:
            # An explicit identity transform still has to read back as one.
            indent = self._indent_str * depth
            return [f"{indent}position {{", f"{indent}}}"]
        lines: List[str] = []
        lines.extend(self._format_axes("position", transform.position, IDENTITY.position, depth))
        lines.extend(self._format_axes("rotation", transform.rotation, IDENTITY.rotation, depth))
        lines.extend(self._format_axes("scale", transform.scale, IDENTITY.scale, depth))
        return lines

    def _format_axes(self, name: str, value, default, depth: int) -> List[str]:
        if value == default:
            return []
        indent = self._indent_str * depth
        inner = self._indent_str * (depth + 1)
        lines = [f"{indent}{name} {{"]
        for axis in ("x", "y", "z", "w"):
            if not hasattr(value, axis):
                continue
            current = getattr(value, axis)
            if current != getattr(default, axis):
                lines.append(f"{inner}{axis}: {format_number(current)}")
        lines.append(f"{indent}}}")
        return lines


def format_descriptor(descriptor: Descriptor, options: Optional[FormattingOptions] = None) -> str:
    """Print a descriptor in canonical form."""
    return DescriptorFormatter(options).format(descriptor)


__all__ = [
    "FormattingOptions",
    "DescriptorFormatter",
    "format_descriptor",
    "format_scalar",
    "quote",
]
