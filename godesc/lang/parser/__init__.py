"""Descriptor parser package.

Public API:
    parse_source(source, path) -> (Descriptor, diagnostics)
    parse_raw(source, path) -> (RawDocument, diagnostics)
    parse_payload_text(text, kind) -> AttributeTree
    DescriptorParser - the shared parser with descriptor and payload entry points

These functions parse and build only; :func:`godesc.parse_descriptor` also
runs the validator.
"""

from typing import List, Optional, Tuple

from godesc.ast import Descriptor, RawDocument
from godesc.diagnostics import Diagnostic, DiagnosticBag

from .declarations import DescriptorBuilder, build_descriptor
from .parse import DescriptorParser
from .payload import PayloadTyper, parse_payload, parse_payload_text


def parse_raw(source: str, path: Optional[str] = None) -> Tuple[RawDocument, List[Diagnostic]]:
    """Parse descriptor text into untyped top-level blocks."""
    diagnostics = DiagnosticBag(path=path)
    document = DescriptorParser(source, path=path, diagnostics=diagnostics).parse()
    return document, diagnostics.sorted()


def parse_source(source: str, path: Optional[str] = None) -> Tuple[Descriptor, List[Diagnostic]]:
    """
    Parse descriptor text into a typed :class:`Descriptor`.

    Never raises for malformed input. When errors are reported the
    descriptor holds only the blocks that could be built.

    Example:
        ```python
        descriptor, diagnostics = parse_source('''
        components {
          id: "script"
          component: "/main/player.script"
        }
        ''')
        print(descriptor.components[0].component_path)  # /main/player.script
        ```
    """
    diagnostics = DiagnosticBag(path=path)
    document = DescriptorParser(source, path=path, diagnostics=diagnostics).parse()
    descriptor = build_descriptor(document, diagnostics, path=path)
    return descriptor, diagnostics.sorted()


__all__ = [
    "parse_source",
    "parse_raw",
    "parse_payload",
    "parse_payload_text",
    "DescriptorParser",
    "DescriptorBuilder",
    "PayloadTyper",
    "build_descriptor",
]
