"""
Game-object descriptor parser and validator.

A descriptor file declares one game object as a sequence of top-level
blocks: ``components`` that reference external scripts or effects, and
``embedded_components`` that carry an inline configuration payload. The
payload is a quoted string whose content uses the descriptor grammar
itself.

The code is organised into several modules:

* ``ast`` - frozen dataclasses for the parsed model (descriptor, blocks,
  transforms and typed attribute trees) plus the raw syntax tree.
* ``lang`` - the catalogs of legal block names, component kinds and
  attribute shapes, the lexer, and the shared recursive descent parser
  with its descriptor and payload entry points.
* ``validator`` - rule-based checks over a parsed descriptor.
* ``formatting`` - a printer that writes descriptors back the way the
  engine does.
* ``loader`` - file and project loading with cross-file reference checks.
* ``config`` - validator settings read from ``godesc.toml`` or
  ``pyproject.toml``.

Typical use::

    from godesc import parse_descriptor

    result = parse_descriptor(Path("hero.go").read_bytes(), path="hero.go")
    if not result.ok:
        for diagnostic in result.errors:
            print(diagnostic)
"""

from importlib import metadata as _metadata

from .ast import (
    Attribute,
    AttributeTree,
    Component,
    ComponentKind,
    Descriptor,
    EmbeddedComponent,
    Quaternion,
    Scalar,
    SourceSpan,
    Transform,
    ValueType,
    Vector3,
)
from .config import DEFAULT_SETTINGS, ValidatorSettings, load_settings
from .core import ParseResult, parse_descriptor
from .diagnostics import Diagnostic, DiagnosticCategory, DiagnosticCode, Severity
from .errors import ConfigurationError, DescriptorSyntaxError, GodescError
from .formatting import DescriptorFormatter, FormattingOptions, format_descriptor
from .loader import Project, load_project, parse_file
from .validator import DescriptorValidator, ValidationRule, validate_descriptor

try:  # pragma: no cover - metadata lookup for installed copies
    __version__ = _metadata.version("godesc")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    "parse_descriptor",
    "ParseResult",
    "parse_file",
    "load_project",
    "Project",
    "Descriptor",
    "Component",
    "EmbeddedComponent",
    "ComponentKind",
    "Transform",
    "Vector3",
    "Quaternion",
    "AttributeTree",
    "Attribute",
    "Scalar",
    "ValueType",
    "SourceSpan",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticCategory",
    "Severity",
    "GodescError",
    "DescriptorSyntaxError",
    "ConfigurationError",
    "ValidatorSettings",
    "DEFAULT_SETTINGS",
    "load_settings",
    "DescriptorValidator",
    "ValidationRule",
    "validate_descriptor",
    "DescriptorFormatter",
    "FormattingOptions",
    "format_descriptor",
]
