"""Parse-and-validate entry point."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union
import codecs
import logging

from godesc.ast import Descriptor, SourceSpan
from godesc.config import DEFAULT_SETTINGS, ValidatorSettings
from godesc.diagnostics import Diagnostic, DiagnosticCode, Severity, sort_diagnostics
from godesc.lang.parser import parse_source
from godesc.validator import DescriptorValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """
    Descriptor and diagnostics of one parse.

    The descriptor may be partial when errors were reported; check
    :attr:`ok` before handing it to anything that executes it. A result
    unpacks as ``descriptor, diagnostics``.
    """
    descriptor: Descriptor
    diagnostics: Tuple[Diagnostic, ...] = ()
    warnings_as_errors: bool = field(default=False, compare=False)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def ok(self) -> bool:
        if self.warnings_as_errors:
            return not self.diagnostics
        return not self.errors

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def __iter__(self) -> Iterator:
        return iter((self.descriptor, list(self.diagnostics)))


def decode_source(data: bytes, path: Optional[str] = None) -> Tuple[Optional[str], Optional[Diagnostic]]:
    """
    Decode descriptor bytes as UTF-8, dropping a leading byte order mark.

    Returns the text, or None and an encoding diagnostic located at the
    first undecodable byte.
    """
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
    try:
        return data.decode("utf-8"), None
    except UnicodeDecodeError as exc:
        line = data.count(b"\n", 0, exc.start) + 1
        line_start = data.rfind(b"\n", 0, exc.start) + 1
        column = exc.start - line_start + 1
        span = SourceSpan(line, column, line, column + 1, path)
        diagnostic = Diagnostic(
            code=DiagnosticCode.LEX_INVALID_ENCODING,
            message=f"Descriptor is not valid UTF-8: {exc.reason}",
            span=span,
        )
        return None, diagnostic


def parse_descriptor(
    data: Union[bytes, bytearray, memoryview, str],
    *,
    path: Optional[str] = None,
    settings: Optional[ValidatorSettings] = None,
    validate: bool = True,
) -> ParseResult:
    """
    Parse, build and validate one descriptor.

    Never raises for malformed input: every problem is reported as a
    diagnostic.

    Args:
        data: Descriptor file contents
        path: File name carried by diagnostic spans
        settings: Validator settings (defaults when omitted)
        validate: Run the validator after building

    Returns:
        ParseResult with the (possibly partial) descriptor and all
        diagnostics ordered by source position

    Example:
        ```python
        descriptor, diagnostics = parse_descriptor(Path("hero.go").read_bytes(), path="hero.go")
        ```
    """
    settings = settings or DEFAULT_SETTINGS
    if isinstance(data, (bytes, bytearray, memoryview)):
        text, encoding_error = decode_source(bytes(data), path)
        if text is None:
            return ParseResult(
                descriptor=Descriptor(path=path),
                diagnostics=(encoding_error,),
                warnings_as_errors=settings.warnings_as_errors,
            )
    else:
        text = data.lstrip("\ufeff")

    descriptor, diagnostics = parse_source(text, path=path)
    if validate:
        diagnostics = sort_diagnostics(diagnostics + DescriptorValidator(settings=settings).validate(descriptor))
    logger.debug(
        "Parsed %s: %d block(s), %d diagnostic(s)",
        path or "<descriptor>", len(descriptor), len(diagnostics),
    )
    return ParseResult(
        descriptor=descriptor,
        diagnostics=tuple(diagnostics),
        warnings_as_errors=settings.warnings_as_errors,
    )


__all__ = ["ParseResult", "parse_descriptor", "decode_source"]
