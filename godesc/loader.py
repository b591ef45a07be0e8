"""Utilities for loading descriptor files and whole project trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union
import logging

from godesc.ast import ComponentKind, Descriptor, Scalar, SourceSpan, ValueType
from godesc.config import ValidatorSettings, load_settings
from godesc.core import ParseResult, parse_descriptor
from godesc.diagnostics import Diagnostic, DiagnosticCode, Severity, sort_diagnostics
from godesc.lang.catalog import is_valid_resource_path

logger = logging.getLogger(__name__)

PathType = Union[str, "PathLike[str]"]


def parse_file(path: PathType, settings: Optional[ValidatorSettings] = None) -> ParseResult:
    """
    Read and parse one descriptor file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    source_path = Path(path)
    data = source_path.read_bytes()
    return parse_descriptor(data, path=str(source_path), settings=settings)


def resource_path_of(path: Path, root: Path) -> str:
    """Resource path of a file: '/' plus its POSIX path relative to ``root``."""
    return "/" + path.resolve().relative_to(root).as_posix()


def _discover_descriptor_files(root: Path, suffix: str) -> List[Path]:
    if root.is_file():
        return [root] if root.suffix == suffix else []
    return sorted(path for path in root.rglob(f"*{suffix}") if path.is_file())


@dataclass
class Project:
    """Every descriptor under a root, keyed by resource path."""
    root: Path
    settings: ValidatorSettings
    results: Dict[str, ParseResult] = field(default_factory=dict)
    # Cross-file findings; per-file findings live on each result.
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        if not all(result.ok for result in self.results.values()):
            return False
        if self.settings.warnings_as_errors:
            return not self.diagnostics
        return not any(d.severity is Severity.ERROR for d in self.diagnostics)

    def descriptor(self, resource_path: str) -> Optional[Descriptor]:
        result = self.results.get(resource_path)
        return result.descriptor if result is not None else None

    def prototypes_of(self, resource_path: str) -> List[str]:
        """Resource paths of the descriptors ``resource_path`` spawns through factories."""
        descriptor = self.descriptor(resource_path)
        if descriptor is None:
            raise KeyError(f"No descriptor loaded for '{resource_path}'")
        prototypes = []
        for component in descriptor.of_kind(ComponentKind.FACTORY):
            value = component.data.get("prototype")
            if isinstance(value, str) and value not in prototypes:
                prototypes.append(value)
        return prototypes

    def all_diagnostics(self) -> List[Diagnostic]:
        combined: List[Diagnostic] = list(self.diagnostics)
        for result in self.results.values():
            combined.extend(result.diagnostics)
        return combined


def _references(descriptor: Descriptor) -> Iterator[Tuple[str, str, Optional[SourceSpan]]]:
    """(what, resource path, span) of every resource a descriptor points at."""
    for component in descriptor.components:
        yield f"component '{component.id}'", component.component_path, component.path_span

    reference_attributes = {
        ComponentKind.FACTORY.value: ("prototype",),
        ComponentKind.COLLECTION_PROXY.value: ("collection",),
        ComponentKind.SPRITE.value: ("material",),
    }
    for component in descriptor.embedded_components:
        for name in reference_attributes.get(component.kind, ()):
            for attribute in component.data.get_all(name):
                if isinstance(attribute.value, Scalar) and attribute.value.type is ValueType.STRING:
                    yield f"{name} of '{component.id}'", attribute.value.value, attribute.value.span
        if component.kind == ComponentKind.SPRITE.value:
            for textures in component.data.get_all("textures"):
                if not textures.is_block:
                    continue
                for attribute in textures.value.get_all("texture"):
                    if isinstance(attribute.value, Scalar) and attribute.value.type is ValueType.STRING:
                        yield f"texture of '{component.id}'", attribute.value.value, attribute.value.span


def check_references(project: Project) -> List[Diagnostic]:
    """Report references to resources that do not exist under the project root."""
    findings: List[Diagnostic] = []
    builtins = project.settings.builtin_prefixes
    for result in project.results.values():
        for what, target, span in _references(result.descriptor):
            if not is_valid_resource_path(target) or target.startswith(builtins):
                continue
            if (project.root / target.lstrip("/")).exists():
                continue
            findings.append(Diagnostic(
                code=DiagnosticCode.REFERENCE_NOT_FOUND,
                message=f"{what} references '{target}', which does not exist under {project.root}",
                span=span,
            ))
    return sort_diagnostics(findings)


def load_project(root_path: PathType, settings: Optional[ValidatorSettings] = None) -> Project:
    """
    Parse and validate every descriptor under ``root_path``.

    Settings default to the ones found for ``root_path`` by
    :func:`godesc.config.load_settings`.

    Raises:
        FileNotFoundError: If ``root_path`` does not exist.
        ConfigurationError: If the project settings file is invalid.
    """
    root = Path(root_path).resolve()
    if not root.exists():
        raise FileNotFoundError(f"No project found at {root}")
    project_root = root if root.is_dir() else root.parent
    if settings is None:
        settings = load_settings(project_root)

    project = Project(root=project_root, settings=settings)
    for path in _discover_descriptor_files(root, settings.descriptor_suffix):
        resource_path = resource_path_of(path, project_root)
        project.results[resource_path] = parse_file(path, settings)
    logger.debug("Loaded %d descriptor(s) from %s", len(project.results), project_root)

    project.diagnostics = check_references(project)
    return project


__all__ = ["Project", "parse_file", "load_project", "check_references", "resource_path_of"]
