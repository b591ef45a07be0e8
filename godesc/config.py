"""Validator settings.

Settings live either in a ``godesc.toml`` file or in the ``[tool.godesc]``
table of ``pyproject.toml``::

    [tool.godesc]
    descriptor_suffix = ".go"
    collection_suffix = ".collection"
    disabled_rules = ["component-resource"]
    warnings_as_errors = false

:func:`load_settings` looks for either file starting at a directory and
walking upward, the same way a project root is found.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore # Fallback

from godesc.errors import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_FILE = "godesc.toml"
PYPROJECT_FILE = "pyproject.toml"

DEFAULT_COMPONENT_SUFFIXES: Tuple[str, ...] = (
    ".script",
    ".gui_script",
    ".render_script",
    ".particlefx",
    ".sound",
    ".label",
    ".gui",
    ".tilemap",
    ".model",
    ".camera",
    ".collisionobject",
    ".sprite",
    ".factory",
    ".collectionfactory",
    ".collectionproxy",
    ".spinemodel",
    ".mesh",
)


class ValidatorSettings(BaseModel):
    """
    Project-defined knobs of the validator.

    Instances are immutable; use ``model_copy(update=...)`` to derive
    variants.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    descriptor_suffix: str = Field(
        default=".go",
        description="Suffix of game-object descriptor files spawned by factories",
    )
    collection_suffix: str = Field(
        default=".collection",
        description="Suffix of collection files loaded by collection proxies",
    )
    component_suffixes: Tuple[str, ...] = Field(
        default=DEFAULT_COMPONENT_SUFFIXES,
        description="Resource suffixes accepted for plain components",
    )
    builtin_prefixes: Tuple[str, ...] = Field(
        default=("/builtins/",),
        description="Resource prefixes supplied by the engine, never looked up on disk",
    )
    disabled_rules: Tuple[str, ...] = Field(
        default=(),
        description="Validator rule ids to skip",
    )
    warnings_as_errors: bool = Field(
        default=False,
        description="Treat warnings as failures in ParseResult.ok",
    )

    @field_validator("descriptor_suffix", "collection_suffix")
    @classmethod
    def _suffix_has_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError(f"suffix must start with '.', got {value!r}")
        return value

    @field_validator("component_suffixes")
    @classmethod
    def _suffixes_have_dot(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for suffix in value:
            if not suffix.startswith("."):
                raise ValueError(f"suffix must start with '.', got {suffix!r}")
        return value

    @field_validator("builtin_prefixes")
    @classmethod
    def _prefixes_are_absolute(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for prefix in value:
            if not prefix.startswith("/"):
                raise ValueError(f"prefix must start with '/', got {prefix!r}")
        return value

    def is_rule_enabled(self, rule_id: str) -> bool:
        return rule_id not in self.disabled_rules


DEFAULT_SETTINGS = ValidatorSettings()


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML: {exc}", path=str(path)) from exc


def settings_from_mapping(data: Dict[str, Any], *, source: Optional[str] = None) -> ValidatorSettings:
    """Validate a settings mapping, raising :class:`ConfigurationError` on bad values."""
    try:
        return ValidatorSettings.model_validate(data)
    except ValidationError as exc:
        problems: List[str] = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "<root>"
            problems.append(f"{location}: {error['msg']}")
        raise ConfigurationError("Invalid godesc settings: " + "; ".join(problems), path=source) from exc


def find_settings_file(start: Path) -> Optional[Path]:
    """
    Find the nearest settings file at or above ``start``.

    A ``godesc.toml`` wins over ``pyproject.toml`` in the same directory; a
    ``pyproject.toml`` only counts when it has a ``[tool.godesc]`` table.
    """
    current = start.resolve()
    if current.is_file():
        current = current.parent

    while True:
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILE
        if pyproject.is_file() and "godesc" in _read_toml(pyproject).get("tool", {}):
            return pyproject
        if current == current.parent:
            return None
        current = current.parent


def load_settings(start: Optional[Path] = None) -> ValidatorSettings:
    """
    Load settings for the project containing ``start`` (default: cwd).

    Returns the defaults when no settings file is found.

    Raises:
        ConfigurationError: If the file is not valid TOML or holds invalid values.
    """
    start = Path(start) if start is not None else Path.cwd()
    settings_path = find_settings_file(start)
    if settings_path is None:
        logger.debug("No settings file found from %s; using defaults", start)
        return DEFAULT_SETTINGS

    data = _read_toml(settings_path)
    if settings_path.name == PYPROJECT_FILE:
        data = data.get("tool", {}).get("godesc", {})
    logger.debug("Loaded settings from %s", settings_path)
    return settings_from_mapping(data, source=str(settings_path))


__all__ = [
    "ValidatorSettings",
    "DEFAULT_SETTINGS",
    "DEFAULT_COMPONENT_SUFFIXES",
    "load_settings",
    "find_settings_file",
    "settings_from_mapping",
]
