"""
Schema declaration files and package logging.

Annotation schemas can be declared in YAML instead of docstrings:

    myapp.annotations.Route:
      default_attribute: path
      targets: [method, function]
      constructor: [path]
      attributes:
        path: {type: string, required: true}
        methods: {type: [string]}

Each entry is validated with pydantic and turned into an AnnotationSchema.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import AnnotationError, SchemaConfigError
from .schema import MISSING, AnnotationSchema, AttributeSpec
from .targets import Placement
from .types import descriptor_from_declaration

DEBUG_ENV = "DOCANNOT_DEBUG"

_LOG = logging.getLogger("docannot")

_yaml = YAML(typ="safe")


def setup_logging() -> None:
    """Installs a single stream handler on the package logger (once)."""
    if getattr(setup_logging, "_inited", False):
        return
    setup_logging._inited = True  # type: ignore[attr-defined]
    level = logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.INFO
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


class AttributeDescriptor(BaseModel):
    """One attribute entry of a schema file."""
    model_config = ConfigDict(extra="forbid")

    type: Any = "mixed"
    required: bool = False
    nullable: bool = False
    setter: Optional[str] = None
    default: Any = None

    def to_spec(self, name: str, resolve_class: Optional[Callable[[str], str]] = None) -> AttributeSpec:
        try:
            descriptor = descriptor_from_declaration(self.type, resolve_class)
        except AnnotationError as e:
            raise SchemaConfigError(str(e), path=name) from e
        return AttributeSpec(
            name=name,
            type=descriptor,
            required=self.required,
            nullable=self.nullable,
            setter=self.setter,
            default=self.default if "default" in self.model_fields_set else MISSING,
        )


class SchemaDescriptor(BaseModel):
    """Schema of one annotation type as declared in a file or a mapping."""
    model_config = ConfigDict(extra="forbid")

    default_attribute: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("default_attribute", "defaultAttribute"),
    )
    targets: Union[str, List[str]] = Field(
        default="class",
        validation_alias=AliasChoices("targets", "target"),
    )
    constructor: Optional[List[str]] = None
    extends: Optional[str] = None
    attributes: Dict[str, AttributeDescriptor] = Field(default_factory=dict)

    @field_validator("targets")
    @classmethod
    def _known_targets(cls, value: Union[str, List[str]]) -> Union[str, List[str]]:
        try:
            Placement.parse(value)
        except AnnotationError as e:
            raise ValueError(str(e)) from e
        return value

    def to_schema(self, resolve_class: Optional[Callable[[str], str]] = None) -> AnnotationSchema:
        return AnnotationSchema(
            default_attribute=self.default_attribute,
            targets=Placement.parse(self.targets),
            constructor_params=list(self.constructor) if self.constructor is not None else None,
            attributes={
                name: attr.to_spec(name, resolve_class)
                for name, attr in self.attributes.items()
            },
            parent=self.extends,
        )


def parse_descriptor(raw: Any, path: str = "") -> SchemaDescriptor:
    """
    Validates a raw mapping into a SchemaDescriptor.

    Raises:
        SchemaConfigError: With the offending path on validation errors
    """
    if isinstance(raw, SchemaDescriptor):
        return raw
    if not isinstance(raw, dict):
        raise SchemaConfigError(f"expected mapping, got {type(raw).__name__}", path)
    try:
        return SchemaDescriptor.model_validate(raw)
    except ValidationError as e:
        raise SchemaConfigError(_format_validation_error(e), path) from e


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc}: {item.get('msg')}" if loc else str(item.get("msg")))
    return "; ".join(parts)


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file that must contain a mapping."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise SchemaConfigError(f"invalid YAML: {e}", str(path)) from e
    if not isinstance(raw, dict):
        raise SchemaConfigError("YAML must be a mapping", str(path))
    return raw


def load_schema_file(path: Union[str, Path]) -> Dict[str, SchemaDescriptor]:
    """
    Loads every schema declared in a YAML file.

    Returns:
        Mapping of type id to validated descriptor, in file order

    Raises:
        SchemaConfigError: On unreadable files or invalid entries
    """
    path = Path(path)
    if not path.is_file():
        raise SchemaConfigError("schema file not found", str(path))
    raw = _read_yaml_map(path)
    result: Dict[str, SchemaDescriptor] = {}
    for type_id, entry in raw.items():
        result[str(type_id)] = parse_descriptor(entry or {}, path=f"{path}:{type_id}")
    _LOG.debug("Loaded %d schema(s) from %s", len(result), path)
    return result


__all__ = [
    "DEBUG_ENV",
    "setup_logging",
    "AttributeDescriptor",
    "SchemaDescriptor",
    "parse_descriptor",
    "load_schema_file",
]
