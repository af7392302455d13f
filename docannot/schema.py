"""
Declared shape of annotation types.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from .errors import AnnotationError
from .targets import Placement
from .types import Mixed, TypeDescriptor


class _Missing:
    """Marker for an attribute without a default value."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

Accessor = Callable[[Any, Any], None]


@dataclass
class AttributeSpec:
    """
    Contract of a single annotation attribute.

    Attributes:
        name: Attribute name as written in tag arguments
        type: Descriptor the supplied value must match
        required: Whether the attribute must be supplied
        nullable: Whether None skips type checking
        setter: Method that receives the value instead of a field write
        default: Value used for constructor parameters that were not supplied
    """
    name: str
    type: TypeDescriptor = field(default_factory=Mixed)
    required: bool = False
    nullable: bool = False
    setter: Optional[str] = None
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


@dataclass
class AnnotationSchema:
    """
    Resolved schema of one annotation type.

    `constructor_params` lists attribute names in constructor order, or is
    None when the type is built without arguments. `accessors` is compiled
    once per type and excluded from equality.
    """
    default_attribute: Optional[str] = None
    targets: Placement = Placement.CLASS
    constructor_params: Optional[List[str]] = None
    attributes: Dict[str, AttributeSpec] = field(default_factory=dict)
    parent: Optional[str] = None
    accessors: Dict[str, Accessor] = field(default_factory=dict, compare=False, repr=False)

    def clone(self) -> "AnnotationSchema":
        """Copy that can be extended without touching this schema."""
        return AnnotationSchema(
            default_attribute=self.default_attribute,
            targets=self.targets,
            constructor_params=list(self.constructor_params) if self.constructor_params is not None else None,
            attributes={name: replace(spec) for name, spec in self.attributes.items()},
            parent=self.parent,
        )

    def required_attributes(self) -> List[str]:
        return [name for name, spec in self.attributes.items() if spec.required]

    def validate(self, type_id: str) -> None:
        """
        Checks internal consistency.

        Raises:
            AnnotationError: If a constructor parameter or the default
                attribute names no declared attribute
        """
        for name in self.constructor_params or ():
            if name not in self.attributes:
                raise AnnotationError(
                    f"Constructor parameter {name} of {type_id} has no attribute declaration"
                )
        if self.default_attribute and self.default_attribute not in self.attributes:
            raise AnnotationError(
                f"Default attribute {self.default_attribute} of {type_id} is not declared"
            )

    def compile_accessors(self, cls: type, type_id: str) -> None:
        """
        Builds the setter-or-field table used to apply attribute values.

        Raises:
            AnnotationError: If a declared setter does not exist on the class
        """
        table: Dict[str, Accessor] = {}
        for name, spec in self.attributes.items():
            if spec.setter:
                method = getattr(cls, spec.setter, None)
                if not callable(method):
                    raise AnnotationError(
                        f"Setter {spec.setter} for attribute {name} does not exist in {type_id}"
                    )
                table[name] = _setter_accessor(method)
            else:
                table[name] = _field_accessor(name)
        self.accessors = table


def _setter_accessor(method: Callable[..., Any]) -> Accessor:
    def apply(obj: Any, value: Any) -> None:
        method(obj, value)
    return apply


def _field_accessor(name: str) -> Accessor:
    def apply(obj: Any, value: Any) -> None:
        setattr(obj, name, value)
    return apply


__all__ = ["MISSING", "AttributeSpec", "AnnotationSchema"]
