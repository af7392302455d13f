"""
Type descriptors of annotation attributes.

Descriptors are plain frozen dataclasses; docannot.checker validates values
against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from .errors import AnnotationError


@dataclass(frozen=True)
class Mixed:
    """Any value."""

    def __str__(self) -> str:
        return "mixed"


@dataclass(frozen=True)
class String:
    def __str__(self) -> str:
        return "string"


@dataclass(frozen=True)
class Number:
    """int, float or a numeric string."""

    def __str__(self) -> str:
        return "number"


@dataclass(frozen=True)
class Integer:
    def __str__(self) -> str:
        return "integer"


@dataclass(frozen=True)
class Float:
    def __str__(self) -> str:
        return "float"


@dataclass(frozen=True)
class Boolean:
    def __str__(self) -> str:
        return "boolean"


@dataclass(frozen=True)
class EnumOf:
    """Membership in a fixed set of scalar values (declaration order kept)."""
    values: Tuple[Any, ...]

    def __str__(self) -> str:
        return "enum(" + ", ".join(map(str, self.values)) + ")"


@dataclass(frozen=True)
class ClassRef:
    """Instance of the class behind a type id."""
    type_id: str

    def __str__(self) -> str:
        return self.type_id


@dataclass(frozen=True)
class TupleOf:
    """Fixed-length array; an empty tuple means any array, unchecked."""
    items: Tuple["TypeDescriptor", ...] = ()

    def __str__(self) -> str:
        return "{" + ", ".join(map(str, self.items)) + "}"


@dataclass(frozen=True)
class ListOf:
    """Array whose every element matches the same descriptor."""
    item: "TypeDescriptor"

    def __str__(self) -> str:
        return "{" + str(self.item) + "}"


TypeDescriptor = Union[Mixed, String, Number, Integer, Float, Boolean, EnumOf, ClassRef, TupleOf, ListOf]

KIND_NAMES = {
    "mixed": Mixed(),
    "any": Mixed(),
    "string": String(),
    "str": String(),
    "number": Number(),
    "int": Integer(),
    "integer": Integer(),
    "float": Float(),
    "bool": Boolean(),
    "boolean": Boolean(),
}

_PYTHON_KINDS = {
    str: String(),
    int: Integer(),
    float: Float(),
    bool: Boolean(),
    object: Mixed(),
}

_DESCRIPTOR_TYPES = (Mixed, String, Number, Integer, Float, Boolean, EnumOf, ClassRef, TupleOf, ListOf)


def descriptor_from_declaration(
    decl: Any,
    resolve_class: Optional[Callable[[str], str]] = None,
) -> TypeDescriptor:
    """
    Converts a declared attribute type into a descriptor.

    Accepted forms: a descriptor, None (mixed), a kind name, an @Enum
    instance (anything with a `values` sequence), a list or tuple of
    declarations, a Python class, or a class name resolved through
    resolve_class.
    """
    if isinstance(decl, _DESCRIPTOR_TYPES):
        return decl
    if decl is None:
        return Mixed()
    if isinstance(decl, str):
        kind = KIND_NAMES.get(decl.strip().lower())
        if kind is not None:
            return kind
        type_id = resolve_class(decl) if resolve_class else decl
        return ClassRef(type_id)
    if isinstance(decl, type):
        if decl in _PYTHON_KINDS:
            return _PYTHON_KINDS[decl]
        return ClassRef(f"{decl.__module__}.{decl.__qualname__}")
    values = getattr(decl, "values", None)
    if values is not None and not callable(values) and not isinstance(decl, (list, tuple)):
        return EnumOf(tuple(values))
    if hasattr(decl, "__iter__"):
        items = [descriptor_from_declaration(d, resolve_class) for d in decl]
        if len(items) == 1:
            return ListOf(items[0])
        return TupleOf(tuple(items))
    raise AnnotationError(f"Unsupported attribute type declaration: {decl!r}")


__all__ = [
    "Mixed",
    "String",
    "Number",
    "Integer",
    "Float",
    "Boolean",
    "EnumOf",
    "ClassRef",
    "TupleOf",
    "ListOf",
    "TypeDescriptor",
    "KIND_NAMES",
    "descriptor_from_declaration",
]
