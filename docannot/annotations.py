"""
Built-in annotation types used to declare other annotation types.

    @Annotation
    @DefaultAttribute path
    @Attribute('path', type: 'string', required: true)
    @Attribute('methods', type: {'string'}, setter: 'set_methods')
    @Attribute('mode', type: @Enum({'sync', 'async'}))
    @Target({'method', 'function'})
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .schema import MISSING, AttributeSpec
from .targets import Placement
from .types import descriptor_from_declaration


class Attribute:
    """Declares one attribute of the annotation type it is placed on."""

    def __init__(self):
        self.name: str = ""
        self.type: Any = "mixed"
        self.setter: Optional[str] = None
        self.nullable: bool = False
        self.required: bool = False
        self.default: Any = MISSING

    def to_spec(self, resolve_class: Optional[Callable[[str], str]] = None) -> AttributeSpec:
        return AttributeSpec(
            name=self.name,
            type=descriptor_from_declaration(self.type, resolve_class),
            required=bool(self.required),
            nullable=bool(self.nullable),
            setter=self.setter,
            default=self.default,
        )

    def __repr__(self) -> str:
        return f"Attribute({self.name!r}, type={self.type!r})"


class Enum:
    """Restricts an attribute to a fixed set of values: `type: @Enum({'a', 'b'})`."""

    def __init__(self):
        self.values: list = []

    def __repr__(self) -> str:
        return f"Enum({self.values!r})"


class Target:
    """Allowed placements of the annotation type: `@Target({'class', 'method'})`."""

    def __init__(self, target):
        self.target = Placement.parse(target)

    def __repr__(self) -> str:
        return f"Target({self.target.describe()})"


__all__ = ["Attribute", "Enum", "Target"]
