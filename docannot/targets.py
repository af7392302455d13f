"""
Placement targets of annotation types.
"""

from __future__ import annotations

import enum
from typing import Iterable, Union

from .errors import AnnotationError


class Placement(enum.IntFlag):
    """
    Program elements an annotation may be attached to.

    An annotation type declares a mask; containment is tested with a
    bitwise AND because a type may allow several placements.
    """

    CLASS = 1
    METHOD = 2
    PROPERTY = 4
    FUNCTION = 8
    ANNOTATION = 16
    ALL = 31

    @classmethod
    def parse(cls, value: Union[str, "Placement", int, Iterable]) -> "Placement":
        """
        Builds a mask from a name, a list of names or an existing mask.

        Raises:
            AnnotationError: On an unknown target name
        """
        if isinstance(value, (Placement, int)) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().upper()
            if key not in cls.__members__:
                raise AnnotationError(f"Invalid target: {value}")
            return cls[key]
        if isinstance(value, bool) or not hasattr(value, "__iter__"):
            raise AnnotationError(f"Invalid target: {value!r}")
        mask = cls(0)
        for item in value:
            mask |= cls.parse(item)
        return mask

    @staticmethod
    def allows(mask: "Placement", placement: "Placement") -> bool:
        return bool(mask & placement)

    def describe(self) -> str:
        if self is Placement.ALL:
            return "all"
        names = [m.name.lower() for m in Placement if m is not Placement.ALL and m & self]
        return "|".join(names) or "none"


__all__ = ["Placement"]
