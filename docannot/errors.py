"""
Exceptions raised while parsing tag blocks and building annotation instances.

All expected errors that should be displayed to the user as clean messages
(without stack traces) inherit from AnnotationUserError. Programming errors
and bugs propagate with full tracebacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .tokens import Token


class AnnotationUserError(Exception):
    """
    Base class for all user-facing errors in docannot.

    These errors point at a defect in the parsed text or in an annotation
    declaration; retrying the same input always fails the same way.
    """
    pass


class AnnotationSyntaxError(AnnotationUserError):
    """Malformed tag syntax: unexpected token, unterminated list, bad key."""

    def __init__(self, message: str, token: Optional["Token"] = None):
        self.message = message
        self.token = token
        if token is not None:
            detail = f" at position {token.position}"
            if token.value:
                detail += f" near {token.value!r}"
            message = message + detail
        super().__init__(message)


class AnnotationError(AnnotationUserError):
    """Schema or semantic level error while building an annotation instance."""
    pass


class UnresolvedNameError(AnnotationError):
    """A bare identifier could not be resolved to a class or a constant."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Class {name} is not found")


@dataclass
class SchemaCycleError(AnnotationError):
    """Circular parent chain between annotation schemas."""
    cycle: List[str]

    def __str__(self) -> str:
        return f"Circular annotation inheritance: {' -> '.join(self.cycle)}"


class SchemaConfigError(AnnotationUserError):
    """Invalid schema declaration file or descriptor."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(prefix + message)


class TagNotFoundError(KeyError):
    """Requested plain tag is absent from a comment."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(tag)

    def __str__(self) -> str:
        return f"Comment does not have @{self.tag} annotation."


class AnnotationTypeNotFoundError(KeyError):
    """Requested annotation type has no instances in a comment."""

    def __init__(self, type_id: str):
        self.type_id = type_id
        super().__init__(type_id)

    def __str__(self) -> str:
        return f"Annotation not set with type {self.type_id}"


__all__ = [
    "AnnotationUserError",
    "AnnotationSyntaxError",
    "AnnotationError",
    "UnresolvedNameError",
    "SchemaCycleError",
    "SchemaConfigError",
    "TagNotFoundError",
    "AnnotationTypeNotFoundError",
]
