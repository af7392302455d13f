"""
Annotations in documentation blocks.

Parses `@Name(key: value)` tags from docstrings into typed annotation
objects, validated against schemas declared on the annotation classes
themselves or registered explicitly.
"""

from __future__ import annotations

from .annotations import Attribute, Enum, Target

from .comment import Comment

from .errors import (
    AnnotationUserError,
    AnnotationSyntaxError,
    AnnotationError,
    UnresolvedNameError,
    SchemaCycleError,
    SchemaConfigError,
    TagNotFoundError,
    AnnotationTypeNotFoundError,
)

from .names import NameResolver, get_documentation

from .parser import AnnotationParser

from .reader import AnnotationReader

from .registry import SchemaRegistry

from .builder import InstanceBuilder

from .schema import MISSING, AnnotationSchema, AttributeSpec

from .targets import Placement

from .values import TagList

from .version import tool_version

__all__ = [
    # Entry points
    "AnnotationReader",
    "AnnotationParser",
    "SchemaRegistry",
    "InstanceBuilder",
    "NameResolver",
    "get_documentation",
    # Data model
    "Comment",
    "TagList",
    "Placement",
    "AnnotationSchema",
    "AttributeSpec",
    "MISSING",
    # Built-in annotation types
    "Attribute",
    "Enum",
    "Target",
    # Errors
    "AnnotationUserError",
    "AnnotationSyntaxError",
    "AnnotationError",
    "UnresolvedNameError",
    "SchemaCycleError",
    "SchemaConfigError",
    "TagNotFoundError",
    "AnnotationTypeNotFoundError",
    "tool_version",
]
