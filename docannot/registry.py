"""
Schema registry for annotation types.

Resolves the schema of an annotation type with:
- Explicit registrations (built-in types, mappings, schema files)
- Docstring introspection of annotation classes
- Single-parent inheritance with cycle detection
- Compute-once caching guarded by a re-entrant lock
"""

from __future__ import annotations

import inspect
import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .annotations import Attribute, Enum, Target
from .comment import Comment
from .config import SchemaDescriptor, parse_descriptor
from .errors import AnnotationError, SchemaCycleError
from .names import NameResolver, scope_of, type_id_of
from .schema import AnnotationSchema, AttributeSpec
from .targets import Placement
from .types import Boolean, Mixed, String, TupleOf

logger = logging.getLogger(__name__)

CommentReader = Callable[[type], Comment]

TypeKey = Union[str, type]

Descriptor = Union[AnnotationSchema, SchemaDescriptor, Mapping[str, Any]]

# Docstring markers of annotation classes
ANNOTATION_MARKER = "Annotation"
DEFAULT_ATTRIBUTE_MARKER = "DefaultAttribute"
TARGET_MARKER = "Target"


def builtin_schemas() -> Dict[type, AnnotationSchema]:
    """Schemas of the types used to declare other annotation types."""
    return {
        Attribute: AnnotationSchema(
            default_attribute="name",
            targets=Placement.ANNOTATION | Placement.CLASS,
            attributes={
                "name": AttributeSpec("name", String(), required=True),
                "setter": AttributeSpec("setter", String(), nullable=True),
                "type": AttributeSpec("type", Mixed()),
                "nullable": AttributeSpec("nullable", Boolean()),
                "required": AttributeSpec("required", Boolean()),
                "default": AttributeSpec("default", Mixed()),
            },
        ),
        Enum: AnnotationSchema(
            default_attribute="values",
            targets=Placement.ANNOTATION,
            attributes={
                "values": AttributeSpec("values", TupleOf(), required=True),
            },
        ),
        Target: AnnotationSchema(
            default_attribute="target",
            targets=Placement.ANNOTATION | Placement.CLASS,
            constructor_params=["target"],
            attributes={
                "target": AttributeSpec("target", Mixed(), required=True),
            },
        ),
    }


class SchemaRegistry:
    """
    Registry of annotation schemas.

    Schemas come either from explicit registration or from the docstring
    of the annotation class itself:

        class Route:
            '''
            @Annotation
            @DefaultAttribute path
            @Attribute('path', type: 'string', required: true)
            @Target({'method', 'function'})
            '''

    Reading a class docstring requires a comment reader, which the
    AnnotationReader binds after the parser is wired.
    """

    def __init__(self, resolver: NameResolver, comment_reader: Optional[CommentReader] = None):
        self._resolver = resolver
        self.comment_reader = comment_reader
        self._declared: Dict[str, AnnotationSchema] = {}
        self._cache: Dict[str, AnnotationSchema] = {}
        self._resolution_stack: List[str] = []
        self._lock = threading.RLock()
        self._register_builtins()

    # -------------------- Registration --------------------

    def register_annotation(self, type_id: TypeKey, descriptor: Descriptor) -> str:
        """
        Stores an explicit schema for a type.

        Args:
            type_id: Type id or the annotation class itself
            descriptor: AnnotationSchema, SchemaDescriptor or a raw mapping

        Returns:
            Type id the schema was stored under

        Raises:
            SchemaConfigError: If a mapping does not validate
        """
        key = self._key(type_id)
        schema = self._to_schema(key, descriptor)
        with self._lock:
            self._declared[key] = schema
            self._cache.pop(key, None)
        logger.debug("Registered schema for %s", key)
        return key

    def is_registered(self, type_id: TypeKey) -> bool:
        key = self._key(type_id)
        with self._lock:
            return key in self._declared or key in self._cache

    def clear_cache(self) -> None:
        """Drops resolved schemas; explicit registrations are kept."""
        with self._lock:
            self._cache.clear()

    # -------------------- Resolution --------------------

    def resolve_schema(self, type_id: TypeKey) -> AnnotationSchema:
        """
        Resolves the schema of an annotation type, once.

        Raises:
            AnnotationError: If the class is not marked with @Annotation or
                its declarations are inconsistent
            SchemaCycleError: If the type is its own ancestor
            UnresolvedNameError: If the type cannot be loaded
        """
        key = self._key(type_id)
        with self._lock:
            return self._resolve(key, as_ancestor=False)

    def _resolve(self, key: str, as_ancestor: bool) -> AnnotationSchema:
        # Check cache
        if key in self._cache:
            logger.debug("Schema cache hit: %s", key)
            return self._cache[key]

        # Check for cycles
        if key in self._resolution_stack:
            cycle = self._resolution_stack[self._resolution_stack.index(key):] + [key]
            raise SchemaCycleError(cycle=cycle)

        self._resolution_stack.append(key)
        try:
            if key in self._declared:
                schema = self._resolve_declared(key, self._declared[key])
            else:
                schema, is_annotation = self._resolve_introspected(key, as_ancestor)
                if not is_annotation:
                    return schema
            logger.debug(
                "Resolved schema %s: attributes=%s, targets=%s",
                key, list(schema.attributes), schema.targets.describe(),
            )
            self._cache[key] = schema
            return schema
        finally:
            self._resolution_stack.pop()

    def _resolve_declared(self, key: str, declared: AnnotationSchema) -> AnnotationSchema:
        schema = declared.clone()
        if declared.parent:
            parent_key = self._resolver.resolve(declared.parent)
            schema = _merge_declared(self._resolve(parent_key, as_ancestor=True), schema)
            schema.parent = parent_key
        self._finish(key, schema)
        return schema

    def _resolve_introspected(self, key: str, as_ancestor: bool) -> Tuple[AnnotationSchema, bool]:
        cls = self._resolver.load(key)

        # Start with the parent's schema or an empty base
        parent_cls = _parent_of(cls)
        if parent_cls is not None:
            parent_key = self._resolver.remember(parent_cls)
            schema = self._resolve(parent_key, as_ancestor=True).clone()
            schema.parent = parent_key
        else:
            schema = AnnotationSchema(targets=Placement(0))

        comment = self._read_comment(cls)
        if not comment.has(ANNOTATION_MARKER):
            if as_ancestor:
                logger.debug("Ancestor %s is not an annotation; using accumulated base", key)
                return schema, False
            raise AnnotationError(f"Class {key} has not been marked with @{ANNOTATION_MARKER}")

        self._merge_attributes(schema, comment, cls)
        self._merge_targets(schema, comment)
        if comment.has(DEFAULT_ATTRIBUTE_MARKER):
            schema.default_attribute = _marker_word(comment, DEFAULT_ATTRIBUTE_MARKER)
        _merge_constructor(schema, cls)

        if not schema.targets:
            schema.targets = Placement.CLASS
        self._finish(key, schema)
        return schema, True

    def _finish(self, key: str, schema: AnnotationSchema) -> None:
        schema.validate(key)
        schema.compile_accessors(self._resolver.load(key), key)

    # -------------------- Docstring markers --------------------

    def _read_comment(self, cls: type) -> Comment:
        if self.comment_reader is None:
            raise AnnotationError(f"Cannot read annotation declarations of {type_id_of(cls)}")
        return self.comment_reader(cls)

    def _merge_attributes(self, schema: AnnotationSchema, comment: Comment, cls: type) -> None:
        if not comment.has_annotation_type(Attribute):
            return
        scope = scope_of(cls)

        def resolve_class(name: str) -> str:
            return self._resolver.resolve(name, scope)

        for attribute in comment.get_annotation_type(Attribute):
            schema.attributes[attribute.name] = attribute.to_spec(resolve_class)

    def _merge_targets(self, schema: AnnotationSchema, comment: Comment) -> None:
        own = Placement(0)
        if comment.has_annotation_type(Target):
            for target in comment.get_annotation_type(Target):
                own |= target.target
        if comment.has(TARGET_MARKER):
            value = comment.get(TARGET_MARKER)
            if value is True:
                raise AnnotationError("Invalid target: @Target requires a value")
            own |= Placement.parse(value)
        if own:
            schema.targets = own

    def _register_builtins(self) -> None:
        for cls, schema in builtin_schemas().items():
            key = self._resolver.remember(cls)
            self._resolver.add_global_import(key)
            self._declared[key] = schema

    # -------------------- Helpers --------------------

    def _key(self, type_id: TypeKey) -> str:
        if isinstance(type_id, str):
            return type_id
        return self._resolver.remember(type_id)

    def _to_schema(self, key: str, descriptor: Descriptor) -> AnnotationSchema:
        if isinstance(descriptor, AnnotationSchema):
            return descriptor.clone()
        validated = parse_descriptor(descriptor if isinstance(descriptor, SchemaDescriptor) else dict(descriptor), path=key)
        return validated.to_schema(self._resolver.resolve)


def _parent_of(cls: type) -> Optional[type]:
    for base in cls.__bases__:
        if base is not object:
            return base
    return None


def _marker_word(comment: Comment, marker: str) -> str:
    value = comment.get(marker)
    if not isinstance(value, str) or not value.strip():
        raise AnnotationError(f"@{marker} requires a name")
    return value.strip()


def _merge_declared(base: AnnotationSchema, schema: AnnotationSchema) -> AnnotationSchema:
    """Explicit schema on top of its parent: own entries win, gaps are inherited."""
    merged = base.clone()
    merged.attributes.update(schema.attributes)
    merged.targets = schema.targets
    if schema.default_attribute is not None:
        merged.default_attribute = schema.default_attribute
    if schema.constructor_params is not None:
        merged.constructor_params = schema.constructor_params
    merged.parent = schema.parent
    return merged


def _merge_constructor(schema: AnnotationSchema, cls: type) -> None:
    params = _constructor_parameters(cls)
    if params is None:
        return
    names = []
    for param in params:
        spec = schema.attributes.get(param.name)
        if spec is None:
            spec = AttributeSpec(param.name)
            schema.attributes[param.name] = spec
        if param.default is not inspect.Parameter.empty and not spec.has_default:
            spec.default = param.default
        spec.required = not spec.has_default and not spec.nullable
        names.append(param.name)
    schema.constructor_params = names or None


def _constructor_parameters(cls: type) -> Optional[List[inspect.Parameter]]:
    if cls.__init__ is object.__init__:
        return None
    try:
        signature = inspect.signature(cls.__init__)
    except (TypeError, ValueError):
        return None
    params = list(signature.parameters.values())[1:]
    return [
        p for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]


__all__ = [
    "SchemaRegistry",
    "builtin_schemas",
    "ANNOTATION_MARKER",
    "DEFAULT_ATTRIBUTE_MARKER",
    "TARGET_MARKER",
]
