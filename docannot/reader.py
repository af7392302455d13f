"""
High level entry point: reads annotations of classes, functions, methods
and properties.

    reader = AnnotationReader()
    comment = reader.read_class(MyService)
    for route in comment.get_annotation_type(Route):
        ...
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .builder import InstanceBuilder
from .comment import Comment
from .config import load_schema_file
from .errors import AnnotationError
from .names import NameResolver, get_documentation, scope_of, type_id_of
from .parser import AnnotationParser
from .registry import Descriptor, SchemaRegistry, TypeKey
from .targets import Placement

logger = logging.getLogger(__name__)


class AnnotationReader:
    """
    Wires the name resolver, schema registry, instance builder and parser.

    The built-in `Attribute`, `Enum` and `Target` types are resolvable by
    their short names from every documentation block.
    """

    def __init__(self, global_imports: Optional[Mapping[str, str]] = None):
        self.resolver = NameResolver(global_imports)
        self.registry = SchemaRegistry(self.resolver)
        self.builder = InstanceBuilder(self.registry, self.resolver)
        self.parser = AnnotationParser(self.resolver, self.builder)
        self.registry.comment_reader = self.read_class

    # -------------------- Reading --------------------

    def parse(
        self,
        text: str,
        placement: Placement = Placement.CLASS,
        scope: Optional[Mapping[str, Any]] = None,
    ) -> Comment:
        """Parses raw documentation text."""
        return self.parser.parse(text, placement, scope)

    def read_class(self, cls: Union[type, str]) -> Comment:
        cls = self._load(cls)
        return self._read(cls, Placement.CLASS)

    def read_function(self, func: Callable[..., Any]) -> Comment:
        return self._read(func, Placement.FUNCTION)

    def read_method(self, cls: Union[type, str], name: str) -> Comment:
        cls = self._load(cls)
        method = getattr(cls, name, None)
        if not inspect.isroutine(method):
            raise AnnotationError(f"Method {name} does not exist in {type_id_of(cls)}")
        return self._read(method, Placement.METHOD)

    def read_property(self, cls: Union[type, str], name: str) -> Comment:
        cls = self._load(cls)
        prop = inspect.getattr_static(cls, name, None)
        if not isinstance(prop, property):
            raise AnnotationError(f"Property {name} does not exist in {type_id_of(cls)}")
        return self._read(prop, Placement.PROPERTY)

    def read_methods(self, cls: Union[type, str]) -> Dict[str, Comment]:
        """Comments of every public and private method, dunder methods excluded."""
        cls = self._load(cls)
        return {
            name: self._read(method, Placement.METHOD)
            for name, method in inspect.getmembers(cls, inspect.isroutine)
            if not _is_dunder(name)
        }

    def read_properties(self, cls: Union[type, str]) -> Dict[str, Comment]:
        cls = self._load(cls)
        return {
            name: self._read(prop, Placement.PROPERTY)
            for name, prop in inspect.getmembers(cls, lambda v: isinstance(v, property))
        }

    # -------------------- Configuration --------------------

    def register_annotation(self, type_id: TypeKey, descriptor: Descriptor) -> str:
        return self.registry.register_annotation(type_id, descriptor)

    def add_global_import(self, type_id: Union[type, str], alias: Optional[str] = None) -> None:
        if isinstance(type_id, type):
            type_id = self.resolver.remember(type_id)
        self.resolver.add_global_import(type_id, alias)

    def load_schemas(self, path: Union[str, Path]) -> List[str]:
        """
        Registers every schema declared in a YAML file.

        Returns:
            Registered type ids in file order
        """
        registered = [
            self.registry.register_annotation(type_id, descriptor)
            for type_id, descriptor in load_schema_file(path).items()
        ]
        logger.debug("Registered %d schema(s) from %s", len(registered), path)
        return registered

    # -------------------- Internals --------------------

    def _read(self, obj: Any, placement: Placement) -> Comment:
        return self.parser.parse(get_documentation(obj), placement, scope_of(obj))

    def _load(self, cls: Union[type, str]) -> type:
        if isinstance(cls, str):
            return self.resolver.load(cls)
        return cls


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


__all__ = ["AnnotationReader"]
