"""
Name resolution for identifiers found in tag blocks.

A type id is the fully qualified dotted name of a class
("package.module.QualName"). Short identifiers are resolved against the
global imports of the resolver, then against the scope of the documented
object (its module globals), then as absolute import paths.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import sys
from typing import Any, Dict, Mapping, Optional

from .errors import UnresolvedNameError

logger = logging.getLogger(__name__)

# Sentinel returned by lookups that did not match
NO_MATCH = object()


def type_id_of(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def get_documentation(obj: Any) -> str:
    """
    Returns the object's own documentation block, cleaned, or "".

    Classes do not inherit docstrings here: an annotation type must carry its
    markers in its own documentation.
    """
    if isinstance(obj, type):
        doc = obj.__dict__.get("__doc__")
    else:
        doc = getattr(obj, "__doc__", None)
    if not isinstance(doc, str) or not doc.strip():
        return ""
    return inspect.cleandoc(doc)


def scope_of(obj: Any) -> Dict[str, Any]:
    """Module globals of the object, used as the name resolution scope."""
    if isinstance(obj, property):
        obj = obj.fget
    module_name = getattr(obj, "__module__", None)
    module = sys.modules.get(module_name) if module_name else None
    return dict(vars(module)) if module is not None else {}


class NameResolver:
    """
    Resolves short identifiers to type ids and loads types back by id.
    """

    def __init__(self, global_imports: Optional[Mapping[str, str]] = None):
        self._global_imports: Dict[str, str] = dict(global_imports or {})
        self._types: Dict[str, type] = {}

    def add_global_import(self, type_id: str, alias: Optional[str] = None) -> None:
        """Makes a type resolvable by its short name from every scope."""
        if alias is None:
            alias = type_id.rsplit(".", 1)[-1]
        self._global_imports[alias] = type_id
        logger.debug("Global import %s -> %s", alias, type_id)

    def get_global_imports(self) -> Dict[str, str]:
        return dict(self._global_imports)

    def remember(self, cls: type) -> str:
        """Registers a class object so that its id loads without importing."""
        type_id = type_id_of(cls)
        self._types[type_id] = cls
        return type_id

    def resolve(self, name: str, scope: Optional[Mapping[str, Any]] = None) -> str:
        """
        Resolves an identifier to a type id.

        Raises:
            UnresolvedNameError: If the identifier names no class
        """
        if name in self._global_imports:
            return self._global_imports[name]
        if name in self._types:
            return name

        found = self._lookup_object(name, scope or {})
        if found is NO_MATCH:
            found = self._import_object(name)
        if isinstance(found, type):
            return self.remember(found)
        raise UnresolvedNameError(name)

    def load(self, type_id: str) -> type:
        """
        Returns the class behind a type id.

        Raises:
            UnresolvedNameError: If the id cannot be imported
        """
        if type_id in self._types:
            return self._types[type_id]
        found = self._import_object(type_id)
        if not isinstance(found, type):
            raise UnresolvedNameError(type_id)
        self._types[type_id] = found
        return found

    def lookup_constant(self, name: str, scope: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Resolves `Type::CONST` or a module level constant of the scope.

        Returns NO_MATCH when the name is not a known constant.
        """
        scope = scope or {}
        if "::" in name:
            class_name, constant = name.split("::", 1)
            try:
                owner = self.load(self.resolve(class_name, scope))
            except UnresolvedNameError:
                return NO_MATCH
            return getattr(owner, constant, NO_MATCH)

        value = self._lookup_object(name, scope)
        if value is NO_MATCH or isinstance(value, type) or inspect.ismodule(value):
            return NO_MATCH
        if callable(value):
            return NO_MATCH
        return value

    def _lookup_object(self, name: str, scope: Mapping[str, Any]) -> Any:
        head, *rest = name.split(".")
        if head not in scope:
            return NO_MATCH
        obj = scope[head]
        for part in rest:
            obj = getattr(obj, part, NO_MATCH)
            if obj is NO_MATCH:
                return NO_MATCH
        return obj

    def _import_object(self, dotted: str) -> Any:
        parts = dotted.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                obj: Any = importlib.import_module(module_name)
            except (ImportError, ValueError, TypeError):
                continue
            for part in parts[split:]:
                obj = getattr(obj, part, NO_MATCH)
                if obj is NO_MATCH:
                    break
            else:
                return obj
        return NO_MATCH


__all__ = [
    "NameResolver",
    "NO_MATCH",
    "type_id_of",
    "get_documentation",
    "scope_of",
]
