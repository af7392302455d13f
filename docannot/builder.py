"""
Construction of annotation instances from parsed arguments.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Union

from .checker import check_type
from .errors import AnnotationError
from .names import NameResolver
from .registry import SchemaRegistry
from .schema import AnnotationSchema
from .targets import Placement
from .values import TagList

logger = logging.getLogger(__name__)


class InstanceBuilder:
    """
    Builds annotation objects according to their resolved schema.

    Steps, in order: target check, positional re-keying, attribute
    validation, required check, construction, remaining attribute
    application.
    """

    def __init__(self, registry: SchemaRegistry, resolver: NameResolver):
        self._registry = registry
        self._resolver = resolver

    def build(
        self,
        type_id: str,
        supplied: Union[TagList, Mapping[str, Any]],
        placement: Placement,
    ) -> Any:
        """
        Builds one instance of an annotation type.

        Args:
            type_id: Type id of the annotation class
            supplied: Parsed arguments; at most one positional entry
            placement: Where the annotation was written

        Returns:
            Constructed annotation object

        Raises:
            AnnotationError: On target, attribute, type or required violations
        """
        schema = self._registry.resolve_schema(type_id)

        if not Placement.allows(schema.targets, placement):
            raise AnnotationError(
                f"Annotation {type_id} can not be applied to {Placement(placement).describe()}"
            )

        attributes = self._normalize(type_id, schema, supplied)
        self._check_attributes(type_id, schema, attributes)
        self._check_required(schema, attributes)

        obj = self._construct(type_id, schema, attributes)
        for name, value in attributes.items():
            schema.accessors[name](obj, _native(value))

        logger.debug("Built %s with %s", type_id, sorted(attributes))
        return obj

    # -------------------- Steps --------------------

    def _normalize(
        self,
        type_id: str,
        schema: AnnotationSchema,
        supplied: Union[TagList, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        if not isinstance(supplied, TagList):
            return dict(supplied)

        attributes: Dict[str, Any] = supplied.named()
        positional = supplied.positional()
        if not positional:
            return attributes

        if len(positional) > 1:
            raise AnnotationError(f"Annotation {type_id} accepts a single unnamed value")
        if not schema.default_attribute:
            raise AnnotationError(f"Annotation {type_id} does not have a default attribute")
        if schema.default_attribute in attributes:
            raise AnnotationError(
                f"Attribute {schema.default_attribute} of {type_id} is set both by name and by position"
            )
        attributes[schema.default_attribute] = positional[0]
        return attributes

    def _check_attributes(self, type_id: str, schema: AnnotationSchema, attributes: Dict[str, Any]) -> None:
        for name, value in attributes.items():
            spec = schema.attributes.get(name)
            if spec is None:
                raise AnnotationError(f"Unknown attribute {name} for annotation {type_id}")
            if value is None and spec.nullable:
                continue
            check_type(name, value, spec.type, self._resolver.load)

    def _check_required(self, schema: AnnotationSchema, attributes: Dict[str, Any]) -> None:
        missing = [name for name in schema.required_attributes() if name not in attributes]
        if len(missing) == 1:
            raise AnnotationError(f"Attribute {missing[0]} is required but not set")
        if missing:
            raise AnnotationError(f"Attributes {', '.join(missing)} are required but not set")

    def _construct(self, type_id: str, schema: AnnotationSchema, attributes: Dict[str, Any]) -> Any:
        cls = self._resolver.load(type_id)
        if schema.constructor_params is None:
            return cls()

        args: List[Any] = []
        for name in schema.constructor_params:
            if name in attributes:
                args.append(_native(attributes.pop(name)))
            else:
                spec = schema.attributes[name]
                args.append(spec.default if spec.has_default else None)
        return cls(*args)


def _native(value: Any) -> Any:
    return value.to_native() if isinstance(value, TagList) else value


__all__ = ["InstanceBuilder"]
