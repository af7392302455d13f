"""
Parse result of a documentation block.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Union

from .errors import AnnotationTypeNotFoundError, TagNotFoundError
from .names import type_id_of


class Comment:
    """
    Description text, plain tags and constructed annotations of one block.

    Plain tags map a tag name to its value (re-adding a name overwrites).
    Annotations map a type id to the instances built from `@Type(...)`
    occurrences, in the order they appear.
    """

    def __init__(self, description: str = ""):
        self.description = description
        self._tags: Dict[str, Any] = {}
        self._annotations: Dict[str, List[Any]] = {}

    def get_description(self) -> str:
        return self.description

    # Plain tags

    def add(self, tag: str, value: Any = None) -> None:
        self._tags[tag] = value

    def has(self, tag: str) -> bool:
        return tag in self._tags

    def get(self, tag: str) -> Any:
        """
        Returns the value of a plain tag.

        Raises:
            TagNotFoundError: If the tag is absent
        """
        if tag not in self._tags:
            raise TagNotFoundError(tag)
        return self._tags[tag]

    def equals(self, tag: str, value: Any) -> bool:
        return self.get(tag) == value

    def contains(self, tag: str, value: Any) -> bool:
        current = self.get(tag)
        if isinstance(current, str) or not hasattr(current, "__contains__"):
            return current == value
        return value in current

    def contains_all(self, tag: str, values: Iterable[Any]) -> bool:
        return all(self.contains(tag, value) for value in values)

    @property
    def tags(self) -> Dict[str, Any]:
        return dict(self._tags)

    # Annotations

    def add_annotation(self, type_id: Union[str, type], annotation: Any) -> None:
        self._annotations.setdefault(_key(type_id), []).append(annotation)

    def get_annotations(self) -> Dict[str, List[Any]]:
        return {k: list(v) for k, v in self._annotations.items()}

    def has_annotation_type(self, type_id: Union[str, type]) -> bool:
        return _key(type_id) in self._annotations

    def get_annotation_type(self, type_id: Union[str, type]) -> List[Any]:
        """
        Returns the instances of one annotation type in declaration order.

        Raises:
            AnnotationTypeNotFoundError: If no instance of the type was parsed
        """
        key = _key(type_id)
        if key not in self._annotations:
            raise AnnotationTypeNotFoundError(key)
        return list(self._annotations[key])

    # Mapping protocol over plain tags

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __getitem__(self, tag: str) -> Any:
        return self.get(tag)

    def __setitem__(self, tag: str, value: Any) -> None:
        self.add(tag, value)

    def __delitem__(self, tag: str) -> None:
        self._tags.pop(tag, None)

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return (
            f"Comment(description={self.description!r}, tags={list(self._tags)}, "
            f"annotations={list(self._annotations)})"
        )


def _key(type_id: Union[str, type]) -> str:
    return type_id if isinstance(type_id, str) else type_id_of(type_id)


__all__ = ["Comment"]
