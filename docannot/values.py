"""
Composite value produced by `{...}` and `(...)` lists.

A TagList is positional and associative at the same time: entries keep
their order, and entries written as `key: value` can also be looked up by
key. Re-using a key overwrites the earlier entry in place.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple


class TagList:
    """Ordered list of `(key, value)` entries; `key` is None for positional ones."""

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Optional[List[Tuple[Optional[str], Any]]] = None):
        self._entries: List[Tuple[Optional[str], Any]] = []
        self._index: Dict[str, int] = {}
        for key, value in entries or ():
            self.append(value, key)

    @classmethod
    def of(cls, *values: Any, **named: Any) -> "TagList":
        result = cls([(None, v) for v in values])
        for key, value in named.items():
            result.append(value, key)
        return result

    def append(self, value: Any, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.append((None, value))
            return
        if key in self._index:
            self._entries[self._index[key]] = (key, value)
            return
        self._index[key] = len(self._entries)
        self._entries.append((key, value))

    def entries(self) -> List[Tuple[Optional[str], Any]]:
        return list(self._entries)

    def values(self) -> List[Any]:
        return [value for _, value in self._entries]

    def positional(self) -> List[Any]:
        return [value for key, value in self._entries if key is None]

    def named(self) -> Dict[str, Any]:
        return {key: value for key, value in self._entries if key is not None}

    def keys(self) -> List[str]:
        return [key for key, _ in self._entries if key is not None]

    @property
    def has_keys(self) -> bool:
        return bool(self._index)

    def to_native(self) -> Any:
        """
        Plain Python form handed to annotation objects.

        list for purely positional lists, dict for purely keyed ones, the
        TagList itself when both kinds are mixed.
        """
        if not self._index:
            return [_native(v) for v in self.values()]
        if len(self._index) == len(self._entries):
            return {k: _native(v) for k, v in self._entries}
        return self

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values())

    def __contains__(self, value: object) -> bool:
        return value in self.values()

    def __getitem__(self, item: Any) -> Any:
        if isinstance(item, str):
            return self._entries[self._index[item]][1]
        if isinstance(item, slice):
            return self.values()[item]
        return self._entries[item][1]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagList):
            return self._entries == other._entries
        if isinstance(other, (list, tuple)):
            return not self._index and self.values() == list(other)
        if isinstance(other, dict):
            return len(self._index) == len(self._entries) and self.named() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [repr(v) if k is None else f"{k}: {v!r}" for k, v in self._entries]
        return "{" + ", ".join(parts) + "}"


def _native(value: Any) -> Any:
    return value.to_native() if isinstance(value, TagList) else value


__all__ = ["TagList"]
