from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .errors import AnnotationError
from .types import (
    Boolean,
    ClassRef,
    EnumOf,
    Float,
    Integer,
    ListOf,
    Mixed,
    Number,
    String,
    TupleOf,
    TypeDescriptor,
)
from .tokens import NUMERIC_LITERAL
from .values import TagList

_LOG = logging.getLogger("docannot.checker")

TypeLoader = Callable[[str], type]

# -------------------- Helpers --------------------

def _err(name: str, msg: str) -> AnnotationError:
    _LOG.debug("RAISE at %s: %s", name, msg)
    return AnnotationError(f"Attribute {name} {msg}")

def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, TagList))

def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        # float() would also take "nan", "inf" and "1_000"
        return NUMERIC_LITERAL.fullmatch(value.strip()) is not None
    return False

def _is_member(value: Any, allowed: tuple) -> bool:
    return any(type(v) is type(value) and v == value for v in allowed)

def _check_tuple(name: str, value: Any, tp: TupleOf, load_type: Optional[TypeLoader]) -> None:
    if not _is_sequence(value):
        raise _err(name, "must be an array")
    count = len(tp.items)
    if count == 0:
        _LOG.debug("Unchecked array at %s", name)
        return
    items = list(value)
    if len(items) != count:
        raise _err(name, f"must be an array with {count} elements")
    for i, (item, expected) in enumerate(zip(items, tp.items)):
        check_type(f"{name}[{i}]", item, expected, load_type)

def _check_list(name: str, value: Any, tp: ListOf, load_type: Optional[TypeLoader]) -> None:
    if not _is_sequence(value):
        raise _err(name, "must be an array")
    for i, item in enumerate(value):
        check_type(f"{name}[{i}]", item, tp.item, load_type)

def _check_class(name: str, value: Any, tp: ClassRef, load_type: Optional[TypeLoader]) -> None:
    cls = load_type(tp.type_id) if load_type else None
    if cls is None or not isinstance(value, cls):
        raise _err(name, f"must be an instance of {tp.type_id}")

# -------------------- Entry point --------------------

def check_type(
    name: str,
    value: Any,
    tp: TypeDescriptor,
    load_type: Optional[TypeLoader] = None,
) -> None:
    """
    Validates value against a descriptor.

    Args:
        name: Attribute name used in error messages (`name[i]` for elements)
        value: Candidate value
        tp: Declared type descriptor
        load_type: Loads the class behind a ClassRef type id

    Raises:
        AnnotationError: On mismatch
    """
    _LOG.debug("check_type: name=%s, tp=%s, val-type=%s", name, tp, type(value).__name__)

    if isinstance(tp, Mixed):
        return

    if isinstance(tp, String):
        if not isinstance(value, str):
            raise _err(name, "must be a string")
        return

    if isinstance(tp, Number):
        if not _is_numeric(value):
            raise _err(name, "must be a number or numeric string")
        return

    if isinstance(tp, Integer):
        if isinstance(value, bool) or not isinstance(value, int):
            raise _err(name, "must be an integer")
        return

    if isinstance(tp, Float):
        if not isinstance(value, float):
            raise _err(name, "must be a floating point number")
        return

    if isinstance(tp, Boolean):
        if not isinstance(value, bool):
            raise _err(name, "must be a boolean")
        return

    if isinstance(tp, EnumOf):
        if not _is_member(value, tp.values):
            allowed = ", ".join(map(str, tp.values))
            raise _err(name, f"must be one of the following: {allowed}")
        return

    if isinstance(tp, TupleOf):
        return _check_tuple(name, value, tp, load_type)

    if isinstance(tp, ListOf):
        return _check_list(name, value, tp, load_type)

    if isinstance(tp, ClassRef):
        return _check_class(name, value, tp, load_type)

    raise TypeError(f"Unknown type descriptor: {tp!r}")


__all__ = ["check_type"]
