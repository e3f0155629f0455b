"""
Value classification for clonekit.

Every value handed to the cloner falls into exactly one ValueKind:

    - PRIMITIVE: None, bool, numbers, str, bytes, Enum members and any
      opaque atom the cloner does not look inside
    - CALLABLE:  functions, methods, classes, objects with __call__
    - MAPPING:   dict and its subclasses
    - SEQUENCE:  list, tuple (named tuples included), set, frozenset,
                 deque, bytearray
    - RECORD:    plain instances carrying a __dict__ (dataclasses included)

ARCHITECTURAL RULE:
    This module only answers "what is this value and what are its keys".
    It never copies anything itself; strategies live in cloner.py
    and serialization.py.
"""

from __future__ import annotations

from collections import defaultdict, deque
from enum import Enum
from types import ModuleType
from typing import Any, Dict, Iterable, List, Tuple


class ValueKind(Enum):
    """Structural category of a value."""
    PRIMITIVE = "primitive"
    CALLABLE = "callable"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    RECORD = "record"


PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes, Enum)
SEQUENCE_TYPES = (list, tuple, set, frozenset, deque, bytearray)
MUTABLE_SEQUENCE_TYPES = (list, set, deque, bytearray)
# Copied like any sequence, but with no structured-text form
TEXTLESS_SEQUENCE_TYPES = (set, frozenset, bytearray)

COMPOSITE_KINDS = frozenset({ValueKind.MAPPING, ValueKind.SEQUENCE, ValueKind.RECORD})

ROOT_PATH = "$"


def child_path(path: str, key: Any) -> str:
    """Path of a member: '$.name' for string keys, '$[0]' for indices and other keys."""
    if isinstance(key, str):
        return f"{path}.{key}"
    return f"{path}[{key!r}]"


def classify(value: Any) -> ValueKind:
    """
    Return the ValueKind of a value.

    Order matters:
        - primitives first, so int/str subclasses with a __dict__ stay atoms
        - callables before containers, so a dict subclass with __call__
          is shared rather than copied
        - modules carry a __dict__ but are never records
    """
    if isinstance(value, PRIMITIVE_TYPES):
        return ValueKind.PRIMITIVE
    if callable(value):
        return ValueKind.CALLABLE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    if isinstance(value, SEQUENCE_TYPES):
        return ValueKind.SEQUENCE
    if isinstance(value, ModuleType):
        return ValueKind.PRIMITIVE
    if hasattr(value, "__dict__"):
        return ValueKind.RECORD
    # Slotted objects, datetimes, Decimals, sentinels...
    return ValueKind.PRIMITIVE


def is_composite(value: Any) -> bool:
    return classify(value) in COMPOSITE_KINDS


def _class_chain(obj: Any) -> List[type]:
    return [klass for klass in type(obj).__mro__ if klass is not object]


def _is_descriptor(attr: Any) -> bool:
    # Functions, property, staticmethod and classmethod all define __get__
    return hasattr(attr, "__get__")


def _slot_names(klass: type) -> List[str]:
    """Slot attribute names declared directly on klass, private names mangled."""
    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    names = []
    for name in slots:
        if name in ("__dict__", "__weakref__"):
            continue
        if name.startswith("__") and not name.endswith("__"):
            name = f"_{klass.__name__.lstrip('_')}{name}"
        names.append(name)
    return names


def _slot_items(obj: Any) -> List[Tuple[str, Any]]:
    items = []
    for klass in _class_chain(obj):
        for name in _slot_names(klass):
            try:
                value = vars(klass)[name].__get__(obj, type(obj))
            except AttributeError:
                # Declared but never assigned
                continue
            items.append((name, value))
    return items


def record_items(obj: Any, own_keys_only: bool = False) -> List[Tuple[str, Any]]:
    """
    Enumerate the keys of a record along its property-resolution chain.

    Own attributes come first: instance __dict__ order, then assigned
    __slots__ values. Unless own_keys_only is set, public class-level data
    attributes follow in MRO order; the first class defining a name wins,
    exactly as attribute lookup resolves it. A method or accessor therefore
    hides a data attribute of the same name further up the chain.

    IMPORTANT:
        Inherited keys are enumerated on purpose. A shallow or deep clone
        turns them into own attributes of the copy. Pass own_keys_only=True
        to restrict enumeration to the instance itself.

    Methods and accessors are never enumerated: they are descriptors and
    remain reachable through the clone's class.
    """
    items = list(vars(obj).items())
    seen = {key for key, _ in items}
    for key, value in _slot_items(obj):
        if key not in seen:
            seen.add(key)
            items.append((key, value))
    if own_keys_only:
        return items

    for klass in _class_chain(obj):
        for name, attr in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith("_") or _is_descriptor(attr):
                continue
            items.append((name, attr))
    return items


def record_accessors(obj: Any) -> List[str]:
    """Return the public property names visible on a record, in MRO order."""
    names: List[str] = []
    seen = set()
    for klass in _class_chain(obj):
        for name, attr in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if isinstance(attr, property) and not name.startswith("_"):
                names.append(name)
    return names


def new_record(obj: Any) -> Any:
    """
    Allocate an empty instance of the record's class without running __init__.

    Exceptions are allocated with their args. A class whose __new__
    requires arguments falls back to object.__new__.
    """
    cls = type(obj)
    if isinstance(obj, BaseException):
        return cls.__new__(cls, *obj.args)
    try:
        return cls.__new__(cls)
    except TypeError:
        return object.__new__(cls)


def _is_slot(cls: type, key: str) -> bool:
    return any(key in _slot_names(klass) for klass in cls.__mro__)


def set_record_item(record: Any, key: str, value: Any) -> None:
    # Write straight into the instance dict (or the slot) so frozen
    # dataclasses and custom __setattr__ hooks do not interfere with copying.
    if _is_slot(type(record), key):
        object.__setattr__(record, key, value)
    else:
        vars(record)[key] = value


def empty_mapping_like(mapping: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Return a new empty mapping of the same kind.

    Subclasses other than defaultdict must be constructible without arguments.
    """
    if type(mapping) is dict:
        return {}
    if isinstance(mapping, defaultdict):
        return type(mapping)(mapping.default_factory)
    return type(mapping)()


def rebuild_sequence(seq: Any, items: Iterable[Any]) -> Any:
    """
    Build a new sequence of the same kind as seq from items.

    Subclasses must accept an iterable of items (named tuples take them
    positionally, deques keep their maxlen).
    """
    if type(seq) is list:
        return list(items)
    if isinstance(seq, tuple) and hasattr(seq, "_fields"):
        return type(seq)(*items)
    if isinstance(seq, deque):
        return type(seq)(items, seq.maxlen)
    return type(seq)(items)
