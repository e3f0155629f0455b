"""
Structured-text codec used by the SERIALIZE_ROUND_TRIP strategy.

A value is first lowered to a plain tree (dict / list / str / int / float /
bool / None), then encoded as JSON or YAML, then decoded back. The plain
tree follows the rules of a standard JSON encoder:

    - mapping values and record attributes holding a callable are omitted
    - sequence slots holding a callable become None
    - NaN and infinities become None
    - Enum members are encoded as their value
    - records become mappings; accessors are flattened to their current value
    - tuples and deques become lists

Anything else that has no text form raises EncodingError, and so does a
cyclic reference.
"""
from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

import yaml

from clonekit.errors import CloneDepthError, EncodingError
from clonekit.options import TextFormat
from clonekit.values import (
    ValueKind,
    classify,
    child_path,
    record_accessors,
    record_items,
    ROOT_PATH,
    TEXTLESS_SEQUENCE_TYPES,
)

LossCallback = Callable[[str, str], None]

_OMIT = object()


class _PlainEncoder:
    """Lowers one value to a plain tree. Not reusable across values."""

    def __init__(self, own_keys_only: bool, max_depth: Optional[int], on_loss: Optional[LossCallback]):
        self.own_keys_only = own_keys_only
        self.max_depth = max_depth
        self.on_loss = on_loss
        # ids of the composites on the current path, for cycle detection
        self.active: Set[int] = set()

    def encode(self, value: Any, path: str, depth: int) -> Any:
        kind = classify(value)
        if kind is ValueKind.CALLABLE:
            return _OMIT
        if kind is ValueKind.PRIMITIVE:
            return self._encode_atom(value, path, depth)

        if id(value) in self.active:
            raise EncodingError(f"Circular reference detected at {path}")
        if self.max_depth is not None and depth > self.max_depth:
            raise CloneDepthError(f"Maximum depth {self.max_depth} exceeded at {path}")

        self.active.add(id(value))
        if kind is ValueKind.MAPPING:
            result = self._encode_mapping(value, path, depth)
        elif kind is ValueKind.SEQUENCE:
            result = self._encode_sequence(value, path, depth)
        else:
            result = self._encode_record(value, path, depth)
        self.active.discard(id(value))
        return result

    def _encode_atom(self, value: Any, path: str, depth: int) -> Any:
        if isinstance(value, Enum):
            return self.encode(value.value, path, depth)
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int):
            return int(value)
        if isinstance(value, float):
            if math.isfinite(value):
                return float(value)
            self._lost(path, f"non-finite number {value!r} replaced with null")
            return None
        if isinstance(value, str):
            return str(value)
        raise EncodingError(f"Object of type {type(value).__name__} at {path} is not serializable")

    def _encode_key(self, key: Any, path: str) -> str:
        if isinstance(key, Enum):
            key = key.value
        if isinstance(key, str):
            return str(key)
        if key is True:
            return "true"
        if key is False:
            return "false"
        if key is None:
            return "null"
        if isinstance(key, int):
            return str(int(key))
        if isinstance(key, float):
            return json.dumps(float(key))
        raise EncodingError(
            f"Keys must be str, int, float, bool or None, not {type(key).__name__} (at {path})"
        )

    def _encode_members(self, items, path: str, depth: int) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, member in items:
            member_path = child_path(path, key)
            text_key = self._encode_key(key, member_path)
            encoded = self.encode(member, member_path, depth + 1)
            if encoded is _OMIT:
                self._lost(member_path, "callable omitted")
                continue
            result[text_key] = encoded
        return result

    def _encode_mapping(self, value: Dict[Any, Any], path: str, depth: int) -> Dict[str, Any]:
        return self._encode_members(value.items(), path, depth)

    def _encode_sequence(self, value: Any, path: str, depth: int) -> List[Any]:
        if isinstance(value, TEXTLESS_SEQUENCE_TYPES):
            raise EncodingError(f"Object of type {type(value).__name__} at {path} is not serializable")
        result = []
        for index, member in enumerate(value):
            member_path = child_path(path, index)
            encoded = self.encode(member, member_path, depth + 1)
            if encoded is _OMIT:
                self._lost(member_path, "callable replaced with null")
                encoded = None
            result.append(encoded)
        return result

    def _encode_record(self, value: Any, path: str, depth: int) -> Any:
        hook = getattr(value, "to_json", None)
        if callable(hook):
            # The hook's result stands in for the record at the same position
            encoded = self.encode(hook(), path, depth)
            if encoded is _OMIT:
                raise EncodingError(f"to_json() of {type(value).__name__} at {path} returned a callable")
            return encoded

        result = self._encode_members(record_items(value, self.own_keys_only), path, depth)
        accessors = [name for name in record_accessors(value) if name not in result]
        result.update(
            self._encode_members(((name, getattr(value, name)) for name in accessors), path, depth)
        )
        return result

    def _lost(self, path: str, reason: str) -> None:
        if self.on_loss is not None:
            self.on_loss(path, reason)


def to_plain(
    value: Any,
    own_keys_only: bool = False,
    max_depth: Optional[int] = None,
    on_loss: Optional[LossCallback] = None,
) -> Any:
    """
    Lower a value to a tree the text grammars can represent.

    Args:
        value: Any value
        own_keys_only: Skip inherited class attributes of records
        max_depth: Maximum Composite nesting (root is depth 0)
        on_loss: Called as on_loss(path, reason) for every dropped or nulled member

    Raises:
        EncodingError: cycles, unsupported types or keys, top-level callables
        CloneDepthError: nesting deeper than max_depth
    """
    encoder = _PlainEncoder(own_keys_only, max_depth, on_loss)
    plain = encoder.encode(value, ROOT_PATH, 0)
    if plain is _OMIT:
        raise EncodingError(f"Value of type {type(value).__name__} has no text representation")
    return plain


def dumps(plain: Any, text_format: TextFormat = TextFormat.JSON) -> str:
    try:
        if text_format is TextFormat.JSON:
            return json.dumps(plain, ensure_ascii=False, allow_nan=False)
        if text_format is TextFormat.YAML:
            return yaml.safe_dump(plain, allow_unicode=True, sort_keys=False)
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise EncodingError(f"Failed to encode value as {text_format.value}: {e}") from e
    raise ValueError(f"Unsupported text format: {text_format}")


def loads(text: str, text_format: TextFormat = TextFormat.JSON) -> Any:
    try:
        if text_format is TextFormat.JSON:
            return json.loads(text)
        if text_format is TextFormat.YAML:
            return yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as e:
        raise EncodingError(f"Failed to decode {text_format.value} text: {e}") from e
    raise ValueError(f"Unsupported text format: {text_format}")


def value_to_json(value: Any, own_keys_only: bool = False) -> str:
    return dumps(to_plain(value, own_keys_only=own_keys_only), TextFormat.JSON)


def value_to_yaml(value: Any, own_keys_only: bool = False) -> str:
    return dumps(to_plain(value, own_keys_only=own_keys_only), TextFormat.YAML)


def round_trip(
    value: Any,
    text_format: TextFormat = TextFormat.JSON,
    own_keys_only: bool = False,
    max_depth: Optional[int] = None,
    on_loss: Optional[LossCallback] = None,
) -> Any:
    """Encode a value to text and decode it into a fresh tree of dicts and lists."""
    plain = to_plain(value, own_keys_only=own_keys_only, max_depth=max_depth, on_loss=on_loss)
    return loads(dumps(plain, text_format), text_format)
