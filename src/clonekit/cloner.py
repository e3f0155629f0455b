"""
ValueCloner: produce an independent copy of a value.

Three strategies, selected per call with CloneMode:

    SHALLOW
        New Composite of the same kind holding the same top-level members.
        Nested Composites stay shared with the input.

    DEEP_RECURSIVE
        New Composite of the same kind, every member replaced by its own
        deep clone. Primitives, opaque atoms and callables are returned
        as-is. Cycle-safe: each source Composite is cloned exactly once
        and later references resolve to that clone, so self-referential
        graphs terminate and shared sub-structures stay shared in the copy.

    SERIALIZE_ROUND_TRIP
        Encode to JSON or YAML and decode again (see serialization.py).
        Lossy by design; raises EncodingError for cycles.

IMPORTANT:
    Records are enumerated along their property-resolution chain unless
    CloneOptions.own_keys_only is set: public class data attributes become
    own attributes of the clone. Accessors (properties) are not copied as
    data under SHALLOW or DEEP_RECURSIVE; the clone keeps the source class,
    so they keep working against the copied backing attributes.
"""

from __future__ import annotations

import warnings
from typing import Any, Dict, List, Optional

from clonekit.errors import CloneDepthError, LossyCloneWarning
from clonekit.options import CloneMode, CloneOptions, TextFormat
from clonekit.serialization import round_trip
from clonekit.values import (
    COMPOSITE_KINDS,
    MUTABLE_SEQUENCE_TYPES,
    ROOT_PATH,
    ValueKind,
    child_path,
    classify,
    empty_mapping_like,
    new_record,
    rebuild_sequence,
    record_items,
    set_record_item,
)

_nil = []


class ValueCloner:
    """
    Clones values according to a CloneMode.

    A cloner holds only its CloneOptions. Every call allocates its own memo,
    so one instance can be shared freely between call sites and threads.
    """

    def __init__(self, options: Optional[CloneOptions] = None):
        self.options = options if options is not None else CloneOptions()

    def clone(self, value: Any, mode: CloneMode = CloneMode.DEEP_RECURSIVE) -> Any:
        """
        Clone a value.

        Args:
            value: Any value
            mode: Cloning strategy

        Returns:
            A newly allocated copy, or the value itself for primitives,
            opaque atoms and callables (SHALLOW / DEEP_RECURSIVE only)

        Raises:
            EncodingError: SERIALIZE_ROUND_TRIP on input with no text form
            CloneDepthError: nesting deeper than options.max_depth
            ValueError: unknown mode
        """
        if mode is CloneMode.SHALLOW:
            return self.shallow(value)
        if mode is CloneMode.DEEP_RECURSIVE:
            return self.deep(value)
        if mode is CloneMode.SERIALIZE_ROUND_TRIP:
            return self.serialize_round_trip(value)
        raise ValueError(f"Unsupported clone mode: {mode!r}")

    # =========================================================================
    # SHALLOW
    # =========================================================================

    def shallow(self, value: Any) -> Any:
        kind = classify(value)

        if kind is ValueKind.MAPPING:
            result = empty_mapping_like(value)
            for key, member in value.items():
                result[key] = member
            return result

        if kind is ValueKind.SEQUENCE:
            return rebuild_sequence(value, list(value))

        if kind is ValueKind.RECORD:
            result = new_record(value)
            for key, member in record_items(value, self.options.own_keys_only):
                set_record_item(result, key, member)
            return result

        return value

    # =========================================================================
    # DEEP_RECURSIVE
    # =========================================================================

    def deep(self, value: Any) -> Any:
        return self._deep(value, {}, 0, ROOT_PATH)

    def _deep(self, value: Any, memo: Dict[int, Any], depth: int, path: str) -> Any:
        kind = classify(value)
        if kind not in COMPOSITE_KINDS:
            return value

        found = memo.get(id(value), _nil)
        if found is not _nil:
            return found

        max_depth = self.options.max_depth
        if max_depth is not None and depth > max_depth:
            raise CloneDepthError(f"Maximum depth {max_depth} exceeded at {path}")

        if kind is ValueKind.MAPPING:
            return self._deep_mapping(value, memo, depth, path)
        if kind is ValueKind.SEQUENCE:
            return self._deep_sequence(value, memo, depth, path)
        return self._deep_record(value, memo, depth, path)

    def _deep_mapping(self, value, memo, depth, path):
        result = empty_mapping_like(value)
        memo[id(value)] = result
        # Keys are hashable and kept as they are
        for key, member in value.items():
            result[key] = self._deep(member, memo, depth + 1, child_path(path, key))
        return result

    def _deep_sequence(self, value, memo, depth, path):
        if isinstance(value, MUTABLE_SEQUENCE_TYPES):
            result = rebuild_sequence(value, ())
            memo[id(value)] = result
            add = result.add if isinstance(result, set) else result.append
            for index, member in enumerate(value):
                add(self._deep(member, memo, depth + 1, child_path(path, index)))
            return result

        # tuple / frozenset can only be built once their members exist
        items: List[Any] = [
            self._deep(member, memo, depth + 1, child_path(path, index))
            for index, member in enumerate(value)
        ]
        # A cycle running through a mutable member may already have built it
        found = memo.get(id(value), _nil)
        if found is not _nil:
            return found
        result = rebuild_sequence(value, items)
        memo[id(value)] = result
        return result

    def _deep_record(self, value, memo, depth, path):
        result = new_record(value)
        memo[id(value)] = result
        for key, member in record_items(value, self.options.own_keys_only):
            set_record_item(result, key, self._deep(member, memo, depth + 1, child_path(path, key)))
        return result

    # =========================================================================
    # SERIALIZE_ROUND_TRIP
    # =========================================================================

    def serialize_round_trip(self, value: Any) -> Any:
        lost: List[str] = []
        on_loss = None
        if self.options.warn_on_loss:
            on_loss = lambda path, reason: lost.append(f"{path} ({reason})")

        result = round_trip(
            value,
            text_format=self.options.text_format,
            own_keys_only=self.options.own_keys_only,
            max_depth=self.options.max_depth,
            on_loss=on_loss,
        )

        if lost:
            warnings.warn(
                f"Round-trip clone lost {len(lost)} member(s): {', '.join(lost)}",
                LossyCloneWarning,
            )
        return result


def clone(value: Any, mode: CloneMode = CloneMode.DEEP_RECURSIVE, options: Optional[CloneOptions] = None) -> Any:
    """Clone a value with a one-off ValueCloner."""
    return ValueCloner(options).clone(value, mode)


def shallow_clone(value: Any, own_keys_only: bool = False) -> Any:
    return ValueCloner(CloneOptions(own_keys_only=own_keys_only)).shallow(value)


def deep_clone(value: Any, own_keys_only: bool = False, max_depth: Optional[int] = None) -> Any:
    return ValueCloner(CloneOptions(own_keys_only=own_keys_only, max_depth=max_depth)).deep(value)


def serialize_clone(value: Any, text_format: TextFormat = TextFormat.JSON, own_keys_only: bool = False) -> Any:
    return ValueCloner(
        CloneOptions(own_keys_only=own_keys_only, text_format=text_format)
    ).serialize_round_trip(value)
