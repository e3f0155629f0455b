"""
Value Analyzer: diagnostics for values about to be cloned.

This module inspects a value graph without copying it:
    - Composite inventory and nesting depth
    - Cycles and shared references
    - Callable and accessor members
    - Members with no structured-text form

Use it to pre-validate input for SERIALIZE_ROUND_TRIP, which raises
EncodingError on cycles and unsupported types, or to check that a clone
shares no Composite with its source.

IMPORTANT: This module never mutates or copies the value.
It only produces read-only reports.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from clonekit.values import (
    COMPOSITE_KINDS,
    ROOT_PATH,
    TEXTLESS_SEQUENCE_TYPES,
    ValueKind,
    child_path,
    classify,
    record_accessors,
    record_items,
)

# Nesting beyond this is flagged: unbounded DEEP_RECURSIVE and
# SERIALIZE_ROUND_TRIP clones recurse once per level.
DEEP_NESTING_THRESHOLD = 100

_TEXT_ATOMS = (type(None), bool, int, float, str, Enum)


def _members(value: Any, kind: ValueKind, own_keys_only: bool) -> Iterator[Tuple[Any, Any]]:
    if kind is ValueKind.MAPPING:
        return iter(value.items())
    if kind is ValueKind.SEQUENCE:
        return enumerate(value)
    return iter(record_items(value, own_keys_only))


def _has_text_form(key: Any) -> bool:
    return isinstance(key, _TEXT_ATOMS)


@dataclass
class ValueReport:
    """Analysis report for a single value graph."""

    root_kind: ValueKind
    total_composites: int = 0
    max_depth: int = 0

    # Members by category, as paths like "$.friends[0]"
    callable_paths: List[str] = field(default_factory=list)
    accessor_paths: List[str] = field(default_factory=list)
    non_finite_paths: List[str] = field(default_factory=list)
    unserializable_paths: List[str] = field(default_factory=list)

    # Graph properties
    shared_paths: List[str] = field(default_factory=list)  # second and later sightings
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def is_serializable(self) -> bool:
        """True when SERIALIZE_ROUND_TRIP can encode the value."""
        return (
            not self.has_cycles
            and not self.unserializable_paths
            and self.root_kind is not ValueKind.CALLABLE
        )


class _Walker:
    """
    Depth-first walk over a value graph.

    Uses an explicit stack of open composites instead of recursion, so
    nesting far beyond the interpreter's recursion limit is still reported.
    """

    def __init__(self, report: ValueReport, own_keys_only: bool):
        self.report = report
        self.own_keys_only = own_keys_only
        self.seen: Set[int] = set()
        # Paths of the composites on the current branch, and their index by id
        self.trail: List[str] = []
        self.on_trail: Dict[int, int] = {}

    def walk(self, root: Any) -> None:
        stack = []
        frame = self._enter(root, ROOT_PATH, 0)
        if frame is not None:
            stack.append(frame)

        while stack:
            value, kind, path, depth, members = stack[-1]
            entry = next(members, None)
            if entry is None:
                stack.pop()
                self._leave(value, kind, path)
                continue

            key, member = entry
            member_path = child_path(path, key)
            if kind is ValueKind.MAPPING and not _has_text_form(key):
                self.report.unserializable_paths.append(member_path)
            frame = self._enter(member, member_path, depth + 1)
            if frame is not None:
                stack.append(frame)

    def _enter(self, value: Any, path: str, depth: int):
        """Record a value; return a stack frame when its members need visiting."""
        report = self.report
        kind = classify(value)

        if kind is ValueKind.CALLABLE:
            report.callable_paths.append(path)
            return None

        if kind is ValueKind.PRIMITIVE:
            if isinstance(value, float) and not math.isfinite(value):
                report.non_finite_paths.append(path)
            elif not isinstance(value, _TEXT_ATOMS):
                report.unserializable_paths.append(path)
            return None

        d = id(value)
        if d in self.on_trail:
            report.shared_paths.append(path)
            if not report.has_cycles:
                report.has_cycles = True
                report.cycle_example = self.trail[self.on_trail[d]:] + [path]
            return None
        if d in self.seen:
            report.shared_paths.append(path)
            return None

        self.seen.add(d)
        report.total_composites += 1
        report.max_depth = max(report.max_depth, depth)

        if isinstance(value, TEXTLESS_SEQUENCE_TYPES):
            report.unserializable_paths.append(path)

        self.on_trail[d] = len(self.trail)
        self.trail.append(path)
        return value, kind, path, depth, _members(value, kind, self.own_keys_only)

    def _leave(self, value: Any, kind: ValueKind, path: str) -> None:
        if kind is ValueKind.RECORD:
            for name in record_accessors(value):
                self.report.accessor_paths.append(child_path(path, name))
        self.trail.pop()
        del self.on_trail[id(value)]


def analyze_value(value: Any, own_keys_only: bool = False) -> ValueReport:
    """
    Analyze a value graph.

    Checks for:
    - Cycles (SERIALIZE_ROUND_TRIP raises EncodingError on them)
    - Shared references (duplicated by SERIALIZE_ROUND_TRIP, kept shared
      by DEEP_RECURSIVE)
    - Callables and accessors (dropped / flattened by SERIALIZE_ROUND_TRIP)
    - Non-finite numbers (become null in SERIALIZE_ROUND_TRIP)
    - Types and keys with no text form
    - Nesting depth

    Returns a ValueReport with metrics and warnings.
    """
    report = ValueReport(root_kind=classify(value))
    _Walker(report, own_keys_only).walk(value)

    # =========================================================================
    # WARNING FLAGS
    # =========================================================================

    if report.root_kind is ValueKind.CALLABLE:
        report.add_warning("Root value is callable: it is shared, never copied, and has no text form")

    if report.has_cycles:
        report.add_warning(
            f"Cycle detected: {' -> '.join(report.cycle_example)}"
        )

    if report.unserializable_paths:
        report.add_warning(
            f"No text form for: {', '.join(report.unserializable_paths)}"
        )

    if report.callable_paths and report.root_kind is not ValueKind.CALLABLE:
        report.add_warning(
            f"Callables are shared by reference and dropped by round-trip clones: {', '.join(report.callable_paths)}"
        )

    if report.accessor_paths:
        report.add_warning(
            f"Accessors are flattened to their current value by round-trip clones: {', '.join(report.accessor_paths)}"
        )

    if report.non_finite_paths:
        report.add_warning(
            f"Non-finite numbers become null in round-trip clones: {', '.join(report.non_finite_paths)}"
        )

    if report.max_depth > DEEP_NESTING_THRESHOLD:
        report.add_warning(
            f"Deep nesting: max depth {report.max_depth}"
        )

    return report


def shared_composites(original: Any, copy: Any, own_keys_only: bool = False) -> List[str]:
    """
    List the paths in copy whose Composite is also reachable from original.

    An empty list means the copy is fully independent of the original.
    Shared Composites are reported once and not descended into.
    """
    source_ids: Set[int] = set()
    stack = [original]
    while stack:
        value = stack.pop()
        kind = classify(value)
        if kind not in COMPOSITE_KINDS or id(value) in source_ids:
            continue
        source_ids.add(id(value))
        stack.extend(member for _, member in _members(value, kind, own_keys_only))

    shared: List[str] = []
    visited: Set[int] = set()
    stack = [(copy, ROOT_PATH)]
    while stack:
        value, path = stack.pop()
        kind = classify(value)
        if kind not in COMPOSITE_KINDS or id(value) in visited:
            continue
        visited.add(id(value))
        if id(value) in source_ids:
            shared.append(path)
            continue
        stack.extend((member, child_path(path, key)) for key, member in _members(value, kind, own_keys_only))
    return sorted(shared)
