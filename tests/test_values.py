"""
Tests for value classification and record key enumeration.

These tests verify:
    - Every value lands in the right ValueKind
    - Records enumerate own keys, then inherited class data
    - Accessors and methods are never enumerated as data
    - Containers are rebuilt with their original kind
"""

import datetime
import math
from collections import OrderedDict, defaultdict, deque, namedtuple
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import pytest

from clonekit.examples import Account, build_account
from clonekit.values import (
    ValueKind,
    child_path,
    classify,
    empty_mapping_like,
    is_composite,
    new_record,
    rebuild_sequence,
    record_accessors,
    record_items,
)


class Color(Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


class Greeter:
    def __call__(self):
        return "hi"


class Base:
    kind = "base"
    label = "plain"
    level = 1


class MethodChild(Base):
    def kind(self):
        return "method"


class PropChild(Base):
    @property
    def label(self):
        return "computed"


class DataChild(Base):
    level = 2


class Slotted:
    __slots__ = ("x", "__secret")

    def hide(self, secret):
        self.__secret = secret


class SlottedChild(Slotted):
    def __init__(self, x, y):
        self.x = x
        self.y = y


class TestClassify:
    """Test classify()."""

    @pytest.mark.parametrize("value", [None, True, 1, 1.5, 2j, "text", b"raw", Color.RED])
    def test_primitives(self, value):
        assert classify(value) is ValueKind.PRIMITIVE

    @pytest.mark.parametrize("value", [len, lambda: 1, int, Greeter(), Account.deposit])
    def test_callables(self, value):
        assert classify(value) is ValueKind.CALLABLE

    def test_mappings(self):
        assert classify({}) is ValueKind.MAPPING
        assert classify(OrderedDict()) is ValueKind.MAPPING
        assert classify(defaultdict(list)) is ValueKind.MAPPING

    @pytest.mark.parametrize("value", [[], (), {1}, frozenset(), deque(), bytearray(b"x")])
    def test_sequences(self, value):
        assert classify(value) is ValueKind.SEQUENCE

    def test_records(self):
        assert classify(Point(1, 2)) is ValueKind.RECORD
        assert classify(build_account()) is ValueKind.RECORD

    @pytest.mark.parametrize("value", [math, object(), Decimal("1.5"), datetime.date(2024, 1, 1)])
    def test_opaque_atoms_are_primitive(self, value):
        """Modules and objects without a __dict__ are never looked inside."""
        assert classify(value) is ValueKind.PRIMITIVE

    def test_is_composite(self):
        assert is_composite([1])
        assert is_composite(Point(1, 2))
        assert not is_composite("abc")
        assert not is_composite(len)


class TestRecordItems:
    """Test key enumeration along the property-resolution chain."""

    def test_own_then_inherited(self):
        account = build_account()
        keys = [key for key, _ in record_items(account)]
        assert keys == ["owner", "tags", "_balance", "kind", "rate", "limits"]

    def test_first_definition_wins(self):
        items = dict(record_items(build_account()))
        assert items["kind"] == "savings"
        assert items["limits"] is Account.limits

    def test_own_keys_only(self):
        keys = [key for key, _ in record_items(build_account(), own_keys_only=True)]
        assert keys == ["owner", "tags", "_balance"]

    def test_instance_value_shadows_class_value(self):
        account = build_account()
        account.kind = "joint"
        items = dict(record_items(account))
        assert items["kind"] == "joint"
        assert [key for key, _ in record_items(account)].count("kind") == 1

    def test_methods_and_accessors_not_enumerated(self):
        keys = [key for key, _ in record_items(build_account())]
        assert "deposit" not in keys
        assert "balance" not in keys

    def test_accessors(self):
        assert record_accessors(build_account()) == ["balance"]
        assert record_accessors(Point(1, 2)) == []


class TestContainers:
    """Test allocation helpers."""

    def test_new_record_skips_init(self):
        account = build_account()
        blank = new_record(account)
        assert type(blank) is type(account)
        assert vars(blank) == {}

    def test_empty_mapping_keeps_kind(self):
        assert type(empty_mapping_like(OrderedDict(a=1))) is OrderedDict
        factory_dict = empty_mapping_like(defaultdict(list, a=[1]))
        assert factory_dict.default_factory is list
        assert len(factory_dict) == 0

    def test_rebuild_sequences(self):
        Pair = namedtuple("Pair", "left right")
        assert rebuild_sequence(Pair(1, 2), [3, 4]) == Pair(3, 4)
        assert type(rebuild_sequence(Pair(1, 2), [3, 4])) is Pair
        assert rebuild_sequence((1,), [2]) == (2,)
        assert rebuild_sequence(frozenset({1}), [2]) == frozenset({2})
        assert rebuild_sequence([1], [2]) == [2]


def test_child_path():
    assert child_path("$", "name") == "$.name"
    assert child_path("$.friends", 0) == "$.friends[0]"
    assert child_path("$", (1, 2)) == "$[(1, 2)]"


class TestOverrides:
    """A subclass definition hides every base definition of the same name."""

    def test_method_hides_base_data(self):
        assert record_items(MethodChild()) == [("label", "plain"), ("level", 1)]

    def test_property_hides_base_data(self):
        assert record_items(PropChild()) == [("kind", "base"), ("level", 1)]
        assert record_accessors(PropChild()) == ["label"]

    def test_data_hides_base_data(self):
        assert record_items(DataChild()) == [("level", 2), ("kind", "base"), ("label", "plain")]

    def test_data_hides_base_property(self):
        class Plain(PropChild):
            label = "fixed"

        assert record_accessors(Plain()) == []
        assert ("label", "fixed") in record_items(Plain())


class TestSlots:
    """Slot values of a record are own keys."""

    def test_assigned_slots_enumerated(self):
        record = SlottedChild(5, 6)
        assert record_items(record) == [("y", 6), ("x", 5)]
        assert record_items(record, own_keys_only=True) == [("y", 6), ("x", 5)]

    def test_private_slot_is_mangled(self):
        record = SlottedChild(5, 6)
        record.hide("s")
        assert ("_Slotted__secret", "s") in record_items(record)


class TestAllocation:
    """Allocation fallbacks for unusual constructors."""

    def test_new_requiring_arguments(self):
        class NeedsArg:
            def __new__(cls, required):
                return super().__new__(cls)

            def __init__(self, required):
                self.required = required

        blank = new_record(NeedsArg(3))
        assert type(blank) is NeedsArg
        assert vars(blank) == {}

    def test_exception_keeps_args(self):
        blank = new_record(ValueError("bad", 2))
        assert type(blank) is ValueError
        assert blank.args == ("bad", 2)

    def test_deque_keeps_maxlen(self):
        rebuilt = rebuild_sequence(deque([1, 2], maxlen=2), [3])
        assert type(rebuilt) is deque
        assert rebuilt.maxlen == 2
        assert list(rebuilt) == [3]
