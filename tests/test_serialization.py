"""
Tests for the structured-text codec behind SERIALIZE_ROUND_TRIP.

These tests pin down how values are lowered to plain trees and which
inputs have no text form, for both JSON and YAML.
"""

import datetime
import json
from collections import deque
from enum import Enum

import pytest
import yaml

from clonekit.errors import CloneDepthError, EncodingError
from clonekit.examples import build_account, build_cyclic_graph, build_lossy_value, build_profile
from clonekit.options import TextFormat
from clonekit.serialization import (
    dumps,
    loads,
    round_trip,
    to_plain,
    value_to_json,
    value_to_yaml,
)


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class Money:
    def __init__(self, amount, currency):
        self.amount = amount
        self.currency = currency

    def to_json(self):
        return f"{self.amount} {self.currency}"


def test_json_roundtrip():
    profile = build_profile()
    json_str = value_to_json(profile)
    assert json.loads(json_str) == profile
    assert loads(json_str, TextFormat.JSON) == profile


def test_yaml_roundtrip():
    profile = build_profile()
    yaml_str = value_to_yaml(profile)
    assert yaml.safe_load(yaml_str) == profile
    assert loads(yaml_str, TextFormat.YAML) == profile


def test_yaml_keeps_insertion_order():
    yaml_str = value_to_yaml({"b": 1, "a": 2})
    assert yaml_str.index("b:") < yaml_str.index("a:")


class TestToPlain:
    """Test lowering values to plain trees."""

    def test_callables_omitted_from_mappings_and_nulled_in_sequences(self):
        plain = to_plain({"f": len, "items": [len, 1]})
        assert plain == {"items": [None, 1]}

    def test_non_finite_numbers_become_null(self):
        plain = to_plain({"nan": float("nan"), "values": [float("inf"), float("-inf"), 1.5]})
        assert plain == {"nan": None, "values": [None, None, 1.5]}

    def test_top_level_non_finite(self):
        assert to_plain(float("nan")) is None

    def test_enum_members_encode_as_value(self):
        assert to_plain({"color": Color.RED, "all": [Color.BLUE]}) == {"color": "red", "all": ["blue"]}

    def test_tuples_become_lists(self):
        assert to_plain(("a", ("b",))) == ["a", ["b"]]

    def test_deques_become_lists(self):
        assert to_plain({"queue": deque([1, (2,)], maxlen=5)}) == {"queue": [1, [2]]}

    def test_mapping_keys(self):
        plain = to_plain({1: "a", None: "b", 2.5: "c", False: "d", Color.RED: "e"})
        assert plain == {"1": "a", "null": "b", "2.5": "c", "false": "d", "red": "e"}

    def test_to_json_hook(self):
        assert to_plain({"price": Money(5, "EUR")}) == {"price": "5 EUR"}

    def test_accessors_flattened(self):
        plain = to_plain(build_account(balance=42.0), own_keys_only=True)
        assert plain["balance"] == 42.0
        assert plain["_balance"] == 42.0

    def test_shared_references_duplicated(self):
        shared = [1]
        result = round_trip({"a": shared, "b": shared})
        assert result == {"a": [1], "b": [1]}
        assert result["a"] is not result["b"]

    def test_on_loss_reports_paths(self):
        lost = []
        to_plain(build_lossy_value(), on_loss=lambda path, reason: lost.append(path))
        assert lost == ["$.score", "$.callback", "$.items[1]", "$.items[2]"]

    def test_depth_bound(self):
        assert to_plain([[1]], max_depth=1) == [[1]]
        with pytest.raises(CloneDepthError, match=r"\$\[0\]\[0\]"):
            to_plain([[[1]]], max_depth=1)


class TestEncodingErrors:
    """Inputs with no text form."""

    def test_cycle(self):
        with pytest.raises(EncodingError, match="Circular reference"):
            to_plain(build_cyclic_graph())

    def test_cycle_in_record(self):
        account = build_account()
        account.tags.append(account)
        with pytest.raises(EncodingError, match=r"\$\.tags\[1\]"):
            round_trip(account)

    def test_top_level_callable(self):
        with pytest.raises(EncodingError, match="no text representation"):
            to_plain(lambda: 1)

    @pytest.mark.parametrize(
        "value", [{1, 2}, frozenset(), bytearray(b"raw"), b"raw", 1j, datetime.date(2024, 1, 1), object()]
    )
    def test_unsupported_types(self, value):
        with pytest.raises(EncodingError, match="not serializable"):
            to_plain({"value": value})

    def test_unsupported_key(self):
        with pytest.raises(EncodingError, match="Keys must be"):
            to_plain({(1, 2): "pair"})

    def test_malformed_json(self):
        with pytest.raises(EncodingError):
            loads("{", TextFormat.JSON)

    def test_malformed_yaml(self):
        with pytest.raises(EncodingError):
            loads("a: [", TextFormat.YAML)

    def test_unsupported_format(self):
        with pytest.raises(ValueError):
            dumps({}, "xml")


@pytest.mark.parametrize("text_format", [TextFormat.JSON, TextFormat.YAML])
def test_round_trip_formats_agree(text_format):
    value = {"id": 1, "name": "x", "nested": {"flag": True, "none": None, "n": 2.5}, 3: [1, "2"]}
    assert round_trip(value, text_format=text_format) == {
        "id": 1,
        "name": "x",
        "nested": {"flag": True, "none": None, "n": 2.5},
        "3": [1, "2"],
    }
