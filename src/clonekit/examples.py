"""
Example values for demonstrations and tests.

Builds the classic copy demonstrations: a user profile with nested
composites, a record whose class carries inherited data plus an accessor
and a method, a graph that refers back to itself, and a value mixing
members that do not survive a text round trip.
"""
from typing import Any, Dict


def build_profile() -> Dict[str, Any]:
    return {
        "name": "Jaenam",
        "gender": "male",
        "friends": ["Dahye", "Jiyeon"],
        "address": {"city": "Seoul", "zip": "04524"},
    }


class Account:
    """
    A record exercising every key category.

    Properties:
        kind, limits:
            Class-level data, reached through the class like inherited
            properties
        owner, tags, _balance:
            Own attributes
        balance:
            Accessor over _balance
        deposit:
            Method (callable, never copied as data)
    """

    kind = "personal"
    limits = {"daily": 1000}

    def __init__(self, owner: str, balance: float = 0.0):
        self.owner = owner
        self.tags = []
        self._balance = balance

    @property
    def balance(self) -> float:
        return self._balance

    @balance.setter
    def balance(self, value: float) -> None:
        self._balance = value

    def deposit(self, amount: float) -> float:
        self._balance += amount
        return self._balance


class SavingsAccount(Account):
    kind = "savings"
    rate = 0.02


def build_account(owner: str = "Jaenam", balance: float = 100.0) -> Account:
    account = SavingsAccount(owner, balance)
    account.tags.append("primary")
    return account


def build_cyclic_graph() -> Dict[str, Any]:
    """A root node that lists its child, whose parent points back at the root."""
    root: Dict[str, Any] = {"name": "root", "children": []}
    child = {"name": "child", "parent": root}
    root["children"].append(child)
    root["self"] = root
    return root


def build_lossy_value() -> Dict[str, Any]:
    return {
        "id": 7,
        "score": float("nan"),
        "callback": lambda: 1,
        "items": [1, len, float("inf")],
        "pair": ("a", "b"),
    }
