"""
Clone strategies and per-cloner options.

There is no configuration file and no environment lookup: a cloner is
configured entirely by the CloneOptions it is constructed with, and the
strategy is selected per call with a CloneMode.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CloneMode(Enum):
    """
    Cloning strategy.

    SHALLOW:
        New top-level container, same member references.
    DEEP_RECURSIVE:
        Structural copy all the way down; callables stay shared.
        Cycle-safe.
    SERIALIZE_ROUND_TRIP:
        Encode to structured text and decode again. Lossy: callables,
        NaN and infinities do not survive, records come back as dicts.

    CONSTRAINT (SHALLOW / DEEP_RECURSIVE):
        Copies are allocated without running __init__. Records fall back
        to object.__new__ when their own __new__ requires arguments, and
        exceptions are allocated with their args. Mapping subclasses
        (other than defaultdict) must be constructible without arguments,
        sequence subclasses from a single iterable; otherwise the
        constructor's TypeError propagates.
    """
    SHALLOW = "shallow"
    DEEP_RECURSIVE = "deep"
    SERIALIZE_ROUND_TRIP = "serialize"


class TextFormat(Enum):
    """Intermediate text grammar used by SERIALIZE_ROUND_TRIP."""
    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True)
class CloneOptions:
    """
    Options shared by every clone call of a ValueCloner.

    Properties:
        own_keys_only:
            Enumerate only a record's instance attributes. When False
            (the default) public class-level data attributes are copied
            onto the clone as well.

        max_depth:
            Maximum Composite nesting accepted by DEEP_RECURSIVE and
            SERIALIZE_ROUND_TRIP. The root Composite sits at depth 0.
            None means unbounded.

        text_format:
            Grammar used for the round trip (JSON or YAML).

        warn_on_loss:
            Emit a LossyCloneWarning listing members dropped or nulled
            by a round trip.
    """

    own_keys_only: bool = False
    max_depth: Optional[int] = None
    text_format: TextFormat = TextFormat.JSON
    warn_on_loss: bool = False

    def __post_init__(self):
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
