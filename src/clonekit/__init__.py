"""
clonekit: independent copies of arbitrary Python values.

Three strategies, one entry point:

    clone(value, CloneMode.SHALLOW)
    clone(value, CloneMode.DEEP_RECURSIVE)
    clone(value, CloneMode.SERIALIZE_ROUND_TRIP)

ARCHITECTURAL GUARANTEE:
------------------------
Cloning is a pure function of (value, mode, options):
    - No module state
    - No I/O
    - The input is never mutated

Callables are never duplicated, only shared by reference.
"""

from clonekit.analyzer import ValueReport, analyze_value, shared_composites
from clonekit.cloner import ValueCloner, clone, deep_clone, serialize_clone, shallow_clone
from clonekit.errors import CloneDepthError, CloneError, EncodingError, LossyCloneWarning
from clonekit.options import CloneMode, CloneOptions, TextFormat
from clonekit.values import ValueKind, classify

__version__ = "0.1.0"

__all__ = [
    "CloneDepthError",
    "CloneError",
    "CloneMode",
    "CloneOptions",
    "EncodingError",
    "LossyCloneWarning",
    "TextFormat",
    "ValueCloner",
    "ValueKind",
    "ValueReport",
    "analyze_value",
    "classify",
    "clone",
    "deep_clone",
    "serialize_clone",
    "shallow_clone",
    "shared_composites",
]
