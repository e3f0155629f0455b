"""
Exceptions and warnings raised by clonekit.

All domain errors derive from CloneError so callers can catch one type.
RecursionError on unbounded input is an interpreter limit, not a domain
error, and is never wrapped.
"""


class CloneError(Exception):
    """Base class for cloning failures."""
    pass


class EncodingError(CloneError):
    """
    Raised when a value cannot be represented in the structured-text grammar.

    Only SERIALIZE_ROUND_TRIP raises this:
        - cyclic references
        - a top-level callable (nothing left to encode)
        - sets, bytes, complex numbers and other opaque atoms
        - mapping keys that have no text form
    """
    pass


class CloneDepthError(CloneError):
    """Raised when a value nests deeper than CloneOptions.max_depth."""
    pass


class LossyCloneWarning(UserWarning):
    """Emitted when a round-trip clone drops or nulls members."""
    pass
