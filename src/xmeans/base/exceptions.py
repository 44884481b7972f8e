"""
Exception hierarchy for the X-means package.

Setup problems (bad shapes, out-of-range cluster counts) raise
InvalidInputError; numerically degenerate runtime conditions raise
InvalidStateError. Both also derive from the matching builtin so callers
catching ValueError / RuntimeError keep working.
"""


class XMeansError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInputError(XMeansError, ValueError):
    """Malformed or out-of-range input detected at setup."""


class InvalidStateError(XMeansError, RuntimeError):
    """Degenerate numerical state or an operation called out of order."""
