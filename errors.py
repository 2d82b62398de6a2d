# errors.py

"""
Fault classes raised by the disk core.

Only non-finite input is a recoverable error. Everything else here signals a
broken configuration or a broken caller and is not meant to be caught by the
simulation loop.
"""


class ConfigurationError(ValueError):
    """The disk configuration cannot satisfy its own radius invariants."""


class InvalidInputError(ValueError):
    """A setter received a NaN or infinite value."""


class DisposedError(RuntimeError):
    """An operation was attempted on a disk that has already been disposed."""


class FieldInvariantError(RuntimeError):
    """The particle generator was asked for an empty or inverted radius range."""
