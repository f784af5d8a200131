"""
Permx Exceptions

Errors raised by the permission engine and its persistence layer.
"""


class PermxError(Exception):
    """Base class for all permx errors."""


class ResolutionError(PermxError, LookupError):
    """A permission reference could not be located or instantiated."""

    def __init__(self, reference, reason: str = "unknown permission"):
        self.reference = reference
        super().__init__(f"Cannot resolve permission {reference!r}: {reason}")


class OverrideStoreError(PermxError):
    """The override store failed to read or write a row."""
