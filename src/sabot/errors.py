"""Exception types.

Emission never raises; these surface only from the optional layers
(process-wide accessor) and from normalization internals.
"""

from __future__ import annotations


class SabotError(Exception):
    """Base class for sabot errors."""


class FieldError(SabotError):
    """A field value could not be normalized into a serializable form."""

    __slots__ = ("value",)

    def __init__(self, message: str, value: object) -> None:
        self.value = value
        super().__init__(message)


class SingletonUndefinedError(SabotError):
    """Raised when the process-wide logger is read before it is installed."""

    def __init__(self) -> None:
        super().__init__("singleton logger is undefined")


class SingletonAlreadySetError(SabotError):
    """Raised when a second, different logger is installed process-wide."""

    def __init__(self) -> None:
        super().__init__("singleton logger is already set")
