"""Errors raised by the storm damage pipeline."""

from __future__ import annotations
from typing import Iterable


class StormError(Exception):
    """Base error for this package."""


class LoadError(StormError):
    """Raised when the dataset cannot be downloaded or parsed as CSV."""


class MissingFieldError(StormError, KeyError):
    """Raised when one or more required columns are absent from the raw data."""

    def __init__(self, missing: Iterable[str]):
        self.missing = tuple(missing)
        super().__init__(f"Missing required field(s): {', '.join(self.missing)}")

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.args[0]


class UnknownExponentCodeError(StormError, ValueError):
    """Raised when a damage exponent code is not in the multiplier table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown damage exponent code: {code!r}")


class InvalidValueError(StormError, ValueError):
    """Raised when a numeric field holds a negative, non-finite or non-numeric value."""
