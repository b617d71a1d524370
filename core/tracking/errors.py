from __future__ import annotations

from typing import List, Sequence


class TrackingError(Exception):
    """Base class for completeness tracking failures."""


class IncompleteObjectError(TrackingError):
    """Raised when a checked function returns an object with unset fields."""

    def __init__(self, function_name: str, missing_fields: Sequence[str]):
        self.function_name = function_name
        self.missing_fields: List[str] = list(missing_fields)
        # args hold the constructor arguments so the error survives pickling
        super().__init__(function_name, self.missing_fields)

    def __str__(self) -> str:
        return (
            f"Not all properties are set in the returned object from {self.function_name}, "
            f"the following are not set: {', '.join(self.missing_fields)}"
        )


class UntrackedReturnWarning(UserWarning):
    """A checked function returned something that does not track its fields."""
