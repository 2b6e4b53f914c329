"""
Calculation outcomes.

A calculation either produces a value or reports that the series was too
short for its window. Callers branch on the type instead of checking for
None or NaN.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class InsufficientData:
    indicator: str
    required: int
    available: int

    def __str__(self) -> str:
        return f"{self.indicator}: need {self.required} points, got {self.available}"


Outcome = Union[Ok[T], InsufficientData]
