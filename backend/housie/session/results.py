"""Explicit success/failure results returned by the exposed room operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from housie.logic.enums import HousieErrorCode
    from housie.logic.exceptions import HousieError


@dataclass(frozen=True)
class Success[T]:
    value: T


@dataclass(frozen=True)
class Failure:
    """A rejected operation.

    Attributes:
        code: Machine-readable error kind.
        message: Human-readable explanation for the requesting client.
        number: Last called number, set only for draws after game over.

    """

    code: HousieErrorCode
    message: str
    number: int | None = None

    @classmethod
    def from_error(cls, error: HousieError) -> Failure:
        return cls(code=error.code, message=error.message, number=getattr(error, "number", None))


type Result[T] = Success[T] | Failure
