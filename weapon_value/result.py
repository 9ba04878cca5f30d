"""
Result type for recoverable evaluation failures.

Operations in the evaluation pipeline never raise for conditions that are
expected on real listings (missing fields, contradictory modifiers, weapons
without rune sockets). They return ``Ok(value)`` or ``Err(failure)`` where
the failure carries a ``FailureReason`` tag so callers can tell a data
quality issue apart from a listing that simply is not a weapon.

Usage:
    from weapon_value.result import Ok, Err, FailureReason, failure

    def parse_aps(text: str) -> Result[float, EvaluationFailure]:
        value = parse_number(text)
        if value is None:
            return failure(FailureReason.MISSING_DATA, "no attack rate")
        return Ok(value)

    result = parse_aps("1.20")
    if result.is_ok():
        print(result.unwrap())
    else:
        print(result.reason, result.error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, NoReturn, Optional, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped success type


class FailureReason(Enum):
    """Why an evaluation step produced no value."""
    MISSING_DATA = "missing_data"
    INCONSISTENT_MODIFIERS = "inconsistent_modifiers"
    NO_RUNE_SOCKETS = "no_rune_sockets"


@dataclass(frozen=True)
class EvaluationFailure:
    """A tagged, human-readable failure."""
    reason: FailureReason
    message: str

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result holding a value.

    Example:
        >>> Ok(42).unwrap()
        42
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, func: Callable[[T], U]) -> Ok[U]:
        """Transform the success value.

        Example:
            >>> Ok(5).map(lambda x: x * 2)
            Ok(10)
        """
        return Ok(func(self.value))

    def and_then(self, func: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning step."""
        return func(self.value)

    @property
    def error(self) -> None:
        return None

    @property
    def reason(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result holding an error (usually an ``EvaluationFailure``).

    Example:
        >>> Err("not a weapon").is_err()
        True
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raises ValueError, since an Err carries no value."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable[[T], U]) -> "Err[E]":
        return self

    def and_then(self, func: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        return self

    @property
    def value(self) -> None:
        return None

    @property
    def reason(self) -> Optional[FailureReason]:
        """The failure tag when the error is an EvaluationFailure."""
        return getattr(self.error, "reason", None)

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


def failure(reason: FailureReason, message: str) -> Err[EvaluationFailure]:
    """Shorthand for ``Err(EvaluationFailure(reason, message))``."""
    return Err(EvaluationFailure(reason, message))
