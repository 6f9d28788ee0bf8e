"""Result type for explicit success/failure handling.

Several operations in the simulation can legitimately fail without it
being an error: a spawn past the population cap, a hookset while another
fish already owns the lure, a state transition the table does not allow.
Those return a Result instead of raising, so the caller decides whether
the failure is worth a log line.

Usage:
------
    result = registry.request_spawn(member)
    if result.is_err():
        logger.debug("spawn dropped: %s", result.error)

    session = fight.try_begin(predator, frame).unwrap_or(None)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transformed value type


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful operation result carrying a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    @property
    def error(self) -> None:
        """Ok has no error, returns None."""
        return None

    def map(self, f: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value.

        Example:
            Ok(3).map(lambda n: n * 2)  # Ok(6)
        """
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning operation."""
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed operation result carrying an error (usually a message).

    Example:
        def lookup(organism_id: OrganismId) -> Result[Organism, str]:
            if organism_id not in live:
                return Err(f"{organism_id} is not live")
            return Ok(live[organism_id])
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raises ValueError since Err has no success value."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    @property
    def value(self) -> None:
        """Err has no value, returns None."""
        return None

    def map(self, f: Callable[[T], U]) -> "Err[E]":
        return self

    def and_then(self, f: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]

# Operation that returns nothing on success but might fail
UnitResult = Result[None, str]


def ok() -> Ok[None]:
    """Create an Ok(None) for operations that succeed with no return value."""
    return Ok(None)


def err(message: str) -> Err[str]:
    """Create an Err with a string message."""
    return Err(message)
