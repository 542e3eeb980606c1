"""Result type for explicit error handling.

Feed generation reports failures by return value instead of raising. Each
step returns ``Ok(value)`` or ``Err(error)`` and the caller decides what to
do with it:

    match writer.write_feed_file(records):
        case Ok(path):
            console.success(f"published {path}")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying an error value."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
