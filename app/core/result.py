"""
Typed service results.

Service operations return ``Ok(value)`` or ``Err(kind, message)`` instead of
raising for expected outcomes (not found, bad credentials, duplicates). The
API layer turns an ``Err`` into an :class:`~app.core.exceptions.AppError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from app.core.exceptions import AppError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    errors: list[dict[str, str]] | None = None

    def to_error(self) -> AppError:
        return AppError(self.kind, self.message, errors=self.errors)


Result = Union[Ok[T], Err]


def unwrap(result: Result[T]) -> T:
    """Return the ``Ok`` value or raise the ``Err`` as an :class:`AppError`."""
    if isinstance(result, Err):
        raise result.to_error()
    return result.value
