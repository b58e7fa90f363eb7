"""
Core Module - Helpers.

Small list and string utilities shared by the registry and the trade feed.
"""

from typing import Callable, Iterable, List, Optional, TypeVar

from .exceptions import NotFoundError


T = TypeVar("T")


def compare_string(first: str, second: str) -> bool:
    """Case-insensitive equality. Both arguments must be strings."""
    if not (isinstance(first, str) and isinstance(second, str)):
        raise TypeError(
            f"String one: {first!r} String two: {second!r} one of them is not a string"
        )
    return first.lower() == second.lower()


def find_or_throw(
    items: Iterable[T],
    predicate: Callable[[T], object],
    message: Optional[str] = None,
) -> T:
    """Return the first item matching ``predicate`` or raise NotFoundError."""
    for item in items:
        if predicate(item):
            return item
    raise NotFoundError(message or "Failed to find object in find or throw")


def update_array(
    items: Iterable[T],
    predicate: Callable[[T], bool],
    updater: Callable[[T], T],
) -> List[T]:
    """Return a new list where matching items are replaced by ``updater(item)``."""
    return [updater(item) if predicate(item) else item for item in items]


__all__ = [
    "compare_string",
    "find_or_throw",
    "update_array",
]
