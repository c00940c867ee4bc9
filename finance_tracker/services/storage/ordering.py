"""Ordering shared by every backend."""

from typing import Iterable, TypeVar

from pydantic import BaseModel

R = TypeVar("R", bound=BaseModel)


def newest_first(records: Iterable[R]) -> list[R]:
    """
    Sort records by their `date`, newest first.

    Sorting on the POSIX timestamp lets aware and naive (local wall time)
    dates sit in the same collection. The sort is stable.
    """
    return sorted(records, key=lambda r: r.date.timestamp(), reverse=True)
