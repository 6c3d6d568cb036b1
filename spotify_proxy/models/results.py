"""
Goal: Tagged result for the list readers.
A reader hands back either every shaped record or one ErrorShape, never a mix,
and callers branch on the type instead of sniffing for an "error" key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, TypeVar, Union

from spotify_proxy.models.schemas import ErrorShape

T = TypeVar("T")


@dataclass(frozen=True)
class Fetched(Generic[T]):
    items: List[T] = field(default_factory=list)


@dataclass(frozen=True)
class FetchFailed:
    error: ErrorShape


ListResult = Union[Fetched[T], FetchFailed]


def to_wire(result: ListResult) -> Union[List, ErrorShape]:
    """Collapse a result into the list-or-ErrorShape form of the JSON payload."""
    if isinstance(result, FetchFailed):
        return result.error
    return list(result.items)
