"""Binary search over sequences sorted by a string key."""

from __future__ import annotations

import bisect
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Outcome of a sorted lookup.

    Attributes:
        found: True if an item with the target key exists.
        index: Position of the match, or the insertion point that keeps
            the sequence sorted when not found.
    """

    found: bool
    index: int


def binary_search(
    items: Sequence[T],
    target: str,
    key: Callable[[T], str],
) -> SearchResult:
    """Locate ``target`` in ``items`` sorted ascending by ``key``.

    The sequence must already be sorted with plain string ordering; it is
    never sorted here. Runs in O(log n) key extractions. Keys are expected
    to be unique; with duplicates the leftmost match is reported.
    """
    index = bisect.bisect_left(items, target, key=key)
    found = index < len(items) and key(items[index]) == target
    return SearchResult(found=found, index=index)


def insert_sorted(items: list[T], item: T, key: Callable[[T], str]) -> int:
    """Insert ``item`` keeping ``items`` sorted, replacing an equal key.

    Returns:
        The index the item now occupies.
    """
    result = binary_search(items, key(item), key)
    if result.found:
        items[result.index] = item
    else:
        items.insert(result.index, item)
    return result.index
