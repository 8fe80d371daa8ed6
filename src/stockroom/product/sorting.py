"""Ordering of stock movements by quantity, smallest first.

Histories are short (bounded by the history capacity), so both strategies
work in place on a plain list:

- ``bubble_sort`` makes adjacent-pair passes and stops after a pass with no
  swaps. Only strictly greater neighbours are swapped, which keeps it stable:
  equal quantities stay in their input order. This is the default.
- ``partition_sort`` recursively partitions each range around its last
  element. It yields the same quantity ordering but does not promise to keep
  equal quantities in input order.
"""

from collections.abc import Callable
from operator import attrgetter

from stockroom.shared.errors import InvalidInput

by_quantity = attrgetter("quantity")


def bubble_sort(items: list, key: Callable = by_quantity) -> list:
    n = len(items)
    for done in range(n - 1):
        swapped = False
        for j in range(n - 1 - done):
            if key(items[j]) > key(items[j + 1]):
                items[j], items[j + 1] = items[j + 1], items[j]
                swapped = True
        if not swapped:
            break
    return items


def _partition(items: list, low: int, high: int, key: Callable) -> int:
    pivot = key(items[high])
    boundary = low - 1
    for j in range(low, high):
        if key(items[j]) <= pivot:
            boundary += 1
            items[boundary], items[j] = items[j], items[boundary]
    items[boundary + 1], items[high] = items[high], items[boundary + 1]
    return boundary + 1


def _partition_sort_range(items: list, low: int, high: int, key: Callable) -> None:
    if low < high:
        split = _partition(items, low, high, key)
        _partition_sort_range(items, low, split - 1, key)
        _partition_sort_range(items, split + 1, high, key)


def partition_sort(items: list, key: Callable = by_quantity) -> list:
    _partition_sort_range(items, 0, len(items) - 1, key)
    return items


SORT_STRATEGIES = {
    "bubble": bubble_sort,
    "partition": partition_sort,
}


def resolve_sort(name: str):
    """Return the sort function registered under ``name``."""
    try:
        return SORT_STRATEGIES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise InvalidInput(
            {"sort_strategy": [f"Unknown sort strategy {name!r}; expected one of {sorted(SORT_STRATEGIES)}"]}
        ) from None


def sort_by_quantity(items: list, strategy: str = "bubble") -> list:
    """Sort ``items`` in place by quantity using the named strategy."""
    return resolve_sort(strategy)(items)
