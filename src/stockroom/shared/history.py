"""Fixed-capacity, most-recent-first history of items.

Keeps only the last ``capacity`` items pushed. When a push would exceed the
capacity, the single oldest item is evicted and handed back to the caller so
it can release whatever it associated with that item.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from stockroom.shared.errors import InvalidCapacity

T = TypeVar("T")


class BoundedHistory(Generic[T]):
    """Retains the last ``capacity`` items, newest first.

    ``items`` may be given oldest-to-newest; they are replayed through
    :meth:`push_front` so the retention rule applies to them as well.
    """

    def __init__(self, capacity: int, items: Iterable[T] = ()) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidCapacity({"capacity": [f"History capacity must be a positive integer, got {capacity!r}"]})

        self._capacity = capacity
        self._items: deque[T] = deque()

        for item in items:
            self.push_front(item)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push_front(self, item: T) -> T | None:
        """Insert ``item`` as the newest entry and return the evicted oldest one, if any."""
        self._items.appendleft(item)
        if len(self._items) > self._capacity:
            return self._items.pop()
        return None

    def drop_oldest(self) -> T | None:
        if not self._items:
            return None
        return self._items.pop()

    def newest(self) -> T | None:
        return self._items[0] if self._items else None

    def oldest(self) -> T | None:
        return self._items[-1] if self._items else None

    def to_list(self) -> list[T]:
        """Snapshot of the retained items, newest first."""
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def is_empty(self) -> bool:
        return not self._items

    def is_full(self) -> bool:
        return len(self._items) == self._capacity

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        return f"BoundedHistory(capacity={self._capacity}, size={len(self._items)})"
