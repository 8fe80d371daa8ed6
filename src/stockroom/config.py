"""Runtime settings for the Stockroom domain, read from the environment."""

import os

from stockroom.shared.errors import InvalidCapacity

DEFAULT_HISTORY_CAPACITY = 4
DEFAULT_SEARCH_STRATEGY = "linear"
DEFAULT_SORT_STRATEGY = "bubble"


def get_history_capacity() -> int:
    """Number of movements each product retains.

    Raises InvalidCapacity when the configured value is not a positive integer.
    """
    raw = os.getenv("STOCKROOM_HISTORY_CAPACITY")
    if raw is None or not raw.strip():
        return DEFAULT_HISTORY_CAPACITY

    try:
        capacity = int(raw)
    except ValueError:
        capacity = None
    if capacity is None or capacity <= 0:
        raise InvalidCapacity(
            {"history_capacity": [f"STOCKROOM_HISTORY_CAPACITY must be a positive integer, got {raw!r}"]}
        )
    return capacity


def get_search_strategy() -> str:
    return os.getenv("STOCKROOM_SEARCH_STRATEGY", DEFAULT_SEARCH_STRATEGY)


def get_sort_strategy() -> str:
    return os.getenv("STOCKROOM_SORT_STRATEGY", DEFAULT_SORT_STRATEGY)
