"""Product lookup by identifier.

Two interchangeable strategies share one signature,
``(products, product_id) -> product | None``:

- ``linear_search`` scans the collection in iteration order and returns the
  first exact match. This is the default.
- ``binary_search`` sorts a copy of the collection by id and bisects it. The
  caller's collection is never reordered.

Both treat a blank or non-string id, or an empty collection, as "not found".
"""

from collections.abc import Iterable

from stockroom.shared.errors import InvalidInput


def _is_unusable_id(product_id) -> bool:
    return not isinstance(product_id, str) or not product_id.strip()


def linear_search(products: Iterable | None, product_id: str | None):
    if products is None or _is_unusable_id(product_id):
        return None

    for product in products:
        if product.id == product_id:
            return product
    return None


def binary_search(products: Iterable | None, product_id: str | None):
    if products is None or _is_unusable_id(product_id):
        return None

    ordered = sorted(products, key=lambda p: p.id)

    low, high = 0, len(ordered) - 1
    while low <= high:
        mid = low + (high - low) // 2
        candidate = ordered[mid]
        if candidate.id == product_id:
            return candidate
        if candidate.id < product_id:
            low = mid + 1
        else:
            high = mid - 1
    return None


SEARCH_STRATEGIES = {
    "linear": linear_search,
    "binary": binary_search,
}


def resolve_search(name: str):
    """Return the search function registered under ``name``."""
    try:
        return SEARCH_STRATEGIES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise InvalidInput(
            {"search_strategy": [f"Unknown search strategy {name!r}; expected one of {sorted(SEARCH_STRATEGIES)}"]}
        ) from None
