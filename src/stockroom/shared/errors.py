"""Stockroom error kinds.

All of them carry a ``messages`` dict keyed by the offending field, the same
shape Protean uses for ``ValidationError``, so callers can report them without
special-casing.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidInput(ValidationError):
    """A required value is blank or malformed, or an unknown movement kind was given."""


class DuplicateProductId(ValidationError):
    """A product with the same id is already registered."""


class InvalidQuantity(ValidationError):
    """A stock movement quantity is negative."""


class InsufficientStock(ValidationError):
    """A removal asks for more units than the product holds."""


class InvalidCapacity(ValidationError):
    """A bounded history was configured with a non-positive capacity."""


class ProductNotFound(ObjectNotFoundError):
    """No registered product has the requested id."""

    def __init__(self, messages: dict, **kwargs) -> None:
        super().__init__(messages, **kwargs)
        self.messages = messages

    def __str__(self) -> str:
        return f"{dict(self.messages)}"
