"""Domain events for the Product aggregate.

Every accepted stock movement is reported, including the ones later pushed
out of the product's bounded history, so consumers can keep a full log even
though the aggregate itself only retains the most recent few.
"""

from protean.fields import Boolean, Date, DateTime, Identifier, Integer, String

from stockroom.domain import stockroom


@stockroom.event(part_of="Product")
class ProductRegistered:
    """A product was added to the registry with its opening stock."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    name = String(required=True)
    entry_date = Date(required=True)
    initial_quantity = Integer(required=True)
    history_capacity = Integer(required=True)


@stockroom.event(part_of="Product")
class StockMovementRecorded:
    """Stock was added to or removed from a product."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    movement_id = Identifier(required=True)
    kind = String(required=True)
    quantity = Integer(required=True)
    movement_date = Date(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    clamped = Boolean(default=False)  # removal exceeded stock; total floored at zero


@stockroom.event(part_of="Product")
class StockMovementEvicted:
    """The oldest retained movement was dropped to make room for a newer one."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    movement_id = Identifier(required=True)
    kind = String(required=True)
    quantity = Integer(required=True)
    movement_date = Date(required=True)


@stockroom.event(part_of="Product")
class ProductRemoved:
    """A product and its movement history were removed from the registry."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    final_quantity = Integer(required=True)
    removed_at = DateTime(required=True)
