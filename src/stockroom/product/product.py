"""Product aggregate — running stock quantity plus a bounded movement history.

Stock Ledger Model:
    quantity:          Units currently held. Never negative.
    movements:         The last ``history_capacity`` accepted movements.
    movement_count:    Movements ever accepted; numbers each new movement.

Two entry points change stock:

    record_movement   The caller-facing path. Refuses a removal larger than the
                      current stock with InsufficientStock and changes nothing.
    apply_movement    The ledger rule itself. A removal larger than the stock
                      floors the quantity at zero, while the stored movement
                      keeps the requested quantity.

Retention is decided by a BoundedHistory rebuilt from ``movements``; whatever
it evicts is removed from the association in the same atomic change.
"""

from datetime import date, datetime
from enum import Enum
from operator import attrgetter
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Date, HasMany, Integer, String

from stockroom.config import get_history_capacity, get_sort_strategy
from stockroom.domain import stockroom
from stockroom.product.events import (
    ProductRegistered,
    ProductRemoved,
    StockMovementEvicted,
    StockMovementRecorded,
)
from stockroom.product.sorting import resolve_sort
from stockroom.shared.errors import InsufficientStock, InvalidInput, InvalidQuantity
from stockroom.shared.history import BoundedHistory
from stockroom.utils.logging import get_logger

logger = get_logger(__name__)


def new_movement_id() -> str:
    return str(uuid4())


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class MovementKind(Enum):
    ADD_TO_STOCK = "AddToStock"
    REMOVE_FROM_STOCK = "RemoveFromStock"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(
                {"kind": [f"Unknown movement kind {value!r}; expected one of {[k.value for k in cls]}"]}
            ) from None


def _validate_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput({"quantity": [f"Quantity must be a whole number, got {quantity!r}"]})
    if quantity < 0:
        raise InvalidQuantity({"quantity": ["Quantity cannot be negative"]})


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@stockroom.entity(part_of="Product", limit=None)
class StockMovement:
    """One accepted addition or removal of stock. Never edited once recorded."""

    kind = String(required=True, choices=MovementKind)
    quantity = Integer(required=True, min_value=0)
    movement_date = Date(required=True)
    sequence = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@stockroom.aggregate(limit=None)
class Product:
    """A stocked product and its most recent movements."""

    name = String(required=True, max_length=255)
    entry_date = Date(required=True)
    quantity = Integer(default=0, min_value=0)
    history_capacity = Integer(required=True, min_value=1)
    movement_count = Integer(default=0, min_value=0)
    movements = HasMany(StockMovement)

    @invariant.post
    def history_cannot_exceed_capacity(self):
        if self.history_capacity and len(self.movements or []) > self.history_capacity:
            raise ValidationError(
                {"movements": [f"Cannot retain more than {self.history_capacity} movements"]}
            )

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        product_id,
        name,
        entry_date=None,
        initial_quantity=0,
        history_capacity=None,
        id_factory=new_movement_id,
    ):
        """Register a new product and record its opening stock as an AddToStock movement."""
        if _is_blank(product_id):
            raise InvalidInput({"product_id": ["Product id cannot be empty"]})
        if _is_blank(name):
            raise InvalidInput({"name": ["Product name cannot be empty"]})
        if isinstance(initial_quantity, bool) or not isinstance(initial_quantity, int):
            raise InvalidInput({"initial_quantity": [f"Opening stock must be a whole number, got {initial_quantity!r}"]})
        if initial_quantity < 0:
            raise InvalidInput({"initial_quantity": ["Opening stock cannot be negative"]})

        capacity = get_history_capacity() if history_capacity is None else history_capacity
        # Rejects a bad capacity with InvalidCapacity before the field validators see it
        BoundedHistory(capacity)

        entry_date = entry_date or date.today()
        product = cls(
            id=str(product_id).strip(),
            name=name.strip(),
            entry_date=entry_date,
            quantity=0,
            history_capacity=capacity,
        )
        # Protean containers only accept declared fields through setattr
        object.__setattr__(product, "_id_factory", id_factory)

        product.raise_(
            ProductRegistered(
                product_id=product.id,
                name=product.name,
                entry_date=entry_date,
                initial_quantity=initial_quantity,
                history_capacity=capacity,
            )
        )
        product.apply_movement(MovementKind.ADD_TO_STOCK, initial_quantity, movement_date=entry_date)
        return product

    def movement_id_factory(self):
        """Id source for new movements. Products loaded from a repository use random ids."""
        return getattr(self, "_id_factory", new_movement_id)

    # -------------------------------------------------------------------
    # History views
    # -------------------------------------------------------------------
    def history(self) -> BoundedHistory:
        """Retained movements as a BoundedHistory, newest first."""
        return BoundedHistory(
            self.history_capacity,
            sorted(self.movements or [], key=attrgetter("sequence")),
        )

    def recent_movements(self) -> list:
        return self.history().to_list()

    def history_sorted_by_quantity(self, strategy=None) -> list:
        """Snapshot of the retained movements ordered by quantity, smallest first."""
        sort = resolve_sort(strategy or get_sort_strategy())
        return sort(self.history().to_list())

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def record_movement(self, kind, quantity, movement_date=None, id_factory=None):
        """Apply a movement after checking that a removal is covered by current stock."""
        kind = MovementKind.parse(kind)
        _validate_quantity(quantity)

        if kind is MovementKind.REMOVE_FROM_STOCK and quantity > self.quantity:
            logger.info(
                "stock.removal_rejected",
                product_id=self.id,
                available=self.quantity,
                requested=quantity,
            )
            raise InsufficientStock(
                {"quantity": [f"Insufficient stock: {self.quantity} available, {quantity} requested"]}
            )

        return self.apply_movement(kind, quantity, movement_date=movement_date, id_factory=id_factory)

    def apply_movement(self, kind, quantity, movement_date=None, id_factory=None):
        """Apply a movement to the running quantity and push it onto the history."""
        kind = MovementKind.parse(kind)
        _validate_quantity(quantity)

        previous_quantity = self.quantity or 0
        clamped = False
        if kind is MovementKind.ADD_TO_STOCK:
            new_quantity = previous_quantity + quantity
        else:
            new_quantity = previous_quantity - quantity
            if new_quantity < 0:
                logger.warning(
                    "stock.clamped",
                    product_id=self.id,
                    available=previous_quantity,
                    requested=quantity,
                )
                new_quantity = 0
                clamped = True

        movement = StockMovement(
            id=(id_factory or self.movement_id_factory())(),
            kind=kind.value,
            quantity=quantity,
            movement_date=movement_date or date.today(),
            sequence=(self.movement_count or 0) + 1,
        )

        evicted = self.history().push_front(movement)

        with atomic_change(self):
            self.add_movements(movement)
            if evicted is not None:
                self.remove_movements(evicted)
            self.quantity = new_quantity
            self.movement_count = movement.sequence

        self.raise_(
            StockMovementRecorded(
                product_id=self.id,
                movement_id=movement.id,
                kind=movement.kind,
                quantity=quantity,
                movement_date=movement.movement_date,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                clamped=clamped,
            )
        )
        logger.info(
            "stock.movement_recorded",
            product_id=self.id,
            movement_id=movement.id,
            kind=movement.kind,
            quantity=quantity,
            new_quantity=new_quantity,
        )

        if evicted is not None:
            self.raise_(
                StockMovementEvicted(
                    product_id=self.id,
                    movement_id=evicted.id,
                    kind=evicted.kind,
                    quantity=evicted.quantity,
                    movement_date=evicted.movement_date,
                )
            )
            logger.debug("stock.movement_evicted", product_id=self.id, movement_id=evicted.id)

        return movement

    # -------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------
    def discard(self):
        """Mark the product as removed from the registry."""
        self.raise_(
            ProductRemoved(
                product_id=self.id,
                final_quantity=self.quantity,
                removed_at=datetime.now(),
            )
        )
