"""Registry of products, unique by id, backed by the Product repository.

Products are persisted through Protean's repository, so every change is
committed (movements added and evicted are flushed, raised events are handed
to the event store) and each operation works on a freshly loaded aggregate.

Listing follows registration order. Lookups load the registered products and
run the configured search strategy (see ``stockroom.product.search``) over
them. ``all()`` hands out a new list each time.

Writes are serialized with a registry-wide lock: the memory provider commits
a whole snapshot of its store, so two interleaved writers would lose updates.
"""

import threading
from datetime import date

from protean.utils.globals import current_domain

from stockroom.config import get_search_strategy
from stockroom.product.product import Product, StockMovement, new_movement_id
from stockroom.product.search import resolve_search
from stockroom.shared.errors import DuplicateProductId, ProductNotFound
from stockroom.utils.logging import get_logger

logger = get_logger(__name__)


class ProductRegistry:
    def __init__(self, search=None, id_factory=new_movement_id, history_capacity=None):
        self._search = search
        self._id_factory = id_factory
        self._history_capacity = history_capacity
        self._lock = threading.RLock()

    @property
    def search(self):
        return self._search or resolve_search(get_search_strategy())

    @staticmethod
    def _repository():
        return current_domain.repository_for(Product)

    def all(self) -> list[Product]:
        """Registered products in registration order."""
        return list(self._repository()._dao.query.all().items)

    def find(self, product_id):
        """Return the product with ``product_id``, or None."""
        key = product_id.strip() if isinstance(product_id, str) else product_id
        return self.search(self.all(), key)

    def get(self, product_id) -> Product:
        """Return the product with ``product_id`` or raise ProductNotFound."""
        product = self.find(product_id)
        if product is None:
            raise ProductNotFound({"product_id": [f"Product {product_id!r} not found"]})
        return product

    def create(self, product_id, name, entry_date=None, initial_quantity=0) -> Product:
        with self._lock:
            if self.find(product_id) is not None:
                raise DuplicateProductId({"product_id": [f"Product {product_id!r} already exists"]})

            product = Product.create(
                product_id=product_id,
                name=name,
                entry_date=entry_date,
                initial_quantity=initial_quantity,
                history_capacity=self._history_capacity,
                id_factory=self._id_factory,
            )
            self._repository().add(product)

        logger.info(
            "product.registered",
            product_id=product.id,
            name=product.name,
            initial_quantity=product.quantity,
        )
        return product

    def remove(self, product_id) -> Product:
        with self._lock:
            product = self.get(product_id)
            product.discard()

            movement_dao = current_domain.repository_for(StockMovement)._dao
            for movement in product.movements:
                movement_dao.delete(movement)
            self._repository()._dao.delete(product)

        logger.info("product.removed", product_id=product.id, final_quantity=product.quantity)
        return product

    def record_movement(self, product_id, kind, quantity, movement_date: date | None = None):
        """Locate a product, record a movement on it through the checked path and persist it."""
        with self._lock:
            product = self.get(product_id)
            movement = product.record_movement(
                kind,
                quantity,
                movement_date=movement_date,
                id_factory=self._id_factory,
            )
            self._repository().add(product)
        return movement

    def clear(self) -> None:
        with self._lock:
            current_domain.repository_for(StockMovement)._dao.delete_all()
            self._repository()._dao.delete_all()

    def __len__(self) -> int:
        return len(self.all())

    def __contains__(self, product_id) -> bool:
        return self.find(product_id) is not None


# Process-wide registry used by the command handlers and the HTTP API
registry = ProductRegistry()
