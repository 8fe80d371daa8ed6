"""Product management commands and their handler.

Commands act on the process-wide ProductRegistry. Domain errors raised by the
registry or the aggregate propagate unchanged to the caller of
``current_domain.process``.
"""

from protean import handle
from protean.fields import Date, Identifier, Integer, String

from stockroom.domain import stockroom
from stockroom.product.product import Product
from stockroom.product.registry import registry


@stockroom.command(part_of="Product")
class RegisterProduct:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    entry_date = Date()
    initial_quantity = Integer(default=0)


@stockroom.command(part_of="Product")
class RecordStockMovement:
    product_id = Identifier(required=True)
    kind = String(required=True, max_length=20)
    quantity = Integer(required=True)
    movement_date = Date()


@stockroom.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


@stockroom.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = registry.create(
            product_id=command.product_id,
            name=command.name,
            entry_date=command.entry_date,
            initial_quantity=command.initial_quantity,
        )
        return str(product.id)

    @handle(RecordStockMovement)
    def record_stock_movement(self, command):
        movement = registry.record_movement(
            command.product_id,
            command.kind,
            command.quantity,
            movement_date=command.movement_date,
        )
        return str(movement.id)

    @handle(RemoveProduct)
    def remove_product(self, command):
        registry.remove(command.product_id)
