"""Tests for stock movements applied to a Product aggregate."""

from datetime import date

import pytest
from protean import atomic_change
from protean.exceptions import ValidationError
from stockroom.product.product import MovementKind, Product
from stockroom.shared.errors import InsufficientStock, InvalidInput, InvalidQuantity

ADD = MovementKind.ADD_TO_STOCK
REMOVE = MovementKind.REMOVE_FROM_STOCK


@pytest.fixture()
def product(sequential_ids):
    return Product.create(
        product_id="P1",
        name="Whole Milk 1L",
        entry_date=date(2024, 3, 1),
        initial_quantity=10,
        history_capacity=4,
        id_factory=sequential_ids,
    )


class TestApplyMovement:
    @pytest.mark.parametrize("quantity", [0, 1, 7, 1_000_000])
    def test_add_increases_by_exact_quantity(self, product, quantity):
        product.apply_movement(ADD, quantity)
        assert product.quantity == 10 + quantity

    @pytest.mark.parametrize("quantity", [0, 1, 9, 10])
    def test_remove_within_stock_decreases_by_exact_quantity(self, product, quantity):
        product.apply_movement(REMOVE, quantity)
        assert product.quantity == 10 - quantity

    def test_remove_beyond_stock_clamps_to_zero(self, product):
        movement = product.apply_movement(REMOVE, 15)
        assert product.quantity == 0
        # The recorded movement keeps the requested quantity
        assert movement.quantity == 15
        assert product.recent_movements()[0].quantity == 15

    def test_negative_quantity_is_rejected(self, product):
        with pytest.raises(InvalidQuantity) as exc_info:
            product.apply_movement(ADD, -1)
        assert "quantity" in exc_info.value.messages
        assert product.quantity == 10
        assert len(product.movements) == 1

    @pytest.mark.parametrize("quantity", [1.5, "3", None, True])
    def test_non_integer_quantity_is_invalid_input(self, product, quantity):
        with pytest.raises(InvalidInput):
            product.apply_movement(ADD, quantity)

    @pytest.mark.parametrize("kind", ["InvalidType", "RemoveToStock", "addtostock", "", None])
    def test_unknown_kind_is_invalid_input(self, product, kind):
        with pytest.raises(InvalidInput) as exc_info:
            product.apply_movement(kind, 5)
        assert "kind" in exc_info.value.messages
        assert product.quantity == 10
        assert len(product.movements) == 1

    def test_kind_accepts_string_values(self, product):
        product.apply_movement("AddToStock", 2)
        product.apply_movement("RemoveFromStock", 1)
        assert product.quantity == 11

    def test_movement_uses_injected_id(self, product):
        movement = product.apply_movement(ADD, 1)
        assert movement.id == "mv-2"

    def test_factory_given_at_creation_is_kept_for_later_movements(self, product):
        ids = [product.record_movement(ADD, q).id for q in (1, 2)]
        ids.append(product.apply_movement(REMOVE, 1).id)
        assert ids == ["mv-2", "mv-3", "mv-4"]

    def test_explicit_factory_overrides_the_kept_one(self, product):
        movement = product.record_movement(ADD, 1, id_factory=lambda: "manual")
        assert movement.id == "manual"

    def test_movement_date_defaults_to_today(self, product):
        movement = product.apply_movement(ADD, 1)
        assert movement.movement_date == date.today()

    def test_movement_keeps_given_date(self, product):
        movement = product.apply_movement(ADD, 1, movement_date=date(2024, 3, 5))
        assert movement.movement_date == date(2024, 3, 5)

    def test_movements_are_numbered_in_order(self, product):
        first = product.apply_movement(ADD, 1)
        second = product.apply_movement(ADD, 1)
        assert (first.sequence, second.sequence) == (2, 3)
        assert product.movement_count == 3


class TestRecordMovement:
    def test_removal_exceeding_stock_is_refused(self, product):
        with pytest.raises(InsufficientStock) as exc_info:
            product.record_movement(REMOVE, 15)
        assert "quantity" in exc_info.value.messages
        assert product.quantity == 10
        assert len(product.movements) == 1

    def test_removal_of_entire_stock_is_allowed(self, product):
        product.record_movement(REMOVE, 10)
        assert product.quantity == 0

    def test_add_is_never_refused(self, product):
        product.record_movement(ADD, 500)
        assert product.quantity == 510

    def test_negative_quantity_is_rejected_before_stock_check(self, product):
        with pytest.raises(InvalidQuantity):
            product.record_movement(REMOVE, -5)

    def test_unknown_kind_is_rejected(self, product):
        with pytest.raises(InvalidInput):
            product.record_movement("Transfer", 1)


class TestHistoryRetention:
    def test_history_keeps_last_four_movements(self, product):
        for quantity in (5, 6, 7, 8, 9):
            product.record_movement(ADD, quantity)

        assert product.quantity == 45
        assert [m.quantity for m in product.recent_movements()] == [9, 8, 7, 6]
        assert len(product.movements) == 4

    def test_initial_movement_is_evicted_first(self, product):
        for quantity in (1, 2, 3):
            product.record_movement(ADD, quantity)
        assert "mv-1" in [m.id for m in product.movements]

        product.record_movement(ADD, 4)
        assert "mv-1" not in [m.id for m in product.movements]

    def test_eviction_does_not_change_quantity(self, product):
        for _ in range(6):
            product.record_movement(ADD, 1)
        assert product.quantity == 16

    def test_history_respects_custom_capacity(self, sequential_ids):
        product = Product.create(
            product_id="P2",
            name="Rye Bread",
            initial_quantity=0,
            history_capacity=2,
            id_factory=sequential_ids,
        )
        for quantity in (1, 2, 3):
            product.record_movement(ADD, quantity)
        assert [m.quantity for m in product.recent_movements()] == [3, 2]

    def test_retention_invariant_guards_direct_additions(self, product):
        from stockroom.product.product import StockMovement

        for quantity in (1, 2, 3):
            product.record_movement(ADD, quantity)

        with pytest.raises(ValidationError) as exc_info:
            with atomic_change(product):
                product.add_movements(
                    StockMovement(
                        id="rogue",
                        kind=ADD.value,
                        quantity=1,
                        movement_date=date.today(),
                        sequence=99,
                    )
                )
        assert "Cannot retain more than 4 movements" in str(exc_info.value)


class TestSortedHistory:
    def test_sorted_by_quantity_ascending(self, product):
        for quantity in (30, 5, 20):
            product.record_movement(ADD, quantity)
        assert [m.quantity for m in product.history_sorted_by_quantity()] == [5, 10, 20, 30]

    def test_equal_quantities_keep_insertion_order(self, sequential_ids):
        product = Product.create(product_id="P3", name="Eggs", initial_quantity=5, id_factory=sequential_ids)
        product.record_movement(ADD, 3)
        product.record_movement(ADD, 5)

        # Ties keep their history order, which is newest first
        assert [m.id for m in product.history_sorted_by_quantity()] == ["mv-2", "mv-3", "mv-1"]

    def test_sorted_view_is_idempotent(self, product):
        for quantity in (4, 2, 8):
            product.record_movement(ADD, quantity)
        first = product.history_sorted_by_quantity()
        second = product.history_sorted_by_quantity()
        assert [m.id for m in first] == [m.id for m in second]

    def test_sorted_view_does_not_reorder_history(self, product):
        for quantity in (4, 2, 8):
            product.record_movement(ADD, quantity)
        product.history_sorted_by_quantity()
        assert [m.quantity for m in product.recent_movements()] == [8, 2, 4, 10]

    def test_partition_strategy_gives_same_quantity_order(self, product):
        for quantity in (4, 2, 8):
            product.record_movement(ADD, quantity)
        bubble = product.history_sorted_by_quantity(strategy="bubble")
        partition = product.history_sorted_by_quantity(strategy="partition")
        assert [m.quantity for m in bubble] == [m.quantity for m in partition]

    def test_configured_strategy_is_used(self, product, monkeypatch):
        monkeypatch.setenv("STOCKROOM_SORT_STRATEGY", "nope")
        with pytest.raises(InvalidInput):
            product.history_sorted_by_quantity()
