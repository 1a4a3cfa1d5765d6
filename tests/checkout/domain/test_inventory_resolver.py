"""Tests for inventory state classification and status resolution."""

import pytest
from protean.exceptions import ValidationError

from checkout.catalogue.inventory import (
    Inventory,
    InventoryStatus,
    StickyBackorder,
    StickyOutOfStock,
    StickyPreorder,
    Tracked,
    Untracked,
    classify_inventory,
    has_stock_on_hand,
    is_out_of_stock,
    resolve_inventory,
)
from checkout.catalogue.product import Product
from checkout.eligibility.validator import stock_violation


def _inventory(**overrides):
    defaults = {"quantity": 10, "low_stock_threshold": 3}
    defaults.update(overrides)
    return Inventory(**defaults)


class TestClassifyInventory:
    def test_managed_stock_is_tracked(self):
        assert isinstance(classify_inventory(_inventory()), Tracked)

    def test_unmanaged_stock_is_untracked(self):
        assert isinstance(classify_inventory(_inventory(manage_stock=False)), Untracked)

    def test_out_of_stock_status_is_sticky(self):
        state = classify_inventory(_inventory(status=InventoryStatus.OUT_OF_STOCK.value, quantity=50))
        assert state == StickyOutOfStock(quantity=50)

    def test_preorder_status_is_sticky(self):
        state = classify_inventory(_inventory(status=InventoryStatus.PREORDER.value, quantity=0))
        assert isinstance(state, StickyPreorder)

    def test_backorder_is_sticky_while_empty(self):
        state = classify_inventory(_inventory(status=InventoryStatus.BACKORDER.value, quantity=0))
        assert isinstance(state, StickyBackorder)

    def test_backorder_with_stock_rederives_with_backorder_on(self):
        state = classify_inventory(_inventory(status=InventoryStatus.BACKORDER.value, quantity=4))
        assert state == Tracked(quantity=4, low_stock_threshold=3, allow_backorder=True)


class TestResolveInventory:
    @pytest.mark.parametrize(
        "quantity, expected",
        [
            (10, InventoryStatus.IN_STOCK),
            (4, InventoryStatus.IN_STOCK),
            (3, InventoryStatus.LOW_STOCK),
            (1, InventoryStatus.LOW_STOCK),
            (0, InventoryStatus.OUT_OF_STOCK),
            (-2, InventoryStatus.OUT_OF_STOCK),
        ],
    )
    def test_tracked_status_follows_quantity(self, quantity, expected):
        assert resolve_inventory(_inventory(quantity=quantity)).status == expected.value

    def test_empty_with_backorder_becomes_backorder(self):
        resolved = resolve_inventory(_inventory(quantity=0, allow_backorder=True))
        assert resolved.status == InventoryStatus.BACKORDER.value

    def test_untracked_is_in_stock_regardless_of_quantity(self):
        resolved = resolve_inventory(_inventory(quantity=0, manage_stock=False))
        assert resolved.status == InventoryStatus.IN_STOCK.value

    def test_sticky_out_of_stock_forces_backorder_off(self):
        resolved = resolve_inventory(
            _inventory(status=InventoryStatus.OUT_OF_STOCK.value, quantity=20, allow_backorder=True)
        )
        assert resolved.status == InventoryStatus.OUT_OF_STOCK.value
        assert resolved.allow_backorder is False

    def test_sticky_preorder_forces_backorder_on(self):
        resolved = resolve_inventory(_inventory(status=InventoryStatus.PREORDER.value, quantity=0))
        assert resolved.status == InventoryStatus.PREORDER.value
        assert resolved.allow_backorder is True

    def test_restocked_backorder_product_resolves_from_quantity(self):
        resolved = resolve_inventory(_inventory(status=InventoryStatus.BACKORDER.value, quantity=8))
        assert resolved.status == InventoryStatus.IN_STOCK.value
        assert resolved.allow_backorder is True

    def test_only_status_and_backorder_change(self):
        original = _inventory(quantity=2)
        resolved = resolve_inventory(original)
        assert resolved.quantity == original.quantity
        assert resolved.low_stock_threshold == original.low_stock_threshold
        assert resolved.manage_stock == original.manage_stock

    def test_resolution_is_idempotent(self):
        once = resolve_inventory(_inventory(quantity=0, allow_backorder=True))
        assert resolve_inventory(once) == once

    def test_negative_threshold_is_rejected(self):
        with pytest.raises(ValidationError):
            Inventory(low_stock_threshold=-1)


class TestAvailability:
    def test_empty_tracked_stock_is_out_of_stock(self):
        assert is_out_of_stock(resolve_inventory(_inventory(quantity=0))) is True

    def test_backorder_is_never_out_of_stock(self):
        assert is_out_of_stock(resolve_inventory(_inventory(quantity=0, allow_backorder=True))) is False

    def test_untracked_is_never_out_of_stock(self):
        assert is_out_of_stock(resolve_inventory(_inventory(quantity=0, manage_stock=False))) is False

    def test_sticky_out_of_stock_with_quantity_is_out_of_stock(self):
        assert is_out_of_stock(resolve_inventory(_inventory(status=InventoryStatus.OUT_OF_STOCK.value))) is True

    def test_untracked_stock_is_on_hand(self):
        assert has_stock_on_hand(_inventory(quantity=0, manage_stock=False)) is True

    def test_backorder_does_not_count_as_on_hand(self):
        assert has_stock_on_hand(_inventory(quantity=0, allow_backorder=True)) is False


class TestOutOfStockAgreesWithStockCheck:
    """A resolved product is out of stock exactly when one unit cannot be ordered."""

    @pytest.mark.parametrize("status", list(InventoryStatus))
    @pytest.mark.parametrize("quantity", [-1, 0, 1, 5])
    @pytest.mark.parametrize("allow_backorder", [True, False])
    @pytest.mark.parametrize("manage_stock", [True, False])
    def test_single_unit(self, status, quantity, allow_backorder, manage_stock):
        inventory = resolve_inventory(
            Inventory(
                quantity=quantity,
                low_stock_threshold=3,
                status=status.value,
                allow_backorder=allow_backorder,
                manage_stock=manage_stock,
            )
        )
        product = Product(id="p-1", name="Widget", price=10.0, inventory=inventory)

        assert is_out_of_stock(inventory) == (stock_violation(product, 1) is not None)
