"""Inventory value object and the inventory state resolver.

Status is derived from ``(quantity, low_stock_threshold, allow_backorder,
manage_stock)``, except for three admin-controlled sticky states:

    out_of_stock  always unavailable, backorder forced off
    preorder      always orderable, backorder forced on
    backorder     backorder forced on; sticky only while quantity <= 0

Resolution goes through ``classify_inventory``, which turns the raw fields
into exactly one ``InventoryState`` variant, so a stored status can never
silently disagree with the quantity it was derived from.
"""

from dataclasses import dataclass
from enum import Enum

from protean.fields import Boolean, Integer, String

from checkout.domain import checkout
from checkout.shared.values import replace


class InventoryStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    BACKORDER = "backorder"
    PREORDER = "preorder"


@checkout.value_object
class Inventory:
    """Stock fields of a catalog product, as read from the catalog."""

    quantity: Integer(default=0)
    low_stock_threshold: Integer(default=0, min_value=0)
    status: String(choices=InventoryStatus, default=InventoryStatus.IN_STOCK.value)
    allow_backorder: Boolean(default=False)
    manage_stock: Boolean(default=True)


# ---------------------------------------------------------------------------
# Inventory state variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Tracked:
    quantity: int
    low_stock_threshold: int
    allow_backorder: bool


@dataclass(frozen=True)
class Untracked:
    quantity: int
    allow_backorder: bool


@dataclass(frozen=True)
class StickyOutOfStock:
    quantity: int


@dataclass(frozen=True)
class StickyPreorder:
    quantity: int


@dataclass(frozen=True)
class StickyBackorder:
    quantity: int


InventoryState = Tracked | Untracked | StickyOutOfStock | StickyPreorder | StickyBackorder


def classify_inventory(inventory: Inventory) -> InventoryState:
    """Map raw inventory fields onto a single state variant."""
    if inventory.status == InventoryStatus.OUT_OF_STOCK.value:
        return StickyOutOfStock(quantity=inventory.quantity)
    if inventory.status == InventoryStatus.PREORDER.value:
        return StickyPreorder(quantity=inventory.quantity)

    allow_backorder = inventory.allow_backorder
    if inventory.status == InventoryStatus.BACKORDER.value:
        if inventory.quantity <= 0:
            return StickyBackorder(quantity=inventory.quantity)
        # Stock came back: re-derive, keeping backorder enabled
        allow_backorder = True

    if not inventory.manage_stock:
        return Untracked(quantity=inventory.quantity, allow_backorder=allow_backorder)
    return Tracked(
        quantity=inventory.quantity,
        low_stock_threshold=inventory.low_stock_threshold,
        allow_backorder=allow_backorder,
    )


def resolve_inventory(inventory: Inventory) -> Inventory:
    """Return a copy of ``inventory`` with a recomputed status.

    Only ``status`` and ``allow_backorder`` can differ from the input.
    """
    state = classify_inventory(inventory)

    if isinstance(state, StickyOutOfStock):
        return replace(inventory, allow_backorder=False)
    if isinstance(state, StickyPreorder | StickyBackorder):
        return replace(inventory, allow_backorder=True)

    if state.allow_backorder and state.quantity <= 0:
        status = InventoryStatus.BACKORDER
    elif isinstance(state, Untracked):
        status = InventoryStatus.IN_STOCK
    elif state.quantity <= 0:
        status = InventoryStatus.OUT_OF_STOCK
    elif state.quantity <= state.low_stock_threshold:
        status = InventoryStatus.LOW_STOCK
    else:
        status = InventoryStatus.IN_STOCK

    return replace(inventory, status=status.value, allow_backorder=state.allow_backorder)


def is_out_of_stock(inventory: Inventory) -> bool:
    """True when not even one unit can be ordered.

    Expects a resolved inventory (see ``resolve_inventory``).
    """
    if inventory.status == InventoryStatus.OUT_OF_STOCK.value:
        return True
    if not inventory.manage_stock:
        return False
    return not inventory.allow_backorder and inventory.quantity <= 0


def has_stock_on_hand(inventory: Inventory) -> bool:
    """Physical availability, ignoring backorder: untracked stock always counts."""
    if not inventory.manage_stock:
        return True
    return inventory.quantity > 0
