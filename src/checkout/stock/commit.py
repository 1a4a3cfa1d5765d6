"""Take inventory for an accepted draft.

Pricing reads a snapshot; by the time the caller persists the order another
checkout may have taken the same units. ``commit_stock`` closes that gap with
an optimistic, conditional decrement per product: the write only happens if
the product is still orderable in the drafted quantity.

The conditional write is atomic per product, not across the whole draft. When
a later line fails, lines committed before it stay committed; the caller is
expected to compensate (or re-price) before retrying.
"""

import structlog

from checkout.catalogue.inventory import Inventory
from checkout.errors import CatalogIneligible, Violation, ViolationCode
from checkout.lookups.port import StockLedger
from checkout.order.draft import OrderDraft

logger = structlog.get_logger(__name__)


def commit_stock(draft: OrderDraft, ledger: StockLedger) -> dict[str, Inventory]:
    """Decrement stock for every tracked line of ``draft``.

    Backorder-enabled lines are decremented clamped at zero; others only
    when enough stock remains. Returns the updated inventory per product id.
    """
    committed: dict[str, Inventory] = {}
    for line in draft.lines:
        if not line.stock_tracked:
            continue

        if line.backordered:
            updated = ledger.decrement_backordered(line.product_id, line.quantity)
        else:
            updated = ledger.decrement_if_available(line.product_id, line.quantity)

        if updated is None:
            logger.warning(
                "Stock commit failed",
                purchaser_id=draft.purchaser_id,
                product_id=line.product_id,
                requested_quantity=line.quantity,
                committed_products=list(committed),
            )
            raise CatalogIneligible(
                "Some products are no longer available in the requested quantity",
                [
                    Violation(
                        code=ViolationCode.INSUFFICIENT_STOCK,
                        product_id=line.product_id,
                        requested_quantity=line.quantity,
                    )
                ],
            )
        committed[line.product_id] = updated

    logger.info(
        "Stock committed",
        purchaser_id=draft.purchaser_id,
        products=list(committed),
    )
    return committed
