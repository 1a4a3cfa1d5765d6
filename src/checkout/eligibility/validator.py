"""Eligibility validation: can this purchaser order these quantities at all?

Checks run in a fixed order:

    1. resolution       every product id exists            (ProductResolutionError)
    2. B2B gating       restricted products need a verified B2B account
    3. C2B billing      C2B accounts need a complete billing address
    4. coming soon      tagged products cannot be ordered
    5. stock            availability and requested quantities

Steps 2 and 3 concern the account and reject at once (AccountIneligible).
Steps 4 and 5 concern individual lines; they are collected for the whole
cart and reported together (CatalogIneligible), so the shopper sees every
offending line in one go. Nothing is partially accepted.
"""

from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from checkout.catalogue.inventory import is_out_of_stock, resolve_inventory
from checkout.catalogue.product import Product
from checkout.customer.purchaser import Purchaser
from checkout.errors import (
    AccountIneligible,
    CatalogIneligible,
    ProductResolutionError,
    Violation,
    ViolationCode,
)
from checkout.lookups.port import CatalogLookup
from checkout.shared.values import replace

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    """A requested line whose product carries a resolved inventory."""

    product: Product
    quantity: int

    @property
    def backordered(self) -> bool:
        return self.product.inventory.allow_backorder

    @property
    def stock_tracked(self) -> bool:
        return self.product.inventory.manage_stock


@dataclass(frozen=True)
class EligibleCart:
    purchaser: Purchaser
    lines: tuple[CartLine, ...]


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------
def resolve_products(quantities: Mapping[str, int], catalog: CatalogLookup) -> list[Product]:
    """Fetch every requested product in one read, in request order."""
    requested_ids = list(quantities)
    products = catalog.find_products_by_ids(requested_ids)
    found = {product.id: product for product in products}

    missing = [pid for pid in requested_ids if pid not in found]
    if missing or len(products) != len(requested_ids):
        raise ProductResolutionError(
            "One or more products are invalid",
            [Violation(code=ViolationCode.PRODUCT_NOT_FOUND, product_ids=tuple(missing))],
        )
    return [found[pid] for pid in requested_ids]


def check_b2b_access(purchaser: Purchaser, products: list[Product]) -> None:
    restricted = tuple(product.id for product in products if product.requires_b2b)
    if not restricted:
        return

    if not purchaser.is_b2b:
        raise AccountIneligible(
            "Some products in your cart require a B2B account",
            [Violation(code=ViolationCode.B2B_REQUIRED, product_ids=restricted)],
        )
    if not purchaser.has_verification:
        raise AccountIneligible(
            "Verification file is required before placing an order",
            [Violation(code=ViolationCode.VERIFICATION_REQUIRED, product_ids=restricted)],
        )


def check_billing_address(purchaser: Purchaser) -> None:
    if not purchaser.is_c2b:
        return
    billing = purchaser.billing_address
    if billing is None or not billing.is_complete():
        raise AccountIneligible(
            "Billing address is required before placing an order",
            [Violation(code=ViolationCode.BILLING_ADDRESS_REQUIRED, field="billing_address")],
        )


def stock_violation(product: Product, requested_quantity: int) -> Violation | None:
    """Violation for one line, judged on its resolved inventory."""
    inventory = product.inventory
    if is_out_of_stock(inventory):
        return Violation(
            code=ViolationCode.OUT_OF_STOCK,
            product_id=product.id,
            available_quantity=inventory.quantity,
        )
    if inventory.manage_stock and not inventory.allow_backorder and inventory.quantity < requested_quantity:
        return Violation(
            code=ViolationCode.INSUFFICIENT_STOCK,
            product_id=product.id,
            available_quantity=inventory.quantity,
            requested_quantity=requested_quantity,
        )
    return None


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def validate_eligibility(
    purchaser: Purchaser,
    quantities: Mapping[str, int],
    catalog: CatalogLookup,
) -> EligibleCart:
    """Validate a cart, given as product id -> total requested quantity."""
    products = resolve_products(quantities, catalog)

    check_b2b_access(purchaser, products)
    check_billing_address(purchaser)

    coming_soon = []
    stock_issues = []
    lines = []
    for product in products:
        requested = quantities[product.id]
        if product.is_coming_soon:
            coming_soon.append(Violation(code=ViolationCode.COMING_SOON, product_id=product.id))
            continue

        resolved = replace(product, inventory=resolve_inventory(product.inventory))
        violation = stock_violation(resolved, requested)
        if violation is not None:
            stock_issues.append(violation)
            continue
        lines.append(CartLine(product=resolved, quantity=requested))

    if coming_soon or stock_issues:
        message = (
            "Some products are coming soon and cannot be ordered yet"
            if coming_soon and not stock_issues
            else "Some products are unavailable in the requested quantity"
        )
        logger.info(
            "Cart failed eligibility",
            purchaser_id=purchaser.id,
            coming_soon=[v.product_id for v in coming_soon],
            stock_issues=[v.product_id for v in stock_issues],
        )
        raise CatalogIneligible(message, coming_soon + stock_issues)

    return EligibleCart(purchaser=purchaser, lines=tuple(lines))
