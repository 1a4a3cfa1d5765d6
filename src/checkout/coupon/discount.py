"""Discount calculation for coupon codes.

The discount is computed against the *eligible subtotal*, the part of the
cart the coupon's scope covers, priced at the current unit price (sale price
when a sale is active). It is never larger than that subtotal.
"""

from collections.abc import Iterable
from datetime import datetime

import structlog
from protean.fields import Float, List, String, ValueObject

from checkout.catalogue.product import Product
from checkout.coupon.coupon import Coupon, DiscountType, normalize_coupon_code
from checkout.domain import checkout
from checkout.errors import CouponRejected, Violation, ViolationCode
from checkout.lookups.port import CatalogLookup, CouponLookup
from checkout.shared.money import line_total, percent_of, round_money, sum_money

logger = structlog.get_logger(__name__)


@checkout.value_object
class AppliedCoupon:
    """Coupon record captured on a draft."""

    code: String(required=True, max_length=40)
    discount_type: String(required=True, choices=DiscountType)
    amount: Float(required=True)
    discount_amount: Float(required=True, min_value=0.0)
    eligible_subtotal: Float(required=True, min_value=0.0)


@checkout.value_object
class CouponPreview:
    coupon: ValueObject(Coupon, required=True)
    subtotal: Float(default=0.0)
    eligible_subtotal: Float(default=0.0)
    discount_amount: Float(default=0.0)
    eligible_product_ids: List(content_type=String, default=list)


def resolve_coupon(code: str, coupons: CouponLookup) -> Coupon:
    """Look up an active coupon or raise ``CouponRejected``."""
    coupon = coupons.find_coupon_by_code(normalize_coupon_code(code))
    if coupon is None or not coupon.is_active:
        raise CouponRejected(
            "Coupon is invalid or inactive",
            [Violation(code=ViolationCode.INVALID_COUPON, field="coupon_code")],
        )
    return coupon


def discount_for(coupon: Coupon, eligible_subtotal: float) -> float:
    if coupon.discount_type == DiscountType.PERCENTAGE.value:
        return percent_of(eligible_subtotal, coupon.amount)
    return round_money(min(coupon.amount, eligible_subtotal))


def calculate_discount(coupon: Coupon, lines: Iterable[tuple[Product, int]], now: datetime) -> AppliedCoupon:
    """Price ``coupon`` against ``(product, quantity)`` lines.

    Raises ``CouponRejected`` when no line falls inside the coupon's scope.
    """
    eligible_subtotal = sum_money(
        line_total(product.unit_price(now), quantity) for product, quantity in lines if coupon.covers(product)
    )
    if eligible_subtotal <= 0:
        raise CouponRejected(
            "Coupon does not apply to any items in your cart",
            [Violation(code=ViolationCode.COUPON_NOT_APPLICABLE, field="coupon_code")],
        )

    discount_amount = discount_for(coupon, eligible_subtotal)
    logger.debug(
        "Coupon priced",
        coupon_code=coupon.code,
        eligible_subtotal=eligible_subtotal,
        discount_amount=discount_amount,
    )
    return AppliedCoupon(
        code=coupon.code,
        discount_type=coupon.discount_type,
        amount=coupon.amount,
        discount_amount=discount_amount,
        eligible_subtotal=eligible_subtotal,
    )


def apply_coupon_to_cart(
    code: str,
    lines: Iterable[tuple[Product, int]],
    coupons: CouponLookup,
    now: datetime,
) -> AppliedCoupon:
    """Resolve ``code`` and price it against the cart's lines."""
    coupon = resolve_coupon(code, coupons)
    applied = calculate_discount(coupon, lines, now)
    logger.info(
        "Coupon applied",
        coupon_code=applied.code,
        discount_type=applied.discount_type,
        discount_amount=applied.discount_amount,
    )
    return applied


def preview_coupon(
    code: str,
    quantities: dict[str, int],
    coupons: CouponLookup,
    catalog: CatalogLookup,
    now: datetime,
) -> CouponPreview:
    """What a coupon would take off a cart, before checkout.

    No eligibility rules run here and unknown product ids are skipped; the
    real check happens when the order is priced.
    """
    coupon = resolve_coupon(code, coupons)
    products = {p.id: p for p in catalog.find_products_by_ids(list(quantities))}
    lines = [(products[pid], qty) for pid, qty in quantities.items() if pid in products]

    applied = calculate_discount(coupon, lines, now)
    return CouponPreview(
        coupon=coupon,
        subtotal=sum_money(line_total(product.unit_price(now), qty) for product, qty in lines),
        eligible_subtotal=applied.eligible_subtotal,
        discount_amount=applied.discount_amount,
        eligible_product_ids=[product.id for product, _ in lines if coupon.covers(product)],
    )
