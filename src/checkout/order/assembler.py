"""Order assembly, the single public entry point of checkout pricing.

Pipeline (fixed order, fail-fast):

    request parsing -> eligibility -> priced lines -> discount -> tax
    -> shipping -> address snapshot -> totals

Each stage either returns a value object or raises an ``OrderRejected``
subclass; ``validate_and_price`` turns the first rejection into a
``RejectionReport`` so callers never see a partial draft.

The engine only reads a point-in-time catalog snapshot. Between pricing and
persisting the order, stock may change under it: take stock with
``checkout.stock.commit.commit_stock``, which re-checks availability with a
conditional update, rather than trusting the draft alone.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from checkout.catalogue.tags import descriptive_tags
from checkout.config import CheckoutSettings, get_settings
from checkout.coupon.discount import CouponPreview, apply_coupon_to_cart, preview_coupon
from checkout.customer.purchaser import Purchaser
from checkout.eligibility.validator import EligibleCart, validate_eligibility
from checkout.errors import InvalidCheckoutRequest, OrderRejected, RejectionReport, Violation, ViolationCode
from checkout.lookups import Lookups, get_lookups
from checkout.order.draft import AddressSnapshot, OrderDraft, PricedLineItem
from checkout.order.request import PricingOptions, parse_checkout_request
from checkout.shared.money import line_total, round_money, sum_money, to_decimal
from checkout.shipping.resolver import resolve_shipping
from checkout.tax.resolver import resolve_tax
from checkout.utils.logging import pricing_context

logger = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class OrderPricingEngine:
    """Prices carts against injected catalog, coupon and tax lookups.

    The engine keeps no mutable state of its own; one instance can serve
    concurrent requests as long as its lookups can.
    """

    def __init__(
        self,
        lookups: Lookups | None = None,
        settings: CheckoutSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.lookups = lookups or get_lookups()
        self.settings = settings or get_settings()
        self.clock = clock or _utc_now

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def price(self, purchaser: Purchaser, requested_lines, options=None) -> OrderDraft:
        """Build a draft or raise ``OrderRejected``."""
        request = parse_checkout_request(requested_lines, options)
        now = self.clock()

        cart = validate_eligibility(purchaser, request.quantities_by_product(), self.lookups.catalog)
        lines = self._price_lines(cart, now)
        subtotal = sum_money(line.line_total for line in lines)

        applied_coupon = None
        discount_amount = 0.0
        if request.options.coupon_code:
            applied_coupon = apply_coupon_to_cart(
                request.options.coupon_code,
                [(line.product, line.quantity) for line in cart.lines],
                self.lookups.coupons,
                now,
            )
            discount_amount = round_money(applied_coupon.discount_amount)

        discounted_subtotal = max(0.0, round_money(to_decimal(subtotal) - to_decimal(discount_amount)))
        tax = resolve_tax(purchaser, discounted_subtotal, self.lookups.tax_rates)
        shipping = self._resolve_shipping(request.options)
        address = AddressSnapshot.of(purchaser.select_shipping_address(request.options.shipping_address_id))

        total = round_money(to_decimal(discounted_subtotal) + to_decimal(tax.amount) + to_decimal(shipping.cost))

        draft = OrderDraft(
            purchaser_id=purchaser.id,
            lines=lines,
            subtotal=subtotal,
            coupon=applied_coupon,
            discount_amount=discount_amount,
            discounted_subtotal=discounted_subtotal,
            tax=tax,
            shipping=shipping,
            shipping_address=address,
            total=total,
            priced_at=now,
        )
        logger.info(
            "Order draft priced",
            purchaser_id=purchaser.id,
            line_count=len(lines),
            subtotal=subtotal,
            discount_amount=discount_amount,
            tax_amount=tax.amount,
            shipping_cost=shipping.cost,
            total=total,
            coupon_code=applied_coupon.code if applied_coupon else None,
        )
        return draft

    def _price_lines(self, cart: EligibleCart, now: datetime) -> list[PricedLineItem]:
        priced = []
        for line in cart.lines:
            unit_price = line.product.unit_price(now)
            priced.append(
                PricedLineItem(
                    product_id=line.product.id,
                    name=line.product.name,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    line_total=line_total(unit_price, line.quantity),
                    tags=descriptive_tags(line.product, now, self.settings.new_arrival_days),
                    backordered=line.backordered,
                    stock_tracked=line.stock_tracked,
                )
            )
        return priced

    def _resolve_shipping(self, options: PricingOptions):
        return resolve_shipping(
            method=options.shipping_method,
            carrier_rate=options.carrier_rate(),
            flat_rates=self.settings.flat_shipping_rates,
        )

    # -------------------------------------------------------------------
    # Coupon preview
    # -------------------------------------------------------------------
    def preview_coupon(self, code: str, requested_lines) -> CouponPreview:
        request = parse_checkout_request(requested_lines, {"coupon_code": code})
        if not request.options.coupon_code:
            raise InvalidCheckoutRequest(
                "Coupon code is required",
                [
                    Violation(
                        code=ViolationCode.INVALID_REQUEST,
                        field="options.coupon_code",
                        messages=("Coupon code is required",),
                    )
                ],
            )
        return preview_coupon(
            request.options.coupon_code,
            request.quantities_by_product(),
            self.lookups.coupons,
            self.lookups.catalog,
            self.clock(),
        )


def validate_and_price(
    purchaser: Purchaser,
    requested_lines,
    options=None,
    engine: OrderPricingEngine | None = None,
) -> OrderDraft | RejectionReport:
    """Price a cart submission, returning a draft or a structured rejection."""
    engine = engine or OrderPricingEngine()
    with pricing_context(purchaser_id=purchaser.id):
        try:
            return engine.price(purchaser, requested_lines, options)
        except OrderRejected as exc:
            logger.info(
                "Order pricing rejected",
                kind=exc.report.kind.value,
                codes=exc.report.codes,
            )
            return exc.report
