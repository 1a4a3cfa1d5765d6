"""The order draft, the immutable priced result of a checkout attempt.

A draft is built once per attempt and never changes afterwards: unit prices,
tags and the shipping address are snapshots taken at pricing time, so later
catalog edits (a sale ending, an address being removed) cannot alter it.
Persisting the draft as an order is the caller's job.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, List, String, ValueObject

from checkout.coupon.discount import AppliedCoupon
from checkout.customer.purchaser import SavedAddress
from checkout.domain import checkout
from checkout.shared.money import round_money, to_decimal
from checkout.shipping.resolver import ShippingQuote
from checkout.tax.resolver import TaxAssessment

_ADDRESS_FIELDS = (
    "full_name",
    "phone",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "postal_code",
    "country",
)


@checkout.value_object
class AddressSnapshot:
    full_name: String(max_length=255)
    phone: String(max_length=50)
    address_line1: String(max_length=255)
    address_line2: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)

    @classmethod
    def of(cls, address: SavedAddress | None):
        if address is None:
            return None
        return cls(**{name: getattr(address, name) for name in _ADDRESS_FIELDS})


@checkout.value_object
class PricedLineItem:
    product_id: String(required=True, max_length=100)
    name: String(required=True, max_length=255)
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True, min_value=0.0)
    line_total: Float(required=True, min_value=0.0)
    tags: List(content_type=String, default=list)
    backordered: Boolean(default=False)
    stock_tracked: Boolean(default=True)


@checkout.value_object
class OrderDraft:
    purchaser_id: String(required=True, max_length=100)
    lines: List(content_type=ValueObject(PricedLineItem), default=list)
    subtotal: Float(required=True, min_value=0.0)
    coupon: ValueObject(AppliedCoupon)
    discount_amount: Float(default=0.0, min_value=0.0)
    discounted_subtotal: Float(required=True)
    tax: ValueObject(TaxAssessment, required=True)
    shipping: ValueObject(ShippingQuote, required=True)
    shipping_address: ValueObject(AddressSnapshot)
    total: Float(required=True)
    priced_at: DateTime(required=True)

    @invariant.post
    def discounted_subtotal_cannot_be_negative(self):
        if self.discounted_subtotal is not None and self.discounted_subtotal < 0:
            raise ValidationError({"discounted_subtotal": ["Discounted subtotal cannot be negative"]})

    @invariant.post
    def totals_must_close(self):
        if self.tax is None or self.shipping is None or self.discounted_subtotal is None:
            return
        expected = round_money(
            to_decimal(self.discounted_subtotal) + to_decimal(self.tax.amount) + to_decimal(self.shipping.cost)
        )
        if self.total != expected:
            raise ValidationError({"total": [f"Draft total {self.total} does not match its components ({expected})"]})

    @property
    def tax_amount(self) -> float:
        return self.tax.amount

    @property
    def shipping_cost(self) -> float:
        return self.shipping.cost
