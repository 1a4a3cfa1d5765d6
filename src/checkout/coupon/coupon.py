"""Coupon value object."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, List, String

from checkout.catalogue.product import Product
from checkout.domain import checkout


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_coupon_code(code: str) -> str:
    return code.strip().upper()


@checkout.value_object
class Coupon:
    """A discount code, optionally scoped to categories and/or products.

    An unscoped coupon applies to the whole cart.
    """

    code: String(required=True, max_length=40)
    discount_type: String(required=True, choices=DiscountType)
    amount: Float(required=True, min_value=0.0)
    is_active: Boolean(default=True)
    category_ids: List(content_type=String, default=list)
    product_ids: List(content_type=String, default=list)

    @invariant.post
    def percentage_cannot_exceed_100(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.amount > 100:
            raise ValidationError({"amount": ["Percentage discounts cannot exceed 100"]})

    @invariant.post
    def code_must_be_normalized(self):
        if self.code != normalize_coupon_code(self.code):
            raise ValidationError({"code": ["Coupon codes are stored trimmed and upper-case"]})

    @classmethod
    def create(cls, code, discount_type, amount, is_active=True, category_ids=(), product_ids=()):
        """Build a coupon from raw catalog values, normalizing the code."""
        if isinstance(discount_type, DiscountType):
            discount_type = discount_type.value
        return cls(
            code=normalize_coupon_code(code),
            discount_type=discount_type,
            amount=amount,
            is_active=is_active,
            category_ids=sorted(category_ids),
            product_ids=sorted(product_ids),
        )

    @property
    def applies_to_all(self) -> bool:
        return not self.category_ids and not self.product_ids

    def covers(self, product: Product) -> bool:
        if self.applies_to_all or product.id in self.product_ids:
            return True
        return bool(set(self.category_ids) & product.category_set())
