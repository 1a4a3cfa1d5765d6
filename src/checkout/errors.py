"""Rejection taxonomy for checkout pricing.

Every failure the engine reports resolves to a ``ViolationCode``; violations
are grouped into a ``RejectionReport`` whose ``kind`` tells the caller what
the shopper can do about it (fix the account, change the cart, drop the
coupon, or resubmit a well-formed request).
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError


class RejectionKind(Enum):
    REQUEST = "request"
    RESOLUTION = "resolution"
    ACCOUNT_ELIGIBILITY = "account_eligibility"
    CATALOG_ELIGIBILITY = "catalog_eligibility"
    COUPON = "coupon"


class ViolationCode(Enum):
    INVALID_REQUEST = "invalid_request"
    PRODUCT_NOT_FOUND = "product_not_found"
    B2B_REQUIRED = "b2b_required"
    VERIFICATION_REQUIRED = "verification_required"
    BILLING_ADDRESS_REQUIRED = "billing_address_required"
    COMING_SOON = "coming_soon"
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_COUPON = "invalid_coupon"
    COUPON_NOT_APPLICABLE = "coupon_not_applicable"


@dataclass(frozen=True)
class Violation:
    """One machine-readable reason a checkout attempt was refused."""

    code: ViolationCode
    product_id: str | None = None
    product_ids: tuple[str, ...] = ()
    available_quantity: int | None = None
    requested_quantity: int | None = None
    field: str | None = None
    messages: tuple[str, ...] = ()

    def as_dict(self) -> dict:
        data = {"code": self.code.value}
        if self.product_id is not None:
            data["product_id"] = self.product_id
        if self.product_ids:
            data["product_ids"] = list(self.product_ids)
        if self.available_quantity is not None:
            data["available_quantity"] = self.available_quantity
        if self.requested_quantity is not None:
            data["requested_quantity"] = self.requested_quantity
        if self.field is not None:
            data["field"] = self.field
        if self.messages:
            data["messages"] = list(self.messages)
        return data


@dataclass(frozen=True)
class RejectionReport:
    """Structured outcome of a refused checkout attempt."""

    kind: RejectionKind
    message: str
    violations: tuple[Violation, ...] = ()

    @property
    def codes(self) -> list[str]:
        return [v.code.value for v in self.violations]

    def violations_for(self, code: ViolationCode) -> list[Violation]:
        return [v for v in self.violations if v.code is code]

    def as_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "violations": [v.as_dict() for v in self.violations],
        }


class OrderRejected(ValidationError):
    """Base class for every refusal raised by a pricing stage.

    ``messages`` follows the field -> messages shape of domain validation
    errors, keyed by rejection kind; ``report`` carries the full detail.
    """

    kind = RejectionKind.REQUEST

    def __init__(self, message, violations=()):
        super().__init__({self.kind.value: [message]})
        self.report = RejectionReport(kind=self.kind, message=message, violations=tuple(violations))

    @property
    def message(self) -> str:
        return self.report.message

    def __str__(self):
        return self.report.message

    @property
    def violations(self) -> tuple[Violation, ...]:
        return self.report.violations


class InvalidCheckoutRequest(OrderRejected):
    kind = RejectionKind.REQUEST


class ProductResolutionError(OrderRejected):
    kind = RejectionKind.RESOLUTION


class AccountIneligible(OrderRejected):
    kind = RejectionKind.ACCOUNT_ELIGIBILITY


class CatalogIneligible(OrderRejected):
    kind = RejectionKind.CATALOG_ELIGIBILITY


class CouponRejected(OrderRejected):
    kind = RejectionKind.COUPON
