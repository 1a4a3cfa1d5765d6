"""Checkout request schemas.

External contract of the pricing entry point, kept apart from the domain
value objects. Callers hand over raw lines and options (dicts or models).
They are validated here once; anything malformed becomes an
``InvalidCheckoutRequest`` listing each offending field, never a library
exception.
"""

import re

from protean.exceptions import ValidationError as DomainValidationError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from checkout.coupon.coupon import normalize_coupon_code
from checkout.errors import InvalidCheckoutRequest, Violation, ViolationCode
from checkout.shipping.rates import CarrierRate

_COUPON_CODE_PATTERN = re.compile(r"^[A-Z0-9_-]{3,40}$")


class RequestedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class CarrierRateSchema(BaseModel):
    """Carrier quote as chosen by the shopper; accepts a ``CarrierRate`` too."""

    model_config = ConfigDict(frozen=True)

    rate_id: str = Field(min_length=1)
    carrier_id: str | None = None
    carrier_code: str | None = None
    carrier_name: str = Field(min_length=1)
    service_code: str | None = None
    service_name: str = Field(min_length=1)
    price: float
    currency: str | None = None
    delivery_days: int | None = None
    estimated_delivery: str | None = None

    def to_carrier_rate(self) -> CarrierRate:
        return CarrierRate(**self.model_dump())


class PricingOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    coupon_code: str | None = None
    shipping_method: str | None = None
    shipping_rate: CarrierRateSchema | None = None
    shipping_address_id: str | None = None

    @field_validator("coupon_code")
    @classmethod
    def _normalize_coupon_code(cls, value):
        if value is None:
            return None
        code = normalize_coupon_code(value)
        if not _COUPON_CODE_PATTERN.match(code):
            raise ValueError(
                "Coupon codes are 3-40 characters of letters, numbers, hyphens, and underscores"
            )
        return code

    @field_validator("shipping_rate", mode="before")
    @classmethod
    def _accept_carrier_rate(cls, value):
        if isinstance(value, CarrierRate):
            return value.to_dict()
        return value

    def carrier_rate(self) -> CarrierRate | None:
        if self.shipping_rate is None:
            return None
        return self.shipping_rate.to_carrier_rate()


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: list[RequestedLine]
    options: PricingOptions = Field(default_factory=PricingOptions)

    @field_validator("lines", mode="before")
    @classmethod
    def _cart_cannot_be_empty(cls, value):
        if isinstance(value, list | tuple) and not value:
            raise ValueError("At least one line is required")
        return value

    def quantities_by_product(self) -> dict[str, int]:
        """Total quantity per product id; duplicate lines are summed, first-seen order kept."""
        quantities: dict[str, int] = {}
        for line in self.lines:
            quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
        return quantities


def _field_path(location) -> str:
    return ".".join(str(part) for part in location)


def parse_checkout_request(requested_lines, options=None) -> CheckoutRequest:
    try:
        request = CheckoutRequest.model_validate(
            {
                "lines": list(requested_lines or ()),
                "options": options if options is not None else {},
            }
        )
    except ValidationError as exc:
        violations = [
            Violation(
                code=ViolationCode.INVALID_REQUEST,
                field=_field_path(error["loc"]),
                messages=(error["msg"],),
            )
            for error in exc.errors()
        ]
        raise InvalidCheckoutRequest("Checkout request is invalid", violations) from exc

    try:
        request.options.carrier_rate()
    except DomainValidationError as exc:
        violations = [
            Violation(
                code=ViolationCode.INVALID_REQUEST,
                field=f"options.shipping_rate.{name}",
                messages=tuple(messages),
            )
            for name, messages in exc.messages.items()
        ]
        raise InvalidCheckoutRequest("Checkout request is invalid", violations) from exc
    return request
