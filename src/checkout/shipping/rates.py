"""Shipping methods and carrier rate quotes."""

from enum import Enum

from protean.fields import Float, Integer, String

from checkout.domain import checkout


class ShippingMethod(Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    OVERNIGHT = "overnight"

    @classmethod
    def parse(cls, keyword):
        """Unknown or missing keywords resolve to STANDARD."""
        try:
            return cls(str(keyword).strip().lower())
        except ValueError:
            return cls.STANDARD


@checkout.value_object
class CarrierRate:
    """A rate quoted by a carrier integration and chosen by the shopper.

    Kept verbatim on the draft for audit and display.
    """

    rate_id: String(required=True, max_length=255)
    carrier_id: String(max_length=255)
    carrier_code: String(max_length=100)
    carrier_name: String(required=True, max_length=255)
    service_code: String(max_length=100)
    service_name: String(required=True, max_length=255)
    price: Float(required=True)
    currency: String(max_length=10)
    delivery_days: Integer()
    estimated_delivery: String(max_length=100)

    @property
    def label(self) -> str:
        return f"{self.carrier_name} - {self.service_name}"
