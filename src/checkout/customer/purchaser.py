"""Purchaser snapshot handed to checkout by the caller, fully hydrated.

The engine never fetches or updates customer records; everything it needs to
decide eligibility, tax jurisdiction and the shipping address is carried here.
"""

from enum import Enum

from protean.fields import Boolean, List, String, ValueObject

from checkout.domain import checkout


class ClientType(Enum):
    B2B = "B2B"
    C2B = "C2B"
    STANDARD = "standard"


@checkout.value_object
class Company:
    """Company record of a B2B purchaser.

    ``address`` is free text; ``country`` and ``state`` are optional explicit
    overrides used for tax jurisdiction.
    """

    name: String(max_length=255)
    address: String(max_length=500)
    country: String(max_length=100)
    state: String(max_length=100)


@checkout.value_object
class BillingAddress:
    address_line1: String(max_length=255)
    address_line2: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)

    def is_complete(self) -> bool:
        required = (self.address_line1, self.city, self.state, self.country)
        return all(isinstance(value, str) and value.strip() for value in required)


@checkout.value_object
class SavedAddress:
    """An entry of the purchaser's shipping address book."""

    id: String(required=True, max_length=100)
    full_name: String(max_length=255)
    phone: String(max_length=50)
    address_line1: String(max_length=255)
    address_line2: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    is_default: Boolean(default=False)


@checkout.value_object
class Purchaser:
    id: String(required=True, max_length=100)
    client_type: String(choices=ClientType, default=ClientType.STANDARD.value)
    tax_exempt: Boolean(default=False)
    has_verification: Boolean(default=False)
    company: ValueObject(Company)
    billing_address: ValueObject(BillingAddress)
    shipping_addresses: List(content_type=ValueObject(SavedAddress), default=list)

    @property
    def is_b2b(self) -> bool:
        return self.client_type == ClientType.B2B.value

    @property
    def is_c2b(self) -> bool:
        return self.client_type == ClientType.C2B.value

    def select_shipping_address(self, address_id: str | None = None) -> SavedAddress | None:
        """Requested address if it exists, else the default, else the first saved one."""
        if address_id:
            selected = next((a for a in self.shipping_addresses if a.id == address_id), None)
            if selected is not None:
                return selected
        if not self.shipping_addresses:
            return None
        return next((a for a in self.shipping_addresses if a.is_default), self.shipping_addresses[0])
