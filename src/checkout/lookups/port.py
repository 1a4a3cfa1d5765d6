"""Lookup ports: abstract interfaces to the catalog, coupon and tax stores.

Pricing code programs against these ports; adapters are swapped via
configuration (see ``checkout.lookups.get_lookups``). None of the pricing
stages write through a lookup port. ``StockLedger`` is the only writer and is
used exclusively by ``checkout.stock.commit``.
"""

from abc import ABC, abstractmethod

from checkout.catalogue.inventory import Inventory
from checkout.catalogue.product import Product
from checkout.coupon.coupon import Coupon
from checkout.tax.rates import TaxRateEntry


class CatalogLookup(ABC):
    @abstractmethod
    def find_products_by_ids(self, ids: list[str]) -> list[Product]:
        """Fetch all requested products in one batched read.

        Unknown ids are simply absent from the result.
        """
        ...


class CouponLookup(ABC):
    @abstractmethod
    def find_coupon_by_code(self, code: str) -> Coupon | None:
        """Return the coupon with this (normalized) code, if any."""
        ...


class TaxRateLookup(ABC):
    @abstractmethod
    def find_tax_rate(self, country_key: str | None, state_key: str | None) -> TaxRateEntry | None:
        """Return the entry whose keys equal the given ones exactly.

        ``None`` matches only entries without that key.
        """
        ...


class StockLedger(ABC):
    @abstractmethod
    def decrement_if_available(self, product_id: str, quantity: int) -> Inventory | None:
        """Conditionally take stock.

        Succeeds only when the product is not marked out of stock and holds at
        least ``quantity`` units. Returns the updated inventory, or None when
        the condition failed and nothing was written.
        """
        ...

    @abstractmethod
    def decrement_backordered(self, product_id: str, quantity: int) -> Inventory | None:
        """Take stock from a backorder-enabled product, clamping at zero.

        Returns None when the product no longer exists.
        """
        ...
