"""In-memory lookup adapters for development and testing.

Every adapter records the calls it receives in ``calls`` so tests can assert
on how the engine reads (for example, that the catalog is hit once per
checkout attempt with every product id).
"""

from checkout.catalogue.inventory import Inventory, InventoryStatus, resolve_inventory
from checkout.catalogue.product import Product
from checkout.coupon.coupon import Coupon, normalize_coupon_code
from checkout.lookups.port import CatalogLookup, CouponLookup, StockLedger, TaxRateLookup
from checkout.shared.values import replace
from checkout.tax.rates import TaxRateEntry, normalize_location


class InMemoryCatalog(CatalogLookup, StockLedger):
    """Product store keyed by id, also serving as the stock ledger."""

    def __init__(self, products=()) -> None:
        self._products: dict[str, Product] = {}
        self.calls: list[dict] = []
        for product in products:
            self.add(product)

    def add(self, product: Product) -> None:
        self._products[product.id] = product

    def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def find_products_by_ids(self, ids: list[str]) -> list[Product]:
        self.calls.append({"method": "find_products_by_ids", "ids": list(ids)})
        return [self._products[pid] for pid in dict.fromkeys(ids) if pid in self._products]

    def decrement_if_available(self, product_id: str, quantity: int) -> Inventory | None:
        self.calls.append({"method": "decrement_if_available", "product_id": product_id, "quantity": quantity})
        product = self._products.get(product_id)
        if product is None:
            return None
        inventory = product.inventory
        if inventory.status == InventoryStatus.OUT_OF_STOCK.value or inventory.quantity < quantity:
            return None
        return self._store_quantity(product, inventory.quantity - quantity)

    def decrement_backordered(self, product_id: str, quantity: int) -> Inventory | None:
        self.calls.append({"method": "decrement_backordered", "product_id": product_id, "quantity": quantity})
        product = self._products.get(product_id)
        if product is None:
            return None
        return self._store_quantity(product, max(0, product.inventory.quantity - quantity))

    def _store_quantity(self, product: Product, quantity: int) -> Inventory:
        inventory = resolve_inventory(replace(product.inventory, quantity=quantity))
        self._products[product.id] = replace(product, inventory=inventory)
        return inventory


class InMemoryCoupons(CouponLookup):
    def __init__(self, coupons=()) -> None:
        self._coupons: dict[str, Coupon] = {}
        self.calls: list[dict] = []
        for coupon in coupons:
            self.add(coupon)

    def add(self, coupon: Coupon) -> None:
        self._coupons[coupon.code] = coupon

    def find_coupon_by_code(self, code: str) -> Coupon | None:
        self.calls.append({"method": "find_coupon_by_code", "code": code})
        return self._coupons.get(normalize_coupon_code(code))


class InMemoryTaxRates(TaxRateLookup):
    def __init__(self, entries=()) -> None:
        self._entries: dict[tuple, TaxRateEntry] = {}
        self.calls: list[dict] = []
        for entry in entries:
            self.add(entry)

    def add(self, entry: TaxRateEntry) -> None:
        self._entries[(entry.country_key, entry.state_key)] = entry

    def find_tax_rate(self, country_key: str | None, state_key: str | None) -> TaxRateEntry | None:
        self.calls.append({"method": "find_tax_rate", "country_key": country_key, "state_key": state_key})
        return self._entries.get((normalize_location(country_key), normalize_location(state_key)))
