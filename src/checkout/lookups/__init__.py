"""Lookup adapter factory.

Provides get_lookups() / set_lookups() / reset_lookups() to swap the stores
checkout reads from. The in-memory adapters are the default; select another
adapter with the CHECKOUT_LOOKUP_ADAPTER environment variable.
"""

from dataclasses import dataclass

from checkout.config import get_settings
from checkout.lookups.port import CatalogLookup, CouponLookup, StockLedger, TaxRateLookup


@dataclass(frozen=True)
class Lookups:
    catalog: CatalogLookup
    coupons: CouponLookup
    tax_rates: TaxRateLookup
    stock: StockLedger


_current_lookups: Lookups | None = None


def memory_lookups(products=(), coupons=(), tax_rates=()) -> Lookups:
    """Lookups backed by fresh in-memory adapters."""
    from checkout.lookups.memory_adapter import InMemoryCatalog, InMemoryCoupons, InMemoryTaxRates

    catalog = InMemoryCatalog(products)
    return Lookups(
        catalog=catalog,
        coupons=InMemoryCoupons(coupons),
        tax_rates=InMemoryTaxRates(tax_rates),
        stock=catalog,
    )


def get_lookups() -> Lookups:
    """Return the configured lookups (singleton)."""
    global _current_lookups
    if _current_lookups is None:
        adapter = get_settings().lookup_adapter
        if adapter == "memory":
            _current_lookups = memory_lookups()
        else:
            raise ValueError(f"Unknown lookup adapter: {adapter}")
    return _current_lookups


def set_lookups(lookups: Lookups) -> None:
    """Override the active lookups (useful for tests and service wiring)."""
    global _current_lookups
    _current_lookups = lookups


def reset_lookups() -> None:
    """Reset to the configured default."""
    global _current_lookups
    _current_lookups = None
