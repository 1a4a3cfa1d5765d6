from datetime import UTC, datetime

import pytest

from checkout.config import CheckoutSettings
from checkout.lookups import memory_lookups
from checkout.order.assembler import OrderPricingEngine

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_engine():
    """Factory for an engine over fresh in-memory lookups and a frozen clock."""

    def _make(products=(), coupons=(), tax_rates=(), settings=None, clock=None):
        lookups = memory_lookups(products=products, coupons=coupons, tax_rates=tax_rates)
        return OrderPricingEngine(
            lookups=lookups,
            settings=settings or CheckoutSettings(),
            clock=clock or (lambda: NOW),
        )

    return _make
