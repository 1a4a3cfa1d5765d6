"""Checkout configuration, read from environment variables.

    CHECKOUT_SHIPPING_STANDARD   flat rate for "standard" shipping (default 0)
    CHECKOUT_SHIPPING_EXPRESS    flat rate for "express" shipping (default 15)
    CHECKOUT_SHIPPING_OVERNIGHT  flat rate for "overnight" shipping (default 30)
    CHECKOUT_NEW_ARRIVAL_DAYS    age window for the "new arrival" tag (default 30)
    CHECKOUT_LOOKUP_ADAPTER      catalog/coupon/tax adapter to use (default "memory")
"""

import os
from dataclasses import dataclass, field

DEFAULT_FLAT_RATES = {"standard": 0.0, "express": 15.0, "overnight": 30.0}
DEFAULT_NEW_ARRIVAL_DAYS = 30


def get_environment() -> str:
    """Name of the running environment, lower-cased."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("CHECKOUT_ENV") or "development").lower()


@dataclass(frozen=True)
class CheckoutSettings:
    flat_shipping_rates: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FLAT_RATES))
    new_arrival_days: int = DEFAULT_NEW_ARRIVAL_DAYS
    lookup_adapter: str = "memory"


def _number_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def get_settings() -> CheckoutSettings:
    """Build settings from the current environment."""
    rates = {
        method: max(0.0, _number_from_env(f"CHECKOUT_SHIPPING_{method.upper()}", default))
        for method, default in DEFAULT_FLAT_RATES.items()
    }
    return CheckoutSettings(
        flat_shipping_rates=rates,
        new_arrival_days=int(_number_from_env("CHECKOUT_NEW_ARRIVAL_DAYS", DEFAULT_NEW_ARRIVAL_DAYS)),
        lookup_adapter=os.getenv("CHECKOUT_LOOKUP_ADAPTER", "memory"),
    )
