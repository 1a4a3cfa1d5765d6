"""Descriptive tags captured on each order line at purchase time."""

from datetime import datetime, timedelta

from checkout.catalogue.inventory import has_stock_on_hand
from checkout.catalogue.product import COMING_SOON_TAG, Product, as_utc
from checkout.config import DEFAULT_NEW_ARRIVAL_DAYS

ON_SALE_TAG = "on sale"
BACK_IN_STOCK_TAG = "back in stock"
NEW_ARRIVAL_TAG = "new arrival"
IN_STOCK_TAG = "in_stock"
OUT_OF_STOCK_TAG = "out_of_stock"


def is_new_arrival(product: Product, now: datetime, window_days: int = DEFAULT_NEW_ARRIVAL_DAYS) -> bool:
    """Created within the window and never restocked."""
    if product.restocked_at is not None or product.created_at is None:
        return False
    age = now - as_utc(product.created_at)
    return timedelta(0) <= age <= timedelta(days=window_days)


def is_back_in_stock(product: Product) -> bool:
    return product.manage_stock and product.restocked_at is not None and has_stock_on_hand(product.inventory)


def descriptive_tags(product: Product, now: datetime, new_arrival_days: int = DEFAULT_NEW_ARRIVAL_DAYS) -> list[str]:
    """Tags for an order line, in display order.

    ``coming soon`` suppresses every other tag. Otherwise the tags accumulate
    and always end with exactly one stock tag.
    """
    if product.is_coming_soon:
        return [COMING_SOON_TAG]

    tags = []
    if product.is_on_sale(now):
        tags.append(ON_SALE_TAG)
    if is_back_in_stock(product):
        tags.append(BACK_IN_STOCK_TAG)
    if is_new_arrival(product, now, new_arrival_days):
        tags.append(NEW_ARRIVAL_TAG)
    tags.append(IN_STOCK_TAG if has_stock_on_hand(product.inventory) else OUT_OF_STOCK_TAG)
    return tags
