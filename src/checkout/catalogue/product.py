"""Catalog product snapshot, as consumed by checkout (read-only)."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, List, String, ValueObject

from checkout.catalogue.inventory import Inventory
from checkout.domain import checkout

COMING_SOON_TAG = "coming soon"


def as_utc(value: datetime | None) -> datetime | None:
    # Catalog documents may carry naive timestamps; they are stored in UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@checkout.value_object
class Product:
    id: String(required=True)
    name: String(required=True)
    price: Float(default=0.0, min_value=0.0)
    sale_price: Float(min_value=0.0)
    sale_start_date: DateTime()
    sale_end_date: DateTime()
    inventory: ValueObject(Inventory, required=True)
    tags: List(content_type=String, default=list)
    category_id: String()
    category_ids: List(content_type=String, default=list)
    requires_b2b: Boolean(default=False)
    restocked_at: DateTime()
    created_at: DateTime()

    @property
    def is_coming_soon(self) -> bool:
        return COMING_SOON_TAG in self.tags

    @property
    def manage_stock(self) -> bool:
        return self.inventory.manage_stock

    def is_on_sale(self, now: datetime) -> bool:
        """A sale is active when the sale price undercuts the base price inside its window.

        Either end of the window may be open.
        """
        if self.sale_price is None or self.sale_price >= self.price:
            return False
        starts, ends = as_utc(self.sale_start_date), as_utc(self.sale_end_date)
        if starts is not None and now < starts:
            return False
        if ends is not None and now > ends:
            return False
        return True

    def unit_price(self, now: datetime) -> float:
        if self.is_on_sale(now):
            return self.sale_price
        return self.price

    def category_set(self) -> set[str]:
        """Primary and additional category ids."""
        categories = set(self.category_ids)
        if self.category_id:
            categories.add(self.category_id)
        return categories
