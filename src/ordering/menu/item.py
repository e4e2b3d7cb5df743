"""Menu item aggregate: the read-only catalog the storefront orders from.

Menu maintenance is owned elsewhere; the ordering core only reads items and
snapshots name, price and image into cart lines at add time.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, String, Text

from ordering.domain import ordering
from ordering.utils.query import fetch_all


@ordering.aggregate
class MenuItem:
    name = String(required=True, max_length=150)
    description = Text()
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=100)
    created_at = DateTime()

    @classmethod
    def create(cls, name, price, description=None, image=None, category=None, item_id=None):
        kwargs = {"id": item_id} if item_id else {}
        return cls(
            name=name,
            price=round(float(price), 2),
            description=description,
            image=image,
            category=category,
            created_at=datetime.now(UTC),
            **kwargs,
        )


@ordering.repository(part_of=MenuItem)
class MenuItemRepository:
    def catalog(self) -> list[MenuItem]:
        """All menu items in the order they were registered."""
        return fetch_all(self._dao.query.order_by("created_at"))
