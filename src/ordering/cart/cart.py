"""Session cart aggregate: the server-side copy of a storefront cart.

A cart is keyed by the opaque session identifier the storefront generates and
keeps in durable client storage. Every save replaces the whole line set, so
the aggregate never merges partial updates: the last writer wins. Two tabs
sharing a session id can therefore overwrite each other's edits.

Lines snapshot the menu item's name, price and image at the moment it was
added; they are not re-validated against the live catalog.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String

from ordering.cart.events import CartCleared, CartSaved
from ordering.domain import ordering


class ClearReason(Enum):
    ORDER_PLACED = "order_placed"
    STALE = "stale"
    REQUESTED = "requested"


@ordering.entity(part_of="Cart")
class CartLine:
    menu_item_id = String(required=True, max_length=64)
    name = String(required=True, max_length=150)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)


@ordering.aggregate
class Cart:
    session_id = String(identifier=True, max_length=255)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, session_id):
        if not session_id or not str(session_id).strip():
            raise ValidationError({"sessionId": ["Identificador de sessão é obrigatório."]})

        now = datetime.now(UTC)
        return cls(session_id=str(session_id), created_at=now, updated_at=now)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def replace_lines(self, lines_data):
        """Overwrite the cart with ``lines_data``.

        Args:
            lines_data: List of dicts with menu_item_id, name, price, image, quantity.
        """
        seen = set()
        new_lines = []
        for data in lines_data:
            item_id = str(data["menu_item_id"])
            if item_id in seen:
                raise ValidationError({"itens": [f"Item {item_id} aparece mais de uma vez no carrinho."]})
            seen.add(item_id)
            new_lines.append(
                CartLine(
                    menu_item_id=item_id,
                    name=data["name"],
                    price=round(float(data["price"]), 2),
                    image=data.get("image"),
                    quantity=data["quantity"],
                )
            )

        self._drop_lines()
        for line in new_lines:
            self.add_lines(line)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartSaved(
                session_id=self.session_id,
                line_count=len(new_lines),
                item_count=self.item_count,
                saved_at=now,
            )
        )

    def clear(self, reason=ClearReason.REQUESTED):
        """Logically empty the cart. The record itself survives."""
        self._drop_lines()
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                session_id=self.session_id,
                reason=ClearReason(reason).value,
                cleared_at=now,
            )
        )

    def _drop_lines(self):
        for line in list(self.lines):
            self.remove_lines(line)
