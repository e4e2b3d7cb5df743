"""Cart store: upsert and clear commands plus the session lookup.

``SaveCart`` is a full overwrite with upsert semantics and no concurrency
token. ``ClearCart`` is the best-effort cleanup used after checkout and by the
stale-cart purge.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, CartLine, ClearReason
from ordering.domain import ordering
from ordering.utils.query import fetch_all

logger = structlog.get_logger(__name__)


@ordering.repository(part_of=Cart)
class CartRepository:
    def lines_for(self, session_id: str) -> list[CartLine]:
        """Persisted lines for a session; an unknown session has an empty cart."""
        try:
            cart = self.get(session_id)
        except ObjectNotFoundError:
            return []
        return list(cart.lines)

    def idle_since(self, cutoff) -> list[Cart]:
        """Carts holding lines whose last save is at or before ``cutoff``, oldest first."""
        query = self._dao.query.filter(updated_at__lte=cutoff).order_by("updated_at")
        return [cart for cart in fetch_all(query) if cart.lines]


@ordering.command(part_of="Cart")
class SaveCart:
    """Replace the persisted lines of a session cart, creating it if needed."""

    session_id = String(required=True, max_length=255)
    lines = Text(required=True)  # JSON: list of {menu_item_id, name, price, image, quantity}


@ordering.command(part_of="Cart")
class ClearCart:
    """Logically empty a session cart."""

    session_id = String(required=True, max_length=255)
    reason = String(choices=ClearReason, default=ClearReason.REQUESTED.value)


@ordering.command_handler(part_of=Cart)
class CartStoreHandler:
    @handle(SaveCart)
    def save_cart(self, command):
        lines = json.loads(command.lines) if isinstance(command.lines, str) else command.lines

        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(command.session_id)
        except ObjectNotFoundError:
            cart = Cart.create(session_id=command.session_id)
            logger.info("Creating cart for new session", session_id=command.session_id)

        cart.replace_lines(lines)
        repo.add(cart)
        return cart.session_id

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(command.session_id)
        except ObjectNotFoundError:
            logger.debug("No cart to clear", session_id=command.session_id)
            return None

        cart.clear(reason=command.reason)
        repo.add(cart)
        return cart.session_id
