"""Cart cleanup after checkout: Cart reacts to OrderPlaced.

The order is already committed when this runs. Emptying the cart is
best-effort: a failure is logged and the customer keeps a stale cart until
the next save or purge.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ordering.cart.cart import Cart, ClearReason
from ordering.cart.store import ClearCart
from ordering.domain import ordering
from ordering.order.events import OrderPlaced

logger = structlog.get_logger(__name__)


@ordering.event_handler(part_of=Cart, stream_category="ordering::order")
class OrderPlacedCartHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        if not event.session_id:
            return

        try:
            current_domain.process(
                ClearCart(session_id=event.session_id, reason=ClearReason.ORDER_PLACED.value),
                asynchronous=False,
            )
        except Exception as exc:
            logger.error(
                "Failed to clear cart after order",
                order_id=str(event.order_id),
                session_id=event.session_id,
                error=str(exc),
            )
            return

        logger.info("Cart cleared after order", order_id=str(event.order_id), session_id=event.session_id)
