"""Customer notification when an order is ready to leave the kitchen.

Reacts to OrderReadyForHandoff after the status change is committed. Delivery
is best-effort: provider errors are logged and never reach the admin request.
"""

import structlog
from protean.utils.mixins import handle

from notifications.channel import NotificationDeliveryError, get_channel
from notifications.templates import get_template
from ordering.domain import ordering
from ordering.order.events import OrderReadyForHandoff
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.event_handler(part_of=Order)
class OrderReadyNotifier:
    @handle(OrderReadyForHandoff)
    def on_order_ready(self, event: OrderReadyForHandoff) -> None:
        rendered = get_template("order_ready").render(
            {
                "order_id": str(event.order_id),
                "customer_name": event.customer_name,
                "service_mode": event.service_mode,
            }
        )

        try:
            result = get_channel().send(to=event.contact, body=rendered["body"])
            if result.get("status") != "sent":
                raise NotificationDeliveryError(result.get("error", "Unknown dispatch error"))
        except Exception as exc:
            logger.error(
                "Order ready notification failed",
                order_id=str(event.order_id),
                error=str(exc),
            )
            return

        logger.info(
            "Order ready notification sent",
            order_id=str(event.order_id),
            service_mode=event.service_mode,
            message_id=result.get("message_id"),
        )
