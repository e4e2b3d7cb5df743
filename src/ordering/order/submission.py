"""Order submission: the storefront checkout lands here."""

import json

import structlog
from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class SubmitOrder:
    customer = Text(required=True)  # JSON: customer dict
    lines = Text(required=True)  # JSON: list of line dicts
    total = String(required=True, max_length=32)
    session_id = String(max_length=255)


@ordering.command_handler(part_of=Order)
class SubmitOrderHandler:
    @handle(SubmitOrder)
    def submit_order(self, command):
        customer = json.loads(command.customer) if isinstance(command.customer, str) else command.customer
        lines = json.loads(command.lines) if isinstance(command.lines, str) else command.lines

        order = Order.place(
            customer=customer,
            lines_data=lines,
            total=command.total,
            session_id=command.session_id,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            session_id=order.session_id,
            total=order.total,
            item_count=order.item_count,
        )
        return str(order.id)
