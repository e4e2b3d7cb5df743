"""Order completion: takes an order off the active board."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class CompleteOrder:
    """Close an order. It stays in the ledger and keeps counting in reports."""

    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class CompleteOrderHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        order.complete()
        repo.add(order)
        return str(order.id)
