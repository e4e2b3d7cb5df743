"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer submitted a cart and the ledger recorded the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    session_id = String(max_length=255)
    customer_name = String(required=True)
    service_mode = String(required=True)
    payment_method = String(required=True)
    item_count = Integer(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to another kitchen status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderReadyForHandoff:
    """The order is ready to leave the kitchen; the customer should be told."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String(required=True)
    contact = String(required=True)
    service_mode = String(required=True)
    ready_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """The order left the active board; it stays in the ledger for reporting."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    completed_at = DateTime(required=True)
