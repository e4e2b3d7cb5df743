"""Tests for the Order status machine: permissive kitchen moves, terminal completion."""

import pytest
from ordering.order.events import OrderCompleted, OrderReadyForHandoff, OrderStatusChanged
from ordering.order.order import ACTIVE_STATUSES, Order, OrderStatus, can_transition
from protean.exceptions import ValidationError


def _make_order(service_mode="entrega"):
    customer = {
        "name": "Bruno",
        "contact": "92 99331-2208",
        "service_mode": service_mode,
        "address": "Rua das Flores, 12" if service_mode == "entrega" else None,
        "payment_method": "pix",
    }
    order = Order.place(
        customer=customer,
        lines_data=[{"menu_item_id": "1", "name": "X-Tudo", "price": 20.0, "quantity": 1}],
        total="20.00",
    )
    order._events.clear()
    return order


class TestStatusParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Recebido", OrderStatus.PLACED),
            ("Em preparação", OrderStatus.PREPARING),
            ("PREPARING", OrderStatus.PREPARING),
            ("ReadyForPickupOrDelivery", OrderStatus.READY_FOR_PICKUP_OR_DELIVERY),
            ("Pronto para entrega", OrderStatus.READY_FOR_PICKUP_OR_DELIVERY),
            ("Delivered", OrderStatus.DELIVERED),
            (" Entregue ", OrderStatus.DELIVERED),
            ("Completed", OrderStatus.COMPLETED),
        ],
    )
    def test_parse_accepts_every_spelling(self, value, expected):
        assert OrderStatus.parse(value) is expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValidationError) as exc:
            OrderStatus.parse("Shipped")
        assert "status" in exc.value.messages

    def test_label(self):
        assert OrderStatus.READY_FOR_PICKUP_OR_DELIVERY.label == "ReadyForPickupOrDelivery"


class TestTransitionTable:
    @pytest.mark.parametrize("current", ACTIVE_STATUSES)
    @pytest.mark.parametrize("target", [*ACTIVE_STATUSES, OrderStatus.COMPLETED])
    def test_active_statuses_move_freely(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_completed_is_terminal(self, target):
        assert not can_transition(OrderStatus.COMPLETED, target)


class TestUpdateStatus:
    def test_forward_move(self):
        order = _make_order()
        order.update_status("Em preparação")
        assert order.status == OrderStatus.PREPARING.value

    def test_backward_move_is_allowed(self):
        order = _make_order()
        order.update_status(OrderStatus.DELIVERED.value)
        order.update_status(OrderStatus.PLACED.value)
        assert order.status == OrderStatus.PLACED.value

    def test_raises_status_changed(self):
        order = _make_order()
        order.update_status("Preparing")
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "Recebido"
        assert event.new_status == "Em preparação"

    def test_ready_raises_handoff_event(self):
        order = _make_order(service_mode="entrega")
        order.update_status("ReadyForPickupOrDelivery")
        handoffs = [e for e in order._events if isinstance(e, OrderReadyForHandoff)]
        assert len(handoffs) == 1
        assert handoffs[0].contact == "92 99331-2208"
        assert handoffs[0].service_mode == "entrega"
        assert handoffs[0].customer_name == "Bruno"

    @pytest.mark.parametrize("status", ["Recebido", "Em preparação", "Entregue"])
    def test_other_statuses_raise_no_handoff(self, status):
        order = _make_order()
        order.update_status(status)
        assert not any(isinstance(e, OrderReadyForHandoff) for e in order._events)

    def test_completed_is_not_a_status_update_target(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_status("Concluído")
        assert order.status == OrderStatus.PLACED.value

    def test_unknown_status_is_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_status("Cancelado")

    def test_completed_order_cannot_move(self):
        order = _make_order()
        order.complete()
        with pytest.raises(ValidationError):
            order.update_status("Em preparação")


class TestComplete:
    def test_complete_sets_terminal_status(self):
        order = _make_order()
        order.update_status("Entregue")
        order.complete()
        assert order.status == OrderStatus.COMPLETED.value
        assert order.completed_at is not None
        assert not order.is_active

    def test_complete_raises_order_completed(self):
        order = _make_order()
        order.complete()
        event = order._events[-1]
        assert isinstance(event, OrderCompleted)
        assert event.previous_status == "Recebido"

    def test_complete_twice_is_rejected(self):
        order = _make_order()
        order.complete()
        with pytest.raises(ValidationError):
            order.complete()
