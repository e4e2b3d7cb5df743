"""Order aggregate: the ledger entry created when a customer checks out.

An order snapshots the submitted cart lines and the customer's service and
payment choices. Lines and total are fixed at creation; afterwards only the
kitchen status moves.

State machine:
    Recebido ⇄ Em preparação ⇄ Pronto para entrega ⇄ Entregue
    (any of the above) → Concluído (terminal)

The four kitchen statuses may be set in any order so an operator can undo a
mistaken click. ``Concluído`` leaves the active board but the order stays in
the ledger for reports.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.order.events import (
    OrderCompleted,
    OrderPlaced,
    OrderReadyForHandoff,
    OrderStatusChanged,
)
from ordering.order.pricing import compute_total, to_money
from ordering.utils.query import fetch_all


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "Recebido"
    PREPARING = "Em preparação"
    READY_FOR_PICKUP_OR_DELIVERY = "Pronto para entrega"
    DELIVERED = "Entregue"
    COMPLETED = "Concluído"

    @classmethod
    def parse(cls, value):
        """Resolve a wire value, member name or English label to a status."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for status in cls:
            if text in (status.value, status.name, _LABELS[status]):
                return status
        raise ValidationError({"status": [f"Status inválido: {value!r}."]})

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    OrderStatus.PLACED: "Placed",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.READY_FOR_PICKUP_OR_DELIVERY: "ReadyForPickupOrDelivery",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.COMPLETED: "Completed",
}


class ServiceMode(Enum):
    DELIVERY = "entrega"
    PICKUP = "retirada"


class PaymentMethod(Enum):
    CASH = "dinheiro"
    CARD = "cartao"
    INSTANT_TRANSFER = "pix"


ACTIVE_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_PICKUP_OR_DELIVERY,
    OrderStatus.DELIVERED,
)

# Kitchen statuses are freely interchangeable; completion is one-way.
_VALID_TRANSITIONS = {
    **{status: {*ACTIVE_STATUSES, OrderStatus.COMPLETED} for status in ACTIVE_STATUSES},
    OrderStatus.COMPLETED: set(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS.get(current, set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
_CONTACT_PATTERN = re.compile(r"^\+?[\d\s\-()]+$")


@ordering.value_object(part_of="Order")
class Customer:
    """Who ordered, how the food leaves the kitchen and how it is paid for.

    The delivery address only exists for deliveries and the change-due amount
    only for cash payments.
    """

    name = String(required=True, max_length=150)
    contact = String(required=True, max_length=30)
    service_mode = String(required=True, choices=ServiceMode)
    address = String(max_length=500)
    payment_method = String(required=True, choices=PaymentMethod)
    change_due = Float(min_value=0.0)

    @invariant.post
    def contact_must_be_a_phone_number(self):
        digits = re.sub(r"\D", "", self.contact or "")
        if not _CONTACT_PATTERN.match(self.contact or "") or len(digits) < 8:
            raise ValidationError({"telefone": [f"Telefone inválido: {self.contact!r}."]})

    @invariant.post
    def address_required_for_delivery(self):
        has_address = bool(self.address and self.address.strip())
        if self.service_mode == ServiceMode.DELIVERY.value and not has_address:
            raise ValidationError({"endereco": ["Endereço é obrigatório para entrega."]})

    @invariant.post
    def change_due_only_for_cash(self):
        if self.payment_method == PaymentMethod.CASH.value and self.change_due is None:
            raise ValidationError({"troco": ["Informe o troco para pagamento em dinheiro."]})
        if self.payment_method != PaymentMethod.CASH.value and self.change_due is not None:
            raise ValidationError({"troco": ["Troco só é aceito para pagamento em dinheiro."]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """A cart line copied into the order at submission time."""

    menu_item_id = String(required=True, max_length=64)
    name = String(required=True, max_length=150)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer = ValueObject(Customer, required=True)
    items = HasMany(OrderLine)
    total = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    session_id = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()
    completed_at = DateTime()

    @invariant.post
    def change_due_covers_total(self):
        change_due = self.customer.change_due if self.customer else None
        if change_due is not None and to_money(change_due, "troco") < to_money(self.total):
            raise ValidationError({"troco": ["O troco não pode ser menor que o total do pedido."]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer, lines_data, total, session_id=None):
        """Record a new order in the ``Recebido`` status.

        Args:
            customer: Dict with name, contact, service_mode, address,
                      payment_method, change_due.
            lines_data: List of dicts with menu_item_id, name, price, image, quantity.
            total: Amount the client computed; must match the lines to the cent.
            session_id: Storefront session whose cart is cleared afterwards.
        """
        if not lines_data:
            raise ValidationError({"itens": ["O pedido precisa de pelo menos um item."]})

        item_ids = [str(data["menu_item_id"]) for data in lines_data]
        if len(set(item_ids)) != len(item_ids):
            raise ValidationError({"itens": ["Cada item deve aparecer uma única vez no pedido."]})

        expected = compute_total(lines_data)
        declared = to_money(total)
        if declared != expected:
            raise ValidationError({"total": [f"Total {declared} não confere com a soma dos itens ({expected})."]})

        now = datetime.now(UTC)
        order = cls(
            customer=Customer(**customer),
            total=float(declared),
            session_id=session_id or None,
            created_at=now,
            updated_at=now,
        )
        for data in lines_data:
            order.add_items(
                OrderLine(
                    menu_item_id=str(data["menu_item_id"]),
                    name=data["name"],
                    price=float(to_money(data["price"], "preco")),
                    image=data.get("image"),
                    quantity=data["quantity"],
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                session_id=order.session_id,
                customer_name=order.customer.name,
                service_mode=order.customer.service_mode,
                payment_method=order.customer.payment_method,
                item_count=order.item_count,
                total=order.total,
                placed_at=now,
            )
        )
        return order

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def is_active(self) -> bool:
        return OrderStatus(self.status) != OrderStatus.COMPLETED

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if not can_transition(current, target_status):
            raise ValidationError({"status": [f"Não é possível mudar de {current.value} para {target_status.value}."]})

    def update_status(self, new_status):
        """Move the order to one of the kitchen statuses."""
        target = OrderStatus.parse(new_status)
        if target not in ACTIVE_STATUSES:
            raise ValidationError({"status": ["Use a conclusão do pedido para encerrá-lo."]})
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

        if target == OrderStatus.READY_FOR_PICKUP_OR_DELIVERY:
            self.raise_(
                OrderReadyForHandoff(
                    order_id=str(self.id),
                    customer_name=self.customer.name,
                    contact=self.customer.contact,
                    service_mode=self.customer.service_mode,
                    ready_at=now,
                )
            )

    def complete(self):
        """Take the order off the active board. Completed orders are kept."""
        self._assert_can_transition(OrderStatus.COMPLETED)

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now
        self.completed_at = now

        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                previous_status=previous,
                completed_at=now,
            )
        )


@ordering.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise ObjectNotFoundError("Pedido não encontrado.") from None

    def active(self) -> list[Order]:
        """Orders still on the kitchen board, newest first."""
        query = self._dao.query.filter(status__in=[status.value for status in ACTIVE_STATUSES])
        return fetch_all(query.order_by("-created_at"))

    def all_orders(self) -> list[Order]:
        """Every order in the ledger, completed ones included, newest first."""
        return fetch_all(self._dao.query.order_by("-created_at"))
