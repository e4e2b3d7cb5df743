"""FastAPI routes for the ordering domain: menu, session carts and orders."""

import json

from fastapi import APIRouter, Response
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CartLineSchema,
    CartResponse,
    MenuItemResponse,
    OrderMessageResponse,
    OrderResponse,
    ReportResponse,
    SaveCartRequest,
    SubmitOrderRequest,
    UpdateStatusRequest,
)
from ordering.cart.cart import Cart
from ordering.cart.store import SaveCart
from ordering.menu.item import MenuItem
from ordering.order.completion import CompleteOrder
from ordering.order.order import Order
from ordering.order.reporting import build_report
from ordering.order.status import UpdateOrderStatus
from ordering.order.submission import SubmitOrder

# ---------------------------------------------------------------------------
# Menu Router
# ---------------------------------------------------------------------------
menu_router = APIRouter(prefix="/api/cardapio", tags=["menu"])


@menu_router.get("", response_model=list[MenuItemResponse])
async def list_menu() -> list[MenuItemResponse]:
    items = current_domain.repository_for(MenuItem).catalog()
    return [MenuItemResponse.from_item(item) for item in items]


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/api/carrinho", tags=["carts"])


@cart_router.get("/{session_id}", response_model=list[CartLineSchema])
async def get_cart(session_id: str) -> list[CartLineSchema]:
    lines = current_domain.repository_for(Cart).lines_for(session_id)
    return [CartLineSchema.from_line(line) for line in lines]


@cart_router.post("", response_model=CartResponse)
async def save_cart(body: SaveCartRequest) -> CartResponse:
    """Overwrite the session cart with the submitted lines."""
    command = SaveCart(
        session_id=body.session_id,
        lines=json.dumps([line.to_line_data() for line in body.lines]),
    )
    session_id = current_domain.process(command, asynchronous=False)
    cart = current_domain.repository_for(Cart).get(session_id)
    return CartResponse.from_cart(cart)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/pedidos", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderMessageResponse)
async def submit_order(body: SubmitOrderRequest) -> OrderMessageResponse:
    command = SubmitOrder(
        customer=json.dumps(body.customer.to_customer_data()),
        lines=json.dumps([line.to_line_data() for line in body.lines]),
        total=str(body.total),
        session_id=body.session_id,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).find(order_id)
    return OrderMessageResponse(
        message="Pedido recebido com sucesso!",
        order=OrderResponse.from_order(order),
    )


@order_router.get("", response_model=list[OrderResponse])
async def list_active_orders() -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).active()
    return [OrderResponse.from_order(order) for order in orders]


# Declared before "/{order_id}" so "relatorio" is not taken for an id.
@order_router.get("/relatorio", response_model=ReportResponse)
async def order_report(periodo: str | None = None, status: str | None = None) -> ReportResponse:
    orders = current_domain.repository_for(Order).all_orders()
    return ReportResponse.from_report(build_report(orders, period=periodo, status=status))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(current_domain.repository_for(Order).find(order_id))


@order_router.put("/{order_id}", response_model=OrderMessageResponse)
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> OrderMessageResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).find(order_id)
    return OrderMessageResponse(
        message="Status do pedido atualizado com sucesso!",
        order=OrderResponse.from_order(order),
    )


@order_router.delete("/{order_id}", status_code=204)
async def complete_order(order_id: str) -> Response:
    current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
    return Response(status_code=204)
