"""Pydantic request/response schemas for the ordering API.

These are the storefront and admin contracts: Portuguese wire keys mapped
onto the internal names through aliases, separate from the Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from ordering.order.pricing import format_money, to_money


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    id: int | str
    name: str = Field(alias="nome", min_length=1)
    price: float = Field(alias="preco", ge=0)
    image: str | None = Field(default=None, alias="imagem")
    quantity: int = Field(alias="quantidade", ge=1)

    model_config = {"populate_by_name": True}

    def to_line_data(self) -> dict:
        return {
            "menu_item_id": str(self.id),
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "quantity": self.quantity,
        }

    @classmethod
    def from_line(cls, line):
        return cls(
            id=line.menu_item_id,
            name=line.name,
            price=line.price,
            image=line.image,
            quantity=line.quantity,
        )


class CustomerSchema(BaseModel):
    name: str = Field(alias="nome", min_length=1)
    contact: str = Field(alias="telefone", min_length=1)
    service_mode: str = Field(alias="tipoServico")
    address: str | None = Field(default=None, alias="endereco")
    payment_method: str = Field(alias="pagamento")
    change_due: float | str | None = Field(default=None, alias="troco")

    model_config = {"populate_by_name": True}

    @field_validator("address", "change_due", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_customer_data(self) -> dict:
        change_due = None if self.change_due is None else float(to_money(self.change_due, "troco"))
        return {
            "name": self.name.strip(),
            "contact": self.contact.strip(),
            "service_mode": self.service_mode,
            "address": self.address,
            "payment_method": self.payment_method,
            "change_due": change_due,
        }

    @classmethod
    def from_customer(cls, customer):
        return cls(
            name=customer.name,
            contact=customer.contact,
            service_mode=customer.service_mode,
            address=customer.address,
            payment_method=customer.payment_method,
            change_due=customer.change_due,
        )


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------
class MenuItemResponse(BaseModel):
    id: str
    name: str = Field(alias="nome")
    description: str | None = Field(default=None, alias="descricao")
    price: float = Field(alias="preco")
    image: str | None = Field(default=None, alias="imagem")
    category: str | None = Field(default=None, alias="categoria")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_item(cls, item):
        return cls(
            id=str(item.id),
            name=item.name,
            description=item.description,
            price=item.price,
            image=item.image,
            category=item.category,
        )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class SaveCartRequest(BaseModel):
    session_id: str = Field(alias="sessionId", min_length=1)
    lines: list[CartLineSchema] = Field(alias="itens")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "sessionId": "3f6c1a52-6a0e-4a8e-9c55-0f1f7f3b9d11",
                    "itens": [{"id": 1, "nome": "X-Burger", "preco": 10.0, "imagem": None, "quantidade": 2}],
                }
            ]
        },
    }


class CartResponse(BaseModel):
    session_id: str = Field(alias="sessionId")
    lines: list[CartLineSchema] = Field(alias="itens")
    updated_at: datetime | None = Field(default=None, alias="atualizadoEm")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_cart(cls, cart):
        return cls(
            session_id=cart.session_id,
            lines=[CartLineSchema.from_line(line) for line in cart.lines],
            updated_at=cart.updated_at,
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class SubmitOrderRequest(BaseModel):
    customer: CustomerSchema = Field(alias="cliente")
    lines: list[CartLineSchema] = Field(alias="itens")
    total: float | str
    placed_at: str | None = Field(default=None, alias="data")  # accepted, the ledger stamps creation
    session_id: str | None = Field(default=None, alias="sessionId")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "cliente": {
                        "nome": "Ana",
                        "telefone": "(92) 99331-2208",
                        "tipoServico": "retirada",
                        "pagamento": "dinheiro",
                        "troco": "30.00",
                    },
                    "itens": [
                        {"id": "a", "nome": "X-Burger", "preco": 10.0, "quantidade": 2},
                        {"id": "b", "nome": "Suco", "preco": 5.5, "quantidade": 1},
                    ],
                    "total": "25.50",
                    "data": "2025-01-01T12:00:00.000Z",
                    "sessionId": "3f6c1a52-6a0e-4a8e-9c55-0f1f7f3b9d11",
                }
            ]
        },
    }


class UpdateStatusRequest(BaseModel):
    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "Em preparação"}]}}


class OrderResponse(BaseModel):
    id: str
    customer: CustomerSchema = Field(alias="cliente")
    lines: list[CartLineSchema] = Field(alias="itens")
    total: str
    status: str
    created_at: datetime | None = Field(default=None, alias="data")
    session_id: str | None = Field(default=None, alias="sessionId")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_order(cls, order):
        return cls(
            id=str(order.id),
            customer=CustomerSchema.from_customer(order.customer),
            lines=[CartLineSchema.from_line(line) for line in order.items],
            total=format_money(order.total),
            status=order.status,
            created_at=order.created_at,
            session_id=order.session_id,
        )


class OrderMessageResponse(BaseModel):
    message: str
    order: OrderResponse = Field(alias="pedido")

    model_config = {"populate_by_name": True}


class ReportResponse(BaseModel):
    orders: list[OrderResponse] = Field(alias="pedidos")
    count: int = Field(alias="totalPedidos")
    revenue: str = Field(alias="faturamento")
    period: str = Field(alias="periodo")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_report(cls, report):
        return cls(
            orders=[OrderResponse.from_order(order) for order in report.orders],
            count=report.count,
            revenue=format_money(report.revenue),
            period=report.period.value,
        )
