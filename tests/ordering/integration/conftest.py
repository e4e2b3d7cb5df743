import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from ordering.api.errors import register_error_handlers
from ordering.api.routes import cart_router, menu_router, order_router


@pytest.fixture()
def app():
    from ordering.domain import ordering

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with ordering.domain_context():
            return await call_next(request)

    app.include_router(menu_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


PICKUP_CASH_ORDER = {
    "cliente": {
        "nome": "Ana",
        "telefone": "(92) 99331-2208",
        "tipoServico": "retirada",
        "pagamento": "dinheiro",
        "troco": "30.00",
    },
    "itens": [
        {"id": "a", "nome": "X-Burger", "preco": 10.0, "imagem": None, "quantidade": 2},
        {"id": "b", "nome": "Suco", "preco": 5.5, "imagem": None, "quantidade": 1},
    ],
    "total": "25.50",
    "data": "2025-03-20T15:00:00.000Z",
}


@pytest.fixture()
def order_payload():
    return {**PICKUP_CASH_ORDER, "cliente": dict(PICKUP_CASH_ORDER["cliente"])}
