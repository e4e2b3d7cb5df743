"""HTTP client for the ordering API, used by storefront and admin tooling.

Any object with the ``requests`` call signature can be injected as the
session: a ``requests.Session`` in production, FastAPI's ``TestClient`` in
the test suite.
"""

import requests
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10


class StorefrontError(Exception):
    """The ordering API rejected a request or could not be reached."""

    def __init__(self, message, status_code=None, errors=None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or {}


class StorefrontClient:
    def __init__(self, base_url: str = "http://localhost:3001", session=None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise StorefrontError(f"Falha de conexão com {url}: {exc}") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise StorefrontError(
                body.get("message") or f"HTTP {response.status_code}",
                status_code=response.status_code,
                errors=body.get("errors"),
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------
    # Menu
    # -------------------------------------------------------------------
    def get_menu(self) -> list[dict]:
        return self._request("GET", "/api/cardapio")

    # -------------------------------------------------------------------
    # Cart store
    # -------------------------------------------------------------------
    def get_cart(self, session_id: str) -> list[dict]:
        return self._request("GET", f"/api/carrinho/{session_id}")

    def save_cart(self, session_id: str, lines: list[dict]) -> dict:
        return self._request("POST", "/api/carrinho", json={"sessionId": session_id, "itens": lines})

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def submit_order(self, payload: dict) -> dict:
        result = self._request("POST", "/api/pedidos", json=payload)
        logger.info("Order submitted", order_id=result["pedido"]["id"], total=result["pedido"]["total"])
        return result

    def list_orders(self) -> list[dict]:
        return self._request("GET", "/api/pedidos")

    def get_order(self, order_id: str) -> dict:
        return self._request("GET", f"/api/pedidos/{order_id}")

    def update_status(self, order_id: str, status: str) -> dict:
        return self._request("PUT", f"/api/pedidos/{order_id}", json={"status": status})

    def complete_order(self, order_id: str) -> None:
        self._request("DELETE", f"/api/pedidos/{order_id}")

    def report(self, period: str | None = None, status: str | None = None) -> dict:
        params = {key: value for key, value in (("periodo", period), ("status", status)) if value}
        return self._request("GET", "/api/pedidos/relatorio", params=params)
