"""Client-side cart controller.

The controller owns the authoritative in-memory cart of one storefront
session. Every mutation is a pure transform of the line tuple followed by a
fire-and-forget save of the whole cart to the cart store. Saves run on a
single worker thread so they reach the store in mutation order; a failed save
is logged and dropped, and the next mutation overwrites it anyway.

The store is read once, at ``load()``. Changes made to the persisted cart from
another device are not pulled afterwards.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from uuid import uuid4

import structlog

from storefront.client import StorefrontError

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CartLine:
    item_id: str
    name: str
    price: Decimal
    image: str | None
    quantity: int

    @classmethod
    def from_wire(cls, data: dict) -> "CartLine":
        return cls(
            item_id=str(data["id"]),
            name=data["nome"],
            price=Decimal(str(data["preco"])),
            image=data.get("imagem"),
            quantity=int(data.get("quantidade", 1)),
        )

    def to_wire(self) -> dict:
        return {
            "id": self.item_id,
            "nome": self.name,
            "preco": float(self.price),
            "imagem": self.image,
            "quantidade": self.quantity,
        }


# ---------------------------------------------------------------------------
# Pure transforms
# ---------------------------------------------------------------------------
def add_item(lines: tuple, item: dict) -> tuple:
    """Increment the line for ``item`` or append it with quantity 1.

    A new line snapshots the item's current name, price and image.
    """
    item_id = str(item["id"])
    if any(line.item_id == item_id for line in lines):
        return change_quantity(lines, item_id, +1)
    return (*lines, CartLine.from_wire({**item, "quantidade": 1}))


def change_quantity(lines: tuple, item_id: str, delta: int) -> tuple:
    """Shift a line's quantity; lines that reach zero are removed."""
    updated = []
    for line in lines:
        if line.item_id == str(item_id):
            quantity = line.quantity + delta
            if quantity <= 0:
                continue
            line = replace(line, quantity=quantity)
        updated.append(line)
    return tuple(updated)


def remove_item(lines: tuple, item_id: str) -> tuple:
    return tuple(line for line in lines if line.item_id != str(item_id))


def cart_total(lines) -> Decimal:
    total = sum((line.price * line.quantity for line in lines), Decimal("0"))
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Session identity
# ---------------------------------------------------------------------------
def load_or_create_session_id(path) -> str:
    """Return the session token kept at ``path``, creating one on first use."""
    path = Path(path)
    if path.exists():
        session_id = path.read_text(encoding="utf-8").strip()
        if session_id:
            return session_id

    session_id = str(uuid4())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(session_id, encoding="utf-8")
    logger.info("Created storefront session", session_id=session_id, path=str(path))
    return session_id


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class CartController:
    """In-memory cart of one session, mirrored to a cart store.

    Args:
        session_id: Opaque session token (see ``load_or_create_session_id``).
        store: Object with ``get_cart(session_id)``, ``save_cart(session_id, lines)``
               and ``submit_order(payload)``; usually a ``StorefrontClient``.
    """

    def __init__(self, session_id: str, store):
        self.session_id = session_id
        self.store = store
        self.lines: tuple = ()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cart-sync")
        self._last_save: Future | None = None

    # -------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------
    @property
    def total(self) -> Decimal:
        return cart_total(self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def quantity_of(self, item_id) -> int:
        return next((line.quantity for line in self.lines if line.item_id == str(item_id)), 0)

    # -------------------------------------------------------------------
    # Load and mutations
    # -------------------------------------------------------------------
    def load(self) -> tuple:
        """Seed local state from the store. An unreachable store leaves the cart empty."""
        try:
            persisted = self.store.get_cart(self.session_id) or []
        except StorefrontError as exc:
            logger.warning("Could not load cart", session_id=self.session_id, error=str(exc))
            persisted = []
        self.lines = tuple(CartLine.from_wire(data) for data in persisted)
        return self.lines

    def add(self, item: dict) -> tuple:
        return self._apply(add_item(self.lines, item))

    def increment(self, item_id) -> tuple:
        return self._apply(change_quantity(self.lines, item_id, +1))

    def decrement(self, item_id) -> tuple:
        return self._apply(change_quantity(self.lines, item_id, -1))

    def remove(self, item_id) -> tuple:
        return self._apply(remove_item(self.lines, item_id))

    def clear(self) -> tuple:
        return self._apply(())

    def _apply(self, lines: tuple) -> tuple:
        self.lines = lines
        self._schedule_save(lines)
        return lines

    # -------------------------------------------------------------------
    # Store synchronization
    # -------------------------------------------------------------------
    def _schedule_save(self, lines: tuple) -> None:
        snapshot = [line.to_wire() for line in lines]
        self._last_save = self._executor.submit(self._save, snapshot)

    def _save(self, snapshot: list[dict]) -> None:
        try:
            self.store.save_cart(self.session_id, snapshot)
        except Exception as exc:
            logger.warning(
                "Cart save failed",
                session_id=self.session_id,
                line_count=len(snapshot),
                error=str(exc),
            )

    def flush(self, timeout: float | None = None) -> None:
        """Block until every scheduled save has been attempted."""
        if self._last_save is not None:
            self._last_save.result(timeout=timeout)

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "CartController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def checkout(self, customer: dict, placed_at: datetime | None = None) -> dict:
        """Submit the cart as an order and empty it locally on success.

        Args:
            customer: Wire-shaped customer record (nome, telefone, tipoServico,
                      endereco, pagamento, troco).
        """
        if not self.lines:
            raise StorefrontError("O carrinho está vazio.")

        self.flush()
        payload = {
            "cliente": customer,
            "itens": [line.to_wire() for line in self.lines],
            "total": f"{self.total:.2f}",
            "data": (placed_at or datetime.now(UTC)).isoformat(),
            "sessionId": self.session_id,
        }
        result = self.store.submit_order(payload)
        self.clear()
        return result
