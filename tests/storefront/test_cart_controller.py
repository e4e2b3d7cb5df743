"""CartController behaviour against an in-memory store."""

import threading
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from storefront.cart import (
    CartController,
    CartLine,
    add_item,
    cart_total,
    change_quantity,
    load_or_create_session_id,
    remove_item,
)
from storefront.client import StorefrontError

BURGER = {"id": 1, "nome": "X-Burger", "preco": 10.0, "imagem": "burger.png"}
JUICE = {"id": 2, "nome": "Suco", "preco": 5.5, "imagem": None}


class InMemoryStore:
    def __init__(self, persisted=None):
        self.persisted = {"sess-1": list(persisted or [])}
        self.saves: list[list[dict]] = []
        self.submitted: list[dict] = []
        self.fail_saves = False
        self.fail_load = False
        self._lock = threading.Lock()

    def get_cart(self, session_id):
        if self.fail_load:
            raise StorefrontError("Falha de conexão")
        return self.persisted.get(session_id, [])

    def save_cart(self, session_id, lines):
        if self.fail_saves:
            raise StorefrontError("Erro ao acessar os dados.", status_code=500)
        with self._lock:
            self.saves.append(lines)
            self.persisted[session_id] = lines

    def submit_order(self, payload):
        self.submitted.append(payload)
        return {"message": "Pedido recebido com sucesso!", "pedido": {"id": "order-1", "total": payload["total"]}}


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def controller(store):
    controller = CartController("sess-1", store)
    yield controller
    controller.close()


class TestPureTransforms:
    def test_add_new_item_snapshots_fields(self):
        lines = add_item((), BURGER)
        assert lines == (CartLine("1", "X-Burger", Decimal("10.0"), "burger.png", 1),)

    def test_add_existing_item_increments(self):
        lines = add_item(add_item((), BURGER), BURGER)
        assert len(lines) == 1
        assert lines[0].quantity == 2

    def test_add_preserves_line_order(self):
        lines = add_item(add_item(add_item((), BURGER), JUICE), BURGER)
        assert [line.item_id for line in lines] == ["1", "2"]

    def test_decrement_to_zero_removes_line(self):
        lines = change_quantity(add_item((), BURGER), "1", -1)
        assert lines == ()

    def test_change_quantity_of_missing_item_is_noop(self):
        lines = add_item((), BURGER)
        assert change_quantity(lines, "99", +1) == lines

    def test_remove_item(self):
        lines = add_item(add_item((), BURGER), JUICE)
        assert [line.item_id for line in remove_item(lines, 1)] == ["2"]

    def test_cart_total_uses_decimal_cents(self):
        lines = change_quantity(add_item(add_item((), BURGER), JUICE), "1", +1)
        assert cart_total(lines) == Decimal("25.50")
        assert cart_total(()) == Decimal("0.00")

    def test_wire_round_trip_keeps_keys(self):
        wire = CartLine.from_wire({**JUICE, "quantidade": 3}).to_wire()
        assert wire == {"id": "2", "nome": "Suco", "preco": 5.5, "imagem": None, "quantidade": 3}


class TestControllerMutations:
    def test_every_mutation_saves_whole_cart_in_order(self, controller, store):
        controller.add(BURGER)
        controller.add(JUICE)
        controller.increment(1)
        controller.decrement(2)
        controller.flush(timeout=5)

        assert [[(line["id"], line["quantidade"]) for line in save] for save in store.saves] == [
            [("1", 1)],
            [("1", 1), ("2", 1)],
            [("1", 2), ("2", 1)],
            [("1", 2)],
        ]
        assert store.persisted["sess-1"] == [line.to_wire() for line in controller.lines]

    def test_derived_views(self, controller):
        controller.add(BURGER)
        controller.add(BURGER)
        controller.add(JUICE)
        assert controller.item_count == 3
        assert controller.total == Decimal("25.50")
        assert controller.quantity_of(1) == 2
        assert controller.quantity_of(3) == 0

    def test_remove_and_clear(self, controller, store):
        controller.add(BURGER)
        controller.add(JUICE)
        controller.remove(1)
        assert [line.item_id for line in controller.lines] == ["2"]

        controller.clear()
        controller.flush(timeout=5)
        assert controller.lines == ()
        assert store.persisted["sess-1"] == []

    def test_failed_save_is_logged_not_raised(self, controller, store):
        store.fail_saves = True
        controller.add(BURGER)
        controller.flush(timeout=5)

        assert controller.quantity_of(1) == 1
        assert store.saves == []

    def test_next_mutation_overwrites_failed_save(self, controller, store):
        store.fail_saves = True
        controller.add(BURGER)
        controller.flush(timeout=5)

        store.fail_saves = False
        controller.add(JUICE)
        controller.flush(timeout=5)
        assert [line["id"] for line in store.persisted["sess-1"]] == ["1", "2"]


class TestLoad:
    def test_load_seeds_from_store(self):
        store = InMemoryStore(persisted=[{"id": "7", "nome": "Pastel", "preco": 6.0, "quantidade": 2}])
        with CartController("sess-1", store) as controller:
            lines = controller.load()

        assert lines == (CartLine("7", "Pastel", Decimal("6.0"), None, 2),)
        assert store.saves == []

    def test_unreachable_store_leaves_cart_empty(self, controller, store):
        store.fail_load = True
        assert controller.load() == ()


class TestContextManager:
    def test_exit_flushes_pending_saves_and_stops_the_worker(self, store):
        with CartController("sess-1", store) as controller:
            controller.add(BURGER)
            controller.add(JUICE)

        assert [line["id"] for line in store.persisted["sess-1"]] == ["1", "2"]
        with pytest.raises(RuntimeError):
            controller.add(BURGER)

    def test_worker_stops_when_the_block_raises(self, store):
        with pytest.raises(KeyError):
            with CartController("sess-1", store) as controller:
                controller.add(BURGER)
                raise KeyError("boom")

        assert store.persisted["sess-1"][0]["id"] == "1"
        with pytest.raises(RuntimeError):
            controller.increment(1)


class TestSessionId:
    def test_created_once_and_reused(self, tmp_path):
        path = tmp_path / "storefront" / "session"
        first = load_or_create_session_id(path)
        assert path.read_text(encoding="utf-8") == first
        assert load_or_create_session_id(path) == first

    def test_blank_file_gets_a_new_id(self, tmp_path):
        path = tmp_path / "session"
        path.write_text("  \n", encoding="utf-8")
        session_id = load_or_create_session_id(path)
        assert session_id.strip()
        assert path.read_text(encoding="utf-8") == session_id


class TestCheckout:
    CUSTOMER = {"nome": "Ana", "telefone": "92993312208", "tipoServico": "retirada", "pagamento": "pix"}

    def test_payload_and_local_clear(self, controller, store):
        controller.add(BURGER)
        controller.add(BURGER)
        controller.add(JUICE)
        placed_at = datetime(2025, 3, 20, 15, 0, tzinfo=UTC)

        result = controller.checkout(self.CUSTOMER, placed_at=placed_at)
        controller.flush(timeout=5)

        payload = store.submitted[0]
        assert payload["cliente"] == self.CUSTOMER
        assert payload["total"] == "25.50"
        assert payload["data"] == "2025-03-20T15:00:00+00:00"
        assert payload["sessionId"] == "sess-1"
        assert [line["quantidade"] for line in payload["itens"]] == [2, 1]
        assert result["pedido"]["id"] == "order-1"
        assert controller.lines == ()
        assert store.persisted["sess-1"] == []

    def test_empty_cart_cannot_check_out(self, controller, store):
        with pytest.raises(StorefrontError):
            controller.checkout(self.CUSTOMER)
        assert store.submitted == []

    def test_rejected_submission_keeps_cart(self, controller, store):
        def reject(payload):
            raise StorefrontError("Total não confere.", status_code=400, errors={"total": ["Total não confere."]})

        store.submit_order = reject
        controller.add(BURGER)

        with pytest.raises(StorefrontError):
            controller.checkout(self.CUSTOMER)
        assert controller.quantity_of(1) == 1
