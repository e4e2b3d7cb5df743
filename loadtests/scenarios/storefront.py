"""Storefront load test scenario.

A customer opens the menu, restores the session cart, edits it (every edit is
a full-cart save, as the storefront does) and checks out.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import fallback_menu, order_payload, pick_lines, session_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import StorefrontState


class CheckoutJourney(SequentialTaskSet):
    """Menu -> Restore cart -> Save x3 -> Submit order -> Verify empty cart."""

    def on_start(self):
        self.state = StorefrontState(session_id=session_id())

    @task
    def browse_menu(self):
        with self.client.get("/api/cardapio", catch_response=True, name="GET /api/cardapio") as resp:
            if resp.status_code == 200:
                self.state.menu = resp.json() or fallback_menu()
            else:
                resp.failure(f"Menu failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def restore_cart(self):
        with self.client.get(
            f"/api/carrinho/{self.state.session_id}",
            catch_response=True,
            name="GET /api/carrinho/{sessionId}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Load cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    def _save(self):
        with self.client.post(
            "/api/carrinho",
            json={"sessionId": self.state.session_id, "itens": self.state.lines},
            catch_response=True,
            name="POST /api/carrinho",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Save cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def add_items(self):
        self.state.lines = pick_lines(self.state.menu)
        self._save()

    @task
    def bump_quantity(self):
        line = random.choice(self.state.lines)
        line["quantidade"] += 1
        self._save()

    @task
    def drop_quantity(self):
        line = random.choice(self.state.lines)
        line["quantidade"] -= 1
        if line["quantidade"] <= 0:
            self.state.lines.remove(line)
        if not self.state.lines:
            self.state.lines = pick_lines(self.state.menu, max_lines=1)
        self._save()

    @task
    def submit_order(self):
        with self.client.post(
            "/api/pedidos",
            json=order_payload(self.state.lines, self.state.session_id),
            catch_response=True,
            name="POST /api/pedidos",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["pedido"]["id"]
            else:
                resp.failure(f"Submit order failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def verify_cart_cleared(self):
        with self.client.get(
            f"/api/carrinho/{self.state.session_id}",
            catch_response=True,
            name="GET /api/carrinho/{sessionId}",
        ) as resp:
            if resp.status_code == 200 and resp.json():
                resp.failure("Cart still has lines after checkout")

    @task
    def done(self):
        self.interrupt()


class StorefrontUser(HttpUser):
    """Locust user simulating storefront customers."""

    wait_time = between(0.5, 2.0)
    weight = 4
    tasks = [CheckoutJourney]
