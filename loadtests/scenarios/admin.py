"""Admin board load test scenario.

An operator polls the active orders, walks one order through the kitchen
statuses, completes it and checks the daily report.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState

KITCHEN_FLOW = ["Em preparação", "Pronto para entrega", "Entregue"]


class KitchenBoardJourney(SequentialTaskSet):
    """Poll board -> Preparing -> Ready -> Delivered -> Complete -> Report."""

    def on_start(self):
        self.state = AdminState()
        self.order_id = None

    @task
    def poll_board(self):
        with self.client.get("/api/pedidos", catch_response=True, name="GET /api/pedidos") as resp:
            if resp.status_code != 200:
                resp.failure(f"Board failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.order_ids = [order["id"] for order in resp.json()]

        if not self.state.order_ids:
            self.interrupt()
            return
        self.order_id = random.choice(self.state.order_ids)

    @task
    def advance_status(self):
        for status in KITCHEN_FLOW:
            with self.client.put(
                f"/api/pedidos/{self.order_id}",
                json={"status": status},
                catch_response=True,
                name="PUT /api/pedidos/{id}",
            ) as resp:
                # Another operator may have completed the order meanwhile.
                if resp.status_code == 400:
                    resp.success()
                    self.interrupt()
                    return
                if resp.status_code != 200:
                    resp.failure(f"Status update failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def complete(self):
        with self.client.delete(
            f"/api/pedidos/{self.order_id}",
            catch_response=True,
            name="DELETE /api/pedidos/{id}",
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            elif resp.status_code != 204:
                resp.failure(f"Complete failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def report(self):
        with self.client.get(
            "/api/pedidos/relatorio",
            params={"periodo": "hoje", "status": "todos"},
            catch_response=True,
            name="GET /api/pedidos/relatorio",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Report failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class AdminUser(HttpUser):
    """Locust user simulating the kitchen operator."""

    wait_time = between(1.0, 3.0)
    weight = 1
    tasks = [KitchenBoardJourney]
