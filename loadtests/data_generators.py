"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the ordering rules (phone
format, address iff delivery, change due iff cash and not below the total)
and use the wire keys the API's Pydantic schemas expect.
"""

import random
import uuid
from decimal import Decimal

from faker import Faker

fake = Faker("pt_BR")


def session_id() -> str:
    return str(uuid.uuid4())


def valid_phone() -> str:
    """Brazilian mobile number such as ``(92) 99331-2208``."""
    area = random.randint(11, 99)
    return f"({area}) 9{random.randint(1000, 9999)}-{random.randint(1000, 9999)}"


def fallback_menu() -> list[dict]:
    """Items used when the catalog has not been seeded."""
    return [
        {"id": f"lt-{i}", "nome": fake.word().capitalize(), "preco": round(random.uniform(4, 40), 2), "imagem": None}
        for i in range(1, 6)
    ]


def pick_lines(menu: list[dict], max_lines: int = 3) -> list[dict]:
    """Choose distinct menu items with random quantities, in cart line shape."""
    chosen = random.sample(menu, k=min(len(menu), random.randint(1, max_lines)))
    return [
        {
            "id": item["id"],
            "nome": item["nome"],
            "preco": item["preco"],
            "imagem": item.get("imagem"),
            "quantidade": random.randint(1, 3),
        }
        for item in chosen
    ]


def lines_total(lines: list[dict]) -> Decimal:
    total = sum((Decimal(str(line["preco"])) * line["quantidade"] for line in lines), Decimal("0"))
    return total.quantize(Decimal("0.01"))


def customer_data(total: Decimal) -> dict:
    """Customer record consistent with the service mode and payment method."""
    service = random.choice(["entrega", "retirada"])
    payment = random.choice(["dinheiro", "cartao", "pix"])
    customer = {
        "nome": fake.first_name()[:150],
        "telefone": valid_phone(),
        "tipoServico": service,
        "pagamento": payment,
    }
    if service == "entrega":
        customer["endereco"] = fake.street_address()[:500]
    if payment == "dinheiro":
        customer["troco"] = f"{(total + random.choice([0, 5, 10, 20, 50])):.2f}"
    return customer


def order_payload(lines: list[dict], session: str) -> dict:
    total = lines_total(lines)
    return {
        "cliente": customer_data(total),
        "itens": lines,
        "total": f"{total:.2f}",
        "data": fake.iso8601(),
        "sessionId": session,
    }
