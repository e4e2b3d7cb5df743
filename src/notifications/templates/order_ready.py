"""Order ready template: sent when the kitchen marks an order ready."""

DELIVERY = "entrega"


class OrderReadyTemplate:
    notification_type = "order_ready"

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("customer_name") or "cliente"
        order_id = context.get("order_id", "N/A")
        if context.get("service_mode") == DELIVERY:
            body = f"Olá {name}! Seu pedido #{order_id} está a caminho."
        else:
            body = f"Olá {name}! Seu pedido #{order_id} está pronto para retirada."
        return {"body": body}
