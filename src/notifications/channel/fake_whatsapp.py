"""Fake WhatsApp adapter: keeps sent messages in memory for assertions."""

from uuid import uuid4

from notifications.channel.messaging_port import MessagingPort


class FakeWhatsAppAdapter(MessagingPort):
    def __init__(self):
        self.sent_messages: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "WhatsApp delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "WhatsApp delivery failed"):
        """Make subsequent sends succeed or fail."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to: str, body: str) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"wamid-{uuid4().hex[:12]}"
        self.sent_messages.append({"message_id": message_id, "to": to, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_messages.clear()
        self.should_succeed = True
        self.failure_reason = "WhatsApp delivery failed"
