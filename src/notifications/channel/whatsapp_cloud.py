"""WhatsApp Cloud API adapter.

Posts plain text messages to ``{api_url}/{phone_number_id}/messages``.
Local Brazilian numbers (area code plus subscriber, 10 or 11 digits) get the
default country code prepended.
"""

import os
import re

import requests
import structlog

from notifications.channel.messaging_port import MessagingPort

logger = structlog.get_logger(__name__)

DEFAULT_API_URL = "https://graph.facebook.com/v19.0"
DEFAULT_TIMEOUT = 10


def normalize_number(number: str, country_code: str = "55") -> str:
    digits = re.sub(r"\D", "", number or "")
    if len(digits) in (10, 11):
        digits = f"{country_code}{digits}"
    return digits


class WhatsAppCloudAdapter(MessagingPort):
    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_url: str = DEFAULT_API_URL,
        country_code: str = "55",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.country_code = country_code
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls):
        phone_number_id = os.getenv("WHATSAPP_PHONE_NUMBER_ID")
        access_token = os.getenv("WHATSAPP_ACCESS_TOKEN")
        if not phone_number_id or not access_token:
            raise ValueError("WHATSAPP_PHONE_NUMBER_ID and WHATSAPP_ACCESS_TOKEN must be set")
        return cls(
            phone_number_id=phone_number_id,
            access_token=access_token,
            api_url=os.getenv("WHATSAPP_API_URL", DEFAULT_API_URL),
            country_code=os.getenv("WHATSAPP_DEFAULT_COUNTRY_CODE", "55"),
        )

    def send(self, to: str, body: str) -> dict:
        recipient = normalize_number(to, self.country_code)
        payload = {
            "messaging_product": "whatsapp",
            "to": recipient,
            "type": "text",
            "text": {"body": body},
        }
        try:
            response = self.session.post(
                f"{self.api_url}/{self.phone_number_id}/messages",
                json=payload,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("WhatsApp send failed", to=recipient, error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        messages = response.json().get("messages") or [{}]
        return {"message_id": messages[0].get("id"), "status": "sent"}
