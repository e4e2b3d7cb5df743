"""Messaging channel port: abstract interface for text message dispatch."""

from abc import ABC, abstractmethod


class MessagingPort(ABC):
    """Abstract interface for customer messaging adapters."""

    @abstractmethod
    def send(self, to: str, body: str) -> dict:
        """Send a text message to a phone number.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
