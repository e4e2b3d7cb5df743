"""Channel adapter registry for customer messaging.

The fake WhatsApp adapter is used unless ``NOTIFICATION_CHANNEL=whatsapp``
selects the Cloud API adapter, which reads its credentials from the
environment.
"""

import os

_channel_instances: dict[str, object] = {}

FAKE = "fake"
WHATSAPP = "whatsapp"


class NotificationDeliveryError(Exception):
    """A message could not be handed to the messaging provider."""


def configured_channel() -> str:
    return os.getenv("NOTIFICATION_CHANNEL", FAKE).strip().lower() or FAKE


def get_channel(channel_type: str | None = None):
    """Return the messaging adapter (singleton per channel type).

    Args:
        channel_type: ``"fake"`` or ``"whatsapp"``; defaults to ``NOTIFICATION_CHANNEL``.
    """
    channel_type = channel_type or configured_channel()
    if channel_type not in _channel_instances:
        if channel_type == FAKE:
            from notifications.channel.fake_whatsapp import FakeWhatsAppAdapter

            _channel_instances[channel_type] = FakeWhatsAppAdapter()
        elif channel_type == WHATSAPP:
            from notifications.channel.whatsapp_cloud import WhatsAppCloudAdapter

            _channel_instances[channel_type] = WhatsAppCloudAdapter.from_env()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
