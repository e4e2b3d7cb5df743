"""Application settings read from the environment.

Protean infrastructure (databases, brokers, event processing mode) is
configured in ``domain.toml``; these are the knobs the ordering rules need.
"""

import os
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_STALE_CART_DAYS = 7


def local_timezone() -> ZoneInfo:
    """Timezone used for report day boundaries ("hoje", "mes")."""
    return ZoneInfo(os.getenv("LANCHONETE_TIMEZONE", DEFAULT_TIMEZONE))


def stale_cart_days() -> int:
    """Idle days after which a session cart is considered stale."""
    return int(os.getenv("LANCHONETE_STALE_CART_DAYS", DEFAULT_STALE_CART_DAYS))
