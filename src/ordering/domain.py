"""Ordering bounded context: menu catalog, session carts and the order ledger.

Handles the session-scoped cart store, order submission, the order status
lifecycle, and the notification trigger raised when an order is ready for
pickup or delivery.
"""

import structlog
from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
