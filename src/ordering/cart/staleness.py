"""Stale cart purge: command and handler for emptying idle session carts.

Session tokens never expire, so carts left behind by abandoned browsers pile
up. The purge is run on demand (``manage.py purge-carts``) and logically
empties every cart with lines whose last save is older than the threshold.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, ClearReason
from ordering.cart.store import ClearCart
from ordering.domain import ordering
from ordering.utils.config import stale_cart_days

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class PurgeStaleCarts:
    """Empty carts idle beyond the threshold."""

    idle_days = Integer(min_value=1)  # Optional: defaults to LANCHONETE_STALE_CART_DAYS
    as_of = DateTime()  # Optional: defaults to now


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


@ordering.command_handler(part_of=Cart)
class PurgeStaleCartsHandler:
    @handle(PurgeStaleCarts)
    def purge_stale_carts(self, command):
        as_of = _as_utc(command.as_of or datetime.now(UTC))
        idle_days = command.idle_days or stale_cart_days()
        cutoff = as_of - timedelta(days=idle_days)

        logger.info("Checking for stale carts", cutoff=cutoff.isoformat(), idle_days=idle_days)

        stale = current_domain.repository_for(Cart).idle_since(cutoff)

        if not stale:
            logger.info("No stale carts found")
            return 0

        purged = 0
        for cart in stale:
            try:
                current_domain.process(
                    ClearCart(session_id=cart.session_id, reason=ClearReason.STALE.value),
                    asynchronous=False,
                )
                purged += 1
                logger.info(
                    "Purged stale cart",
                    session_id=cart.session_id,
                    item_count=cart.item_count,
                    last_updated=str(cart.updated_at),
                )
            except ValidationError as exc:
                logger.warning("Failed to purge cart", session_id=cart.session_id, error=str(exc))

        logger.info("Stale cart purge complete", purged=purged)
        return purged
