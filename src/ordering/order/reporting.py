"""Sales report over the order ledger.

Orders are filtered by a period bucket and a status, then counted and
summed. Day and month boundaries are taken in the vendor's local timezone;
timestamps stored without tzinfo are UTC.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError

from ordering.order.order import Order, OrderStatus
from ordering.order.pricing import CENT, to_money
from ordering.utils.config import local_timezone

ALL_STATUSES = ("todos", "all")


class ReportPeriod(Enum):
    TODAY = "hoje"
    LAST_15_DAYS = "15dias"
    CURRENT_MONTH = "mes"
    ALL_TIME = "todos"

    @classmethod
    def parse(cls, value):
        if not value:
            return cls.ALL_TIME
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError({"periodo": [f"Período inválido: {value!r}."]}) from None


@dataclass
class SalesReport:
    period: ReportPeriod
    orders: list = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.orders)

    @property
    def revenue(self) -> Decimal:
        total = sum((to_money(order.total) for order in self.orders), Decimal("0"))
        return total.quantize(CENT)


def period_start(period: ReportPeriod, now: datetime) -> datetime | None:
    """First instant included in ``period``, or None for all time."""
    local_now = now.astimezone(local_timezone())
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == ReportPeriod.TODAY:
        return midnight
    if period == ReportPeriod.LAST_15_DAYS:
        return local_now - timedelta(days=15)
    if period == ReportPeriod.CURRENT_MONTH:
        return midnight.replace(day=1)
    return None


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def build_report(orders: list[Order], period=None, status=None, now: datetime | None = None) -> SalesReport:
    """Filter ``orders`` by period bucket and status and aggregate them.

    Args:
        orders: Candidate orders, in the order the report should list them.
        period: A ``ReportPeriod`` or its wire value; defaults to all time.
        status: Any status spelling ``OrderStatus.parse`` accepts, or "todos"/"all".
        now: Reference instant; defaults to the current time.
    """
    period = ReportPeriod.parse(period.value if isinstance(period, ReportPeriod) else period)
    now = _as_utc(now or datetime.now(UTC))
    start = period_start(period, now)

    wanted = None
    if status and str(status).strip().lower() not in ALL_STATUSES:
        wanted = OrderStatus.parse(status).value

    selected = []
    for order in orders:
        if wanted is not None and order.status != wanted:
            continue
        if start is not None and (order.created_at is None or _as_utc(order.created_at) < start):
            continue
        selected.append(order)

    return SalesReport(period=period, orders=selected)
