"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class StorefrontState:
    """A simulated customer session: menu snapshot, local cart, placed order."""

    session_id: str | None = None
    menu: list[dict] = field(default_factory=list)
    lines: list[dict] = field(default_factory=list)
    order_id: str | None = None


@dataclass
class AdminState:
    """The kitchen board as last seen by a simulated operator."""

    order_ids: list[str] = field(default_factory=list)
