"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartSaved:
    """The full line set of a session cart was replaced."""

    __version__ = 1

    session_id = String(required=True, max_length=255)
    line_count = Integer(required=True)
    item_count = Integer(required=True)
    saved_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """A session cart was logically emptied (the record is kept)."""

    __version__ = 1

    session_id = String(required=True, max_length=255)
    reason = String(required=True, max_length=50)
    cleared_at = DateTime(required=True)
