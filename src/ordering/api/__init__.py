"""Ordering API package."""

from ordering.api.routes import cart_router, menu_router, order_router

__all__ = ["menu_router", "cart_router", "order_router"]
