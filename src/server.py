"""Protean Engine runner for the ordering domain.

With ``event_processing = "async"`` (the production overlay) committed events
are not handled inside the request. This process picks them up and runs the
event handlers: cart cleanup after checkout and the order-ready message.

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode    # drain pending events and exit
"""

import argparse

from protean.server.engine import Engine

from ordering.domain import ordering
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


def build_engine(test_mode: bool = False) -> Engine:
    ordering.init()
    return Engine(ordering, test_mode=test_mode)


def main():
    parser = argparse.ArgumentParser(description="Manú Lanches event processing engine")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending events once and exit",
    )
    args = parser.parse_args()

    engine = build_engine(test_mode=args.test_mode)
    logger.info("Starting engine", domain=ordering.name, test_mode=args.test_mode)
    engine.run()


if __name__ == "__main__":
    main()
