"""Catalog loading: seeds menu items from an external source.

Used by ``manage.py load-menu`` to import a JSON export shaped like the
``GET /api/cardapio`` response.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.menu.item import MenuItem

logger = structlog.get_logger(__name__)


@ordering.command(part_of="MenuItem")
class RegisterMenuItem:
    """Add an item to the catalog, or refresh it when the id is already known."""

    item_id = String(max_length=64)
    name = String(required=True, max_length=150)
    description = Text()
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=100)


@ordering.command_handler(part_of=MenuItem)
class RegisterMenuItemHandler:
    @handle(RegisterMenuItem)
    def register_menu_item(self, command):
        repo = current_domain.repository_for(MenuItem)

        item = None
        if command.item_id:
            try:
                item = repo.get(command.item_id)
            except ObjectNotFoundError:
                item = None

        if item is None:
            item = MenuItem.create(
                name=command.name,
                price=command.price,
                description=command.description,
                image=command.image,
                category=command.category,
                item_id=command.item_id,
            )
        else:
            item.name = command.name
            item.price = round(command.price, 2)
            item.description = command.description
            item.image = command.image
            item.category = command.category

        repo.add(item)
        logger.info("Menu item registered", item_id=str(item.id), name=item.name)
        return str(item.id)
