"""Admin menu management: create, update and delete menu items."""

import logging
from dataclasses import dataclass

from restaurant_storefront.mappers.menu_mapper import (
    MenuDecodeError,
    decode_menu_item,
    menu_item_to_payload,
)
from restaurant_storefront.models.menu_models import MenuCategory, MenuItem
from restaurant_storefront.models.result_models import ErrorKind, OperationResult
from restaurant_storefront.services.app_context import AppContext

logger = logging.getLogger(__name__)


@dataclass
class MenuItemForm:
    """Fields editable from the menu management screen."""

    name: str
    description: str
    price: float | str
    category: MenuCategory | str = MenuCategory.MAIN_COURSE
    image: str = ""
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_spicy: bool = False

    @classmethod
    def from_menu_item(cls, item: MenuItem) -> "MenuItemForm":
        """Pre-fill the form from an existing item."""
        return cls(
            name=item.name,
            description=item.description,
            price=item.price,
            category=item.category,
            image=item.image,
            is_vegetarian=item.is_vegetarian,
            is_vegan=item.is_vegan,
            is_spicy=item.is_spicy,
        )


class MenuManagementService:
    """Service behind the admin menu screen.

    Writes go to the restaurant API with the session's bearer token; the
    context's menu cache is only changed after the API accepts the write.
    """

    def __init__(self, context: AppContext) -> None:
        """Initialize the MenuManagementService.

        Args:
            context: Application state container holding the session and menu cache
        """
        self.context = context

    async def create_item(self, form: MenuItemForm) -> OperationResult:
        """Create a menu item and append it to the cached menu.

        Args:
            form: Values entered on the menu form

        Returns:
            OperationResult whose value is the created MenuItem
        """
        payload = self._payload(form)
        if payload is None:
            return self._invalid_form()

        result = await self.context.api_client.create_menu_item(self.context.auth_token, payload)
        if not result.success:
            return OperationResult.failed(result)

        try:
            item = decode_menu_item(result.data)
        except MenuDecodeError as e:
            logger.error(f"Created menu item could not be decoded: {e}")
            return OperationResult(
                success=False,
                error_message="Something went wrong while saving the menu item",
                error_kind=ErrorKind.DECODE,
            )

        self.context.add_menu_item(item)
        logger.info(f"Menu item {item.id} created")
        return OperationResult(success=True, value=item)

    async def update_item(self, item_id: str, form: MenuItemForm) -> OperationResult:
        """Update a menu item and replace the matching cached entry.

        When the API echoes the updated row it is used as-is; otherwise the
        cached entry is patched with the form values, keeping its allergens
        and nutrition facts.

        Args:
            item_id: Identifier of the item being edited
            form: Values entered on the menu form

        Returns:
            OperationResult whose value is the updated MenuItem (None if the
            item was not in the cache)
        """
        payload = self._payload(form)
        if payload is None:
            return self._invalid_form()

        result = await self.context.api_client.update_menu_item(
            self.context.auth_token, item_id, payload
        )
        if not result.success:
            return OperationResult.failed(result)

        updated = self._updated_item(item_id, payload, result.data)
        if updated is not None:
            self.context.replace_menu_item(updated)
        logger.info(f"Menu item {item_id} updated")
        return OperationResult(success=True, value=updated)

    async def delete_item(self, item_id: str) -> OperationResult:
        """Delete a menu item and drop it from the cached menu."""
        result = await self.context.api_client.delete_menu_item(self.context.auth_token, item_id)
        if not result.success:
            return OperationResult.failed(result)

        self.context.remove_menu_item(item_id)
        logger.info(f"Menu item {item_id} deleted")
        return OperationResult(success=True, value=item_id)

    def _updated_item(self, item_id: str, payload: dict, data: object) -> MenuItem | None:
        if isinstance(data, dict) and "name" in data:
            try:
                return decode_menu_item({"id": item_id, **data})
            except MenuDecodeError as e:
                logger.warning(f"Ignoring undecodable update response for {item_id}: {e}")

        existing = self.context.get_menu_item(item_id)
        if existing is None:
            return None
        return existing.model_copy(
            update={
                "name": payload["name"],
                "description": payload["description"],
                "price": payload["price"],
                "category": MenuCategory(payload["category"]),
                "image": payload["image_url"],
                "is_vegetarian": bool(payload["is_vegetarian"]),
                "is_vegan": bool(payload["is_vegan"]),
                "is_spicy": bool(payload["is_spicy"]),
            }
        )

    @staticmethod
    def _payload(form: MenuItemForm) -> dict | None:
        try:
            payload = menu_item_to_payload(
                name=form.name,
                description=form.description,
                price=form.price,
                category=form.category,
                image=form.image,
                is_vegetarian=form.is_vegetarian,
                is_vegan=form.is_vegan,
                is_spicy=form.is_spicy,
            )
        except ValueError as e:
            logger.warning(f"Menu form rejected: {e}")
            return None
        if payload["price"] < 0:
            logger.warning(f"Menu form rejected: negative price {payload['price']}")
            return None
        return payload

    @staticmethod
    def _invalid_form() -> OperationResult:
        return OperationResult(
            success=False,
            error_message="Please enter a valid price and category",
            error_kind=ErrorKind.VALIDATION,
        )
