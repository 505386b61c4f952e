"""Translation between restaurant API rows and internal menu items.

The same remote row always produces an identical ``MenuItem``; every view
that consumes the menu goes through these functions.
"""

import logging
from typing import Any

from pydantic import ValidationError

from restaurant_storefront.models.menu_models import (
    ApiMenuItem,
    MenuCategory,
    MenuItem,
    NutritionalInfo,
)

logger = logging.getLogger(__name__)


class MenuDecodeError(ValueError):
    """Raised when a remote menu payload does not match the expected shape."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw


def parse_price(value: float | int | str) -> float:
    """Parse a price from its numeric or decimal-string representation.

    Args:
        value: Price as a number or a string such as ``"12.50"``

    Returns:
        float: The parsed price

    Raises:
        MenuDecodeError: If a string price is not a decimal number
    """
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as e:
            raise MenuDecodeError(f"Invalid price: {value!r}", raw=value) from e
    return float(value)


def split_allergens(allergens: str | None) -> list[str]:
    """Split a comma separated allergen column into a list.

    Args:
        allergens: Raw column value, e.g. ``"Gluten, Dairy"`` or None

    Returns:
        List of trimmed, non-empty allergen names
    """
    if not allergens:
        return []
    return [token.strip() for token in allergens.split(",") if token.strip()]


def map_api_to_menu_item(row: ApiMenuItem) -> MenuItem:
    """Convert a validated API row into a ``MenuItem``.

    Args:
        row: Menu row from the restaurant API

    Returns:
        MenuItem: Internal representation of the row
    """
    return MenuItem(
        id=str(row.id),
        name=row.name,
        description=row.description or "",
        price=parse_price(row.price),
        category=row.category,
        image=row.image_url or "",
        is_vegetarian=bool(row.is_vegetarian),
        is_vegan=bool(row.is_vegan),
        is_spicy=bool(row.is_spicy),
        allergens=tuple(split_allergens(row.allergens)),
        nutritional_info=NutritionalInfo(
            calories=row.calories if row.calories is not None else 0,
            protein=row.protein if row.protein is not None else "0g",
            carbs=row.carbs if row.carbs is not None else "0g",
            fat=row.fat if row.fat is not None else "0g",
        ),
        reviews=(),
    )


def decode_menu_item(raw: Any) -> MenuItem:
    """Validate a raw JSON object and map it to a ``MenuItem``.

    Args:
        raw: One element of the ``GET /api/menu`` response

    Returns:
        MenuItem: Internal representation of the row

    Raises:
        MenuDecodeError: If the object is not a valid menu row
    """
    if not isinstance(raw, dict):
        raise MenuDecodeError(f"Expected a menu object, got {type(raw).__name__}", raw=raw)

    try:
        row = ApiMenuItem.model_validate(raw)
        return map_api_to_menu_item(row)
    except ValidationError as e:
        raise MenuDecodeError(f"Invalid menu row {raw.get('id')!r}: {e}", raw=raw) from e


def decode_menu(raw: Any) -> list[MenuItem]:
    """Decode a full menu payload.

    Rows that fail to decode are logged and left out; the rest of the menu
    is still returned.

    Args:
        raw: Decoded JSON body of ``GET /api/menu``

    Returns:
        List of MenuItem objects in payload order

    Raises:
        MenuDecodeError: If the payload is not a list
    """
    if not isinstance(raw, list):
        raise MenuDecodeError(f"Expected a list of menu rows, got {type(raw).__name__}", raw=raw)

    items: list[MenuItem] = []
    for row in raw:
        try:
            items.append(decode_menu_item(row))
        except MenuDecodeError as e:
            logger.warning(f"Skipping menu row: {e}")
    if len(items) < len(raw):
        logger.warning(f"Dropped {len(raw) - len(items)} of {len(raw)} menu rows")
    return items


def menu_item_to_payload(
    name: str,
    description: str,
    price: float | str,
    category: MenuCategory | str,
    image: str = "",
    is_vegetarian: bool = False,
    is_vegan: bool = False,
    is_spicy: bool = False,
) -> dict[str, Any]:
    """Build the request body for creating or updating a menu item.

    Returns:
        dict: API-compatible representation (snake_case, 0/1 flags)
    """
    return {
        "name": name,
        "description": description,
        "price": parse_price(price),
        "category": MenuCategory(category).value,
        "image_url": image,
        "is_vegetarian": 1 if is_vegetarian else 0,
        "is_vegan": 1 if is_vegan else 0,
        "is_spicy": 1 if is_spicy else 0,
    }
