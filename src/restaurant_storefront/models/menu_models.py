"""Menu data models.

``ApiMenuItem`` mirrors the row shape returned by the restaurant API
(snake_case, nullable nutrition columns, 0/1 flags). ``MenuItem`` and
``CartItem`` are the internal shapes consumed by views.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MenuCategory(str, Enum):
    """Enumeration of menu sections."""

    STARTERS = "Starters"
    MAIN_COURSE = "Main Course"
    DESSERTS = "Desserts"
    DRINKS = "Drinks"


class NutritionalInfo(BaseModel):
    """Nutrition facts for a menu item."""

    model_config = ConfigDict(frozen=True)

    calories: int = Field(default=0, description="Energy in kcal", ge=0)
    protein: str = Field(default="0g", description="Protein with unit suffix")
    carbs: str = Field(default="0g", description="Carbohydrates with unit suffix")
    fat: str = Field(default="0g", description="Fat with unit suffix")


class Review(BaseModel):
    """Customer review of a menu item."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    date: str


class MenuItem(BaseModel):
    """Menu item as presented to customers.

    Instances are immutable all the way down, so items handed out from the
    menu cache or the cart cannot alter cached state.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable external identifier")
    name: str = Field(..., description="Item name")
    description: str = Field(default="", description="Item description")
    price: float = Field(..., description="Item price", ge=0)
    category: MenuCategory = Field(..., description="Menu section")
    image: str = Field(default="", description="URL to item image")
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_spicy: bool = False
    allergens: tuple[str, ...] = Field(default=(), description="Allergen names")
    nutritional_info: NutritionalInfo = Field(default_factory=NutritionalInfo)
    reviews: tuple[Review, ...] = Field(default=())


class CartItem(MenuItem):
    """A menu item line in the shopping cart."""

    quantity: int = Field(default=1, description="Units ordered", ge=1)

    @property
    def line_total(self) -> float:
        """Price of this line (price times quantity)."""
        return self.price * self.quantity

    @classmethod
    def from_menu_item(cls, item: MenuItem, quantity: int = 1) -> "CartItem":
        """Create a cart line for a menu item.

        Args:
            item: The menu item being added
            quantity: Starting quantity

        Returns:
            CartItem: New cart line
        """
        data = item.model_dump()
        data.pop("quantity", None)
        return cls(**data, quantity=quantity)


class ApiMenuItem(BaseModel):
    """Menu row as returned by ``GET /api/menu``."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    name: str
    description: str | None = None
    price: float | str
    category: MenuCategory
    image_url: str | None = None
    is_vegetarian: int | bool = 0
    is_vegan: int | bool = 0
    is_spicy: int | bool = 0
    allergens: str | None = None
    calories: int | None = None
    protein: str | None = None
    carbs: str | None = None
    fat: str | None = None
