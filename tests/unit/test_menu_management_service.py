"""Unit tests for MenuManagementService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from restaurant_storefront.models.menu_models import MenuCategory, MenuItem
from restaurant_storefront.models.result_models import ApiResult, ErrorKind
from restaurant_storefront.services.app_context import AppContext
from restaurant_storefront.services.menu_management_service import (
    MenuItemForm,
    MenuManagementService,
)
from restaurant_storefront.services.restaurant_api_client import RestaurantApiClient
from restaurant_storefront.services.session_storage import AUTH_TOKEN_KEY, InMemorySessionStorage


@pytest.fixture
def mock_api_client() -> MagicMock:
    """Create a mock RestaurantApiClient."""
    client = MagicMock(spec=RestaurantApiClient)
    client.create_menu_item = AsyncMock()
    client.update_menu_item = AsyncMock()
    client.delete_menu_item = AsyncMock()
    return client


@pytest.fixture
def context(mock_api_client: MagicMock, burger: MenuItem) -> AppContext:
    """Create a context with a staff token and one cached item."""
    context = AppContext(
        api_client=mock_api_client,
        storage=InMemorySessionStorage({AUTH_TOKEN_KEY: "staff-token"}),
    )
    context.add_menu_item(burger)
    return context


@pytest.fixture
def service(context: AppContext) -> MenuManagementService:
    return MenuManagementService(context)


@pytest.mark.unit
class TestMenuManagementService:
    """Test suite for admin menu writes."""

    @pytest.mark.asyncio
    async def test_create_item_appends_to_menu(
        self, service: MenuManagementService, context: AppContext, mock_api_client: MagicMock
    ) -> None:
        """Test that the created row is decoded and cached."""
        mock_api_client.create_menu_item.return_value = ApiResult(
            success=True,
            status_code=201,
            data={
                "id": 9,
                "name": "Chili",
                "description": "Hot",
                "price": "9.50",
                "category": "Main Course",
                "image_url": "",
                "is_vegetarian": 0,
                "is_vegan": 0,
                "is_spicy": 1,
            },
        )

        result = await service.create_item(
            MenuItemForm(name="Chili", description="Hot", price="9.50", is_spicy=True)
        )

        assert result.success is True
        assert result.value.id == "9"
        assert result.value.is_spicy is True
        assert [item.id for item in context.menu] == ["1", "9"]
        token, payload = mock_api_client.create_menu_item.call_args.args
        assert token == "staff-token"
        assert payload["price"] == 9.5
        assert payload["is_spicy"] == 1

    @pytest.mark.asyncio
    async def test_create_item_invalid_price(
        self, service: MenuManagementService, mock_api_client: MagicMock
    ) -> None:
        """Test that a non-numeric price is refused before calling the API."""
        result = await service.create_item(MenuItemForm(name="X", description="", price="abc"))

        assert result.success is False
        assert result.error_kind == ErrorKind.VALIDATION
        mock_api_client.create_menu_item.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_item_negative_price(
        self, service: MenuManagementService, mock_api_client: MagicMock
    ) -> None:
        """Test that a negative price is refused."""
        result = await service.create_item(MenuItemForm(name="X", description="", price=-1))

        assert result.success is False
        mock_api_client.create_menu_item.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_item_unknown_category(
        self, service: MenuManagementService, mock_api_client: MagicMock
    ) -> None:
        """Test that a category outside the menu sections is refused."""
        result = await service.create_item(
            MenuItemForm(name="X", description="", price=1, category="Brunch")
        )

        assert result.success is False
        mock_api_client.create_menu_item.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_item_unauthorized(
        self, service: MenuManagementService, context: AppContext, mock_api_client: MagicMock
    ) -> None:
        """Test that an API rejection leaves the cache unchanged."""
        mock_api_client.create_menu_item.return_value = ApiResult(
            success=False,
            status_code=403,
            error_message="You are not authorized to manage the menu",
            error_kind=ErrorKind.UNAUTHORIZED,
        )

        result = await service.create_item(MenuItemForm(name="X", description="", price=1))

        assert result.success is False
        assert result.error_kind == ErrorKind.UNAUTHORIZED
        assert result.error_message == "You are not authorized to manage the menu"
        assert len(context.menu) == 1

    @pytest.mark.asyncio
    async def test_update_item_without_echo_keeps_allergens(
        self, service: MenuManagementService, context: AppContext, mock_api_client: MagicMock
    ) -> None:
        """Test that a bare acknowledgement patches the cached item."""
        mock_api_client.update_menu_item.return_value = ApiResult(
            success=True, status_code=200, data={"message": "Menu item updated"}
        )
        form = MenuItemForm.from_menu_item(context.get_menu_item("1"))
        form.name = "Double Burger"
        form.price = "14.00"

        result = await service.update_item("1", form)

        assert result.success is True
        cached = context.get_menu_item("1")
        assert cached.name == "Double Burger"
        assert cached.price == 14.0
        assert cached.category == MenuCategory.MAIN_COURSE
        assert cached.allergens == ("Gluten",)

    @pytest.mark.asyncio
    async def test_update_item_with_echoed_row(
        self, service: MenuManagementService, context: AppContext, mock_api_client: MagicMock
    ) -> None:
        """Test that an echoed row replaces the cached item."""
        mock_api_client.update_menu_item.return_value = ApiResult(
            success=True,
            data={
                "name": "Veggie Burger",
                "description": "Plant based",
                "price": 11,
                "category": "Main Course",
                "is_vegetarian": 1,
                "allergens": "Soy",
            },
        )

        result = await service.update_item(
            "1", MenuItemForm(name="Veggie Burger", description="Plant based", price=11)
        )

        assert result.success is True
        cached = context.get_menu_item("1")
        assert cached.name == "Veggie Burger"
        assert cached.is_vegetarian is True
        assert cached.allergens == ("Soy",)

    @pytest.mark.asyncio
    async def test_delete_item(
        self, service: MenuManagementService, context: AppContext, mock_api_client: MagicMock
    ) -> None:
        """Test that a successful delete drops the cached item."""
        mock_api_client.delete_menu_item.return_value = ApiResult(success=True, status_code=200)

        result = await service.delete_item("1")

        assert result.success is True
        assert context.menu == []
        mock_api_client.delete_menu_item.assert_awaited_once_with("staff-token", "1")

    @pytest.mark.asyncio
    async def test_delete_item_failure_keeps_cache(
        self, service: MenuManagementService, context: AppContext, mock_api_client: MagicMock
    ) -> None:
        """Test that a failed delete keeps the item."""
        mock_api_client.delete_menu_item.return_value = ApiResult(
            success=False,
            error_message="Unable to connect to server",
            error_kind=ErrorKind.TRANSPORT,
        )

        result = await service.delete_item("1")

        assert result.success is False
        assert len(context.menu) == 1
