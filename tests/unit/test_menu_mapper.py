"""Unit tests for the menu mapper."""

import pytest

from restaurant_storefront.mappers.menu_mapper import (
    MenuDecodeError,
    decode_menu,
    decode_menu_item,
    map_api_to_menu_item,
    menu_item_to_payload,
    parse_price,
    split_allergens,
)
from restaurant_storefront.models.menu_models import ApiMenuItem, MenuCategory


@pytest.mark.unit
class TestMenuMapper:
    """Test suite for translating API menu rows."""

    def test_maps_full_row(self, api_menu_rows: list[dict]) -> None:
        """Test that every field of a complete row is carried over."""
        item = decode_menu_item(api_menu_rows[0])

        assert item.id == "1"
        assert item.name == "Classic Burger"
        assert item.price == 12.99
        assert item.category == MenuCategory.MAIN_COURSE
        assert item.image == "https://example.com/burger.jpg"
        assert item.is_vegetarian is False
        assert item.allergens == ("Gluten", "Dairy")
        assert item.nutritional_info.calories == 650
        assert item.nutritional_info.protein == "35g"
        assert item.reviews == ()

    def test_defaults_for_null_fields(self, api_menu_rows: list[dict]) -> None:
        """Test that null description, allergens and nutrition get defaults."""
        item = decode_menu_item(api_menu_rows[1])

        assert item.description == ""
        assert item.allergens == ()
        assert item.nutritional_info.calories == 0
        assert item.nutritional_info.protein == "0g"
        assert item.nutritional_info.carbs == "0g"
        assert item.nutritional_info.fat == "0g"
        assert item.is_vegetarian is True
        assert item.is_vegan is True

    def test_string_and_numeric_price_map_identically(self, api_menu_rows: list[dict]) -> None:
        """Test that "12.50" and 12.5 both map to 12.5."""
        from_string = decode_menu_item({**api_menu_rows[0], "price": "12.50"})
        from_number = decode_menu_item({**api_menu_rows[0], "price": 12.5})

        assert from_string.price == 12.5
        assert from_number.price == 12.5
        assert from_string == from_number

    def test_mapping_is_deterministic(self, api_menu_rows: list[dict]) -> None:
        """Test that the same row always yields an identical item."""
        assert decode_menu_item(api_menu_rows[0]) == decode_menu_item(api_menu_rows[0])

    def test_map_api_to_menu_item_from_validated_row(self, api_menu_rows: list[dict]) -> None:
        """Test mapping from an already validated ApiMenuItem."""
        row = ApiMenuItem.model_validate(api_menu_rows[1])
        item = map_api_to_menu_item(row)

        assert item.id == "2"
        assert item.price == 8.5

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Gluten, Dairy", ["Gluten", "Dairy"]),
            (" Nuts ,, Soy , ", ["Nuts", "Soy"]),
            ("", []),
            (None, []),
        ],
    )
    def test_split_allergens(self, raw: str | None, expected: list[str]) -> None:
        """Test allergen splitting, trimming and empty-token removal."""
        assert split_allergens(raw) == expected

    def test_parse_price_rejects_garbage(self) -> None:
        """Test that a non-numeric price string raises a decode error."""
        with pytest.raises(MenuDecodeError):
            parse_price("twelve")

    def test_decode_rejects_missing_name(self, api_menu_rows: list[dict]) -> None:
        """Test that a row without a name is a decode error."""
        row = dict(api_menu_rows[0])
        del row["name"]

        with pytest.raises(MenuDecodeError):
            decode_menu_item(row)

    def test_decode_rejects_unknown_category(self, api_menu_rows: list[dict]) -> None:
        """Test that categories outside the four menu sections are rejected."""
        with pytest.raises(MenuDecodeError):
            decode_menu_item({**api_menu_rows[0], "category": "Brunch"})

    def test_decode_rejects_negative_price(self, api_menu_rows: list[dict]) -> None:
        """Test that negative prices are rejected."""
        with pytest.raises(MenuDecodeError):
            decode_menu_item({**api_menu_rows[0], "price": "-1.00"})

    def test_decode_menu_requires_list(self) -> None:
        """Test that a non-list payload is a decode error."""
        with pytest.raises(MenuDecodeError):
            decode_menu({"items": []})

    def test_decode_menu_preserves_order(self, api_menu_rows: list[dict]) -> None:
        """Test that a payload decodes in order."""
        items = decode_menu(api_menu_rows)

        assert [item.id for item in items] == ["1", "2"]

    def test_decode_menu_skips_invalid_rows(self, api_menu_rows: list[dict]) -> None:
        """Test that rows with an unknown category or bad types are dropped individually."""
        payload = [
            api_menu_rows[0],
            {**api_menu_rows[0], "id": 99, "category": "Sides"},
            {**api_menu_rows[1], "id": 100, "protein": 12},
            "not a row",
            api_menu_rows[1],
        ]

        items = decode_menu(payload)

        assert [item.id for item in items] == ["1", "2"]

    def test_payload_uses_api_shape(self) -> None:
        """Test that the admin write payload is snake_case with 0/1 flags."""
        payload = menu_item_to_payload(
            name="Chili",
            description="Hot",
            price="9.50",
            category="Main Course",
            image="https://example.com/chili.jpg",
            is_spicy=True,
        )

        assert payload == {
            "name": "Chili",
            "description": "Hot",
            "price": 9.5,
            "category": "Main Course",
            "image_url": "https://example.com/chili.jpg",
            "is_vegetarian": 0,
            "is_vegan": 0,
            "is_spicy": 1,
        }
