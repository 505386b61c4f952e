"""Shared pytest fixtures and configuration for all tests."""

import os
from collections.abc import Iterator

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from restaurant_storefront.models.menu_models import MenuCategory, MenuItem

os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture(scope="session")
def session_span_exporter() -> InMemorySpanExporter:
    """Install an SDK tracer provider that keeps finished spans in memory."""
    trace.set_tracer_provider(TracerProvider())
    provider = trace.get_tracer_provider()
    exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return exporter


@pytest.fixture
def span_exporter(session_span_exporter: InMemorySpanExporter) -> Iterator[InMemorySpanExporter]:
    """Fixture providing an empty in-memory span exporter for one test."""
    session_span_exporter.clear()
    yield session_span_exporter
    session_span_exporter.clear()


@pytest.fixture
def api_menu_rows() -> list[dict]:
    """Fixture providing menu rows as returned by GET /api/menu."""
    return [
        {
            "id": 1,
            "name": "Classic Burger",
            "description": "Juicy beef patty with fresh lettuce, tomato, and our special sauce",
            "price": "12.99",
            "category": "Main Course",
            "image_url": "https://example.com/burger.jpg",
            "is_vegetarian": 0,
            "is_vegan": 0,
            "is_spicy": 0,
            "allergens": "Gluten, Dairy",
            "calories": 650,
            "protein": "35g",
            "carbs": "45g",
            "fat": "32g",
        },
        {
            "id": 2,
            "name": "Garden Salad",
            "description": None,
            "price": 8.5,
            "category": "Starters",
            "image_url": "https://example.com/salad.jpg",
            "is_vegetarian": 1,
            "is_vegan": 1,
            "is_spicy": 0,
            "allergens": None,
            "calories": None,
            "protein": None,
            "carbs": None,
            "fat": None,
        },
    ]


@pytest.fixture
def auth_payload() -> dict:
    """Fixture providing a successful login/register response body."""
    return {
        "token": "jwt-token-123",
        "user": {
            "id": 7,
            "name": "Jane Doe",
            "email": "jane@example.com",
            "role": "customer",
            "phone": "555-0100",
        },
    }


@pytest.fixture
def burger() -> MenuItem:
    """Fixture providing a main course menu item priced at 10.00."""
    return MenuItem(
        id="1",
        name="Classic Burger",
        description="Beef burger",
        price=10.00,
        category=MenuCategory.MAIN_COURSE,
        allergens=["Gluten"],
    )


@pytest.fixture
def lemonade() -> MenuItem:
    """Fixture providing a drink menu item priced at 5.00."""
    return MenuItem(
        id="2",
        name="Lemonade",
        description="Fresh lemonade",
        price=5.00,
        category=MenuCategory.DRINKS,
        is_vegetarian=True,
        is_vegan=True,
    )
