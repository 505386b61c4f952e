"""Main entry point for the restaurant storefront client.

This module builds the application state container from environment
configuration. Running it directly loads the menu once and prints it.
"""

import asyncio
import logging
import os

from restaurant_storefront.observability import configure_logging, setup_observability
from restaurant_storefront.services.app_context import AppContext
from restaurant_storefront.services.restaurant_api_client import (
    DEFAULT_BASE_URL,
    RestaurantApiClient,
)
from restaurant_storefront.services.session_storage import (
    InMemorySessionStorage,
    JsonFileSessionStorage,
    SessionStorage,
)

logger = logging.getLogger(__name__)


def create_session_storage() -> SessionStorage:
    """Create session storage from environment configuration.

    Returns:
        File-backed storage when SESSION_STORAGE_PATH is set, in-memory otherwise
    """
    storage_path = os.getenv("SESSION_STORAGE_PATH")
    if storage_path:
        logger.info(f"Using session file at {storage_path}")
        return JsonFileSessionStorage(storage_path)

    logger.info("Using in-memory session storage")
    return InMemorySessionStorage()


def create_application() -> AppContext:
    """Create and configure the application state container.

    This factory function:
    1. Configures logging
    2. Sets up observability
    3. Creates the restaurant API client
    4. Creates session storage and restores any stored session

    Returns:
        Configured AppContext instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)
    setup_observability(enable_exporters=os.getenv("ENABLE_OTLP_EXPORT", "false").lower() == "true")

    logger.info("Initializing restaurant storefront...")

    base_url = os.getenv("RESTAURANT_API_BASE_URL", DEFAULT_BASE_URL)
    timeout = float(os.getenv("RESTAURANT_API_TIMEOUT_SECONDS", "10"))
    api_client = RestaurantApiClient(base_url=base_url, timeout=timeout)
    logger.info(f"Restaurant API client configured - URL: {base_url}")

    enforce = os.getenv("ENFORCE_STATUS_TRANSITIONS", "false").lower() == "true"
    context = AppContext(
        api_client=api_client,
        storage=create_session_storage(),
        enforce_transitions=enforce,
    )

    logger.info("Restaurant storefront initialized successfully")
    return context


async def show_menu(context: AppContext) -> int:
    """Load the menu and print it grouped by category.

    Returns:
        Process exit code (0 on success, 1 if the menu could not be loaded)
    """
    if not await context.refresh_menu():
        print(context.error_menu)
        return 1

    for item in context.menu:
        flags = "".join(
            tag
            for tag, enabled in (
                (" [V]", item.is_vegetarian),
                (" [VG]", item.is_vegan),
                (" [HOT]", item.is_spicy),
            )
            if enabled
        )
        print(f"{item.category.value:<12} {item.id:>4}  {item.name}{flags}  {item.price:.2f}")
    return 0


def run() -> int:
    """Console entry point: build the application and print the menu."""
    return asyncio.run(show_menu(create_application()))


if __name__ == "__main__":
    raise SystemExit(run())
