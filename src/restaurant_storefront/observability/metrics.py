"""Custom metrics for the storefront client."""

from opentelemetry import metrics

meter = metrics.get_meter("storefront")

menu_refresh_counter = meter.create_counter(
    name="menu_refresh_total",
    description="Total number of menu refreshes by outcome",
    unit="1",
)

auth_attempt_counter = meter.create_counter(
    name="auth_attempt_total",
    description="Total number of login and registration attempts by outcome",
    unit="1",
)

order_placed_counter = meter.create_counter(
    name="order_placed_total",
    description="Total number of orders placed by delivery type",
    unit="1",
)

menu_size_histogram = meter.create_histogram(
    name="menu_items_loaded",
    description="Number of items in each successfully loaded menu",
    unit="1",
)

api_request_duration = meter.create_histogram(
    name="api_request_duration_seconds",
    description="Response time for restaurant API calls",
    unit="s",
)


def record_menu_refresh(success: bool, item_count: int = 0) -> None:
    """Record the outcome of a menu refresh.

    Args:
        success: Whether the menu was replaced
        item_count: Number of items loaded
    """
    menu_refresh_counter.add(1, {"outcome": "success" if success else "failure"})
    if success:
        menu_size_histogram.record(item_count)


def record_auth_attempt(operation: str, success: bool) -> None:
    """Record a login or registration attempt.

    Args:
        operation: "login" or "register"
        success: Whether a session was established
    """
    auth_attempt_counter.add(
        1, {"operation": operation, "outcome": "success" if success else "failure"}
    )


def record_order_placed(delivery_type: str) -> None:
    """Record an order placed at checkout.

    Args:
        delivery_type: "delivery" or "collection"
    """
    order_placed_counter.add(1, {"delivery_type": delivery_type})


def record_api_call(method: str, path: str, status_code: int | None, duration_seconds: float) -> None:
    """Record a restaurant API call.

    Args:
        method: HTTP method
        path: Request path template (e.g. "/api/menu/{id}")
        status_code: Response status, None when no response was received
        duration_seconds: Duration in seconds
    """
    api_request_duration.record(
        duration_seconds,
        {"method": method, "path": path, "status_code": str(status_code or "none")},
    )
