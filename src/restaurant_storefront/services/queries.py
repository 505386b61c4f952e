"""Read-only filters and summaries over context state.

Views call these with lists taken from ``AppContext``; nothing here mutates
its inputs.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from restaurant_storefront.models.menu_models import MenuCategory, MenuItem
from restaurant_storefront.models.order_models import (
    DELIVERY_STEPS,
    Order,
    OrderStatus,
    Reservation,
    ReservationStatus,
)
from restaurant_storefront.models.user_models import DirectoryUser, User, UserRole

ALL = "All"


@dataclass
class DashboardSummary:
    """Figures shown on the admin dashboard.

    Attributes:
        today_orders: Orders created today
        today_revenue: Sum of today's order totals
        today_reservations: Reservations booked for today
        status_counts: Number of orders in each status, in progression order
        upcoming_reservations: Pending or confirmed reservations
    """

    today_orders: list[Order]
    today_revenue: float
    today_reservations: list[Reservation]
    status_counts: dict[OrderStatus, int] = field(default_factory=dict)
    upcoming_reservations: list[Reservation] = field(default_factory=list)


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def filter_menu(
    items: list[MenuItem],
    category: MenuCategory | str = ALL,
    search: str = "",
    vegetarian: bool = False,
    vegan: bool = False,
    spicy: bool = False,
) -> list[MenuItem]:
    """Filter menu items the way the menu page does.

    Args:
        items: Cached menu
        category: Category to show, or "All"
        search: Case-insensitive substring of name or description
        vegetarian: Only vegetarian items
        vegan: Only vegan items
        spicy: Only spicy items

    Returns:
        Matching items in menu order
    """
    wanted = None if category == ALL else MenuCategory(category)
    return [
        item
        for item in items
        if (wanted is None or item.category == wanted)
        and (_contains(item.name, search) or _contains(item.description, search))
        and (not vegetarian or item.is_vegetarian)
        and (not vegan or item.is_vegan)
        and (not spicy or item.is_spicy)
    ]


def filter_orders(
    orders: list[Order], search: str = "", status: OrderStatus | str = ALL
) -> list[Order]:
    """Filter orders by id/customer name and status (staff order screen)."""
    wanted = None if status == ALL else OrderStatus(status)
    return [
        order
        for order in orders
        if (_contains(order.id, search) or _contains(order.customer_name, search))
        and (wanted is None or order.status == wanted)
    ]


def orders_for_user(orders: list[Order], user: User | None) -> list[Order]:
    """Orders visible on the tracking page.

    Orders are matched to a logged-in user by customer name; anonymous
    visitors see every order placed in this session.
    """
    if user is None:
        return list(orders)
    return [order for order in orders if order.customer_name.lower() == user.name.lower()]


def filter_reservations(
    reservations: list[Reservation],
    search: str = "",
    date_filter: str = "",
    status: ReservationStatus | str = ALL,
) -> list[Reservation]:
    """Filter reservations by name/email/phone, booking date and status."""
    wanted = None if status == ALL else ReservationStatus(status)
    return [
        r
        for r in reservations
        if (
            _contains(r.customer_name, search)
            or _contains(r.customer_email, search)
            or search in r.customer_phone
        )
        and (not date_filter or r.date == date_filter)
        and (wanted is None or r.status == wanted)
    ]


def filter_users(
    users: list[DirectoryUser], search: str = "", role: UserRole | str = ALL
) -> list[DirectoryUser]:
    """Filter the admin directory by name/email and role."""
    wanted = None if role == ALL else UserRole(role)
    return [
        user
        for user in users
        if (_contains(user.name, search) or _contains(user.email, search))
        and (wanted is None or user.role == wanted)
    ]


def dashboard_summary(
    orders: list[Order], reservations: list[Reservation], today: date | None = None
) -> DashboardSummary:
    """Compute the admin dashboard figures.

    Args:
        orders: Session orders
        reservations: Session reservations
        today: Day to report on (defaults to the current UTC date)

    Returns:
        DashboardSummary for ``today``
    """
    day = (today or datetime.now(UTC).date()).isoformat()
    today_orders = [order for order in orders if order.created_at.split("T")[0] == day]
    return DashboardSummary(
        today_orders=today_orders,
        today_revenue=round(sum(order.total for order in today_orders), 2),
        today_reservations=[r for r in reservations if r.date == day],
        status_counts={
            status: sum(1 for order in orders if order.status == status)
            for status in DELIVERY_STEPS
        },
        upcoming_reservations=[
            r
            for r in reservations
            if r.status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)
        ],
    )
