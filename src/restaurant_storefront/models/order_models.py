"""Order and reservation models.

Orders and reservations are created and held client-side only. Status
values are enums; the allowed edges between them live in
``ORDER_TRANSITIONS`` and ``RESERVATION_TRANSITIONS``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from restaurant_storefront.models.menu_models import CartItem


class OrderStatus(str, Enum):
    """Enumeration of order status values."""

    ORDERED = "Ordered"
    PREPARING = "Preparing"
    READY = "Ready"
    OUT_FOR_DELIVERY = "Out for delivery"
    COMPLETED = "Completed"


class DeliveryType(str, Enum):
    """Fulfilment channel chosen at checkout."""

    DELIVERY = "delivery"
    COLLECTION = "collection"


class ReservationStatus(str, Enum):
    """Enumeration of reservation status values."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


DELIVERY_STEPS: tuple[OrderStatus, ...] = (
    OrderStatus.ORDERED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.COMPLETED,
)

COLLECTION_STEPS: tuple[OrderStatus, ...] = (
    OrderStatus.ORDERED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)


def _forward_edges(steps: tuple[OrderStatus, ...]) -> dict[OrderStatus, frozenset[OrderStatus]]:
    return {
        status: frozenset(steps[index + 1 : index + 2])
        for index, status in enumerate(steps)
    }


ORDER_TRANSITIONS: dict[DeliveryType, dict[OrderStatus, frozenset[OrderStatus]]] = {
    DeliveryType.DELIVERY: _forward_edges(DELIVERY_STEPS),
    DeliveryType.COLLECTION: _forward_edges(COLLECTION_STEPS),
}

RESERVATION_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED}),
    ReservationStatus.CANCELLED: frozenset(),
}


def status_steps(delivery_type: DeliveryType) -> tuple[OrderStatus, ...]:
    """Return the ordered status steps for a fulfilment channel.

    Args:
        delivery_type: Delivery or collection

    Returns:
        Tuple of statuses from Ordered to Completed
    """
    if delivery_type == DeliveryType.DELIVERY:
        return DELIVERY_STEPS
    return COLLECTION_STEPS


def can_transition_order(
    delivery_type: DeliveryType, current: OrderStatus, target: OrderStatus
) -> bool:
    """Check whether an order may move from ``current`` to ``target``."""
    return target in ORDER_TRANSITIONS[delivery_type].get(current, frozenset())


def can_transition_reservation(current: ReservationStatus, target: ReservationStatus) -> bool:
    """Check whether a reservation may move from ``current`` to ``target``."""
    return target in RESERVATION_TRANSITIONS[current]


class NewOrder(BaseModel):
    """Order details supplied at checkout, before id and timestamp exist."""

    items: list[CartItem] = Field(..., description="Snapshot of the cart at checkout")
    total: float = Field(..., description="Total charged, computed once", ge=0)
    status: OrderStatus = Field(default=OrderStatus.ORDERED)
    customer_name: str
    customer_phone: str
    delivery_address: str | None = None
    delivery_type: DeliveryType
    estimated_time: str


class Order(NewOrder):
    """Order tracked during the session."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Client-generated time-based identifier")
    created_at: str = Field(..., description="ISO-8601 creation timestamp")


class NewReservation(BaseModel):
    """Table booking request as submitted by a customer."""

    customer_name: str = Field(..., min_length=1)
    customer_email: str = Field(..., min_length=1)
    customer_phone: str
    date: str = Field(..., description="Booking date (YYYY-MM-DD)", min_length=1)
    time: str = Field(..., description="Booking time (HH:MM)", min_length=1)
    party_size: int = Field(..., ge=1)


class Reservation(NewReservation):
    """Reservation tracked during the session."""

    model_config = ConfigDict(frozen=True)

    id: str
    status: ReservationStatus = Field(default=ReservationStatus.PENDING)
