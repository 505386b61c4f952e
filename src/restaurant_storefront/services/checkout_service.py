"""Cart pricing, checkout and reservation submission workflows."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from restaurant_storefront.models.menu_models import CartItem
from restaurant_storefront.models.order_models import (
    DeliveryType,
    NewOrder,
    NewReservation,
    OrderStatus,
)
from restaurant_storefront.models.result_models import ErrorKind, OperationResult
from restaurant_storefront.observability.metrics import record_order_placed
from restaurant_storefront.services.app_context import AppContext

logger = logging.getLogger(__name__)

TAX_RATE = 0.10
DELIVERY_FEE = 5.00
MAX_PARTY_SIZE = 10
LARGE_PARTY_MESSAGE = "For parties larger than 10, please call us at (555) 123-4567"

RESERVATION_TIME_SLOTS: tuple[str, ...] = (
    "11:00", "11:30", "12:00", "12:30", "13:00", "13:30", "14:00", "14:30",
    "17:00", "17:30", "18:00", "18:30", "19:00", "19:30", "20:00", "20:30", "21:00",
)


@dataclass
class CartTotals:
    """Price breakdown of a cart.

    Attributes:
        subtotal: Sum of line totals
        tax: Tax at ``TAX_RATE`` of the subtotal
        delivery_fee: Flat fee for delivery orders, 0 otherwise
        total: subtotal + tax + delivery_fee
    """

    subtotal: float
    tax: float
    delivery_fee: float
    total: float


@dataclass
class CheckoutDetails:
    """Customer details collected on the checkout form."""

    customer_name: str
    customer_phone: str
    delivery_type: DeliveryType
    delivery_address: str | None = None


def calculate_totals(cart: list[CartItem], delivery_type: DeliveryType | None = None) -> CartTotals:
    """Price a cart.

    Args:
        cart: Cart lines
        delivery_type: Fulfilment channel; None prices the cart page (no fee)

    Returns:
        CartTotals rounded to 2 decimal places
    """
    subtotal = sum(line.price * line.quantity for line in cart)
    tax = subtotal * TAX_RATE
    delivery_fee = DELIVERY_FEE if delivery_type == DeliveryType.DELIVERY else 0.0
    return CartTotals(
        subtotal=round(subtotal, 2),
        tax=round(tax, 2),
        delivery_fee=delivery_fee,
        total=round(subtotal + tax + delivery_fee, 2),
    )


def estimated_time(delivery_type: DeliveryType) -> str:
    """Customer-facing preparation estimate for a fulfilment channel."""
    if delivery_type == DeliveryType.DELIVERY:
        return "45-60 mins"
    return "20-30 mins"


def place_order(context: AppContext, details: CheckoutDetails) -> OperationResult:
    """Turn the current cart into an order and empty the cart.

    Args:
        context: Application state container
        details: Customer and fulfilment details

    Returns:
        OperationResult whose value is the stored Order
    """
    cart = context.cart
    if not cart:
        return OperationResult(
            success=False,
            error_message="Your cart is empty",
            error_kind=ErrorKind.VALIDATION,
        )

    address = (details.delivery_address or "").strip()
    if details.delivery_type == DeliveryType.DELIVERY and not address:
        return OperationResult(
            success=False,
            error_message="A delivery address is required",
            error_kind=ErrorKind.VALIDATION,
        )

    totals = calculate_totals(cart, details.delivery_type)
    try:
        new_order = NewOrder(
            items=cart,
            total=totals.total,
            status=OrderStatus.ORDERED,
            customer_name=details.customer_name,
            customer_phone=details.customer_phone,
            delivery_address=address if details.delivery_type == DeliveryType.DELIVERY else None,
            delivery_type=details.delivery_type,
            estimated_time=estimated_time(details.delivery_type),
        )
    except ValidationError as e:
        logger.warning(f"Checkout rejected: {e}")
        return OperationResult(
            success=False,
            error_message="Please check your order details",
            error_kind=ErrorKind.VALIDATION,
        )

    order = context.add_order(new_order)
    context.clear_cart()
    record_order_placed(details.delivery_type.value)
    return OperationResult(success=True, value=order)


def submit_reservation(
    context: AppContext,
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    date: str,
    time: str,
    party_size: int,
) -> OperationResult:
    """Validate a booking request and record it as pending.

    Parties above ``MAX_PARTY_SIZE`` are directed to the phone line.

    Returns:
        OperationResult whose value is the stored Reservation
    """
    if party_size > MAX_PARTY_SIZE:
        return OperationResult(
            success=False,
            error_message=LARGE_PARTY_MESSAGE,
            error_kind=ErrorKind.VALIDATION,
        )

    if time not in RESERVATION_TIME_SLOTS:
        return OperationResult(
            success=False,
            error_message=f"{time} is not an available time slot",
            error_kind=ErrorKind.VALIDATION,
        )

    try:
        request = NewReservation(
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            date=date,
            time=time,
            party_size=party_size,
        )
    except ValidationError as e:
        logger.warning(f"Reservation rejected: {e}")
        return OperationResult(
            success=False,
            error_message="Please check your reservation details",
            error_kind=ErrorKind.VALIDATION,
        )

    return OperationResult(success=True, value=context.add_reservation(request))
