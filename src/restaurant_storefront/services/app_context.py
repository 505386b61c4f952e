"""Application state container for the storefront.

``AppContext`` is built once at startup and passed to every consumer. It
owns the menu cache, cart, session orders and reservations, and the
authenticated session. Cart, order and reservation mutators are local and
synchronous; menu refresh and auth round-trip to the restaurant API.
"""

import logging
import time
from datetime import UTC, datetime

from pydantic import ValidationError

from restaurant_storefront.mappers.menu_mapper import MenuDecodeError, decode_menu
from restaurant_storefront.mappers.user_mapper import UserDecodeError, decode_auth_response
from restaurant_storefront.models.menu_models import CartItem, MenuItem
from restaurant_storefront.models.order_models import (
    NewOrder,
    NewReservation,
    Order,
    OrderStatus,
    Reservation,
    ReservationStatus,
    can_transition_order,
    can_transition_reservation,
)
from restaurant_storefront.models.result_models import (
    ApiResult,
    AuthResult,
    ErrorKind,
    StatusUpdateResult,
)
from restaurant_storefront.models.user_models import User, UserRole
from restaurant_storefront.observability import traced
from restaurant_storefront.observability.metrics import record_auth_attempt, record_menu_refresh
from restaurant_storefront.services.restaurant_api_client import RestaurantApiClient
from restaurant_storefront.services.session_storage import (
    AUTH_TOKEN_KEY,
    CURRENT_USER_KEY,
    SessionStorage,
)

logger = logging.getLogger(__name__)

MENU_LOAD_ERROR = "Failed to load menu from database"


class AppContext:
    """Process-wide store for menu, cart, orders, reservations and session.

    Status transitions are accepted unconditionally by default. Pass
    ``enforce_transitions=True`` to reject edges outside the order and
    reservation transition tables.
    """

    def __init__(
        self,
        api_client: RestaurantApiClient,
        storage: SessionStorage,
        enforce_transitions: bool = False,
    ) -> None:
        """Initialize the context and restore any stored session.

        Args:
            api_client: Client for the restaurant API
            storage: Durable storage for the session token and user
            enforce_transitions: Reject illegal status transitions
        """
        self.api_client = api_client
        self.storage = storage
        self.enforce_transitions = enforce_transitions

        self._menu: list[MenuItem] = []
        self.loading_menu = False
        self.error_menu: str | None = None

        self._cart: list[CartItem] = []
        self._orders: list[Order] = []
        self._reservations: list[Reservation] = []

        self.current_user: User | None = None
        self.auth_token: str | None = None
        self._last_id_millis = 0

        self.restore_session()

    # Menu

    @property
    def menu(self) -> list[MenuItem]:
        return list(self._menu)

    @traced("app_context.refresh_menu")
    async def refresh_menu(self) -> bool:
        """Fetch the menu and replace the cache.

        On failure the previous cache is kept and ``error_menu`` is set.

        Returns:
            True if the cache was replaced, False otherwise
        """
        self.loading_menu = True
        self.error_menu = None
        try:
            result = await self.api_client.get_menu()
            if not result.success:
                logger.error(f"Menu refresh failed: {result.error_message}")
                self.error_menu = MENU_LOAD_ERROR
                record_menu_refresh(success=False)
                return False

            try:
                items = decode_menu(result.data)
            except MenuDecodeError as e:
                logger.error(f"Menu payload rejected: {e}")
                self.error_menu = MENU_LOAD_ERROR
                record_menu_refresh(success=False)
                return False

            self._menu = items
            logger.info(f"Menu refreshed with {len(items)} items")
            record_menu_refresh(success=True, item_count=len(items))
            return True
        finally:
            self.loading_menu = False

    def get_menu_item(self, item_id: str) -> MenuItem | None:
        """Look up a cached menu item by id."""
        return next((item for item in self._menu if item.id == item_id), None)

    def add_menu_item(self, item: MenuItem) -> None:
        """Append an item created through the admin flow."""
        self._menu = [*self._menu, item]

    def replace_menu_item(self, item: MenuItem) -> bool:
        """Replace the cached entry with the same id.

        Returns:
            True if an entry was replaced, False if no entry matched
        """
        if self.get_menu_item(item.id) is None:
            return False
        self._menu = [item if existing.id == item.id else existing for existing in self._menu]
        return True

    def remove_menu_item(self, item_id: str) -> None:
        """Drop an item deleted through the admin flow."""
        self._menu = [item for item in self._menu if item.id != item_id]

    # Cart

    @property
    def cart(self) -> list[CartItem]:
        return list(self._cart)

    def add_to_cart(self, item: MenuItem) -> None:
        """Add one unit of ``item``, creating a line at the end if needed."""
        if any(line.id == item.id for line in self._cart):
            self._cart = [
                line.model_copy(update={"quantity": line.quantity + 1}) if line.id == item.id else line
                for line in self._cart
            ]
        else:
            self._cart = [*self._cart, CartItem.from_menu_item(item)]

    def remove_from_cart(self, item_id: str) -> None:
        self._cart = [line for line in self._cart if line.id != item_id]

    def update_cart_item_quantity(self, item_id: str, quantity: int) -> None:
        """Set a line's quantity exactly; zero or less removes the line."""
        if quantity <= 0:
            self.remove_from_cart(item_id)
            return
        self._cart = [
            line.model_copy(update={"quantity": quantity}) if line.id == item_id else line
            for line in self._cart
        ]

    def clear_cart(self) -> None:
        self._cart = []

    # Orders

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    def add_order(self, new_order: NewOrder) -> Order:
        """Record an order with a generated id and creation timestamp.

        Does not touch the cart; checkout clears it as a separate step.

        Args:
            new_order: Order details from checkout

        Returns:
            Order: The stored order
        """
        order = Order(
            **new_order.model_dump(),
            id=self._next_id("ORD"),
            created_at=datetime.now(UTC).isoformat(),
        )
        self._orders = [*self._orders, order]
        logger.info(f"Order {order.id} added ({order.delivery_type.value}, total {order.total:.2f})")
        return order

    def get_order(self, order_id: str) -> Order | None:
        return next((order for order in self._orders if order.id == order_id), None)

    def update_order_status(self, order_id: str, status: OrderStatus | str) -> StatusUpdateResult:
        """Change the status of an order.

        Args:
            order_id: Order to update
            status: New status

        Returns:
            StatusUpdateResult with the previous status on success
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            return StatusUpdateResult(
                success=False,
                error_message=f"Unknown order status: {status}",
                error_kind=ErrorKind.VALIDATION,
            )

        order = self.get_order(order_id)
        if order is None:
            return StatusUpdateResult(
                success=False,
                error_message=f"Order {order_id} not found",
                error_kind=ErrorKind.NOT_FOUND,
            )

        if self.enforce_transitions and not can_transition_order(
            order.delivery_type, order.status, target
        ):
            logger.warning(f"Rejected order {order_id} transition {order.status.value} -> {target.value}")
            return StatusUpdateResult(
                success=False,
                previous_status=order.status.value,
                error_message=f"Cannot move order from {order.status.value} to {target.value}",
                error_kind=ErrorKind.INVALID_TRANSITION,
            )

        self._orders = [
            o.model_copy(update={"status": target}) if o.id == order_id else o for o in self._orders
        ]
        return StatusUpdateResult(success=True, previous_status=order.status.value)

    # Reservations

    @property
    def reservations(self) -> list[Reservation]:
        return list(self._reservations)

    def add_reservation(self, new_reservation: NewReservation) -> Reservation:
        """Record a reservation request with status pending."""
        reservation = Reservation(
            **new_reservation.model_dump(),
            id=self._next_id("RES"),
            status=ReservationStatus.PENDING,
        )
        self._reservations = [*self._reservations, reservation]
        logger.info(f"Reservation {reservation.id} added for {reservation.date} {reservation.time}")
        return reservation

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        return next((r for r in self._reservations if r.id == reservation_id), None)

    def update_reservation_status(
        self, reservation_id: str, status: ReservationStatus | str
    ) -> StatusUpdateResult:
        """Change the status of a reservation.

        Args:
            reservation_id: Reservation to update
            status: New status

        Returns:
            StatusUpdateResult with the previous status on success
        """
        try:
            target = ReservationStatus(status)
        except ValueError:
            return StatusUpdateResult(
                success=False,
                error_message=f"Unknown reservation status: {status}",
                error_kind=ErrorKind.VALIDATION,
            )

        reservation = self.get_reservation(reservation_id)
        if reservation is None:
            return StatusUpdateResult(
                success=False,
                error_message=f"Reservation {reservation_id} not found",
                error_kind=ErrorKind.NOT_FOUND,
            )

        if self.enforce_transitions and not can_transition_reservation(reservation.status, target):
            logger.warning(
                f"Rejected reservation {reservation_id} transition "
                f"{reservation.status.value} -> {target.value}"
            )
            return StatusUpdateResult(
                success=False,
                previous_status=reservation.status.value,
                error_message=f"Cannot move reservation from {reservation.status.value} to {target.value}",
                error_kind=ErrorKind.INVALID_TRANSITION,
            )

        self._reservations = [
            r.model_copy(update={"status": target}) if r.id == reservation_id else r
            for r in self._reservations
        ]
        return StatusUpdateResult(success=True, previous_status=reservation.status.value)

    # Auth

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None and self.auth_token is not None

    async def login(self, email: str, password: str, role: UserRole | str) -> AuthResult:
        """Log in and persist the session.

        Stored session state is untouched on failure.

        Args:
            email: Account email
            password: Account password
            role: Role the user is signing in as

        Returns:
            AuthResult with the session user on success
        """
        result = await self.api_client.login(email, password, role)
        return self._establish_session("login", result)

    async def register(
        self, name: str, email: str, password: str, phone: str | None = None
    ) -> AuthResult:
        """Create an account and log straight in."""
        result = await self.api_client.register(name, email, password, phone)
        return self._establish_session("register", result)

    def logout(self) -> None:
        """Clear the in-memory and stored session."""
        self.current_user = None
        self.auth_token = None
        self.storage.remove_item(AUTH_TOKEN_KEY)
        self.storage.remove_item(CURRENT_USER_KEY)
        logger.info("Session cleared")

    def restore_session(self) -> None:
        """Load the stored token and user without contacting the API."""
        self.auth_token = self.storage.get_item(AUTH_TOKEN_KEY)

        stored_user = self.storage.get_item(CURRENT_USER_KEY)
        if stored_user is None:
            return

        try:
            self.current_user = User.model_validate_json(stored_user)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable stored user: {e}")
            return

        logger.info(f"Restored session for user {self.current_user.id}")

    def _establish_session(self, operation: str, result: ApiResult) -> AuthResult:
        if not result.success:
            record_auth_attempt(operation, success=False)
            return AuthResult(
                success=False,
                error_message=result.error_message,
                error_kind=result.error_kind,
            )

        try:
            token, user = decode_auth_response(result.data)
        except UserDecodeError as e:
            logger.error(f"{operation} response rejected: {e}")
            record_auth_attempt(operation, success=False)
            return AuthResult(
                success=False,
                error_message="Unexpected response from server",
                error_kind=ErrorKind.DECODE,
            )

        self.current_user = user
        self.auth_token = token
        self.storage.set_item(AUTH_TOKEN_KEY, token)
        self.storage.set_item(CURRENT_USER_KEY, user.model_dump_json())

        logger.info(f"{operation} succeeded for user {user.id} ({user.role.value})")
        record_auth_attempt(operation, success=True)
        return AuthResult(success=True, user=user)

    def _next_id(self, prefix: str) -> str:
        # Millisecond timestamp, bumped so ids issued in the same millisecond stay distinct
        millis = max(time.time_ns() // 1_000_000, self._last_id_millis + 1)
        self._last_id_millis = millis
        return f"{prefix}{millis}"
