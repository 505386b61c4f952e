"""Client for interacting with the restaurant API."""

import logging
import time
from typing import Any

import httpx

from restaurant_storefront.models.result_models import ApiResult, ErrorKind
from restaurant_storefront.models.user_models import UserRole
from restaurant_storefront.observability import traced
from restaurant_storefront.observability.metrics import record_api_call

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://restaurant-backend-u1nf.onrender.com"
CONNECTION_ERROR_MESSAGE = "Unable to connect to server"


class RestaurantApiClient:
    """HTTP client for the restaurant's menu, auth and admin endpoints.

    Every method returns an ``ApiResult``; expected failures (transport
    errors, non-2xx responses, missing credentials) never raise. Privileged
    calls check for a bearer token before any request is sent.

    Requests give up after ``timeout`` seconds (10 by default) instead of
    waiting indefinitely, and surface as TRANSPORT failures. The base URL
    is a constructor argument; ``DEFAULT_BASE_URL`` is the production
    address.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the restaurant API client.

        Args:
            base_url: Base URL of the API (e.g., "https://api.example.com")
            transport: Optional httpx transport (used to talk to an in-process app)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.timeout = timeout

    @traced("restaurant_api.get_menu")
    async def get_menu(self) -> ApiResult:
        """Fetch the menu catalog.

        Returns:
            ApiResult whose data is the raw list of menu rows
        """
        return await self._send("GET", "/api/menu", fallback_error="Failed to load menu")

    @traced("restaurant_api.create_menu_item")
    async def create_menu_item(self, token: str | None, payload: dict[str, Any]) -> ApiResult:
        """Create a menu item.

        Args:
            token: Bearer token of a staff/admin session
            payload: Menu row body (see ``menu_item_to_payload``)

        Returns:
            ApiResult whose data is the created menu row
        """
        return await self._send(
            "POST",
            "/api/menu",
            fallback_error="Failed to create menu item",
            token=token,
            require_auth=True,
            unauthorized_message="You are not authorized to manage the menu",
            json=payload,
        )

    @traced("restaurant_api.update_menu_item")
    async def update_menu_item(
        self, token: str | None, item_id: str, payload: dict[str, Any]
    ) -> ApiResult:
        """Replace a menu item.

        Args:
            token: Bearer token of a staff/admin session
            item_id: Identifier of the item to update
            payload: Menu row body

        Returns:
            ApiResult with the response body, if any
        """
        return await self._send(
            "PUT",
            f"/api/menu/{item_id}",
            path_template="/api/menu/{id}",
            fallback_error="Failed to update item",
            token=token,
            require_auth=True,
            unauthorized_message="You are not authorized to manage the menu",
            json=payload,
        )

    @traced("restaurant_api.delete_menu_item")
    async def delete_menu_item(self, token: str | None, item_id: str) -> ApiResult:
        """Delete a menu item.

        Args:
            token: Bearer token of a staff/admin session
            item_id: Identifier of the item to delete
        """
        return await self._send(
            "DELETE",
            f"/api/menu/{item_id}",
            path_template="/api/menu/{id}",
            fallback_error="Failed to delete menu item",
            token=token,
            require_auth=True,
            unauthorized_message="You are not authorized to delete menu items",
        )

    @traced("restaurant_api.list_users")
    async def list_users(self, token: str | None) -> ApiResult:
        """Fetch the user directory.

        Returns:
            ApiResult whose data is the raw list of user records
        """
        return await self._send(
            "GET",
            "/api/admin/users",
            fallback_error="Failed to load users",
            token=token,
            require_auth=True,
        )

    @traced("restaurant_api.update_user")
    async def update_user(
        self, token: str | None, user_id: str, changes: dict[str, Any]
    ) -> ApiResult:
        """Update a user's profile or role.

        Args:
            token: Bearer token of an admin session
            user_id: Identifier of the user to update
            changes: Fields to patch (name, email, phone, role)

        Returns:
            ApiResult whose data is the updated user record
        """
        return await self._send(
            "PATCH",
            f"/api/admin/users/{user_id}",
            path_template="/api/admin/users/{id}",
            fallback_error="Failed to update user",
            token=token,
            require_auth=True,
            json=changes,
        )

    @traced("restaurant_api.delete_user")
    async def delete_user(self, token: str | None, user_id: str) -> ApiResult:
        """Delete a user. Only a 204 response counts as success."""
        return await self._send(
            "DELETE",
            f"/api/admin/users/{user_id}",
            path_template="/api/admin/users/{id}",
            fallback_error="Failed to delete user",
            token=token,
            require_auth=True,
            expected_status=204,
        )

    @traced("restaurant_api.login")
    async def login(self, email: str, password: str, role: UserRole | str) -> ApiResult:
        """Authenticate with email, password and requested role.

        Returns:
            ApiResult whose data is ``{"token": ..., "user": {...}}``
        """
        return await self._send(
            "POST",
            "/api/auth/login",
            fallback_error="Login failed",
            json={"email": email, "password": password, "role": UserRole(role).value},
        )

    @traced("restaurant_api.register")
    async def register(
        self, name: str, email: str, password: str, phone: str | None = None
    ) -> ApiResult:
        """Create a customer account.

        The phone key is omitted from the body when no phone is given.

        Returns:
            ApiResult whose data is ``{"token": ..., "user": {...}}``
        """
        body: dict[str, Any] = {"name": name, "email": email, "password": password}
        if phone is not None:
            body["phone"] = phone
        return await self._send(
            "POST",
            "/api/auth/register",
            fallback_error="Registration failed",
            json=body,
        )

    async def _send(
        self,
        method: str,
        path: str,
        fallback_error: str,
        path_template: str | None = None,
        token: str | None = None,
        require_auth: bool = False,
        unauthorized_message: str = "You are not authorized",
        json: dict[str, Any] | None = None,
        expected_status: int | None = None,
    ) -> ApiResult:
        """Send one request and convert the outcome into an ``ApiResult``.

        Args:
            method: HTTP method
            path: Request path including identifiers
            fallback_error: Message used when the server gives no ``error`` field
            path_template: Path with identifiers masked, for metrics
            token: Bearer token to attach
            require_auth: Refuse to send the request when no token is present
            unauthorized_message: Message returned when the token is missing
            json: Optional JSON body
            expected_status: Exact status required for success (default: any 2xx)

        Returns:
            ApiResult describing the response or failure
        """
        if require_auth and not token:
            logger.warning(f"Refusing {method} {path}: no auth token")
            return ApiResult(
                success=False,
                error_message=unauthorized_message,
                error_kind=ErrorKind.UNAUTHORIZED,
            )

        url = f"{self.base_url}{path}"
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs: dict[str, Any] = {"headers": headers}
        if json is not None:
            kwargs["json"] = json

        started = time.perf_counter()
        status_code: int | None = None
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                send = getattr(client, method.lower())
                response = await send(url, **kwargs)
                status_code = response.status_code

                if expected_status is not None:
                    ok = status_code == expected_status
                else:
                    ok = 200 <= status_code < 300

                if not ok:
                    message = self._error_message(response, fallback_error)
                    logger.error(f"{method} {path} failed with status {status_code}: {message}")
                    return ApiResult(
                        success=False,
                        status_code=status_code,
                        error_message=message,
                        error_kind=(
                            ErrorKind.UNAUTHORIZED
                            if status_code in (401, 403)
                            else ErrorKind.REJECTED
                        ),
                    )

                return ApiResult(
                    success=True,
                    data=self._body(response),
                    status_code=status_code,
                )

        except httpx.RequestError as e:
            logger.error(f"{method} {path} could not reach the restaurant API: {e}")
            return ApiResult(
                success=False,
                error_message=CONNECTION_ERROR_MESSAGE,
                error_kind=ErrorKind.TRANSPORT,
            )
        finally:
            record_api_call(method, path_template or path, status_code, time.perf_counter() - started)

    @staticmethod
    def _body(response: httpx.Response) -> Any:
        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        """Extract the server's ``error`` field, falling back to a fixed message."""
        try:
            data = response.json()
        except ValueError:
            return fallback
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return fallback
