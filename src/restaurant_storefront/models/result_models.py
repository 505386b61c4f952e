"""Result types returned to callers instead of raising or alerting.

Following the same pattern used across the services, expected failures are
reported as values. The view layer decides how to present them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from restaurant_storefront.models.user_models import User


class ErrorKind(str, Enum):
    """Classification of a failed operation."""

    TRANSPORT = "transport"
    UNAUTHORIZED = "unauthorized"
    REJECTED = "rejected"
    DECODE = "decode"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    VALIDATION = "validation"


@dataclass
class ApiResult:
    """Outcome of a single call to the restaurant API.

    Attributes:
        success: Whether the call completed with a 2xx response
        data: Decoded JSON body on success (None for empty bodies)
        status_code: HTTP status code, None if no response was received
        error_message: Message to show the user when the call failed
        error_kind: Failure classification, None on success
    """

    success: bool
    data: Any = None
    status_code: int | None = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None


@dataclass
class AuthResult:
    """Outcome of a login or registration attempt."""

    success: bool
    user: User | None = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None


@dataclass
class StatusUpdateResult:
    """Outcome of an order or reservation status change."""

    success: bool
    previous_status: str | None = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None


@dataclass
class OperationResult:
    """Outcome of a client-side workflow (checkout, management actions).

    Attributes:
        success: Whether the workflow completed
        value: The entity produced or affected, if any
        error_message: Message to show the user when the workflow failed
        error_kind: Failure classification, None on success
    """

    success: bool
    value: Any = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def failed(cls, result: ApiResult) -> "OperationResult":
        """Carry a failed API call's message and kind into a workflow result."""
        return cls(success=False, error_message=result.error_message, error_kind=result.error_kind)
