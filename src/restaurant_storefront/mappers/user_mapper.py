"""Translation between API user records and session/directory users."""

from typing import Any

from pydantic import ValidationError

from restaurant_storefront.models.user_models import ApiUser, AuthResponse, DirectoryUser, User


class UserDecodeError(ValueError):
    """Raised when a user or auth payload does not match the expected shape."""


def map_api_to_user(row: ApiUser) -> User:
    """Convert an API user record into a session ``User``."""
    return User(
        id=str(row.id),
        name=row.name,
        email=row.email,
        role=row.role,
        phone=row.phone or None,
    )


def map_api_to_directory_user(row: ApiUser) -> DirectoryUser:
    """Convert an API user record into an admin directory entry."""
    return DirectoryUser(
        id=str(row.id),
        name=row.name,
        email=row.email,
        role=row.role,
        phone=row.phone or None,
        joined_date=row.created_at or "",
    )


def decode_auth_response(raw: Any) -> tuple[str, User]:
    """Decode the body of a successful login/register call.

    Args:
        raw: Decoded JSON body

    Returns:
        Tuple of (token, user)

    Raises:
        UserDecodeError: If the body is missing the token or user
    """
    try:
        response = AuthResponse.model_validate(raw)
    except ValidationError as e:
        raise UserDecodeError(f"Invalid auth response: {e}") from e
    return response.token, map_api_to_user(response.user)


def decode_directory_user(raw: Any) -> DirectoryUser:
    """Decode a single admin directory record.

    Raises:
        UserDecodeError: If the record is malformed
    """
    try:
        return map_api_to_directory_user(ApiUser.model_validate(raw))
    except ValidationError as e:
        raise UserDecodeError(f"Invalid user record: {e}") from e


def decode_directory(raw: Any) -> list[DirectoryUser]:
    """Decode the ``GET /api/admin/users`` payload.

    Raises:
        UserDecodeError: If the payload is not a list or a record is malformed
    """
    if not isinstance(raw, list):
        raise UserDecodeError(f"Expected a list of users, got {type(raw).__name__}")
    return [decode_directory_user(row) for row in raw]
