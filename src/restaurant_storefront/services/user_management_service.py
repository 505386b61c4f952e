"""Admin user directory management."""

import logging
from dataclasses import dataclass

from restaurant_storefront.mappers.user_mapper import (
    UserDecodeError,
    decode_directory,
    decode_directory_user,
)
from restaurant_storefront.models.result_models import ErrorKind, OperationResult
from restaurant_storefront.models.user_models import DirectoryUser, UserRole
from restaurant_storefront.services.app_context import AppContext

logger = logging.getLogger(__name__)

CREATE_USER_UNSUPPORTED = (
    "Creating new users from the Admin panel is not supported yet. "
    "Customers should sign up from the Sign Up page. "
    "Staff/Admin accounts are predefined in the system."
)


@dataclass
class UserForm:
    """Fields editable from the user management screen."""

    name: str
    email: str
    role: UserRole | str = UserRole.CUSTOMER
    phone: str = ""


class UserManagementService:
    """Service behind the admin user screen.

    Holds the directory listing it loaded; the session user in the context
    is never changed from here.
    """

    def __init__(self, context: AppContext) -> None:
        """Initialize the UserManagementService.

        Args:
            context: Application state container providing the bearer token
        """
        self.context = context
        self.users: list[DirectoryUser] = []

    async def load_users(self) -> OperationResult:
        """Fetch the user directory.

        Returns:
            OperationResult whose value is the list of DirectoryUser
        """
        result = await self.context.api_client.list_users(self.context.auth_token)
        if not result.success:
            return OperationResult.failed(result)

        try:
            users = decode_directory(result.data)
        except UserDecodeError as e:
            logger.error(f"User directory could not be decoded: {e}")
            return OperationResult(
                success=False,
                error_message="Failed to load users",
                error_kind=ErrorKind.DECODE,
            )

        self.users = users
        return OperationResult(success=True, value=list(users))

    async def update_user(self, user_id: str, form: UserForm) -> OperationResult:
        """Patch a user's profile and role.

        Args:
            user_id: Identifier of the user being edited
            form: Values entered on the user form

        Returns:
            OperationResult whose value is the updated DirectoryUser
        """
        try:
            role = UserRole(form.role)
        except ValueError:
            return OperationResult(
                success=False,
                error_message=f"Unknown role: {form.role}",
                error_kind=ErrorKind.VALIDATION,
            )

        changes = {
            "name": form.name,
            "email": form.email,
            "phone": form.phone or None,
            "role": role.value,
        }
        result = await self.context.api_client.update_user(self.context.auth_token, user_id, changes)
        if not result.success:
            return OperationResult.failed(result)

        try:
            updated = decode_directory_user(result.data)
        except UserDecodeError as e:
            logger.error(f"Updated user {user_id} could not be decoded: {e}")
            return OperationResult(
                success=False,
                error_message="Failed to update user",
                error_kind=ErrorKind.DECODE,
            )

        self.users = [updated if user.id == updated.id else user for user in self.users]
        logger.info(f"User {updated.id} updated (role {updated.role.value})")
        return OperationResult(success=True, value=updated)

    async def delete_user(self, user_id: str) -> OperationResult:
        """Delete a user and drop them from the loaded directory."""
        result = await self.context.api_client.delete_user(self.context.auth_token, user_id)
        if not result.success:
            return OperationResult.failed(result)

        self.users = [user for user in self.users if user.id != user_id]
        logger.info(f"User {user_id} deleted")
        return OperationResult(success=True, value=user_id)

    async def create_user(self, form: UserForm) -> OperationResult:  # noqa: ARG002
        """Account creation is not available to admins; customers self-register."""
        return OperationResult(
            success=False,
            error_message=CREATE_USER_UNSUPPORTED,
            error_kind=ErrorKind.REJECTED,
        )
