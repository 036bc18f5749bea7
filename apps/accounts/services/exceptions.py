"""Domain-specific exceptions for accounts services."""
from rest_framework import status

from apps.core.exceptions import (
    AuthorizationError,
    LedgerError,
    NotFoundError,
    ValidationError,
)


class InvalidCredentialsError(LedgerError):
    """Raised when authentication credentials are invalid."""
    kind = 'authentication_error'
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid username or password.'
    default_code = 'invalid_credentials'


class InactiveAccountError(AuthorizationError):
    """Raised when account is deactivated."""
    default_detail = 'Account is deactivated.'
    default_code = 'inactive_account'


class UserNotFoundError(NotFoundError):
    """Raised when user does not exist."""
    default_detail = 'User not found.'
    default_code = 'user_not_found'


class DuplicateUsernameError(ValidationError):
    """Raised when the username is already taken."""
    default_detail = 'A user with this username already exists.'
    default_code = 'duplicate_username'


class UserInUseError(ValidationError):
    """Raised when deleting a user that ledger records still reference."""
    default_detail = 'User is referenced by ledger records and cannot be deleted.'
    default_code = 'user_in_use'
