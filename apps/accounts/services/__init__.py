"""Services for accounts business logic."""

from .exceptions import (
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    DuplicateUsernameError,
    UserInUseError,
)
from .user_authentication import authenticate_user
from .user_management import (
    create_user,
    get_user_by_id,
    list_users,
    delete_user,
)

__all__ = [
    # Exceptions
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'DuplicateUsernameError',
    'UserInUseError',
    # Services
    'authenticate_user',
    'create_user',
    'get_user_by_id',
    'list_users',
    'delete_user',
]
