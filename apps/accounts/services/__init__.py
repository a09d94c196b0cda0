"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    InvalidFriendError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .friend_management import (
    get_user_by_id,
    find_user_by_email,
    add_friend,
    get_friends,
    are_friends,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'InvalidFriendError',
    # Services
    'register_user',
    'authenticate_user',
    'get_user_by_id',
    'find_user_by_email',
    'add_friend',
    'get_friends',
    'are_friends',
]
