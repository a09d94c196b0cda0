"""
Friend management service.

Friendship is stored as two directed rows so that "my friends" is a single
indexed lookup. Both rows are written in one transaction and the insert is
idempotent, so re-adding an existing friend is a no-op.
"""

import logging

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User, Friendship

from .exceptions import UserNotFoundError, InvalidFriendError

logger = logging.getLogger(__name__)


def get_user_by_id(*, user_id) -> User:
    """
    Fetch an active user by primary key.

    Raises:
        UserNotFoundError: If no active user has that id
    """
    try:
        return User.objects.get(id=user_id, is_active=True)
    except (User.DoesNotExist, ValueError, TypeError):
        raise UserNotFoundError(f"User with ID {user_id} not found")


def find_user_by_email(*, email: str) -> User:
    """
    Look up a user by email (case-insensitive), used to find friends.

    Raises:
        UserNotFoundError: If no active user has that email
    """
    user = (
        User.objects
        .filter(email__iexact=email.strip(), is_active=True)
        .order_by('id')
        .first()
    )
    if user is None:
        raise UserNotFoundError("User not found")
    return user


@transaction.atomic
def add_friend(*, user: User, friend_id) -> User:
    """
    Add a symmetric friendship between ``user`` and ``friend_id``.

    Args:
        user: The requesting user
        friend_id: Primary key of the user to befriend

    Returns:
        The friend User instance

    Raises:
        InvalidFriendError: If user tries to befriend themselves
        UserNotFoundError: If the friend does not exist
    """
    if str(friend_id) == str(user.id):
        raise InvalidFriendError("You cannot add yourself as a friend.")

    friend = get_user_by_id(user_id=friend_id)

    _, created_forward = Friendship.objects.get_or_create(user=user, friend=friend)
    _, created_reverse = Friendship.objects.get_or_create(user=friend, friend=user)

    if created_forward or created_reverse:
        logger.info("Friendship created between users %s and %s", user.id, friend.id)

    return friend


def get_friends(*, user: User) -> QuerySet[User]:
    """Return the user's friends ordered by name."""
    return (
        User.objects
        .filter(friend_of__user=user)
        .order_by('display_name', 'email')
    )


def are_friends(*, user: User, other: User) -> bool:
    return Friendship.objects.filter(user=user, friend=other).exists()
