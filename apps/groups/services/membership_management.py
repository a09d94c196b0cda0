"""
Membership queries used by the groups views and the expenses services.
"""

from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import GroupMembership

from .group_management import get_group_for_member


def get_group_members(*, group_id, user: User) -> QuerySet[GroupMembership]:
    """
    Get all members of a group the user belongs to.

    Raises:
        GroupNotFoundError: If group doesn't exist or user is not a member
    """
    group = get_group_for_member(group_id=group_id, user=user)

    return (
        GroupMembership.objects
        .filter(group=group)
        .select_related('user')
        .order_by('joined_at')
    )


def is_group_member(*, group_id, user_id) -> bool:
    return GroupMembership.objects.filter(group_id=group_id, user_id=user_id).exists()
