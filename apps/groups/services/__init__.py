"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    GroupValidationError,
)

from .group_management import (
    create_group,
    get_user_groups,
    get_group_for_member,
)

from .membership_management import (
    get_group_members,
    is_group_member,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'GroupValidationError',

    # Group Management
    'create_group',
    'get_user_groups',
    'get_group_for_member',

    # Membership Management
    'get_group_members',
    'is_group_member',
]
