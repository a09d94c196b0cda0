"""
Group management service.

Handles group creation and member-scoped lookups with transaction safety.
"""

import logging
from decimal import Decimal
from typing import Iterable

from django.db import transaction
from django.db.models import DecimalField, OuterRef, QuerySet, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import GroupNotFoundError, GroupValidationError

logger = logging.getLogger(__name__)


@transaction.atomic
def create_group(
    *,
    name: str,
    owner: User,
    member_ids: Iterable = ()
) -> Group:
    """
    Create a new group with the given members.

    The owner is always added as a member, and duplicate ids collapse to
    a single membership.

    Args:
        name: Group name
        owner: User creating the group
        member_ids: Primary keys of the other members

    Returns:
        Created Group instance

    Raises:
        GroupValidationError: If the name is blank or a member id is unknown
    """
    name = (name or '').strip()
    if not name:
        raise GroupValidationError("Group name is required")

    wanted = {int(member_id) for member_id in member_ids} - {owner.id}
    members = list(User.objects.filter(id__in=wanted, is_active=True))
    missing = wanted - {member.id for member in members}
    if missing:
        raise GroupValidationError(
            f"Unknown member id(s): {', '.join(str(m) for m in sorted(missing))}"
        )

    group = Group.objects.create(name=name, owner=owner)

    GroupMembership.objects.create(user=owner, group=group, role=GroupRole.OWNER)
    GroupMembership.objects.bulk_create([
        GroupMembership(user=member, group=group, role=GroupRole.MEMBER)
        for member in members
    ])

    logger.info("Group %s created by user %s with %d member(s)", group.id, owner.id, len(members) + 1)
    return group


def _with_totals(queryset: QuerySet[Group]) -> QuerySet[Group]:
    # Subquery keeps the sum independent of the membership join
    totals = (
        Expense.objects
        .filter(group=OuterRef('pk'))
        .order_by()
        .values('group')
        .annotate(total=Sum('amount'))
        .values('total')
    )
    return queryset.annotate(
        total_expenses=Coalesce(
            Subquery(totals, output_field=DecimalField(max_digits=12, decimal_places=2)),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    )


def get_user_groups(*, user: User) -> QuerySet[Group]:
    """Return the user's groups with members prefetched and `total_expenses` annotated."""
    return _with_totals(
        Group.objects
        .filter(memberships__user=user)
        .select_related('owner')
        .prefetch_related('memberships__user')
        .distinct()
    )


def get_group_for_member(*, group_id, user: User) -> Group:
    """
    Fetch a group the user belongs to.

    Raises:
        GroupNotFoundError: If the group does not exist or user is not a member
    """
    group = (
        _with_totals(
            Group.objects
            .select_related('owner')
            .prefetch_related('memberships__user')
        )
        .filter(id=group_id, memberships__user=user)
        .first()
    )
    if group is None:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")
    return group
