from django.db import models


class GroupRole(models.TextChoices):
    OWNER = 'owner', 'Owner'
    MEMBER = 'member', 'Member'


class Group(models.Model):
    """A set of users who share expenses."""

    name = models.CharField(max_length=200)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='groups_owner_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()


class GroupMembership(models.Model):
    """User membership in a group."""

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=GroupRole.choices, default=GroupRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_memberships'
        constraints = [
            models.UniqueConstraint(fields=['group', 'user'], name='unique_group_membership'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name} ({self.role})"

    def save(self, *args, **kwargs):
        if self.group.owner_id == self.user_id:
            self.role = GroupRole.OWNER
        super().save(*args, **kwargs)
