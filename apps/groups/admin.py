from django.contrib import admin
from apps.groups.models import Group, GroupMembership


class GroupMembershipInline(admin.TabularInline):
    """Inline admin for group memberships."""
    model = GroupMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']
    raw_id_fields = ['user']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = ['name', 'owner', 'member_count', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'owner__email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [GroupMembershipInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'
