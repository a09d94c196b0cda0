from rest_framework import serializers
from .models import Group, GroupMembership
from apps.accounts.serializers import UserPublicSerializer


class GroupMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""

    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    """Group with member names and the running expense total."""

    owner = UserPublicSerializer(read_only=True)
    members = serializers.SerializerMethodField()
    total_expenses = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'owner',
            'members',
            'total_expenses',
            'created_at',
        ]
        read_only_fields = fields

    def get_members(self, obj):
        return [m.user.get_display_name() for m in obj.memberships.all()]


class GroupCreateSerializer(serializers.Serializer):
    """Input for creating a group."""

    name = serializers.CharField(max_length=200)
    members = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )
