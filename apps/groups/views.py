from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupMemberSerializer,
)

from apps.groups.services import (
    create_group,
    get_user_groups,
    get_group_for_member,
    get_group_members,
    # Exceptions
    GroupNotFoundError,
    GroupValidationError,
)


class GroupViewSet(viewsets.ViewSet):
    """
    ViewSet for groups.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all groups the user is a member of
    create: Create a new group with members
    retrieve: Get a specific group
    members: List members of a group
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    @extend_schema(responses={200: GroupSerializer(many=True)}, tags=['groups'])
    def list(self, request):
        """List the user's groups with members and totals."""
        groups = get_user_groups(user=request.user)
        return Response(GroupSerializer(groups, many=True).data)

    @extend_schema(request=GroupCreateSerializer, responses={201: GroupSerializer}, tags=['groups'])
    def create(self, request):
        """Create a new group."""
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = create_group(
                name=serializer.validated_data['name'],
                owner=request.user,
                member_ids=serializer.validated_data['members'],
            )
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        group = get_group_for_member(group_id=group.id, user=request.user)
        return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GroupSerializer}, tags=['groups'])
    def retrieve(self, request, pk=None):
        """Get a group the user belongs to."""
        try:
            group = get_group_for_member(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(GroupSerializer(group).data)

    @extend_schema(responses={200: GroupMemberSerializer(many=True)}, tags=['groups'])
    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the group."""
        try:
            memberships = get_group_members(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)
