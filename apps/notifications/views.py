from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    NotificationSerializer,
    PaymentReminderSerializer,
    ReminderCreateSerializer,
    MarkAllReadResponseSerializer,
    SendAllResponseSerializer,
)
from .services import (
    list_notifications,
    mark_as_read,
    mark_all_as_read,
    create_reminder,
    send_all_reminders,
    list_reminders,
    pay_reminder,
    NotificationNotFoundError,
    ReminderNotFoundError,
    ReminderValidationError,
    ReminderAlreadyPaidError,
)
from apps.wallet.serializers import PayDebtResponseSerializer
from apps.wallet.services import (
    InvalidAmountError,
    InvalidCreditorError,
    InsufficientBalanceError,
    OverpaymentError,
    AllocationConflictError,
    CreditorNotFoundError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    parameters=[OpenApiParameter('unread', bool, required=False)],
    responses={200: NotificationSerializer(many=True)},
    description="List notifications, newest first. Pass unread=true for unread only.",
    tags=['notifications'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notifications(request):
    """List the user's notifications."""
    unread_only = request.query_params.get('unread', '').lower() in ('1', 'true', 'yes')
    queryset = list_notifications(user=request.user, unread_only=unread_only)
    return Response(NotificationSerializer(queryset, many=True).data)


@extend_schema(
    request=None,
    responses={200: NotificationSerializer, 404: ErrorResponseSerializer},
    description="Mark a notification as read.",
    tags=['notifications'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_read(request, notification_id):
    """Mark one notification as read."""
    try:
        notification = mark_as_read(user=request.user, notification_id=notification_id)
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(NotificationSerializer(notification).data)


@extend_schema(
    request=None,
    responses={200: MarkAllReadResponseSerializer},
    description="Mark every notification as read.",
    tags=['notifications'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_all_read(request):
    """Mark all notifications as read."""
    updated = mark_all_as_read(user=request.user)
    return Response({'updated': updated})


@extend_schema(
    methods=['GET'],
    responses={200: PaymentReminderSerializer(many=True)},
    description="List payment reminders addressed to the current user.",
    tags=['reminders'],
)
@extend_schema(
    methods=['POST'],
    request=ReminderCreateSerializer,
    responses={201: PaymentReminderSerializer, 400: ErrorResponseSerializer},
    description="Send a payment reminder to a debtor.",
    tags=['reminders'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def reminders(request):
    """List or send payment reminders."""
    if request.method == 'GET':
        return Response(PaymentReminderSerializer(list_reminders(user=request.user), many=True).data)

    serializer = ReminderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        reminder = create_reminder(creditor=request.user, **serializer.validated_data)
    except (ReminderValidationError, InvalidAmountError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(PaymentReminderSerializer(reminder).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={200: SendAllResponseSerializer},
    description="Remind every friend who currently owes you money.",
    tags=['reminders'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send_all(request):
    """Send reminders to every friend with a positive balance."""
    return Response({'sent': send_all_reminders(creditor=request.user)})


@extend_schema(
    request=None,
    responses={
        200: PayDebtResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Pay a reminder from the wallet, settling the debt to its creditor.",
    tags=['reminders'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def pay(request, reminder_id):
    """Pay a reminder from the wallet."""
    try:
        result = pay_reminder(user=request.user, reminder_id=reminder_id)
    except (ReminderNotFoundError, CreditorNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (InvalidAmountError, InvalidCreditorError, InsufficientBalanceError, OverpaymentError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (ReminderAlreadyPaidError, AllocationConflictError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(PayDebtResponseSerializer(result).data)
