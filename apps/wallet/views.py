from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    WalletSerializer,
    WalletTransactionSerializer,
    AddFundsSerializer,
    PayDebtSerializer,
    BalanceResponseSerializer,
    PayDebtResponseSerializer,
)
from .services import (
    get_or_create_wallet,
    credit,
    pay_debt,
    get_wallet_transactions,
    InvalidAmountError,
    InsufficientBalanceError,
    OverpaymentError,
    AllocationConflictError,
    CreditorNotFoundError,
    InvalidCreditorError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    responses={200: WalletSerializer},
    description="Get the current user's wallet balance.",
    tags=['wallet'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def wallet_detail(request):
    """Get the user's wallet, creating it on first access."""
    wallet = get_or_create_wallet(user=request.user)
    return Response(WalletSerializer(wallet).data)


@extend_schema(
    request=AddFundsSerializer,
    responses={200: BalanceResponseSerializer, 400: ErrorResponseSerializer},
    description="Add funds to the wallet.",
    tags=['wallet'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def add_funds(request):
    """Credit the user's wallet."""
    serializer = AddFundsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        new_balance = credit(
            user=request.user,
            amount=serializer.validated_data['amount'],
            description=serializer.validated_data['description'] or 'Funds added',
        )
    except InvalidAmountError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(BalanceResponseSerializer({'new_balance': new_balance}).data)


@extend_schema(
    request=PayDebtSerializer,
    responses={
        200: PayDebtResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description=(
        "Pay from the wallet. With creditor_id the payment settles the oldest "
        "debts to that user first; the debit and the settlement succeed or fail together."
    ),
    tags=['wallet'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def pay_debt_view(request):
    """Debit the wallet and settle debts to a creditor."""
    serializer = PayDebtSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = pay_debt(
            user=request.user,
            amount=serializer.validated_data['amount'],
            creditor_id=serializer.validated_data.get('creditor_id'),
            description=serializer.validated_data['description'],
        )
    except (InvalidAmountError, InvalidCreditorError, InsufficientBalanceError, OverpaymentError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except CreditorNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except AllocationConflictError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(PayDebtResponseSerializer(result).data)


@extend_schema(
    responses={200: WalletTransactionSerializer(many=True)},
    description="Wallet history, newest first.",
    tags=['wallet'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transactions(request):
    """List the user's wallet transactions."""
    serializer = WalletTransactionSerializer(get_wallet_transactions(user=request.user), many=True)
    return Response(serializer.data)
