from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    UserPublicSerializer,
    AddFriendSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    find_user_by_email,
    add_friend,
    get_friends,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    InvalidFriendError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token issued at login")


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    # Remove password_confirm before passing to service
    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. The refresh token, when sent, must be well formed.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout the current user."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({'error': 'Invalid token'}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Logout successful'})


@extend_schema(
    methods=['GET'],
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer},
    description="Update the current user's profile (display_name, currency).",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Get or update the current authenticated user's profile."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = UserSerializer(request.user, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@extend_schema(
    parameters=[OpenApiParameter('email', str, required=True)],
    responses={200: UserPublicSerializer, 404: ErrorResponseSerializer},
    description="Find a user by email, used before adding a friend.",
    tags=['friends'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lookup_user(request):
    """Find a user by email."""
    email = request.query_params.get('email', '')
    if not email:
        return Response({'error': 'email is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = find_user_by_email(email=email)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(UserPublicSerializer(user).data)


@extend_schema(
    methods=['GET'],
    responses={200: UserPublicSerializer(many=True)},
    description="List the current user's friends.",
    tags=['friends'],
)
@extend_schema(
    methods=['POST'],
    request=AddFriendSerializer,
    responses={
        201: UserPublicSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Add a friend. The friendship is symmetric.",
    tags=['friends'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def friends(request):
    """List or add friends."""
    if request.method == 'GET':
        serializer = UserPublicSerializer(get_friends(user=request.user), many=True)
        return Response(serializer.data)

    serializer = AddFriendSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        friend = add_friend(user=request.user, friend_id=serializer.validated_data['friend_id'])
    except InvalidFriendError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(UserPublicSerializer(friend).data, status=status.HTTP_201_CREATED)
