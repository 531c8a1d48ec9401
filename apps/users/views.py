"""
Users API Views - registration, login and the current-user lookup
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from apps.common.throttling import AuthOperationsThrottle
from apps.common.serializers import ErrorResponseSerializer, TokenResponseSerializer
from .serializers import UserSerializer, RegisterSerializer, LoginSerializer
from .services import UserService

# Initialize service once
user_service = UserService()

@extend_schema(
    request=RegisterSerializer,
    responses={
        201: TokenResponseSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer
    },
    summary="Register a new user",
    description="Create a seller or buyer account and return its bearer token"
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthOperationsThrottle])
def register(request):
    """Register a new user (seller or buyer)"""
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    auth_data = user_service.register_user(serializer.validated_data)
    return Response({
        'token': auth_data['token'],
        'user': UserSerializer(auth_data['user']).data
    }, status=status.HTTP_201_CREATED)

@extend_schema(
    request=LoginSerializer,
    responses={
        200: TokenResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer
    },
    summary="User login",
    description="Authenticate with email and password and return the bearer token"
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthOperationsThrottle])
def login(request):
    """Authenticate user and return token"""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    auth_data = user_service.authenticate_user(
        serializer.validated_data['email'],
        serializer.validated_data['password']
    )
    return Response({
        'token': auth_data['token'],
        'user': UserSerializer(auth_data['user']).data
    }, status=status.HTTP_200_OK)

@extend_schema(
    responses={
        200: UserSerializer,
        401: ErrorResponseSerializer
    },
    summary="Get current user",
    description="Retrieve the account the bearer token belongs to"
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """Get the authenticated user"""
    return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)
