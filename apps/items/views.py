"""
Items API Views - listings browsed by everyone and managed by their sellers
"""
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes, throttle_classes, authentication_classes
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly, AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.common.authentication import OptionalBearerTokenAuthentication
from apps.common.throttling import ListingThrottle
from apps.common.serializers import ErrorResponseSerializer
from .serializers import ItemSerializer, ItemWriteSerializer, ItemFilterSerializer
from .services import ItemService

# Initialize service once
item_service = ItemService()

@extend_schema(
    methods=['GET'],
    parameters=[
        OpenApiParameter('category', str, description="Exact category"),
        OpenApiParameter('status', str, description="available or borrowed"),
        OpenApiParameter('location', str, description="Case-insensitive location substring"),
    ],
    responses={200: ItemSerializer(many=True), 400: ErrorResponseSerializer},
    summary="List items",
    description="Browse listings, optionally filtered by category, status and location"
)
@extend_schema(
    methods=['POST'],
    request=ItemWriteSerializer,
    responses={
        201: ItemSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer
    },
    summary="Create an item",
    description="List a new item for lending (sellers only)"
)
@api_view(['GET', 'POST'])
@authentication_classes([OptionalBearerTokenAuthentication])
@permission_classes([IsAuthenticatedOrReadOnly])
@throttle_classes([ListingThrottle])
def items(request):
    """List items or create a new one"""
    if request.method == 'POST':
        serializer = ItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = item_service.create_item(request.user, serializer.validated_data)
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)

    filters = ItemFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)
    listed = item_service.list_items(**filters.validated_data)
    return Response(ItemSerializer(listed, many=True).data, status=status.HTTP_200_OK)

@extend_schema(
    methods=['GET'],
    responses={200: ItemSerializer, 404: ErrorResponseSerializer},
    summary="Get item details"
)
@extend_schema(
    methods=['PUT'],
    request=ItemWriteSerializer,
    responses={
        200: ItemSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer
    },
    summary="Update an item",
    description="Replace the editable fields of an item (owner only)"
)
@extend_schema(
    methods=['DELETE'],
    responses={
        204: None,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer
    },
    summary="Delete an item",
    description="Remove a listing that is not currently lent out (owner only)"
)
@api_view(['GET', 'PUT', 'DELETE'])
@authentication_classes([OptionalBearerTokenAuthentication])
@permission_classes([IsAuthenticatedOrReadOnly])
@throttle_classes([ListingThrottle])
def item_detail(request, item_id):
    """Get, update or delete a single item"""
    if request.method == 'PUT':
        serializer = ItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = item_service.update_item(item_id, request.user, serializer.validated_data)
        return Response(ItemSerializer(item).data, status=status.HTTP_200_OK)

    if request.method == 'DELETE':
        item_service.delete_item(item_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    item = item_service.get_item(item_id)
    return Response(ItemSerializer(item).data, status=status.HTTP_200_OK)

@extend_schema(
    responses={200: ItemSerializer(many=True), 403: ErrorResponseSerializer},
    summary="Get seller's items",
    description="Get all items listed by the authenticated seller"
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_items(request):
    """Get all items listed by the authenticated seller"""
    listed = item_service.get_items_by_seller(request.user)
    return Response(ItemSerializer(listed, many=True).data, status=status.HTTP_200_OK)

@extend_schema(
    responses={200: serializers.ListField(child=serializers.CharField())},
    summary="List item categories"
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def categories(request):
    """List the categories an item can be filed under"""
    return Response(item_service.get_categories(), status=status.HTTP_200_OK)

@extend_schema(
    responses={200: serializers.ListField(child=serializers.CharField())},
    summary="List item locations",
    description="Distinct locations of the current listings, for the location filter"
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def locations(request):
    """List the distinct locations items are offered in"""
    return Response(item_service.get_locations(), status=status.HTTP_200_OK)
