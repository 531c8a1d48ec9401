"""
Borrowing API Views - filing borrow requests and deciding on them
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from apps.common.throttling import BorrowRequestThrottle
from apps.common.serializers import ErrorResponseSerializer
from .serializers import BorrowRequestSerializer, CreateBorrowRequestSerializer
from .services import BorrowRequestService

# Initialize service once
borrow_service = BorrowRequestService()

TRANSITION_RESPONSES = {
    200: BorrowRequestSerializer,
    403: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
    409: ErrorResponseSerializer
}

@extend_schema(
    request=CreateBorrowRequestSerializer,
    responses={
        201: BorrowRequestSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer
    },
    summary="Request to borrow an item",
    description="File a time-boxed borrow request for an available item (buyers only)"
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([BorrowRequestThrottle])
def create_borrow_request(request):
    """File a borrow request"""
    serializer = CreateBorrowRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    borrow_request = borrow_service.create_request(request.user, serializer.validated_data)
    return Response(BorrowRequestSerializer(borrow_request).data, status=status.HTTP_201_CREATED)

@extend_schema(
    request=None,
    responses=TRANSITION_RESPONSES,
    summary="Approve a borrow request",
    description="Approve a pending request; the item becomes borrowed and overlapping pending requests are denied"
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@throttle_classes([BorrowRequestThrottle])
def approve_borrow_request(request, request_id):
    """Approve a pending borrow request for one of the seller's items"""
    borrow_request = borrow_service.approve_request(request_id, request.user)
    return Response(BorrowRequestSerializer(borrow_request).data, status=status.HTTP_200_OK)

@extend_schema(
    request=None,
    responses=TRANSITION_RESPONSES,
    summary="Deny a borrow request"
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@throttle_classes([BorrowRequestThrottle])
def deny_borrow_request(request, request_id):
    """Deny a pending borrow request for one of the seller's items"""
    borrow_request = borrow_service.deny_request(request_id, request.user)
    return Response(BorrowRequestSerializer(borrow_request).data, status=status.HTTP_200_OK)

@extend_schema(
    request=None,
    responses=TRANSITION_RESPONSES,
    summary="Mark a borrowed item as returned",
    description="Close an approved request; the item becomes available again"
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@throttle_classes([BorrowRequestThrottle])
def return_borrow_request(request, request_id):
    """Record that the item of an approved request came back"""
    borrow_request = borrow_service.mark_returned(request_id, request.user)
    return Response(BorrowRequestSerializer(borrow_request).data, status=status.HTTP_200_OK)

@extend_schema(
    responses={200: BorrowRequestSerializer(many=True)},
    summary="Get my borrow requests",
    description="Borrow requests filed by the authenticated user"
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_requests(request):
    requests = borrow_service.get_my_requests(request.user)
    return Response(BorrowRequestSerializer(requests, many=True).data, status=status.HTTP_200_OK)

@extend_schema(
    responses={200: BorrowRequestSerializer(many=True)},
    summary="Get requests for my items",
    description="Borrow requests filed against the authenticated seller's items"
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def requests_for_my_items(request):
    requests = borrow_service.get_requests_for_my_items(request.user)
    return Response(BorrowRequestSerializer(requests, many=True).data, status=status.HTTP_200_OK)
