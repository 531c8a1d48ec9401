"""
Custom exception handler for DRF that provides structured error responses.
"""

from rest_framework.views import exception_handler
from rest_framework.response import Response
import logging

from .exceptions import MarketplaceError

logger = logging.getLogger('apps.common')


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns structured JSON responses.
    """
    request = context.get('request')

    if isinstance(exc, MarketplaceError):
        user = getattr(request, 'user', None)
        logger.warning(
            f"MarketplaceError: {exc.error_code}",
            extra={
                'error_code': exc.error_code,
                'error_message': str(exc.message),
                'user_id': getattr(user, 'id', None),
                'path': request.path if request else None,
                'method': request.method if request else None,
            }
        )
        return Response({
            'success': False,
            'error_code': exc.error_code,
            'message': str(exc.message),
            'details': None
        }, status=exc.status_code)

    # Call REST framework's default exception handler for everything else
    response = exception_handler(exc, context)

    if response is not None:
        error_message = None
        error_code = "VALIDATION_ERROR"

        if isinstance(response.data, dict):
            if 'detail' in response.data:
                error_message = response.data['detail']
                error_code = getattr(response.data['detail'], 'code', 'DETAIL_ERROR').upper()
            elif 'non_field_errors' in response.data:
                error_message = response.data['non_field_errors'][0] if response.data['non_field_errors'] else "Validation error"
            else:
                error_message = first_field_error(response.data) or "Validation failed"

        response.data = {
            'success': False,
            'error_code': error_code,
            'message': str(error_message or "An error occurred"),
            'details': response.data
        }

    return response


def first_field_error(errors):
    """Return the first message out of a DRF field error mapping."""
    for messages in errors.values():
        if isinstance(messages, (list, tuple)) and messages:
            return str(messages[0])
        if isinstance(messages, str):
            return messages
    return None


def log_lifecycle_event(event_type, user_id, reference_id=None, details=None):
    """
    Helper function to log marketplace state transitions with structured data.
    """
    audit_logger = logging.getLogger('apps.audit')

    log_data = {
        'event_type': event_type,
        'user_id': user_id,
        'reference_id': reference_id,
        'details': details or {}
    }

    audit_logger.info(
        f"Lifecycle event: {event_type}",
        extra=log_data
    )
