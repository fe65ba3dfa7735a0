"""
Domain errors shared by the inventory and order apps, and the DRF exception
handler that turns them into the JSON envelope:

    {"success": false, "message": "...", "error": "<code>", ...details}

Status mapping:
    ValidationError family      -> 400
    ProductNotFound / OrderNotFound -> 404
    InsufficientStock           -> 400 (carries available / requested)
    DuplicateOrderNumber        -> 400 (caller may retry the create)
    PersistenceError            -> 500
Anything unexpected is logged with its traceback and returned as a bare 500.
"""

import logging

from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'error'
    default_message = 'Request could not be processed'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self):
        payload = {
            'success': False,
            'message': self.message,
            'error': self.code,
        }
        payload.update(self.details)
        return payload


class ValidationError(DomainError):
    code = 'validation_error'
    default_message = 'Invalid or missing data'


class InvalidQuantity(ValidationError):
    code = 'invalid_quantity'
    default_message = 'Quantity must be a positive integer'


class InvalidStatusTransition(ValidationError):
    code = 'invalid_status_transition'
    default_message = 'Status change is not allowed'


class ProductNotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'product_not_found'
    default_message = 'Product not found'


class OrderNotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'order_not_found'
    default_message = 'Order not found'


class InsufficientStock(DomainError):
    code = 'insufficient_stock'

    def __init__(self, product_id, available, requested):
        super().__init__(
            f'Insufficient stock for {product_id}. '
            f'Available: {available}, requested: {requested}',
            product_id=product_id,
            available=available,
            requested=requested,
        )
        self.available = available
        self.requested = requested


class DuplicateOrderNumber(DomainError):
    code = 'duplicate_order_number'

    def __init__(self, order_no):
        super().__init__(
            f'Order number {order_no} is already taken, please try again',
            order_no=order_no,
            retryable=True,
        )
        self.order_no = order_no


class PersistenceError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 'persistence_error'
    default_message = 'Could not save changes, please try again later'


def api_exception_handler(exc, context):
    """REST_FRAMEWORK['EXCEPTION_HANDLER'] entry point."""
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.error(f"[{view_name}] {exc.code}: {exc.message}", exc_info=exc)
        else:
            logger.info(f"[{view_name}] {exc.code}: {exc.message}")
        return Response(exc.as_dict(), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception(f"[{view_name}] Unhandled error: {exc}", exc_info=exc)
        return Response({
            'success': False,
            'message': 'Internal server error',
            'error': 'server_error',
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    error_code = getattr(exc, 'default_code', 'error')
    if isinstance(exc, Http404):
        message = 'Not found'
        error_code = 'not_found'
    elif isinstance(response.data, dict) and 'detail' in response.data:
        message = str(response.data['detail'])
    else:
        message = 'Validation failed'

    payload = {
        'success': False,
        'message': message,
        'error': error_code,
    }
    if isinstance(response.data, dict) and 'detail' not in response.data:
        payload['errors'] = response.data
    elif isinstance(response.data, list):
        payload['errors'] = response.data
    response.data = payload
    return response
