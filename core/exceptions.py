"""
DRF exception handler that reports every failure inside the envelope.
"""
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.http import Http404
from rest_framework import exceptions
from rest_framework.views import set_rollback

from .responses import error_envelope

logger = logging.getLogger(__name__)


def flatten_errors(detail, prefix='') -> str:
    """Collapse DRF's nested error detail into one readable message."""
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            label = field if field != 'non_field_errors' else ''
            nested = f"{prefix}.{label}" if prefix and label else (label or prefix)
            parts.append(flatten_errors(value, nested))
        return '; '.join(p for p in parts if p)
    if isinstance(detail, list):
        parts = []
        for idx, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                parts.append(flatten_errors(value, f"{prefix}[{idx}]" if prefix else f"[{idx}]"))
            else:
                parts.append(flatten_errors(value, prefix))
        return '; '.join(p for p in parts if p)
    return f"{prefix}: {detail}" if prefix else str(detail)


def envelope_exception_handler(exc, context):
    """
    Convert any exception raised by a view into ``{data: null, error: msg}``.

    Transaction state is rolled back the same way DRF's default handler does.
    """
    if isinstance(exc, (Http404, ObjectDoesNotExist)):
        exc = exceptions.NotFound()

    if isinstance(exc, exceptions.APIException):
        message = flatten_errors(exc.detail)
        if isinstance(exc, exceptions.ValidationError):
            logger.info(f"Request validation failed: {message}")
    else:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        message = 'An unexpected error occurred'

    set_rollback()
    return error_envelope(message)
