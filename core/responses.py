"""
Envelope responses for DRF views.

Business failures are reported with HTTP 200 and a populated ``error`` field;
clients must always inspect ``error`` rather than the status code.
"""
from rest_framework import status
from rest_framework.response import Response

from .result import Success, to_wire


class EnvelopeResponse(Response):
    """A Response whose data is already a ``{data, error}`` envelope."""
    is_envelope = True


def envelope(data=None) -> EnvelopeResponse:
    return EnvelopeResponse({'data': data, 'error': None}, status=status.HTTP_200_OK)


def error_envelope(message: str) -> EnvelopeResponse:
    return EnvelopeResponse({'data': None, 'error': message}, status=status.HTTP_200_OK)


def result_response(result, serialize=None) -> EnvelopeResponse:
    """
    Render a service result.

    Args:
        result: ``Success`` or ``Failure``
        serialize: Optional callable applied to ``result.data`` on success
    """
    if isinstance(result, Success) and serialize is not None:
        return EnvelopeResponse(to_wire(result, serialize(result.data)), status=status.HTTP_200_OK)
    return EnvelopeResponse(to_wire(result), status=status.HTTP_200_OK)
