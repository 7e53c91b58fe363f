"""
Tagged result type shared by the API layer and the storefront client.

Services return ``Success`` or ``Failure`` instead of raising for business
outcomes. At the HTTP boundary a result is serialized into the wire envelope

    {"data": <payload or null>, "error": <message or null>}

and the client parses that envelope back into a result. This module has no
Django dependency so the storefront package can import it.
"""
import enum
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar, Union

T = TypeVar('T')


class ErrorKind(str, enum.Enum):
    VALIDATION = 'validation'
    INSUFFICIENT_STOCK = 'insufficient_stock'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    AUTHENTICATION = 'authentication'
    TRANSACTION = 'transaction'
    TRANSPORT = 'transport'


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self):
        return self.message


Result = Union[Success[T], Failure]


def to_wire(result: 'Result', data: Any = None) -> Dict[str, Any]:
    """
    Serialize a result into the ``{data, error}`` envelope.

    ``data`` overrides the success payload, so views can pass the serialized
    form of a model instance carried by the result.
    """
    if isinstance(result, Success):
        return {'data': result.data if data is None else data, 'error': None}
    return {'data': None, 'error': result.message}


def from_wire(payload: Any, default_kind: ErrorKind = ErrorKind.VALIDATION) -> 'Result':
    """
    Parse a ``{data, error}`` envelope received over HTTP.

    The envelope carries only a message, so the failure kind is supplied by
    the caller.
    """
    if not isinstance(payload, dict) or 'error' not in payload:
        return Failure(ErrorKind.TRANSPORT, 'Malformed response envelope')
    error: Optional[str] = payload.get('error')
    if error:
        return Failure(default_kind, str(error))
    return Success(payload.get('data'))
