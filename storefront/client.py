"""
REST client for the ordering API.

Every call returns a ``core.result`` value parsed from the ``{data, error}``
envelope. Network failures and unparsable responses become
``ErrorKind.TRANSPORT`` failures; they are never raised to the caller.
"""
import logging
from typing import Any, Dict, Optional

import requests

from core.result import ErrorKind, Failure, Result, Success, from_wire
from .models import ProductSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class StorefrontClient:
    """
    Thin wrapper over ``requests`` for the ``/api`` endpoints.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``
        session: Optional ``requests.Session`` (any compatible object)
        timeout: Per-request timeout in seconds
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, kind: ErrorKind = ErrorKind.VALIDATION, **kwargs) -> Result:
        url = f"{self.base_url}/api{endpoint}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            payload = response.json()
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            return Failure(ErrorKind.TRANSPORT, str(e))
        except ValueError as e:
            logger.error(f"{method} {url} returned a non-JSON body: {e}")
            return Failure(ErrorKind.TRANSPORT, f"Invalid response from server ({response.status_code})")
        return from_wire(payload, kind)

    # Auth

    def login(self, email: str, password: str) -> Result:
        return self._request('POST', '/auth/login', ErrorKind.AUTHENTICATION,
                             json={'email': email, 'password': password})

    # Products

    def list_products(self, is_active: Optional[bool] = None) -> Result:
        params = {}
        if is_active is not None:
            params['is_active'] = 'true' if is_active else 'false'
        return self._request('GET', '/products', params=params)

    def list_product_snapshots(self, is_active: Optional[bool] = None) -> Result:
        """Like ``list_products`` but parsed into ``ProductSnapshot`` values."""
        result = self.list_products(is_active)
        if not isinstance(result, Success):
            return result
        try:
            return Success([ProductSnapshot.from_dict(row) for row in result.data or []])
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            return Failure(ErrorKind.TRANSPORT, f"Malformed product listing: {e}")

    # Orders

    def create_order(self, payload: Dict[str, Any]) -> Result:
        return self._request('POST', '/orders', json=payload)

    def list_orders(self, user_id: Optional[int] = None) -> Result:
        params = {'user_id': user_id} if user_id else {}
        return self._request('GET', '/orders', params=params)

    def update_order(self, order_id: int, status: Optional[str] = None, notes: Optional[str] = None) -> Result:
        body = {k: v for k, v in (('status', status), ('notes', notes)) if v is not None}
        return self._request('PATCH', f'/orders/{order_id}', json=body)
