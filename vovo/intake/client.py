#!/usr/bin/env python3
"""
HTTP client for the storefront endpoints.

Used by the order intake workflow and the admin console. Every call has a
bounded timeout; failures come back as the exceptions in `errors.py` so the
callers never deal with `requests` directly.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..app.config import Config
from ..schemas.store_models import OrderOut, ProductOut
from ..utils.logger import get_logger
from .errors import (
    CONNECTIVITY_MESSAGE,
    GENERIC_SERVER_MESSAGE,
    ServerRejectedError,
    TransportError,
)

log = get_logger("client")


def error_message(response) -> str:
    """The server's `error` text, or the generic fallback for any other body."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_SERVER_MESSAGE
    if isinstance(body, dict):
        message = body.get("error")
        if isinstance(message, str) and message:
            return message
    return GENERIC_SERVER_MESSAGE


class StoreClient:
    """Thin wrapper over the store endpoints."""

    def __init__(self, base_url: str = None, timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or Config.API_URL).rstrip("/")
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            log.warning("transport timeout after %.1fs: %s %s", self.timeout, method, path)
            raise TransportError(CONNECTIVITY_MESSAGE, cause=e) from e
        except requests.RequestException as e:
            log.warning("transport failure: %s %s (%s)", method, path, e.__class__.__name__)
            raise TransportError(CONNECTIVITY_MESSAGE, cause=e) from e

        if not 200 <= response.status_code < 300:
            message = error_message(response)
            log.info("server rejected %s %s with %s: %s", method, path, response.status_code, message)
            raise ServerRejectedError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            log.error("unparsable success body from %s %s", method, path)
            raise ServerRejectedError(GENERIC_SERVER_MESSAGE, status_code=response.status_code) from e

    def _expect(self, data, kind=dict, key=None):
        if not isinstance(data, kind) or (key is not None and key not in data):
            log.error("unexpected response shape: %s", type(data).__name__)
            raise ServerRejectedError(GENERIC_SERVER_MESSAGE)
        return data

    def _parse(self, model, data, many=False):
        data = self._expect(data, list if many else dict)
        # pydantic ValidationError is a ValueError
        try:
            if many:
                return [model(**item) for item in data]
            return model(**data)
        except (TypeError, ValueError) as e:
            log.error("unexpected %s payload: %s", model.__name__, e)
            raise ServerRejectedError(GENERIC_SERVER_MESSAGE) from e

    def _string_map(self, data) -> Dict[str, str]:
        data = self._expect(data)
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
            log.error("unexpected values in string map response")
            raise ServerRejectedError(GENERIC_SERVER_MESSAGE)
        return dict(data)

    # Catalog
    def list_products(self) -> List[ProductOut]:
        return self._parse(ProductOut, self._request("GET", "/products"), many=True)

    def save_product(self, product: Dict[str, Any]) -> ProductOut:
        return self._parse(ProductOut, self._request("POST", "/products", json=product))

    def delete_product(self, product_id: str) -> bool:
        return bool(self._expect(self._request("DELETE", f"/products/{product_id}"), key="deleted")["deleted"])

    # Availability
    def get_availability(self, start: date, end: date) -> Dict[str, str]:
        params = {"start": start.isoformat(), "end": end.isoformat()}
        return self._string_map(self._request("GET", "/availability", params=params))

    # Settings
    def get_settings(self) -> Dict[str, str]:
        return self._string_map(self._request("GET", "/settings"))

    def save_setting(self, key: str, value: Any) -> Dict[str, str]:
        return self._expect(self._request("POST", "/settings", json={"key": key, "value": value}))

    # Orders
    def list_orders(self) -> List[OrderOut]:
        return self._parse(OrderOut, self._request("GET", "/orders"), many=True)

    def create_order(self, payload: Dict[str, Any]) -> OrderOut:
        return self._parse(OrderOut, self._request("POST", "/orders", json=payload))

    def update_order(self, order: Dict[str, Any]) -> OrderOut:
        return self._parse(OrderOut, self._request("POST", "/orders/update", json=order))

    def delete_order(self, order_id: str) -> bool:
        return bool(self._expect(self._request("DELETE", f"/orders/{order_id}"), key="deleted")["deleted"])

    # Files
    def upload(self, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        return self._expect(self._request("POST", "/upload", files=files), key="url")["url"]
