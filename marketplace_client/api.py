"""
HTTP client for the Resource Sharing API.

Every request carries the stored bearer token. A 401 drops that token, the
same way the browser client forgot its session and sent the user back to
the login page.
"""

import logging
import os
from typing import Any, Dict, Optional

import requests

from .exceptions import ApiConnectionError, ApiError, UnauthorizedError
from .storage import MemoryTokenStore

logger = logging.getLogger('marketplace_client')

DEFAULT_API_URL = 'http://localhost:8000'
DEFAULT_TIMEOUT = 10


class ApiClient:
    def __init__(self, base_url: Optional[str] = None, token_store=None,
                 timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = (base_url or os.getenv('RESOURCE_SHARING_API_URL') or DEFAULT_API_URL).rstrip('/')
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                json: Any = None) -> Any:
        method = method.upper()
        url = f"{self.base_url}{path}"

        headers = {}
        token = self.token_store.get()
        if token:
            headers['Authorization'] = f'Bearer {token}'
            logger.debug(f"Adding token to {method} request: {path}")
        else:
            logger.debug(f"No token found for {method} request: {path}")

        try:
            response = self.session.request(
                method, url, params=params, json=json, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"API Error: no response for {method} {path}: {e}")
            raise ApiConnectionError(f"Could not reach {self.base_url}: {e}") from e

        logger.debug(f"Response from {method} {path}: Status {response.status_code}")

        if response.status_code == 401:
            logger.warning(f"Unauthorized response for {method} {path} - clearing stored token")
            self.token_store.clear()
            raise UnauthorizedError.from_response(response)

        if not response.ok:
            error = ApiError.from_response(response)
            logger.error(f"API Error: {method} {path} - Status {response.status_code}: {error.message}")
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request('GET', path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request('POST', path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request('PUT', path, json=json)

    def delete(self, path: str) -> Any:
        return self.request('DELETE', path)
