"""
Runtime API client.

Thin synchronous wrapper over the control endpoint's three resources:
next invocation, invocation response and invocation error.
"""

import logging

import httpx

from ..core.exceptions import TransportError
from ..models.invocation import Invocation
from ..models.result import ErrorDescriptor

logger = logging.getLogger("bootstrap.runtime_client")

ERROR_TYPE_HEADER = "Lambda-Runtime-Function-Error-Type"


class RuntimeAPIClient:
    def __init__(self, client: httpx.Client, base_url: str):
        """
        Args:
            client: httpx.Client used for every request
            base_url: http://<host:port>/2018-06-01
        """
        self.client = client
        self.base_url = base_url.rstrip("/")

    def next_invocation(self) -> Invocation:
        """
        Long-poll the next invocation.

        Raises:
            TransportError: network failure or non-2xx status
        """
        url = f"{self.base_url}/runtime/invocation/next"
        response = self._send("next", "GET", url)
        return Invocation(
            body=response.content,
            headers={k.lower(): v for k, v in response.headers.items()},
        )

    def post_response(self, request_id: str, payload: bytes) -> None:
        url = f"{self.base_url}/runtime/invocation/{request_id}/response"
        self._send("response", "POST", url, content=payload)

    def post_error(self, request_id: str, error: ErrorDescriptor) -> None:
        url = f"{self.base_url}/runtime/invocation/{request_id}/error"
        self._send(
            "error",
            "POST",
            url,
            content=error.to_wire(),
            headers={"Content-Type": "application/json", ERROR_TYPE_HEADER: error.error_type},
        )

    def _send(self, operation: str, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise TransportError(operation, e) from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def close(self) -> None:
        self.client.close()
