"""HTTP transport for the Hugging Face Inference API (httpx, bearer auth, retry)."""

import logging
from typing import Optional

import httpx

from hf_inference.services.errors import EmptyTokenError
from hf_inference.utils.retry import (
    APIRateLimitError,
    NetworkError,
    TemporaryServiceError,
    is_retryable_status,
    retry_api_call,
)

logger = logging.getLogger(__name__)


class InferenceTransport:
    """Sends authenticated JSON requests and retries transient failures.

    Network failures and 429/5xx answers are retried up to ``retries`` times
    with a fixed ``retry_delay``. Other non-success answers are returned as-is
    so the caller can classify them. When retries run out on a retryable
    status, the last response is returned; when they run out on a network
    failure, NetworkError is raised.
    """

    def __init__(
        self,
        api_token: str,
        timeout: float = 30.0,
        retries: int = 2,
        retry_delay: float = 1.0,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the transport.

        Args:
            api_token: Hugging Face API token sent as a bearer token
            timeout: Per-attempt timeout in seconds
            retries: Retries after the first attempt
            retry_delay: Seconds between attempts
            client: Optional preconfigured httpx.Client (tests, proxies)
        """
        if not api_token or not api_token.strip():
            raise EmptyTokenError()

        self.api_token = api_token
        self.timeout = timeout
        self.retries = retries
        self.retry_delay = retry_delay
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    @property
    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def post(self, url: str, payload: dict) -> httpx.Response:
        """POST a JSON payload with retry.

        Args:
            url: Absolute request URL
            payload: JSON-serializable request body

        Returns:
            The final httpx.Response (success or not)

        Raises:
            NetworkError: If every attempt failed before a response arrived
        """
        return self._send("POST", url, json=payload)

    def get(self, url: str) -> httpx.Response:
        """GET a URL once, without retry (used for best-effort lookups)."""
        try:
            return self.client.get(url, headers=self.headers, timeout=self.timeout)
        except httpx.TransportError as e:
            raise NetworkError(f"GET {url} failed: {e}") from e

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        send = retry_api_call(
            max_retries=self.retries,
            base_delay=self.retry_delay,
        )(self._send_once)

        try:
            return send(method, url, **kwargs)
        except TemporaryServiceError as e:
            if e.response is None:
                raise
            return e.response

    def _send_once(self, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            response = self.client.request(
                method, url, headers=self.headers, timeout=self.timeout, **kwargs
            )
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        if is_retryable_status(response.status_code):
            if response.status_code == 429:
                raise APIRateLimitError(
                    f"Rate limited by {url}", response=response
                )
            raise TemporaryServiceError(
                f"{url} returned status {response.status_code}", response=response
            )

        return response

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "InferenceTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
