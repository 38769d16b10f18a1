"""
HTTP transport shared by the platform clients.

Each platform client subclasses BaseApiClient, which owns the
requests.Session, the per-client rate limiter, the timeout, optional retry
of 429/5xx responses and the mapping of HTTP failures to typed exceptions.
"""

import logging
import random
import threading
import time
from typing import Any, Callable

import requests
from requests.adapters import HTTPAdapter

from ..core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    TransientError,
)


# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def calculate_delay(
    attempt: int,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
    jitter: float = 0.1,
    retry_after: int | None = None,
) -> float:
    """
    Calculate delay before next retry using exponential backoff with jitter.

    Args:
        attempt: Current attempt number (0-indexed)
        retry_after: Optional Retry-After header value in seconds

    Returns:
        Delay in seconds
    """
    if retry_after is not None:
        base_delay = min(retry_after, max_delay)
    else:
        base_delay = min(initial_delay * (backoff_factor**attempt), max_delay)

    jitter_range = base_delay * jitter
    return max(0.0, base_delay + random.uniform(-jitter_range, jitter_range))


def get_retry_after(response: requests.Response) -> int | None:
    """Extract the Retry-After header in seconds, if present and numeric."""
    retry_after = response.headers.get("Retry-After")
    if retry_after is None:
        return None
    try:
        return int(retry_after)
    except ValueError:
        return None


class RateLimiter:
    """
    Minimum-interval rate limiter.

    Guarantees at least `min_interval` seconds between the start of two
    consecutive requests made through the same limiter. Every target client
    owns one, so the interval applies per platform.

    Thread-safe.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = max(0.0, min_interval)
        self.last_request_time = 0.0
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

        # Statistics
        self._total_requests = 0
        self._total_wait_time = 0.0

        self.logger = logging.getLogger("RateLimiter")

    def acquire(self) -> float:
        """
        Wait until the next request may start.

        Returns:
            Seconds spent waiting.
        """
        with self._lock:
            waited = 0.0
            if self._total_requests > 0:
                elapsed = self._clock() - self.last_request_time
                waited = self.min_interval - elapsed
                if waited > 0:
                    if waited > 0.01:
                        self.logger.debug(f"Rate limit: waiting {waited:.3f}s")
                    self._sleep(waited)
                else:
                    waited = 0.0

            self.last_request_time = self._clock()
            self._total_requests += 1
            self._total_wait_time += waited
            return waited

    @property
    def stats(self) -> dict[str, Any]:
        """Get rate limiter statistics."""
        with self._lock:
            return {
                "total_requests": self._total_requests,
                "total_wait_time": self._total_wait_time,
                "min_interval": self.min_interval,
            }

    def reset(self) -> None:
        """Reset the rate limiter to initial state."""
        with self._lock:
            self.last_request_time = 0.0
            self._total_requests = 0
            self._total_wait_time = 0.0


class BaseApiClient:
    """
    Low-level REST client base.

    Subclasses set PROVIDER and build the API URL and auth headers; the
    request loop, dry-run guards and error mapping live here.
    """

    PROVIDER = "http"

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_RETRIES = 0
    DEFAULT_INITIAL_DELAY = 1.0
    DEFAULT_MAX_DELAY = 60.0
    DEFAULT_BACKOFF_FACTOR = 2.0
    DEFAULT_JITTER = 0.1

    # Connection pool settings
    DEFAULT_POOL_CONNECTIONS = 10
    DEFAULT_POOL_MAXSIZE = 10

    def __init__(
        self,
        api_url: str,
        headers: dict[str, str] | None = None,
        dry_run: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_interval: float | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_url: Base URL every relative endpoint is joined to
            headers: Extra headers (auth) sent with every request
            dry_run: If True, don't make write operations
            timeout: Request timeout in seconds
            max_retries: Retry attempts for 429/5xx and network failures
            min_interval: Minimum seconds between requests (None disables)
        """
        self.api_url = api_url.rstrip("/")
        self.dry_run = dry_run
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.logger = logging.getLogger(type(self).__name__)

        self._rate_limiter: RateLimiter | None = None
        if min_interval is not None and min_interval > 0:
            self._rate_limiter = RateLimiter(min_interval=min_interval)

        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if headers:
            self.headers.update(headers)

        self._session = requests.Session()
        self._session.headers.update(self.headers)

        adapter = HTTPAdapter(
            pool_connections=self.DEFAULT_POOL_CONNECTIONS,
            pool_maxsize=self.DEFAULT_POOL_MAXSIZE,
        )
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith("http://") or endpoint.startswith("https://"):
            return endpoint
        return f"{self.api_url}/{endpoint.lstrip('/')}"

    def send(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """
        Send a request and return the successful response.

        Args:
            method: HTTP method
            endpoint: Endpoint relative to the API URL, or an absolute URL
            **kwargs: Additional arguments for requests

        Returns:
            The 2xx response.

        Raises:
            AuthenticationError: On 401
            AccessDeniedError: On 403
            NotFoundError: On 404
            RateLimitError: On 429 after all retries
            RequestTimeoutError: When the timeout expires
            TransientError: On any other failure
        """
        url = self._url(endpoint)
        kwargs.setdefault("timeout", self.timeout)
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            if self._rate_limiter is not None:
                self._rate_limiter.acquire()

            try:
                response = self._session.request(method, url, **kwargs)
            except requests.exceptions.Timeout as e:
                last_exception = e
                if attempt < self.max_retries:
                    self._backoff(attempt, f"Timeout on {method} {endpoint}")
                    continue
                raise RequestTimeoutError(
                    f"{self.PROVIDER} request timed out: {method} {endpoint}",
                    resource=endpoint,
                    provider=self.PROVIDER,
                    cause=e,
                ) from e
            except requests.exceptions.RequestException as e:
                last_exception = e
                if attempt < self.max_retries:
                    self._backoff(attempt, f"Connection error on {method} {endpoint}")
                    continue
                raise TransientError(
                    f"{self.PROVIDER} connection failed: {method} {endpoint}",
                    resource=endpoint,
                    provider=self.PROVIDER,
                    cause=e,
                ) from e

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                self._backoff(
                    attempt,
                    f"Retryable error {response.status_code} on {method} {endpoint}",
                    retry_after=get_retry_after(response),
                )
                continue

            return self._check_response(response, endpoint)

        raise TransientError(
            f"Request failed after {self.max_retries + 1} attempts",
            resource=endpoint,
            provider=self.PROVIDER,
            cause=last_exception,
        )

    def _backoff(self, attempt: int, reason: str, retry_after: int | None = None) -> None:
        delay = calculate_delay(
            attempt,
            initial_delay=self.DEFAULT_INITIAL_DELAY,
            max_delay=self.DEFAULT_MAX_DELAY,
            backoff_factor=self.DEFAULT_BACKOFF_FACTOR,
            jitter=self.DEFAULT_JITTER,
            retry_after=retry_after,
        )
        self.logger.warning(
            f"{reason}, attempt {attempt + 1}/{self.max_retries + 1}, retrying in {delay:.2f}s"
        )
        time.sleep(delay)

    def request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any] | list[Any]:
        """Send a request and decode the JSON body ({} when empty)."""
        response = self.send(method, endpoint, **kwargs)
        if not response.text:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        if isinstance(data, (dict, list)):
            return data
        return {}

    def get(self, endpoint: str, **kwargs: Any) -> dict[str, Any] | list[Any]:
        """Perform a GET request."""
        return self.request("GET", endpoint, **kwargs)

    def get_text(self, url: str, **kwargs: Any) -> str:
        """GET a raw (non-JSON) resource."""
        return self.send("GET", url, **kwargs).text

    def post(
        self,
        endpoint: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any] | list[Any]:
        """Perform a POST request. Respects dry_run mode."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would POST to {endpoint}")
            return {}
        return self.request("POST", endpoint, json=json, **kwargs)

    def put(
        self,
        endpoint: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any] | list[Any]:
        """Perform a PUT request. Respects dry_run mode."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would PUT to {endpoint}")
            return {}
        return self.request("PUT", endpoint, json=json, **kwargs)

    def patch(
        self,
        endpoint: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any] | list[Any]:
        """Perform a PATCH request. Respects dry_run mode."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would PATCH {endpoint}")
            return {}
        return self.request("PATCH", endpoint, json=json, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> dict[str, Any] | list[Any]:
        """Perform a DELETE request. Respects dry_run mode."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would DELETE {endpoint}")
            return {}
        return self.request("DELETE", endpoint, **kwargs)

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _check_response(self, response: requests.Response, endpoint: str) -> requests.Response:
        """Convert non-2xx responses to typed exceptions."""
        if response.ok:
            return response

        status = response.status_code
        error_body = response.text[:500] if response.text else ""

        if status == 401:
            raise AuthenticationError(
                f"{self.PROVIDER} authentication failed. Check the configured token.",
                resource=endpoint,
                provider=self.PROVIDER,
            )

        if status == 403:
            raise AccessDeniedError(
                f"Permission denied for {endpoint}. Check token permissions.",
                resource=endpoint,
                provider=self.PROVIDER,
            )

        if status == 404:
            raise NotFoundError(f"Not found: {endpoint}", resource=endpoint, provider=self.PROVIDER)

        if status == 429:
            raise RateLimitError(
                f"{self.PROVIDER} rate limit exceeded for {endpoint}",
                retry_after=get_retry_after(response),
                resource=endpoint,
                provider=self.PROVIDER,
            )

        raise TransientError(
            f"{self.PROVIDER} API error {status}: {error_body}",
            resource=endpoint,
            provider=self.PROVIDER,
        )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    @property
    def rate_limiter(self) -> RateLimiter | None:
        """Get the rate limiter instance, if rate limiting is enabled."""
        return self._rate_limiter

    @property
    def is_rate_limited(self) -> bool:
        """Check if rate limiting is enabled."""
        return self._rate_limiter is not None

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()
