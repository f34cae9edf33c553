"""API service for HTTP client abstraction."""
import requests
import time
import logging
from ..errors import TransportError, FetchError


class APIService:
    """HTTP client for backend API calls with error handling and retry logic.

    Every request carries a timeout. Retries only happen for connection
    failures, 5xx, 408 and 429, and only when ``max_retries`` is above one.
    """

    def __init__(self, base_url='http://localhost:5000', max_retries=1, retry_delay=1.0, timeout=10.0,
                 access_token=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.access_token = access_token
        self.session = session or requests.Session()
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config, session=None):
        return cls(
            base_url=config.api_base_url,
            max_retries=config.api_max_retries,
            retry_delay=config.api_retry_delay,
            timeout=config.api_timeout,
            access_token=config.api_access_token,
            session=session,
        )

    def _merge_headers(self, kwargs):
        """Merge auth headers with any provided headers in kwargs."""
        if not self.access_token:
            return kwargs

        existing_headers = kwargs.get('headers', {})
        if not isinstance(existing_headers, dict):
            existing_headers = {}

        kwargs['headers'] = {**existing_headers, 'Authorization': f"Bearer {self.access_token}"}
        return kwargs

    def _make_request(self, method, url, **kwargs):
        """Make HTTP request with retry logic."""
        kwargs = self._merge_headers(kwargs)
        kwargs.setdefault('timeout', self.timeout)

        last_exception = None
        response = None

        for attempt in range(self.max_retries):
            try:
                response = self.session.request(method, url, **kwargs)
                last_exception = None
                # Don't retry on client errors (4xx) except timeout and rate limit
                if 400 <= response.status_code < 500 and response.status_code not in (408, 429):
                    return response
                if response.status_code < 400:
                    return response

                if attempt < self.max_retries - 1:
                    self.logger.warning(f"Request failed (attempt {attempt + 1}/{self.max_retries}): {response.status_code} {response.reason}")
                    time.sleep(self.retry_delay * (2 ** attempt))  # Exponential backoff

            except requests.exceptions.RequestException as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    self.logger.warning(f"Request exception (attempt {attempt + 1}/{self.max_retries}): {e}")
                    time.sleep(self.retry_delay * (2 ** attempt))  # Exponential backoff
                else:
                    self.logger.error(f"Request failed after {self.max_retries} attempts: {e}")

        if last_exception is not None:
            raise last_exception
        return response

    def get(self, endpoint, **kwargs):
        """GET request with error handling and retry."""
        return self._make_request('GET', f"{self.base_url}{endpoint}", **kwargs)

    def call(self, method, endpoint, **kwargs):
        """Perform a request and return its decoded JSON body.

        Raises:
            FetchError: a GET failed at the transport level or was rejected
            TransportError: any other method failed or was rejected
        """
        error_class = FetchError if method == 'GET' else TransportError
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._make_request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            raise error_class(f"{method} {endpoint} failed: {e}") from e

        if not response.ok:
            message = self._error_message(response)
            self.logger.warning(f"{method} {endpoint} rejected ({response.status_code}): {message}")
            raise error_class(f"{method} {endpoint} failed: {message}", status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise error_class(f"{method} {endpoint} returned invalid JSON", status_code=response.status_code) from e

    def download(self, endpoint, **kwargs):
        """GET a binary resource and return its bytes."""
        try:
            response = self.get(endpoint, **kwargs)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"GET {endpoint} failed: {e}") from e
        if not response.ok:
            raise FetchError(f"GET {endpoint} failed: {self._error_message(response)}", status_code=response.status_code)
        return response.content

    @staticmethod
    def _error_message(response):
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('error'):
            return body['error']
        return response.reason or f"HTTP {response.status_code}"
