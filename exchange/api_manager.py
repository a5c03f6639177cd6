"""
API Manager
Handles HTTP requests with retry logic and error tracking
"""

import time
import requests
from typing import Dict, Any, Optional, Union
from datetime import datetime


JSONResponse = Union[Dict[str, Any], list]


class APIManager:
    """
    API Request Manager
    Retries connection errors, timeouts, 429 and 5xx responses with a growing
    delay; 4xx responses fail immediately
    """

    def __init__(self, config, logger, session: Optional[requests.Session] = None):
        """
        Initialize API Manager

        Args:
            config: Configuration object
            logger: Logger instance
            session: Optional requests session (tests inject one)
        """
        self.config = config
        self.logger = logger

        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': 'DualVenueTrader/1.0'})

        self.error_counts: Dict[str, int] = {}
        self.last_error: Optional[str] = None
        self.last_status: Optional[int] = None
        self.started_at = datetime.now()

    def _record_error(self, endpoint: str, message: str):
        self.error_counts[endpoint] = self.error_counts.get(endpoint, 0) + 1
        self.last_error = message

    def _backoff(self, attempt: int):
        time.sleep(self.config.RETRY_DELAY * (attempt + 1))

    def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                body: Optional[Dict[str, Any]] = None, params: Optional[Dict[str, Any]] = None,
                endpoint: str = '') -> Optional[JSONResponse]:
        """
        Make an API request with retry logic

        Args:
            method: HTTP method (GET, POST, DELETE)
            url: Full URL
            headers: Request headers
            body: JSON body (for POST)
            params: Query string parameters
            endpoint: Endpoint label for logging and error tracking

        Returns:
            Decoded JSON response ({} for empty bodies) or None on failure
        """
        endpoint = endpoint or url
        self.last_error = None
        self.last_status = None
        attempts = max(1, self.config.RETRY_ATTEMPTS)

        for attempt in range(attempts):
            try:
                start_time = time.time()
                response = self.session.request(
                    method,
                    url,
                    headers=headers,
                    json=body,
                    params=params,
                    timeout=self.config.API_TIMEOUT
                )
                duration = time.time() - start_time

                self.logger.api_call(
                    method=method,
                    url=endpoint,
                    status=response.status_code,
                    duration=duration
                )
                self.last_status = response.status_code

                if 200 <= response.status_code < 300:
                    if not response.content:
                        return {}
                    return response.json()

                if response.status_code == 429 or response.status_code >= 500:
                    self.logger.warning(
                        f"HTTP {response.status_code} from {endpoint}, retrying",
                        attempt=attempt + 1,
                        max_attempts=attempts
                    )
                    self._record_error(endpoint, f"HTTP {response.status_code}: {response.text}")
                    if attempt < attempts - 1:
                        self._backoff(attempt)
                    continue

                # Client error (400-499), don't retry
                self.logger.error(
                    f"API request failed with status {response.status_code}",
                    endpoint=endpoint,
                    response=response.text
                )
                self._record_error(endpoint, f"HTTP {response.status_code}: {response.text}")
                return None

            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                self.logger.warning(
                    f"{type(e).__name__} on {endpoint} (attempt {attempt + 1}/{attempts})"
                )
                self._record_error(endpoint, str(e))
                if attempt < attempts - 1:
                    self._backoff(attempt)

            except ValueError as e:
                self.logger.error(f"Invalid JSON from {endpoint}: {e}")
                self._record_error(endpoint, str(e))
                return None

        self.logger.error(f"All retry attempts exhausted for {endpoint}")
        return None

    def get_error_statistics(self) -> Dict[str, Any]:
        return {
            'total_errors': sum(self.error_counts.values()),
            'errors_by_endpoint': dict(self.error_counts),
            'last_error': self.last_error,
            'since': self.started_at.isoformat()
        }
