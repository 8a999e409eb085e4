# 📄 File: sprout/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# A careful messenger for talking to outside services over the internet (the shipping
# label company and the email company), trying again when the line drops for a moment.

# 🧪 Purpose (Technical Summary):
# Generic async HTTP client over aiohttp with tenacity retries for transport failures,
# status-code to exception mapping, basic or header authentication and request stats.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - tenacity: Retry logic and backoff strategies

# 🔄 Connected Modules / Calls From:
# Used by: shipping ShippoClient, contact MailjetClient

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import BasicAuth, ClientSession, ClientTimeout
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sprout.shared.core.exceptions import ExternalAPIError
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)
retry_logger = logging.getLogger(__name__)


class APIClient:
    """
    Generic async HTTP client for external API integrations.

    Features:
    - Automatic retry with exponential backoff on transport errors
    - Basic auth or fixed auth headers
    - Non-2xx responses mapped to ExternalAPIError with the upstream status
    - Request statistics
    """

    def __init__(
        self,
        base_url: str,
        api_name: str,
        auth: Optional[BasicAuth] = None,
        auth_headers: Optional[Dict[str, str]] = None,
        timeout: int = 30,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_name = api_name
        self.auth = auth
        self.auth_headers = auth_headers or {}
        self.timeout = timeout

        self.session: Optional[ClientSession] = None

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'average_response_time': 0,
            'last_request_time': None,
        }

    async def initialize(self):
        """Create the underlying aiohttp session."""
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers=self._get_default_headers(),
            auth=self.auth,
        )
        logger.info(f"API client initialized for {self.api_name}")

    def _get_default_headers(self) -> Dict[str, str]:
        headers = {
            'User-Agent': f'SproutMarketplace/1.0 ({self.api_name}-client)',
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        }
        headers.update(self.auth_headers)
        return headers

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError)),
        before_sleep=before_sleep_log(retry_logger, logging.WARNING),
        reraise=True,
    )
    async def _send(
        self,
        method: str,
        url: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Single HTTP exchange. Transport failures propagate so tenacity can retry them."""
        if self.session is None:
            await self.initialize()

        async with self.session.request(method, url, json=json_body, params=params) as response:
            await self._handle_response_status(response)
            try:
                return await response.json(content_type=None)
            except ValueError:
                return {'raw_response': await response.text()}

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make an HTTP request with retry logic and uniform errors."""
        url = self._build_url(endpoint)
        start_time = time.time()
        self.stats['total_requests'] += 1
        self.stats['last_request_time'] = datetime.now(timezone.utc).isoformat()

        try:
            data = await self._send(method, url, json_body, params)
        except Exception as e:
            self.stats['failed_requests'] += 1
            logger.error(
                f"{self.api_name} API request failed: {method} {url} - {e}",
                api_name=self.api_name,
                error_type=type(e).__name__,
            )
            raise self._transform_exception(e, method, url) from e

        response_time = time.time() - start_time
        self.stats['successful_requests'] += 1
        if self.stats['average_response_time'] == 0:
            self.stats['average_response_time'] = response_time
        else:
            self.stats['average_response_time'] = (
                self.stats['average_response_time'] * 0.7 + response_time * 0.3
            )

        logger.info(f"{self.api_name} API request successful: {method} {url} - {response_time:.2f}s")
        return data

    async def _handle_response_status(self, response: aiohttp.ClientResponse):
        """Raise ExternalAPIError for any non-2xx response."""
        if 200 <= response.status < 300:
            return

        response_text = await response.text()
        if response.status in (401, 403):
            message = f"Authentication failed for {self.api_name}"
        elif 400 <= response.status < 500:
            message = f"Client error for {self.api_name} ({response.status})"
        else:
            message = f"Server error for {self.api_name} ({response.status})"

        raise ExternalAPIError(
            message,
            service=self.api_name,
            status_code=response.status,
            service_response=response_text[:500],
        )

    def _transform_exception(self, exception: Exception, method: str, url: str) -> Exception:
        if isinstance(exception, ExternalAPIError):
            return exception
        if isinstance(exception, asyncio.TimeoutError):
            return ExternalAPIError(f"Timeout for {self.api_name}: {method} {url}", service=self.api_name)
        if isinstance(exception, aiohttp.ClientError):
            return ExternalAPIError(f"Client error for {self.api_name}: {exception}", service=self.api_name)
        return exception

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._make_request('GET', endpoint, params=params)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._make_request('POST', endpoint, json_body=data)

    def get_stats(self) -> Dict[str, Any]:
        """Get client performance statistics."""
        return {
            **self.stats,
            'api_name': self.api_name,
            'error_rate': (
                self.stats['failed_requests'] / max(self.stats['total_requests'], 1)
            ) * 100,
        }

    async def close(self):
        """Close the client session."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info(f"API client closed for {self.api_name}", extra=self.get_stats())
