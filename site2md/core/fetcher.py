"""
HTTP fetch capability backed by a shared aiohttp session.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from site2md.core.base import FetcherInterface, FetchError, FetchSettings


PAGE_ACCEPT = 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8'
SITEMAP_ACCEPT = 'application/xml,text/xml,application/xhtml+xml,text/html;q=0.9'


class HttpFetcher(FetcherInterface):
    """
    Performs GET requests with the configured timeout and user agent.
    Every failure (timeout, transport error, non-200 status) surfaces
    as a FetchError so callers can decide whether to retry.
    """

    def __init__(self, config: FetchSettings):
        super().__init__(config)
        self.logger = logging.getLogger(__name__)
        self.timeout = config.timeout
        self.user_agent = config.user_agent
        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Create the HTTP session"""
        if self._initialized:
            return

        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={'User-Agent': self.user_agent}
        )
        self._initialized = True
        self.logger.debug(f"HTTP fetcher initialized (timeout={self.timeout}s)")

    async def cleanup(self) -> None:
        """Close the HTTP session"""
        if self.session:
            await self.session.close()
            self.session = None
        self._initialized = False

    async def fetch(self, url: str, accept: Optional[str] = None) -> str:
        """
        Fetch a URL and return its decoded body.

        Args:
            url: Absolute URL to request
            accept: Accept header value, defaults to an HTML-first preference

        Returns:
            Response body as text

        Raises:
            FetchError: On timeout, transport error or a non-200 status
        """
        if not self.session:
            await self.initialize()

        headers = {
            'Accept': accept or PAGE_ACCEPT,
            'Accept-Language': 'en-US,en;q=0.5',
        }

        try:
            async with self.session.get(url, headers=headers, allow_redirects=True) as response:
                if response.status != 200:
                    raise FetchError(
                        f"HTTP {response.status}: {response.reason}", url=url, status=response.status
                    )
                return await response.text(errors='replace')
        except asyncio.TimeoutError:
            raise FetchError(f"Request timed out after {self.timeout}s", url=url)
        except aiohttp.ClientError as e:
            raise FetchError(f"Client error: {e}", url=url)
