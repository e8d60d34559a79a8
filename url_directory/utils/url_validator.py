from typing import Awaitable, Callable, Optional
import asyncio
import logging

import aiohttp
from bs4 import BeautifulSoup

from ..models.weblink import CheckResult, ValidationOutcome

logger = logging.getLogger(__name__)

CheckFunc = Callable[[str], Awaitable[CheckResult]]


class URLValidator:
    """Network collaborator: one HEAD per check, one GET per title fetch."""

    def __init__(self, timeout: float = 10, user_agent: Optional[str] = None):
        self.timeout = timeout
        self.headers = {'User-Agent': user_agent} if user_agent else {}

    def _session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        return aiohttp.ClientSession(timeout=timeout, headers=self.headers)

    async def check(self, url: str) -> CheckResult:
        """Check if a URL answers with a 2xx status."""
        try:
            async with self._session() as session:
                async with session.head(url, allow_redirects=True) as response:
                    return CheckResult(ok=200 <= response.status < 300, status_code=response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.debug(f"URL check failed for {url}: {e}")
            return CheckResult(ok=False, status_code='error')

    async def fetch_title(self, url: str) -> str:
        """Fetch the page's <title> text, or an empty string on any failure."""
        try:
            async with self._session() as session:
                async with session.get(url, allow_redirects=True) as response:
                    html = await response.text(errors='replace')
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.debug(f"Failed to fetch title for {url}: {e}")
            return ''

        soup = BeautifulSoup(html, 'html.parser')
        if soup.title is None:
            return ''
        return soup.title.get_text().strip()


def classify(result: CheckResult) -> ValidationOutcome:
    if result.ok:
        return ValidationOutcome.REACHABLE
    if result.status_code == 401:
        return ValidationOutcome.REQUIRES_AUTH
    return ValidationOutcome.UNREACHABLE


class ValidatorAdapter:
    """Maps the network check onto the three validation outcomes.

    Exactly one check per URL; failures of the check itself count as
    unreachable and never reach the caller.
    """

    def __init__(self, check: CheckFunc):
        self.check = check

    async def validate(self, url: str) -> ValidationOutcome:
        try:
            result = await self.check(url)
        except Exception as e:
            logger.warning(f"Check for {url} raised {type(e).__name__}: {e}")
            return ValidationOutcome.UNREACHABLE

        outcome = classify(result)
        logger.debug(f"{url} -> {result.status_code} ({outcome.value})")
        return outcome
