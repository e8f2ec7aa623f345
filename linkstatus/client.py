"""HTTP client that reports whether a link answers a HEAD request."""

from __future__ import annotations

import asyncio
import json

import aiohttp

REQUEST_TIMEOUT = 2.0


class LinkCheckError(Exception):
    """A link could not be checked."""


def is_status_available(code: int) -> bool:
    """Success and redirection status codes count as available."""
    return 200 <= code < 400


class HTTPLinkClient:
    """Checks links with a HEAD request and a fixed timeout."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT, allow_redirects: bool = True) -> None:
        self.timeout = timeout
        self.allow_redirects = allow_redirects

    async def is_link_available(self, link: str) -> bool:
        """Return True when the link answers with a 2xx or 3xx status.

        Raises LinkCheckError when the request cannot be built or sent.
        """
        quoted = json.dumps(link)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.head(link, allow_redirects=self.allow_redirects) as response:
                    return is_status_available(response.status)
        except ValueError as exc:
            raise LinkCheckError(
                f"failed to create HEAD request for link {quoted}; err: {exc}"
            ) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            raise LinkCheckError(
                f"network error during HEAD request to link {quoted}; err: {exc}"
            ) from exc