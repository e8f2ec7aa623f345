"""Link checker that tries both http and https for links given without a scheme."""

from __future__ import annotations

import asyncio
import json
import re
from typing import Awaitable, Protocol
from urllib.parse import SplitResult, urlsplit

from linkstatus.client import LinkCheckError

SCHEMES = ("http", "https")

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class LinkChecker(Protocol):
    def is_link_available(self, link: str) -> Awaitable[bool]: ...


def _parse(link: str) -> SplitResult:
    quoted = json.dumps(link)
    if _CONTROL_CHARS.search(link):
        raise ValueError(f"parse {quoted}: net/url: invalid control character in URL")
    if link.startswith(":"):
        raise ValueError(f"parse {quoted}: missing protocol scheme")
    if _BAD_ESCAPE.search(link):
        raise ValueError(f"parse {quoted}: invalid URL escape")
    parts = urlsplit(link)
    if not parts.scheme and not parts.netloc and parts.path and not parts.path.startswith("/"):
        if ":" in parts.path.split("/", 1)[0]:
            raise ValueError(f"parse {quoted}: first path segment in URL cannot contain colon")
    if parts.netloc:
        try:
            parts.port
        except ValueError as exc:
            raise ValueError(f"parse {quoted}: invalid port") from exc
    return parts


def _with_scheme(parts: SplitResult, scheme: str) -> str:
    text = scheme + ":"
    if parts.netloc or parts.path:
        text += "//"
    text += parts.netloc + parts.path
    if parts.query:
        text += "?" + parts.query
    if parts.fragment:
        text += "#" + parts.fragment
    return text


class SchemeFallbackChecker:
    """Checks absolute links directly and scheme-less links over http and https at once."""

    def __init__(self, checker: LinkChecker) -> None:
        self.checker = checker

    async def is_link_available(self, link: str) -> bool:
        """Return True if the link, or either of its http/https forms, is available.

        Raises LinkCheckError when the link cannot be parsed, or when every attempt fails.
        """
        try:
            parts = _parse(link)
        except ValueError as exc:
            raise LinkCheckError(f"link {json.dumps(link)} cannot be parsed: {exc}") from exc

        if parts.scheme:
            return await self.checker.is_link_available(link)

        urls = [_with_scheme(parts, scheme) for scheme in SCHEMES]
        tasks = [asyncio.ensure_future(self.checker.is_link_available(url)) for url in urls]
        good_results = 0
        errors: list[Exception] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                try:
                    is_available = await next_done
                except Exception as exc:
                    errors.append(exc)
                    if len(errors) == len(urls):
                        raise LinkCheckError(
                            "got two errors for http and https calls: "
                            f"\n1){errors[0]} \n2){errors[1]}"
                        ) from exc
                    if good_results:
                        return False
                    continue
                good_results += 1
                if is_available:
                    return True
                if good_results + len(errors) == len(urls):
                    return False
        finally:
            for task in tasks:
                task.cancel()
        return False