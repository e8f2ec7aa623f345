"""Link status use cases: check link sets and remember them by number."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, Protocol

from linkstatus.models import LinkGetStatusResult, LinkState, sort_strings


class LinkRepositoryProtocol(Protocol):
    def get_link_num(self, links: list[str]) -> tuple[int, bool]: ...

    def get_links_by_link_num(self, link_num: int) -> list[str]: ...

    def store_links(self, links: list[str], link_num: int) -> None: ...


class LinkCheckerProtocol(Protocol):
    def is_link_available(self, link: str) -> Awaitable[bool]: ...


class LinkService:
    """Checks links and keeps track of the link sets that were asked about."""

    def __init__(self, repo: LinkRepositoryProtocol, checker: LinkCheckerProtocol) -> None:
        self.repo = repo
        self.checker = checker

    async def get_status(self, links: list[str]) -> LinkGetStatusResult:
        """Number the link set (storing it when new) and check every link.

        The repository sorts the given list in place, so the states come in sorted order.
        """
        try:
            link_num, is_new = self.repo.get_link_num(links)
        except Exception as exc:
            raise RuntimeError(f"error during getting LinkNum: {exc}") from exc
        if is_new:
            try:
                self.repo.store_links(links, link_num)
            except Exception as exc:
                raise RuntimeError(f"error during storing set of links: {exc}") from exc
        link_states = await self.get_link_states(links)
        return LinkGetStatusResult(link_states=link_states, link_num=link_num)

    async def get_link_states(self, links: Iterable[str]) -> list[LinkState]:
        """Check all links concurrently; a failed check counts as not available."""

        async def check(link: str) -> LinkState:
            try:
                available = bool(await self.checker.is_link_available(link))
            except Exception:
                available = False
            return LinkState(link=link, is_available=available)

        return list(await asyncio.gather(*(check(link) for link in links)))

    def get_unique_links(self, link_nums: Iterable[int]) -> list[str]:
        """Union of the links of all given link sets, in first-seen order."""
        unique: dict[str, None] = {}
        for link_num in link_nums:
            try:
                links = self.repo.get_links_by_link_num(link_num)
            except Exception as exc:
                raise RuntimeError(f"cannot get links by linkNum[{link_num}]: {exc}") from exc
            unique.update(dict.fromkeys(links))
        return list(unique)

    async def get_statuses_of_link_sets(self, link_nums: Iterable[int]) -> list[LinkState]:
        """Check the sorted union of the links of the given link sets."""
        try:
            unique_links = self.get_unique_links(link_nums)
        except Exception as exc:
            raise RuntimeError(f"cannot get uniqueLinks: {exc}") from exc
        return await self.get_link_states(sort_strings(unique_links))