"""
Navigation: load URLs into viewports and wait for completion signals without polling.

Two waits exist: the page load event, and a one-shot DOM mutation watch for sources
that refresh content in place (an overlay is inserted, then removed, when new data
arrives). Each viewport is owned by the NavigationController; nothing else repoints it.
"""
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeout

from shared.models.enums import ViewportState
from shared.utils.logging import get_logger

from enricher.errors import NavigationTimeout
from enricher.metrics import record_navigation, record_navigation_reuse

logger = get_logger(__name__)

Trigger = Callable[[], Awaitable[None]]


class Viewport(ABC):
    """A browsing surface that can be pointed at a URL and inspected."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.state = ViewportState.IDLE

    @property
    @abstractmethod
    def location(self) -> str:
        """URL currently shown ('' before the first navigation)."""

    @abstractmethod
    async def navigate(self, url: str) -> None:
        """Navigate and return once the load event has fired."""

    @abstractmethod
    async def content(self) -> str:
        """Current document HTML."""

    @abstractmethod
    async def click(self, selector: str, index: int = 0) -> None:
        """Click the index-th element matching selector."""

    @abstractmethod
    async def arm_removal_watch(self, scope_selector: str) -> None:
        """Start watching scope_selector's children; fires on the first node removal only."""

    @abstractmethod
    async def wait_removal(self) -> None:
        """Suspend until the armed watch fires. The watch disconnects itself when it fires."""

    @abstractmethod
    async def disarm_removal_watch(self) -> None:
        """Tear down an armed watch that has not fired (no-op otherwise)."""


# Installed in the page; resolves window.__feRefresh once, on the first removal under scope
_ARM_REMOVAL_WATCH_JS = """
(scope) => {
  const target = document.querySelector(scope);
  if (!target) {
    throw new Error(`no element matches ${scope}`);
  }
  window.__feRefresh = new Promise((resolve) => {
    const observer = new MutationObserver((mutations) => {
      if (mutations.some((m) => m.removedNodes.length > 0)) {
        observer.disconnect();
        window.__feRefreshObserver = null;
        resolve(true);
      }
    });
    window.__feRefreshObserver = observer;
    observer.observe(target, { childList: true });
  });
}
"""

_WAIT_REMOVAL_JS = "() => window.__feRefresh"

_DISARM_REMOVAL_WATCH_JS = """
() => {
  if (window.__feRefreshObserver) {
    window.__feRefreshObserver.disconnect();
    window.__feRefreshObserver = null;
  }
}
"""


class PlaywrightViewport(Viewport):
    """Viewport backed by a Playwright async Page (one browser tab)."""

    def __init__(self, name: str, page, navigation_timeout_s: Optional[float] = None) -> None:
        super().__init__(name)
        self._page = page
        # Playwright treats 0 as "no timeout"
        self._timeout_ms = int(navigation_timeout_s * 1000) if navigation_timeout_s else 0

    @property
    def location(self) -> str:
        url = self._page.url
        return "" if url == "about:blank" else url

    async def navigate(self, url: str) -> None:
        await self._page.goto(url, wait_until="load", timeout=self._timeout_ms)

    async def content(self) -> str:
        return await self._page.content()

    async def click(self, selector: str, index: int = 0) -> None:
        await self._page.locator(selector).nth(index).click(timeout=self._timeout_ms)

    async def arm_removal_watch(self, scope_selector: str) -> None:
        await self._page.evaluate(_ARM_REMOVAL_WATCH_JS, scope_selector)

    async def wait_removal(self) -> None:
        await self._page.evaluate(_WAIT_REMOVAL_JS)

    async def disarm_removal_watch(self) -> None:
        await self._page.evaluate(_DISARM_REMOVAL_WATCH_JS)


class NavigationController:
    """Sequences load-and-wait operations on viewports; one operation in flight at a time."""

    def __init__(self, timeout_s: Optional[float] = None) -> None:
        self._timeout_s = timeout_s

    async def _bounded(self, awaitable: Awaitable[None], url: str) -> None:
        if self._timeout_s is None:
            await awaitable
            return
        try:
            await asyncio.wait_for(awaitable, timeout=self._timeout_s)
        except (asyncio.TimeoutError, PlaywrightTimeout) as e:
            raise NavigationTimeout(url, self._timeout_s) from e

    async def ensure_loaded(self, viewport: Viewport, url: str) -> bool:
        """
        Make viewport show url. Returns False without navigating when it already does,
        True after a completed navigation.
        """
        if viewport.location == url:
            record_navigation_reuse()
            logger.debug("navigation_reused", viewport=viewport.name, url=url)
            return False

        logger.info("navigation_started", viewport=viewport.name, url=url)
        viewport.state = ViewportState.LOADING
        loaded = False
        try:
            await self._bounded(viewport.navigate(url), url)
            loaded = True
        finally:
            viewport.state = ViewportState.LOADED if loaded else ViewportState.IDLE
        record_navigation()
        return True

    async def await_content_refresh(
        self,
        viewport: Viewport,
        scope_selector: str,
        trigger: Optional[Trigger] = None,
    ) -> None:
        """
        Arm a one-shot removal watch on scope_selector, run trigger, and suspend until
        the first removal observed after arming. Insertions and other mutations are ignored.
        """
        await viewport.arm_removal_watch(scope_selector)
        fired = False
        try:
            if trigger is not None:
                await self._bounded(trigger(), viewport.location)
            await self._bounded(viewport.wait_removal(), viewport.location)
            fired = True
            logger.debug("content_refreshed", viewport=viewport.name, scope=scope_selector)
        finally:
            if not fired:
                await viewport.disarm_removal_watch()

