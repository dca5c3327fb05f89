"""
================================================================================
Browser Manager
================================================================================

Starts a Playwright browser and hands out driver sessions to generated page
objects.

    with BrowserManager(browser_type="firefox") as manager:
        session = manager.new_session()
        session.goto("https://example.com")

Every session lives in its own browser context (separate cookies and
storage) and is closed together with the manager.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    BrowserType,
    Error as PlaywrightError,
    Page,
    Playwright,
    sync_playwright,
)


BROWSER_TYPES = ("chromium", "firefox", "webkit")


class DriverSession:
    """
    One browser tab as seen by generated page objects.

    Page objects keep a reference to their session; they are unusable once
    the session is closed.
    """

    def __init__(self, page: Page, context: Optional[BrowserContext] = None):
        self.page = page
        self.context = context

    def current_url(self) -> str:
        return self.page.url

    def page_source(self) -> str:
        return self.page.content()

    def goto(self, url: str, wait_until: str = "load") -> None:
        logger.debug(f"Navigating to {url}")
        self.page.goto(url, wait_until=wait_until)

    def screenshot(self, path: Path, full_page: bool = True) -> bytes:
        """Save a PNG to ``path`` and return its bytes."""
        return self.page.screenshot(path=str(path), full_page=full_page)

    def close(self) -> None:
        (self.context or self.page).close()


class BrowserManager:
    """
    Owns the Playwright driver, one browser, and the contexts opened on it.

    Args:
        headless: Launch without a visible window
        browser_type: One of ``BROWSER_TYPES``; unknown names fall back to
            chromium
    """

    LAUNCH_OPTIONS: Dict[str, Any] = {
        "args": ["--ignore-certificate-errors"],
    }

    CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(self, headless: bool = True, browser_type: str = "chromium"):
        if browser_type not in BROWSER_TYPES:
            logger.warning(f"Unknown browser type '{browser_type}', using chromium")
            browser_type = "chromium"
        self.headless = headless
        self.browser_type = browser_type

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    def __enter__(self) -> "BrowserManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        self._playwright = sync_playwright().start()
        launcher: BrowserType = getattr(self._playwright, self.browser_type)
        self._browser = launcher.launch(headless=self.headless, **self.LAUNCH_OPTIONS)
        logger.debug(f"Launched {self.browser_type} (headless={self.headless})")

    def close(self) -> None:
        """Close every context, the browser, and the Playwright driver."""
        while self._contexts:
            context = self._contexts.pop()
            try:
                context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")

        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

        logger.debug(f"Closed {self.browser_type}")

    def new_context(self, **options: Any) -> BrowserContext:
        """Open an isolated context; ``options`` override ``CONTEXT_OPTIONS``."""
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")
        context = self._browser.new_context(**{**self.CONTEXT_OPTIONS, **options})
        self._contexts.append(context)
        return context

    def new_session(self, **context_options: Any) -> DriverSession:
        context = self.new_context(**context_options)
        return DriverSession(context.new_page(), context)

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BROWSER_TYPES",
    "BrowserManager",
    "DriverSession",
]
