"""
================================================================================
Page Driver
================================================================================

Runs one test's worth of browser interaction: starts the browser, wires the
factory, navigates to pages, and captures a screenshot when the test ends
in error.

Usage:
    @url("/")
    class Index(Page):
        @by(css="h1")
        def read_heading(self) -> str: ...

    with PageDriver(test_name="test_home").base_url("http://example.com") as driver:
        assert driver.get(Index).read_heading() == "Example Domain"

URLs are built by plain concatenation: the page's ``url`` template is
appended to the base URL, then formatted with the ``get`` arguments.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar
from urllib.parse import quote_plus

import allure
from loguru import logger

from .actions import PlaywrightActions
from .browser_manager import BrowserManager, DriverSession
from .config_loader import ConfigLoader
from .contract import PAGE_LIKE, capability_of, url_of
from .errors import NavigationError
from .factory import PanelFactory
from .finder import ElementFinder, finder_from_config
from .panel_base import PanelBase
from .query_params import QueryParams


SEPARATOR = "*" * 85

T = TypeVar("T")


class PageDriver:
    """
    Browser session scoped to a single test.

    Configuration methods return the driver so they can be chained, and must
    be called before the driver is entered.
    """

    def __init__(self, test_name: str = "test", config: Optional[ConfigLoader] = None):
        config = config or ConfigLoader()

        self.test_name = test_name
        self._base_url: str = config.get("browser.base_url")
        self._browser_type: str = config.get("browser.type")
        self._headless: bool = config.get("browser.headless")
        self._finder: ElementFinder = finder_from_config(config)
        self._panel_base: Type[PanelBase] = PanelBase
        self._screenshot_dir = Path(config.get("screenshots.dir"))
        self._screenshot_on_error: bool = config.get("screenshots.on_error")

        self._manager: Optional[BrowserManager] = None
        self._session: Optional[DriverSession] = None
        self._factory: Optional[PanelFactory] = None

    # =========================================================================
    # Configuration
    # =========================================================================

    def _assert_unstarted(self) -> None:
        if self._manager is not None:
            raise RuntimeError("driver configuration must happen before the test starts")

    def base_url(self, base_url: str) -> "PageDriver":
        self._assert_unstarted()
        self._base_url = base_url
        return self

    def browser_type(self, browser_type: str) -> "PageDriver":
        self._assert_unstarted()
        self._browser_type = browser_type
        return self

    def headless(self, headless: bool) -> "PageDriver":
        self._assert_unstarted()
        self._headless = headless
        return self

    def finder(self, finder: ElementFinder) -> "PageDriver":
        self._assert_unstarted()
        if finder is None:
            raise ValueError("finder must not be None")
        self._finder = finder
        return self

    def panel_base(self, panel_base: Type[PanelBase]) -> "PageDriver":
        self._assert_unstarted()
        if not (isinstance(panel_base, type) and issubclass(panel_base, PanelBase)):
            raise TypeError(f"panel_base must be a PanelBase subclass, got {panel_base!r}")
        self._panel_base = panel_base
        return self

    def screenshot_dir(self, screenshot_dir: Path) -> "PageDriver":
        self._assert_unstarted()
        screenshot_dir = Path(screenshot_dir)
        if not screenshot_dir.is_dir():
            raise ValueError(f"screenshot dir must be an existing directory: {screenshot_dir}")
        self._screenshot_dir = screenshot_dir
        return self

    def screenshot_on_error(self, enabled: bool) -> "PageDriver":
        self._screenshot_on_error = enabled
        return self

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def __enter__(self) -> "PageDriver":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type is not None:
                logger.opt(exception=(exc_type, exc_val, exc_tb)).error("TEST ENDED IN ERROR")
                if self._screenshot_on_error and self._session is not None:
                    try:
                        self.take_screenshot("error-screenshot")
                    except Exception as e:
                        logger.error(f"couldn't save the error screenshot: {e}")
        finally:
            self.stop()

    def start(self) -> None:
        self._manager = BrowserManager(headless=self._headless, browser_type=self._browser_type)
        self._manager.start()
        self._session = self._manager.new_session()
        self._factory = PanelFactory(
            self._session,
            PlaywrightActions(self._session, self._finder),
            panel_base=self._panel_base,
        )

        logger.info(SEPARATOR)
        logger.info(f"beginning {self.test_name}")
        logger.info(f"using {self._browser_type} (headless={self._headless})")

    def stop(self) -> None:
        logger.info(SEPARATOR + "\n")
        if self._manager is not None:
            self._manager.close()
        self._manager = None
        self._session = None
        self._factory = None

    @property
    def takes_error_screenshots(self) -> bool:
        return self._screenshot_on_error

    @property
    def session(self) -> DriverSession:
        if self._session is None:
            raise RuntimeError("no session outside of a test")
        return self._session

    @property
    def factory(self) -> PanelFactory:
        if self._factory is None:
            raise RuntimeError("no factory outside of a test")
        return self._factory

    # =========================================================================
    # Navigation
    # =========================================================================

    def make_url(self, template: str, *query_args: Any) -> str:
        """
        Build a URL from a template and a mix of str, number and QueryParams
        arguments. Strings are URL-encoded and numbers used as is for the %
        placeholders; QueryParams are appended to the query string.
        """
        format_args: List[Any] = []
        params: Optional[QueryParams] = None

        for arg in query_args:
            if isinstance(arg, QueryParams):
                params = arg if params is None else params & arg
            elif isinstance(arg, str):
                format_args.append(quote_plus(arg))
            elif isinstance(arg, (int, float)) and not isinstance(arg, bool):
                format_args.append(arg)
            else:
                logger.error(f"got a querystring argument that makes no sense, {arg!r}")

        result = template % tuple(format_args) if format_args else template

        if params:
            result = result + ("&" if "?" in result else "?") + str(params)

        return result

    def get(self, page_contract: Type[T], *query_args: Any) -> T:
        """
        Navigate to ``page_contract``'s URL and return a live implementation.

        Raises:
            NavigationError: When the contract is not a Page with a url
        """
        if capability_of(page_contract) != PAGE_LIKE or url_of(page_contract) is None:
            raise NavigationError(
                f"{getattr(page_contract, '__name__', page_contract)} needs a url() to be navigated to"
            )

        target = self.make_url(self._base_url.rstrip("/") + url_of(page_contract), *query_args)
        with allure.step(f"Navigate to {target}"):
            self.session.goto(target)

        return self.factory.create(page_contract)

    # =========================================================================
    # Screenshots
    # =========================================================================

    def screenshot_name(self, base: str) -> str:
        """``<base>-<test name>[Y.M.D.h.m.s.ms].png``"""
        now = datetime.now()
        return (
            f"{base}-{self.test_name}"
            f"[{now.year}.{now.month}.{now.day}.{now.hour}.{now.minute}."
            f"{now.second}.{now.microsecond // 1000}].png"
        )

    def take_screenshot(self, base: str = "screenshot") -> Path:
        """
        Save a screenshot of the current browser state and attach it to Allure.

        Returns:
            Path to the saved PNG
        """
        self._screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = self._screenshot_dir / self.screenshot_name(base)

        png = self.session.screenshot(path)
        allure.attach(png, name=base, attachment_type=allure.attachment_type.PNG)

        logger.info(f"saved {path}")
        return path


__all__ = [
    "PageDriver",
]
