"""
================================================================================
Primitive Actions
================================================================================

The small action surface generated page objects are built on:

    click(locator)
    set_text(locator, value)
    read_text(locator) -> str
    read_attribute(locator, name) -> str

``PlaywrightActions`` executes them against one live driver session, locating
each element through the configured ElementFinder. Every action runs inside an
Allure step so reports show the exact sequence of interactions.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Protocol

import allure
from loguru import logger

from .browser_manager import DriverSession
from .finder import ElementFinder, ImpatientElementFinder
from .locator import ResolvedLocator


# Tags whose "text" is their current value
VALUE_TAGS = frozenset({"input", "textarea", "select"})


class PrimitiveActions(Protocol):
    """What generated methods need from the browser."""

    def click(self, locator: ResolvedLocator) -> None: ...

    def set_text(self, locator: ResolvedLocator, value: str) -> None: ...

    def read_text(self, locator: ResolvedLocator) -> str: ...

    def read_attribute(self, locator: ResolvedLocator, name: str) -> str: ...


def mask_value(locator: ResolvedLocator, value: str) -> str:
    """Hide values typed into password fields from logs and reports."""
    if "password" in locator.value.lower():
        return "*" * len(value)
    return value


class PlaywrightActions:
    """
    Primitive actions over a Playwright page.

    Usage:
        actions = PlaywrightActions(session, ImpatientElementFinder())
        actions.set_text(ResolvedLocator(LocatorKind.ID, "username"), "demo")
    """

    def __init__(self, session: DriverSession, finder: ElementFinder = None):
        self.session = session
        self.finder = finder or ImpatientElementFinder()

    def _find(self, locator: ResolvedLocator):
        return self.finder.find(self.session.page, locator)

    def click(self, locator: ResolvedLocator) -> None:
        with allure.step(f"Click: {locator}"):
            self._find(locator).click()

    def set_text(self, locator: ResolvedLocator, value: str) -> None:
        with allure.step(f"Set {locator}: {mask_value(locator, value)}"):
            self._find(locator).fill(value)

    def read_text(self, locator: ResolvedLocator) -> str:
        with allure.step(f"Read: {locator}"):
            element = self._find(locator)
            tag = element.evaluate("el => el.tagName").lower()
            if tag in VALUE_TAGS:
                return element.input_value()
            return element.inner_text()

    def read_attribute(self, locator: ResolvedLocator, name: str) -> str:
        with allure.step(f"Read {name} of {locator}"):
            value = self._find(locator).get_attribute(name)
            if value is None:
                logger.debug(f"{locator} has no attribute '{name}'")
                return ""
            return value


__all__ = [
    "PrimitiveActions",
    "PlaywrightActions",
    "mask_value",
]
