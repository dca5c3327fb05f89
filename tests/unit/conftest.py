"""
Shared fakes for unit tests: an action surface that records every primitive
call, and a session that never touches a browser.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from autopanel import PanelFactory, clear_plan_cache
from autopanel.errors import ElementNotFoundError
from autopanel.locator import ResolvedLocator


class RecordingActions:
    """Primitive actions that record calls and serve canned texts."""

    def __init__(
        self,
        texts: Optional[Dict[str, str]] = None,
        attributes: Optional[Dict[Tuple[str, str], str]] = None,
    ):
        self.texts = texts or {}
        self.attributes = attributes or {}
        self.calls: List[tuple] = []

    def click(self, locator: ResolvedLocator) -> None:
        self.calls.append(("click", locator.value))

    def set_text(self, locator: ResolvedLocator, value: str) -> None:
        self.calls.append(("set_text", locator.value, value))

    def read_text(self, locator: ResolvedLocator) -> str:
        self.calls.append(("read_text", locator.value))
        if locator.value not in self.texts:
            raise ElementNotFoundError(f"Element not found: {locator}")
        return self.texts[locator.value]

    def read_attribute(self, locator: ResolvedLocator, name: str) -> str:
        self.calls.append(("read_attribute", locator.value, name))
        return self.attributes.get((locator.value, name), "")


class FakeSession:
    def __init__(self, url: str = "http://localhost:8080/"):
        self.url = url

    def current_url(self) -> str:
        return self.url

    def page_source(self) -> str:
        return "<html><body></body></html>"


@pytest.fixture(autouse=True)
def _fresh_plan_cache():
    clear_plan_cache()
    yield
    clear_plan_cache()


@pytest.fixture
def actions() -> RecordingActions:
    return RecordingActions()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def factory(session, actions) -> PanelFactory:
    return PanelFactory(session, actions)
