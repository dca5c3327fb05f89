import pytest

from autopanel.actions import PlaywrightActions, mask_value
from autopanel.locator import LocatorKind, ResolvedLocator


class FakeElement:

    def __init__(self, tag, text="", value="", attributes=None):
        self.tag = tag
        self.text = text
        self.value = value
        self.attributes = attributes or {}
        self.events = []

    def evaluate(self, expression):
        return self.tag.upper()

    def click(self):
        self.events.append("click")

    def fill(self, value):
        self.events.append(("fill", value))
        self.value = value

    def input_value(self):
        return self.value

    def inner_text(self):
        return self.text

    def get_attribute(self, name):
        return self.attributes.get(name)


class FakeFinder:

    def __init__(self, elements):
        self.elements = elements

    def find(self, page, locator):
        return self.elements[locator.value]


class FakeSession:
    page = object()


def locator(value):
    return ResolvedLocator(LocatorKind.ID, value)


@pytest.fixture
def elements():
    return {
        "heading": FakeElement("h1", text="Example Domain"),
        "username": FakeElement("input", value="demo"),
        "more": FakeElement("a", text="More", attributes={"href": "https://www.iana.org/"}),
    }


@pytest.fixture
def actions(elements):
    return PlaywrightActions(FakeSession(), FakeFinder(elements))


def test_read_text_of_plain_element(actions):
    assert actions.read_text(locator("heading")) == "Example Domain"


def test_read_text_of_input_is_its_value(actions):
    assert actions.read_text(locator("username")) == "demo"


def test_set_text_fills(actions, elements):
    actions.set_text(locator("username"), "admin")
    assert elements["username"].events == [("fill", "admin")]


def test_click(actions, elements):
    actions.click(locator("more"))
    assert elements["more"].events == ["click"]


def test_read_attribute(actions):
    assert actions.read_attribute(locator("more"), "href") == "https://www.iana.org/"
    assert actions.read_attribute(locator("more"), "title") == ""


def test_mask_value():
    assert mask_value(locator("panel-password"), "secret") == "******"
    assert mask_value(locator("panel-username"), "demo") == "demo"
