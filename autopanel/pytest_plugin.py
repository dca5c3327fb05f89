"""
================================================================================
Pytest Plugin
================================================================================

Fixtures and hooks for tests written against generated page objects.

Key Features:
- ``page_driver``: a started PageDriver per test, closed afterwards
- ``autopanel_config``: the shared ConfigLoader
- Screenshot capture on failure, attached to the Allure report

Enable it from a conftest.py:

    pytest_plugins = ["autopanel.pytest_plugin"]

================================================================================
"""

from typing import Generator

import pytest
from loguru import logger

from .config_loader import ConfigLoader
from .logging_setup import init_logger
from .page_driver import PageDriver


def pytest_configure(config):
    """Configure logging and register the plugin markers."""
    init_logger()
    config.addinivalue_line(
        "markers", "ui: test drives a real browser"
    )


@pytest.fixture(scope="session")
def autopanel_config() -> ConfigLoader:
    """Session-wide configuration (YAML + environment)."""
    return ConfigLoader()


@pytest.fixture(scope="function")
def page_driver(request, autopanel_config: ConfigLoader) -> Generator[PageDriver, None, None]:
    """
    Function-scoped PageDriver.

    Starts a browser for the test and closes it afterwards, even on failure.
    """
    driver = PageDriver(test_name=request.node.name, config=autopanel_config)
    driver.start()
    yield driver
    driver.stop()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Hook to capture screenshots on test failure.

    Takes a screenshot when a test using ``page_driver`` fails and attaches it
    to the Allure report.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        driver = getattr(item, "funcargs", {}).get("page_driver")
        if driver is not None and driver.takes_error_screenshots:
            try:
                driver.take_screenshot("error-screenshot")
            except Exception as e:
                # Log but don't fail if screenshot capture fails
                logger.warning(f"Failed to capture screenshot on failure: {e}")
