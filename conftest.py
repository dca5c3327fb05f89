"""
================================================================================
Root Pytest Configuration
================================================================================

Registers the autopanel plugin, the project markers and the ``--run-ui``
switch. Browser tests under ``tests/ui`` need an installed Playwright browser
(``playwright install chromium``) and only run when ``--run-ui`` is given.

================================================================================
"""

from __future__ import annotations

from pathlib import Path

import pytest


pytest_plugins = ["autopanel.pytest_plugin"]


def pytest_addoption(parser):
    parser.addoption(
        "--run-ui",
        action="store_true",
        default=False,
        help="run tests that drive a real browser",
    )


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""
    config.addinivalue_line(
        "markers", "unit: Fast tests without a browser"
    )
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory and skip browser tests unless requested."""
    skip_ui = pytest.mark.skip(reason="needs --run-ui and an installed browser")

    for item in items:
        path = str(item.fspath)
        if f"{Path('tests', 'unit')}" in path:
            item.add_marker(pytest.mark.unit)
        if f"{Path('tests', 'ui')}" in path:
            item.add_marker(pytest.mark.ui)
            if not config.getoption("--run-ui"):
                item.add_marker(skip_ui)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
