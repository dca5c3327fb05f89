# ================================================================================
# Element Finders
# ================================================================================
#
# Strategies for turning a resolved locator into a live Playwright element.
# The finder owns the wait / retry policy; generated page objects never wait
# on their own.
#
# Key Features:
#   - Impatient finder: a single bounded wait for visibility
#   - Patient finder: retries with exponential backoff
#   - Failed attempts are logged; the last ElementNotFoundError is raised
#
# ================================================================================

import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Iterator, Optional

from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from .errors import ElementNotFoundError
from .locator import ResolvedLocator


DEFAULT_TIMEOUT = 5000  # milliseconds


@dataclass(frozen=True)
class RetryConfig:
    """
    Attempt budget of the patient finder.

    Attributes:
        max_attempts: Lookups before giving up
        delay_seconds: Pause after the first failed lookup
        backoff_multiplier: Growth factor of the pause
        max_delay_seconds: Upper bound of the pause
    """
    max_attempts: int = 3
    delay_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    max_delay_seconds: float = 5.0

    def delays(self) -> Iterator[float]:
        """Pauses between consecutive attempts (``max_attempts - 1`` of them)."""
        delay = self.delay_seconds
        for _ in range(self.max_attempts - 1):
            yield delay
            delay = min(delay * self.backoff_multiplier, self.max_delay_seconds)


def with_retry(config: Optional[RetryConfig] = None, retry_on=(ElementNotFoundError,)):
    """
    Retry the decorated lookup while it raises one of ``retry_on``.

    The last failure is re-raised once the attempts are used up.
    """
    config = config or RetryConfig()

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            pauses = config.delays()
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    pause = next(pauses, None)
                    if pause is None:
                        logger.error(f"{func.__name__} failed {attempt} time(s), giving up: {e}")
                        raise
                    logger.warning(
                        f"{func.__name__} attempt {attempt}/{config.max_attempts} failed: {e}. "
                        f"Retrying in {pause}s"
                    )
                    time.sleep(pause)
                    attempt += 1

        return wrapper
    return decorator


class ElementFinder:
    """
    Base element finder.

    Subclasses implement ``find``; it either returns a visible element or
    raises ElementNotFoundError.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def find(self, page: Page, locator: ResolvedLocator) -> Locator:
        raise NotImplementedError

    def _wait_visible(self, page: Page, locator: ResolvedLocator, timeout: int) -> Locator:
        selector = locator.to_selector()
        element = page.locator(selector).first
        try:
            element.wait_for(state="visible", timeout=timeout)
        except PlaywrightError as e:
            raise ElementNotFoundError(
                f"Element not found: {locator} ({selector}) -> {str(e).splitlines()[0][:80]}"
            ) from e
        logger.debug(f"Element found: {selector}")
        return element


class ImpatientElementFinder(ElementFinder):
    """Waits once, up to ``timeout`` milliseconds, for the element to show."""

    def find(self, page: Page, locator: ResolvedLocator) -> Locator:
        return self._wait_visible(page, locator, self.timeout)


class PatientElementFinder(ElementFinder):
    """
    Retries the lookup with exponential backoff.

    Useful for pages that render controls late (client-side routing, lazy
    panels). The total wait is roughly ``timeout * max_attempts`` plus the
    backoff delays.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        retry_config: Optional[RetryConfig] = None,
    ):
        super().__init__(timeout)
        self.retry_config = retry_config or RetryConfig()
        self._find = with_retry(self.retry_config)(self._wait_visible)

    def find(self, page: Page, locator: ResolvedLocator) -> Locator:
        return self._find(page, locator, self.timeout)


def finder_from_config(config) -> ElementFinder:
    """
    Build the finder named by ``finder.strategy`` in the configuration.

    Args:
        config: Object with a ``get(key, default)`` method (ConfigLoader)
    """
    strategy = config.get("finder.strategy", "impatient")
    timeout = config.get("finder.timeout", DEFAULT_TIMEOUT)

    if strategy == "patient":
        retry = RetryConfig(max_attempts=config.get("finder.max_attempts", 3))
        return PatientElementFinder(timeout=timeout, retry_config=retry)
    if strategy != "impatient":
        logger.warning(f"Unknown finder strategy '{strategy}', using impatient")
    return ImpatientElementFinder(timeout=timeout)


__all__ = [
    "RetryConfig",
    "with_retry",
    "ElementFinder",
    "ImpatientElementFinder",
    "PatientElementFinder",
    "finder_from_config",
]
