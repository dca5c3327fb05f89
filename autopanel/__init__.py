"""
================================================================================
autopanel
================================================================================

Declarative page objects for Playwright.

Describe what a page or panel offers - click this, read that, set these
fields - and let the framework synthesize the implementation.

Components:
    - contract: Page / Panel markers and the by / scope / url / model decorators
    - locator: locator descriptors and placeholder validation
    - scope: scope stack resolving nested panel locators
    - generators: rules turning declared operations into call plans
    - factory: compiles contracts and creates live implementations
    - page_driver: per-test browser session, navigation and screenshots

Author: Automation Team
License: MIT
================================================================================
"""

from .contract import Page, Panel, ReturnKind, by, model, scope, url
from .errors import (
    AmbiguousOperationError,
    AutopanelError,
    ContractShapeError,
    ElementNotFoundError,
    LocatorArityError,
    NavigationError,
    ScopeResolutionError,
    SynthesisError,
    UnsupportedOperationShapeError,
)
from .factory import PanelFactory, clear_plan_cache, compile_contract
from .locator import LocatorDescriptor, LocatorKind, ResolvedLocator
from .page_driver import PageDriver
from .panel_base import PanelBase
from .query_params import QueryParams, query
from .scope_stack import ScopeStack

__version__ = "0.3.0"

__all__ = [
    "Page",
    "Panel",
    "ReturnKind",
    "by",
    "model",
    "scope",
    "url",
    "AmbiguousOperationError",
    "AutopanelError",
    "ContractShapeError",
    "ElementNotFoundError",
    "LocatorArityError",
    "NavigationError",
    "ScopeResolutionError",
    "SynthesisError",
    "UnsupportedOperationShapeError",
    "PanelFactory",
    "clear_plan_cache",
    "compile_contract",
    "LocatorDescriptor",
    "LocatorKind",
    "ResolvedLocator",
    "PageDriver",
    "PanelBase",
    "QueryParams",
    "query",
    "ScopeStack",
]
