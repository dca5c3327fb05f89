"""
================================================================================
Panel Base
================================================================================

Base class of every generated page and panel implementation.

DO NOT subclass this to write page objects by hand. Declare a contract
(see ``autopanel.contract``) and let ``PanelFactory`` build the
implementation. A custom subclass may be handed to the factory to add base
services shared by all generated objects.

Generated methods call ``run_plan``, which:
    1. slices the call arguments into value arguments and locator arguments
    2. resolves each locator against the instance's scope stack
    3. runs the primitive calls in order
    4. applies the return epilogue (self, nested panel, or new page)

Anything that goes wrong raises; an interaction failure is a test failure.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Optional, Sequence

from loguru import logger as default_logger

from .actions import PrimitiveActions, mask_value
from .browser_manager import DriverSession
from .contract import PAGE_LIKE, ReturnKind, capability_of
from .generators import CLICK, READ_ATTRIBUTE, READ_TEXT, SET_TEXT, CallPlan, PrimitiveCall
from .locator import ResolvedLocator
from .scope_stack import ScopeStack

if TYPE_CHECKING:
    from .factory import PanelFactory


class PanelBase:
    """
    Runtime services for generated contract implementations.

    Attributes:
        session: Active driver session
        actions: Primitive action surface
        factory: Factory used for PANEL / PAGE epilogues
        logger: Logger bound to this object's display name
        name: Display name of the contract
        scope_stack: Ancestor locators this instance resolves against
    """

    # Set on each generated subclass by the factory
    __contract__: type = None

    def __init__(
        self,
        session: DriverSession,
        actions: PrimitiveActions,
        factory: "PanelFactory",
        logger=None,
        name: Optional[str] = None,
        scope_stack: Optional[ScopeStack] = None,
    ):
        self.session = session
        self.actions = actions
        self.factory = factory
        self.name = name or self.__contract__.__name__
        self.logger = (logger or default_logger).bind(panel=self.name)
        self.scope_stack = scope_stack if scope_stack is not None else ScopeStack()

        self.logger.info(f"[{self.name}] created")
        if capability_of(self.__contract__) == PAGE_LIKE:
            self.logger.info(f"url is {self.current_url()}")

    # =========================================================================
    # Plan execution
    # =========================================================================

    def run_plan(self, plan: CallPlan, args: Sequence[Any]) -> Any:
        """Execute a compiled plan with the positional call arguments."""
        format_args = tuple(args[plan.slice_at:])
        result = None

        for call in plan.calls:
            locator = self.scope_stack.resolve(call.locator, format_args)

            if call.action == CLICK:
                self.click(locator)
            elif call.action == SET_TEXT:
                value = self._value_for(call, args)
                if value is None:
                    continue
                self.fill(locator, str(value))
            elif call.action == READ_TEXT:
                result = self.get_text(locator)
            elif call.action == READ_ATTRIBUTE:
                result = self.get_attribute(locator, call.attribute)
            else:
                raise ValueError(f"unknown primitive action: {call.action}")

        if plan.returns_result:
            return result
        return self._epilogue(plan)

    def _value_for(self, call: PrimitiveCall, args: Sequence[Any]) -> Any:
        value = args[call.argument]
        if call.field is None:
            return value
        if not dataclasses.is_dataclass(value) or isinstance(value, type):
            raise TypeError(
                f"[{self.name}] expected a model instance, got {type(value).__name__}"
            )
        return getattr(value, call.field)

    def _epilogue(self, plan: CallPlan) -> Any:
        kind = plan.epilogue
        if kind in (ReturnKind.VOID, ReturnKind.SELF):
            return self
        if kind is ReturnKind.PANEL:
            return self.make_panel(plan.target)
        if kind is ReturnKind.PAGE:
            return self.navigate_to(plan.target)
        raise ValueError(f"unknown return kind: {kind}")

    def make_panel(self, panel_contract: type) -> Any:
        """Nested panel, resolving relative to this instance's scope."""
        return self.factory.create(panel_contract, self.scope_stack)

    def navigate_to(self, page_contract: type) -> Any:
        """New top-level page; the browser is expected to be there already."""
        return self.factory.create(page_contract)

    # =========================================================================
    # Primitives
    # =========================================================================

    def _log(self, action: str, locator: ResolvedLocator) -> None:
        self.logger.info(f"[{self.name}] {action} - {locator}")

    def click(self, locator: ResolvedLocator) -> None:
        self._log("click", locator)
        self.actions.click(locator)

    def fill(self, locator: ResolvedLocator, value: str) -> None:
        self._log(f"set {mask_value(locator, value)}", locator)
        self.actions.set_text(locator, value)

    def get_text(self, locator: ResolvedLocator) -> str:
        self._log("read", locator)
        return self.actions.read_text(locator)

    def get_attribute(self, locator: ResolvedLocator, name: str) -> str:
        self._log(f"read attribute {name}", locator)
        return self.actions.read_attribute(locator, name)

    # =========================================================================
    # Session access
    # =========================================================================

    def current_url(self) -> str:
        return self.session.current_url()

    def page_source(self) -> str:
        return self.session.page_source()

    def __repr__(self) -> str:
        return f"<{self.name} scope={self.scope_stack!r}>"


__all__ = [
    "PanelBase",
]
