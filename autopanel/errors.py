"""
================================================================================
Error Taxonomy
================================================================================

Every error the framework raises on its own account.

Synthesis errors (unsupported shapes, locator arity, ambiguous rules, empty
contracts) are raised eagerly while a contract is compiled, so a broken
contract fails before any browser interaction happens. Runtime errors raised
by the element finders propagate unchanged through generated methods.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional


class AutopanelError(Exception):
    """Root of all framework errors."""
    pass


class SynthesisError(AutopanelError):
    """Raised while compiling a contract into call plans."""

    def __init__(
        self,
        message: str,
        contract: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.contract = contract
        self.operation = operation


class UnsupportedOperationShapeError(SynthesisError):
    """Raised when no generator rule matches a declared operation."""
    pass


class LocatorArityError(UnsupportedOperationShapeError):
    """
    Raised when the placeholders of a locator template do not line up with
    the trailing parameters of the operation that owns it.
    """
    pass


class AmbiguousOperationError(SynthesisError):
    """Raised when more than one generator rule claims the same operation."""
    pass


class ContractShapeError(SynthesisError):
    """Raised when a class is not a contract or declares no operations."""
    pass


class ScopeResolutionError(AutopanelError):
    """Raised when a scoped locator cannot be composed with its ancestors."""
    pass


class ElementNotFoundError(AutopanelError):
    """Raised when all locator strategies fail to find element."""
    pass


class NavigationError(AutopanelError):
    """Raised when a page cannot be navigated to directly."""
    pass


class ConfigurationError(AutopanelError):
    """Raised when configuration loading or access fails."""
    pass


__all__ = [
    "AutopanelError",
    "SynthesisError",
    "UnsupportedOperationShapeError",
    "LocatorArityError",
    "AmbiguousOperationError",
    "ContractShapeError",
    "ScopeResolutionError",
    "ElementNotFoundError",
    "NavigationError",
    "ConfigurationError",
]
