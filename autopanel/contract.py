"""
================================================================================
Contract Declarations
================================================================================

The vocabulary a test author uses to describe a page or a panel without
writing any implementation code.

    @url("/login")
    class LoginPage(Page):

        @by("username")
        def set_username(self, value: str) -> "LoginPage": ...

        @by(css="button[type='submit']")
        def click_login(self) -> DashboardPage: ...

        @by(css=".error")
        def read_error(self) -> str: ...

Every public function on a contract class is an operation declaration. Its
locator, parameter types and return kind are read once, when the contract is
first compiled by the factory.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, TypeVar

from .errors import ContractShapeError, UnsupportedOperationShapeError
from .locator import LocatorDescriptor, make_descriptor


PANEL_LIKE = "panel"
PAGE_LIKE = "page"

LOCATOR_ATTR = "__locator__"

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


class Panel:
    """
    Marker for a composable UI region.

    Panels are created inside another contract and resolve their fragment
    locators relative to their container through the scope stack.
    """
    __capability__ = PANEL_LIKE


class Page:
    """
    Marker for a top-level, addressable screen.

    Pages always start with an empty scope stack. Decorate with ``url`` to
    allow navigating to them directly.
    """
    __capability__ = PAGE_LIKE


_MARKERS = (Panel, Page, object)


class ReturnKind(Enum):
    """How a generated method finishes after its primitive calls."""
    VOID = "void"
    SELF = "self"
    PANEL = "panel"
    PAGE = "page"


@dataclass(frozen=True)
class OperationDeclaration:
    """
    One method-shaped entry on a contract.

    Attributes:
        owner: Name of the declaring contract
        name: Method name
        parameter_types: Annotated parameter types, ``self`` excluded
        return_type: Annotated return type (None for no return value)
        return_kind: Standard return kind, or None (e.g. for ``str``)
        locator: Locator attached with ``by``, if any
    """
    owner: str
    name: str
    parameter_types: Tuple[Any, ...]
    return_type: Any
    return_kind: Optional[ReturnKind]
    locator: Optional[LocatorDescriptor] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.name}"


# =============================================================================
# Decorators
# =============================================================================

def by(
    value: Optional[str] = None,
    *,
    id: Optional[str] = None,
    css: Optional[str] = None,
    name: Optional[str] = None,
    xpath: Optional[str] = None,
    link_text: Optional[str] = None,
    partial_link_text: Optional[str] = None,
    tag_name: Optional[str] = None,
    class_name: Optional[str] = None,
    attribute: Optional[str] = None,
) -> Callable[[F], F]:
    """
    Attach a locator to an operation.

    A bare positional value is an id fragment; otherwise name exactly one kind.

    Args:
        value: Id fragment (shorthand for ``id=``)
        attribute: For read operations, the attribute to return instead of text

    Usage:
        @by("user-%d")
        def read_user(self, index: int) -> str: ...

        @by(css="a.more", attribute="href")
        def read_more_link(self) -> str: ...
    """
    descriptor = make_descriptor(
        value,
        attribute=attribute,
        id=id,
        css=css,
        name=name,
        xpath=xpath,
        link_text=link_text,
        partial_link_text=partial_link_text,
        tag_name=tag_name,
        class_name=class_name,
    )

    def decorator(func: F) -> F:
        setattr(func, LOCATOR_ATTR, descriptor)
        return func

    return decorator


def scope(
    value: Optional[str] = None,
    *,
    id: Optional[str] = None,
    css: Optional[str] = None,
) -> Callable[[C], C]:
    """
    Declare the locator fragment a panel contributes to its children.

    Usage:
        @scope("panel-")
        class LoginForm(Panel):
            @by("username")          # resolves to "panel-username"
            def set_username(self, value: str) -> None: ...
    """
    descriptor = make_descriptor(value, id=id, css=css)

    def decorator(cls: C) -> C:
        if capability_of(cls) != PANEL_LIKE:
            raise TypeError(f"scope() only applies to Panel contracts, not {cls.__name__}")
        cls.__scope__ = descriptor
        return cls

    return decorator


def url(template: str) -> Callable[[C], C]:
    """
    Declare the address of a page, relative to the configured base URL.

    The template may carry %s / %d placeholders filled by ``PageDriver.get``.
    """
    def decorator(cls: C) -> C:
        if capability_of(cls) != PAGE_LIKE:
            raise TypeError(f"url() only applies to Page contracts, not {cls.__name__}")
        cls.__url__ = template
        return cls

    return decorator


def model(cls: C) -> C:
    """
    Mark a class as a model: a flat mapping of field name to value.

    The class is turned into a dataclass when it is not one already. Setting
    a model through a ``set`` operation fills one input per field.
    """
    if not dataclasses.is_dataclass(cls):
        cls = dataclass(cls)
    cls.__panel_model__ = True
    return cls


# =============================================================================
# Introspection
# =============================================================================

def capability_of(tp: Any) -> Optional[str]:
    """Capability tag of a type, or None when it is not a contract."""
    if not isinstance(tp, type):
        return None
    return getattr(tp, "__capability__", None)


def is_contract(tp: Any) -> bool:
    return capability_of(tp) in (PANEL_LIKE, PAGE_LIKE) and tp not in _MARKERS


def is_model(tp: Any) -> bool:
    return isinstance(tp, type) and getattr(tp, "__panel_model__", False) is True


def scope_of(contract: type) -> Optional[LocatorDescriptor]:
    return getattr(contract, "__scope__", None)


def url_of(contract: type) -> Optional[str]:
    return getattr(contract, "__url__", None)


def classify_return(contract: type, return_type: Any) -> Optional[ReturnKind]:
    """
    Determine the return kind of an operation declared on ``contract``.

    Returns:
        The ReturnKind, or None when the return type is not a standard one
    """
    if return_type is None or return_type is type(None):
        return ReturnKind.VOID
    if return_type is contract:
        return ReturnKind.SELF

    capability = capability_of(return_type)
    if capability == PAGE_LIKE and is_contract(return_type):
        return ReturnKind.PAGE
    if capability == PANEL_LIKE and is_contract(return_type):
        return ReturnKind.PANEL
    return None


def declared_operations(contract: type) -> Tuple[OperationDeclaration, ...]:
    """
    Read every operation declared on ``contract`` and its contract ancestors.

    Declarations closer to ``contract`` in the MRO win over inherited ones.

    Raises:
        ContractShapeError: When ``contract`` is not a Page or Panel contract,
            or an annotation cannot be resolved
        UnsupportedOperationShapeError: For operations with *args, **kwargs
            or keyword-only parameters
    """
    if not is_contract(contract):
        raise ContractShapeError(
            f"{getattr(contract, '__name__', contract)!r} is not a Page or Panel contract",
            contract=getattr(contract, "__name__", None),
        )

    seen = set()
    operations = []
    for klass in contract.__mro__:
        if klass in _MARKERS:
            continue
        for attr_name, member in vars(klass).items():
            if attr_name.startswith("_") or attr_name in seen:
                continue
            if not inspect.isfunction(member):
                continue
            seen.add(attr_name)
            operations.append(_read_declaration(contract, member))

    return tuple(operations)


def _read_declaration(contract: type, func: Callable[..., Any]) -> OperationDeclaration:
    owner = contract.__name__
    try:
        hints = typing.get_type_hints(func, localns={owner: contract})
    except NameError as e:
        raise ContractShapeError(
            f"{owner}.{func.__name__}: cannot resolve annotation ({e})",
            contract=owner,
            operation=func.__name__,
        ) from e

    parameters = list(inspect.signature(func).parameters.values())[1:]
    parameter_types = []
    for param in parameters:
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            raise UnsupportedOperationShapeError(
                f"{owner}.{func.__name__}: parameter '{param.name}' must be positional",
                contract=owner,
                operation=func.__name__,
            )
        parameter_types.append(hints.get(param.name, Any))

    return_type = hints.get("return", None)
    return OperationDeclaration(
        owner=owner,
        name=func.__name__,
        parameter_types=tuple(parameter_types),
        return_type=return_type,
        return_kind=classify_return(contract, return_type),
        locator=getattr(func, LOCATOR_ATTR, None),
    )


__all__ = [
    "Panel",
    "Page",
    "PANEL_LIKE",
    "PAGE_LIKE",
    "ReturnKind",
    "OperationDeclaration",
    "by",
    "scope",
    "url",
    "model",
    "capability_of",
    "is_contract",
    "is_model",
    "scope_of",
    "url_of",
    "classify_return",
    "declared_operations",
]
