"""
================================================================================
Locator Descriptors
================================================================================

Declarative locator values and the rules for turning them into concrete,
resolvable selectors.

A descriptor is created once when a contract is declared and is read-only
afterwards:

    LocatorDescriptor(kind=LocatorKind.ID, template="user-%d")

Templates may carry positional placeholders (``%s``, ``%d``) that are filled
from the trailing arguments of the owning operation. Fragment kinds
(``ID`` and ``CSS``) are composed with the enclosing panels through the
scope stack; every other kind is absolute.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from .errors import LocatorArityError


# Placeholders accepted in templates. "%%" is consumed first so a literal
# percent sign is never counted.
_PLACEHOLDER = re.compile(r"%(%|[sd])")

# Parameter types that may feed a placeholder, with a sample value used to
# check the template against them.
_FORMAT_SAMPLES = {
    str: " ",
    int: 0,
}


class LocatorKind(str, Enum):
    """Selector strategies a descriptor can declare."""
    ID = "id"
    CSS = "css"
    NAME = "name"
    XPATH = "xpath"
    LINK_TEXT = "link_text"
    PARTIAL_LINK_TEXT = "partial_link_text"
    TAG_NAME = "tag_name"
    CLASS_NAME = "class_name"

    @property
    def composes(self) -> bool:
        """Whether descriptors of this kind resolve against the scope stack."""
        return self in _FRAGMENT_KINDS


_FRAGMENT_KINDS = frozenset({LocatorKind.ID, LocatorKind.CSS})


@dataclass(frozen=True)
class ResolvedLocator:
    """
    A final locator, ready to hand to the element finder.

    Attributes:
        kind: Selector strategy
        value: Fully formatted and scope-resolved selector value
    """
    kind: LocatorKind
    value: str

    def to_selector(self) -> str:
        """Render as a Playwright selector string."""
        kind, value = self.kind, self.value
        if kind is LocatorKind.ID:
            return f'[id="{_quote(value)}"]'
        if kind is LocatorKind.NAME:
            return f'[name="{_quote(value)}"]'
        if kind is LocatorKind.XPATH:
            return f"xpath={value}"
        if kind is LocatorKind.LINK_TEXT:
            return f'a:text-is("{_quote(value)}")'
        if kind is LocatorKind.PARTIAL_LINK_TEXT:
            return f'a:has-text("{_quote(value)}")'
        if kind is LocatorKind.CLASS_NAME:
            return f".{value}"
        # CSS and TAG_NAME are already valid selectors
        return value

    def __str__(self) -> str:
        return f"By.{self.kind.value}: {self.value}"


@dataclass(frozen=True)
class LocatorDescriptor:
    """
    Declared locator for an operation or a panel.

    Attributes:
        kind: Selector strategy
        template: Raw selector template, possibly with %s / %d placeholders
        attribute: Attribute to read instead of the element text (reads only)
    """
    kind: LocatorKind
    template: str
    attribute: Optional[str] = None

    @property
    def needs_scope_resolution(self) -> bool:
        """Fixed by kind: fragments compose with ancestors, the rest are absolute."""
        return self.kind.composes

    @property
    def placeholder_count(self) -> int:
        return sum(1 for m in _PLACEHOLDER.finditer(self.template) if m.group(1) != "%")

    def format(self, args: Sequence[Any] = ()) -> str:
        """Fill the template placeholders with the sliced operation arguments."""
        if not self.placeholder_count:
            return self.template
        return self.template % tuple(args)

    def extended(self, suffix: str) -> "LocatorDescriptor":
        """Descriptor of the same kind with ``suffix`` appended to the template."""
        return LocatorDescriptor(self.kind, self.template + suffix.replace("%", "%%"))

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.template!r}"


def make_descriptor(
    value: Optional[str] = None,
    attribute: Optional[str] = None,
    **kinds: Optional[str],
) -> LocatorDescriptor:
    """
    Build a descriptor from declarative keyword arguments.

    A bare positional ``value`` is an ``id`` fragment. Otherwise exactly one
    keyword naming a ``LocatorKind`` value must be supplied.

    Examples:
        >>> make_descriptor("panel-")
        LocatorDescriptor(kind=<LocatorKind.ID: 'id'>, template='panel-', attribute=None)
        >>> make_descriptor(css="div > h1").kind
        <LocatorKind.CSS: 'css'>

    Raises:
        ValueError: When zero or several kinds are given
    """
    given = {k: v for k, v in kinds.items() if v is not None}
    if value is not None:
        given.setdefault(LocatorKind.ID.value, value)
        if len(given) > 1 or given[LocatorKind.ID.value] != value:
            raise ValueError("a positional locator value is an id and cannot be combined with other kinds")

    if len(given) != 1:
        raise ValueError(
            f"exactly one locator kind is required, got {sorted(given) or 'none'}"
        )

    (kind_name, template), = given.items()
    try:
        kind = LocatorKind(kind_name)
    except ValueError as e:
        raise ValueError(f"unknown locator kind: {kind_name}") from e

    return LocatorDescriptor(kind=kind, template=template, attribute=attribute)


def validate_format_arguments(
    descriptor: Optional[LocatorDescriptor],
    parameter_types: Sequence[Any],
    operation: str = "",
) -> None:
    """
    Check that the trailing parameters of an operation can feed the template.

    Only ``str`` and ``int`` parameters are accepted, and their number must
    equal the template's placeholder count. An operation without a locator
    accepts no trailing parameters at all.

    Raises:
        LocatorArityError: On any mismatch
    """
    params: Tuple[Any, ...] = tuple(parameter_types)

    if descriptor is None:
        if params:
            raise LocatorArityError(
                f"{operation}: {len(params)} trailing parameter(s) but no locator to format",
                operation=operation,
            )
        return

    expected = descriptor.placeholder_count
    if len(params) != expected:
        raise LocatorArityError(
            f"{operation}: locator {descriptor} expects {expected} argument(s), "
            f"operation supplies {len(params)}",
            operation=operation,
        )

    samples = []
    for param in params:
        if param not in _FORMAT_SAMPLES:
            raise LocatorArityError(
                f"{operation}: unsupported locator argument type {getattr(param, '__name__', param)!r}",
                operation=operation,
            )
        samples.append(_FORMAT_SAMPLES[param])

    try:
        descriptor.format(samples)
    except (TypeError, ValueError) as e:
        raise LocatorArityError(
            f"{operation}: locator {descriptor} rejects arguments "
            f"{[p.__name__ for p in params]}: {e}",
            operation=operation,
        ) from e


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


__all__ = [
    "LocatorKind",
    "LocatorDescriptor",
    "ResolvedLocator",
    "make_descriptor",
    "validate_format_arguments",
]
