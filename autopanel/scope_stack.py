"""
================================================================================
Scope Stack
================================================================================

Ordered chain of the panel locators an instance is nested within, outermost
first. Resolving a fragment locator walks the chain innermost-first and
prefixes each ancestor's template onto it:

    >>> stack = ScopeStack().push(make_descriptor("form-")).push(make_descriptor("panel-"))
    >>> stack.resolve(make_descriptor("field")).value
    'form-panel-field'

Stacks are immutable values. ``push`` returns a new stack, so a panel never
observes a change made on behalf of one of its children.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Iterator, Sequence, Tuple

from .errors import ScopeResolutionError
from .locator import LocatorDescriptor, LocatorKind, ResolvedLocator


class ScopeStack:
    """Immutable stack of ancestor panel descriptors."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Sequence[LocatorDescriptor] = ()):
        self._entries: Tuple[LocatorDescriptor, ...] = tuple(entries)

    def push(self, descriptor: LocatorDescriptor) -> "ScopeStack":
        """Return a new stack with ``descriptor`` as the innermost ancestor."""
        return ScopeStack(self._entries + (descriptor,))

    def resolve(
        self,
        descriptor: LocatorDescriptor,
        args: Sequence[Any] = (),
    ) -> ResolvedLocator:
        """
        Format ``descriptor`` with ``args`` and compose it with the ancestors.

        Absolute descriptors ignore the stack. Fragments are prefixed with each
        ancestor's template, innermost first, until an absolute ancestor,
        an ancestor of the other fragment kind, or the bottom of the stack is
        reached. Ancestor templates are used as declared, never formatted.

        Raises:
            ScopeResolutionError: When the descriptor's kind has no
                composition rule
        """
        value = descriptor.format(args)

        if not descriptor.needs_scope_resolution:
            return ResolvedLocator(descriptor.kind, value)

        if descriptor.kind not in _COMPOSITION_RULES:
            raise ScopeResolutionError(
                f"no composition rule for scoped locator kind '{descriptor.kind.value}'"
            )

        compose = _COMPOSITION_RULES[descriptor.kind]
        for ancestor in reversed(self._entries):
            if not ancestor.needs_scope_resolution:
                break
            if not ancestor.template:
                # panel without a scope of its own
                continue
            if ancestor.kind is not descriptor.kind:
                break
            value = compose(ancestor.template, value)

        return ResolvedLocator(descriptor.kind, value)

    @property
    def entries(self) -> Tuple[LocatorDescriptor, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LocatorDescriptor]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScopeStack):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"ScopeStack({', '.join(str(e) for e in self._entries)})"


def _concatenate(prefix: str, value: str) -> str:
    return prefix + value


# Fragment style: ancestors are string prefixes for both ids and css fragments.
_COMPOSITION_RULES = {
    LocatorKind.ID: _concatenate,
    LocatorKind.CSS: _concatenate,
}


__all__ = [
    "ScopeStack",
]
