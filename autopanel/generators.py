"""
================================================================================
Method Generators
================================================================================

Pattern-matching rules that decide how a declared operation is implemented.

Each rule answers two questions about an ``OperationDeclaration``:

    matches(op) -> bool     does the operation have my shape?
    emit(op)    -> CallPlan which primitive calls implement it?

Rules are stateless. The registry tries them in ``GENERATOR_PRIORITY`` order
and the first match wins; a second matching rule raises
AmbiguousOperationError.

Supported shapes:

    click*  -> click(locator), then the standard return
    read*   -> read_text(locator) / read_attribute(locator, name), returned
    set*    -> set_text(locator_for(field), value) for every field of a model
    set*    -> set_text(locator, first argument), then the standard return

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Pattern, Sequence, Tuple

from loguru import logger

from .contract import OperationDeclaration, ReturnKind, is_model
from .errors import (
    AmbiguousOperationError,
    LocatorArityError,
    UnsupportedOperationShapeError,
)
from .locator import LocatorDescriptor, LocatorKind, validate_format_arguments


# Primitive action names understood by PanelBase
CLICK = "click"
SET_TEXT = "set_text"
READ_TEXT = "read_text"
READ_ATTRIBUTE = "read_attribute"

STANDARD_RETURNS = frozenset(ReturnKind)


def make_name_pattern(verb: str) -> Pattern[str]:
    """
    Compile a pattern for method names starting with ``verb`` followed by an
    uppercase letter, a digit, an underscore or '$'.

    ``click_submit`` and ``clickSubmit`` match "click"; ``clickable`` does not.
    """
    return re.compile("^" + re.escape(verb) + r"[A-Z0-9_$]")


@dataclass(frozen=True)
class PrimitiveCall:
    """
    One primitive action of a plan.

    Attributes:
        action: One of CLICK, SET_TEXT, READ_TEXT, READ_ATTRIBUTE
        locator: Descriptor to format with the sliced args and scope-resolve
        argument: Index of the call argument supplying the value (SET_TEXT)
        field: Model field to read from that argument (SET_TEXT on models)
        attribute: Attribute name (READ_ATTRIBUTE)
    """
    action: str
    locator: LocatorDescriptor
    argument: Optional[int] = None
    field: Optional[str] = None
    attribute: Optional[str] = None


@dataclass(frozen=True)
class CallPlan:
    """
    Compiled implementation of one operation.

    Attributes:
        operation: The declaration this plan implements
        slice_at: Arguments from this index on feed the locator placeholders
        calls: Primitive calls, run in order
        epilogue: Standard return to apply, or None to return the result of
            the last primitive call
    """
    operation: OperationDeclaration
    slice_at: int
    calls: Tuple[PrimitiveCall, ...]
    epilogue: Optional[ReturnKind]

    @property
    def returns_result(self) -> bool:
        return self.epilogue is None

    @property
    def target(self) -> Any:
        """Contract constructed by a PANEL / PAGE epilogue."""
        return self.operation.return_type


class MethodGenerator:
    """
    Base rule. Subclasses set ``verb`` and override ``matches_shape`` and
    ``generate``; ``emit`` assembles the plan and the standard return.
    """

    verb: str = ""
    slice_at: int = 0
    requires_locator: bool = True

    def __init__(self) -> None:
        self.name_pattern = make_name_pattern(self.verb)

    @property
    def name(self) -> str:
        return type(self).__name__

    def matches(self, op: OperationDeclaration) -> bool:
        """Full match test: shape plus locator arguments."""
        if not self.matches_shape(op):
            return False
        try:
            self.check_arguments(op)
        except LocatorArityError:
            return False
        return True

    def matches_shape(self, op: OperationDeclaration) -> bool:
        """Name, locator presence and return shape, ignoring placeholder arity."""
        return (
            self.name_pattern.search(op.name) is not None
            and (op.locator is not None or not self.requires_locator)
        )

    def check_arguments(self, op: OperationDeclaration) -> None:
        """
        Validate the trailing parameters against the locator template.

        Raises:
            LocatorArityError: When they do not line up
        """
        validate_format_arguments(
            op.locator,
            op.parameter_types[self.slice_at:],
            operation=op.qualified_name,
        )

    def emit(self, op: OperationDeclaration) -> CallPlan:
        return CallPlan(
            operation=op,
            slice_at=self.slice_at,
            calls=tuple(self.generate(op)),
            epilogue=self.epilogue(op),
        )

    def generate(self, op: OperationDeclaration) -> Iterable[PrimitiveCall]:
        return ()

    def epilogue(self, op: OperationDeclaration) -> Optional[ReturnKind]:
        return op.return_kind

    @staticmethod
    def is_standard_return(op: OperationDeclaration) -> bool:
        return op.return_kind in STANDARD_RETURNS


class ClickGenerator(MethodGenerator):
    """click<Something>(*format_args) with a locator and a standard return."""

    verb = "click"

    def matches_shape(self, op: OperationDeclaration) -> bool:
        return super().matches_shape(op) and self.is_standard_return(op)

    def generate(self, op: OperationDeclaration) -> Iterable[PrimitiveCall]:
        yield PrimitiveCall(CLICK, op.locator)


class ReadGenerator(MethodGenerator):
    """read<Something>(*format_args) -> str with a locator."""

    verb = "read"

    def matches_shape(self, op: OperationDeclaration) -> bool:
        return super().matches_shape(op) and op.return_type is str

    def generate(self, op: OperationDeclaration) -> Iterable[PrimitiveCall]:
        if op.locator.attribute:
            yield PrimitiveCall(READ_ATTRIBUTE, op.locator, attribute=op.locator.attribute)
        else:
            yield PrimitiveCall(READ_TEXT, op.locator)

    def epilogue(self, op: OperationDeclaration) -> Optional[ReturnKind]:
        # text is terminal
        return None


class SetModelGenerator(MethodGenerator):
    """
    set<Something>(model) fills one input per model field.

    With a locator, each field resolves to ``template + field name`` in the
    locator's kind; without one, to the id ``field name``.
    """

    verb = "set"
    slice_at = 1
    requires_locator = False

    def matches_shape(self, op: OperationDeclaration) -> bool:
        return (
            super().matches_shape(op)
            and self.is_standard_return(op)
            and len(op.parameter_types) == 1
            and is_model(op.parameter_types[0])
        )

    def generate(self, op: OperationDeclaration) -> Iterable[PrimitiveCall]:
        for field in dataclasses.fields(op.parameter_types[0]):
            if op.locator is not None:
                locator = op.locator.extended(field.name)
            else:
                locator = LocatorDescriptor(LocatorKind.ID, field.name.replace("%", "%%"))
            yield PrimitiveCall(SET_TEXT, locator, argument=0, field=field.name)


class SetInputGenerator(MethodGenerator):
    """set<Something>(value: str, *format_args) with a locator."""

    verb = "set"
    slice_at = 1

    def matches_shape(self, op: OperationDeclaration) -> bool:
        return (
            super().matches_shape(op)
            and self.is_standard_return(op)
            and len(op.parameter_types) >= 1
            and op.parameter_types[0] is str
        )

    def generate(self, op: OperationDeclaration) -> Iterable[PrimitiveCall]:
        yield PrimitiveCall(SET_TEXT, op.locator, argument=0)


# Evaluation order of the registry. SetModel precedes SetInput; both claim
# "set" names.
GENERATOR_PRIORITY: Tuple[type, ...] = (
    ClickGenerator,
    ReadGenerator,
    SetModelGenerator,
    SetInputGenerator,
)


class GeneratorRegistry:
    """
    Ordered collection of generator rules.

    Usage:
        >>> registry = GeneratorRegistry()
        >>> plan = registry.compile(op)
    """

    def __init__(self, generators: Optional[Sequence[MethodGenerator]] = None):
        if generators is None:
            generators = [generator_class() for generator_class in GENERATOR_PRIORITY]
        self.generators: Tuple[MethodGenerator, ...] = tuple(generators)

    def select(self, op: OperationDeclaration) -> MethodGenerator:
        """
        Pick the rule implementing ``op``.

        Raises:
            LocatorArityError: When a rule fits the shape but not the locator
                arguments, and no other rule matches
            UnsupportedOperationShapeError: When no rule matches
            AmbiguousOperationError: When more than one rule matches
        """
        matched: List[MethodGenerator] = []
        arity_error: Optional[LocatorArityError] = None

        for generator in self.generators:
            if not generator.matches_shape(op):
                continue
            try:
                generator.check_arguments(op)
            except LocatorArityError as e:
                arity_error = arity_error or e
                continue
            matched.append(generator)

        if len(matched) > 1:
            raise AmbiguousOperationError(
                f"{op.qualified_name} is matched by several generators: "
                f"{', '.join(g.name for g in matched)}",
                contract=op.owner,
                operation=op.name,
            )

        if not matched:
            if arity_error is not None:
                arity_error.contract = op.owner
                arity_error.operation = op.name
                raise arity_error
            raise UnsupportedOperationShapeError(
                f"no generator matches {op.qualified_name}"
                f"{tuple(_type_name(t) for t in op.parameter_types)} -> {_type_name(op.return_type)}",
                contract=op.owner,
                operation=op.name,
            )

        return matched[0]

    def compile(self, op: OperationDeclaration) -> CallPlan:
        generator = self.select(op)
        plan = generator.emit(op)
        logger.debug(
            f"Compiled {op.qualified_name} with {generator.name}: "
            f"{[c.action for c in plan.calls]} -> {plan.epilogue.value if plan.epilogue else 'result'}"
        )
        return plan


def _type_name(tp: Any) -> str:
    if tp is None:
        return "None"
    return getattr(tp, "__name__", repr(tp))


__all__ = [
    "CLICK",
    "SET_TEXT",
    "READ_TEXT",
    "READ_ATTRIBUTE",
    "make_name_pattern",
    "PrimitiveCall",
    "CallPlan",
    "MethodGenerator",
    "ClickGenerator",
    "ReadGenerator",
    "SetModelGenerator",
    "SetInputGenerator",
    "GENERATOR_PRIORITY",
    "GeneratorRegistry",
]
