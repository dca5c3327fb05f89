"""
================================================================================
Panel Factory
================================================================================

Turns a contract class into a live implementation object.

    factory = PanelFactory(session, actions)
    index = factory.create(Index)
    index.read_heading()

Compilation happens once per contract per process: every operation is
matched against the generator registry and compiled into a CallPlan, and a
dispatch subclass of (PanelBase, contract) is built whose methods simply run
those plans. The subclass is an instance of the contract, so generated
objects are drop-in implementations with the declared signatures.

All synthesis errors surface from ``create`` (or ``compile_contract``),
before any instance exists and before any browser interaction.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import functools
import inspect
import threading
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type, TypeVar

from loguru import logger

from .actions import PrimitiveActions
from .browser_manager import DriverSession
from .contract import PAGE_LIKE, capability_of, declared_operations, scope_of
from .errors import ContractShapeError
from .generators import CallPlan, GeneratorRegistry
from .locator import LocatorDescriptor, LocatorKind
from .panel_base import PanelBase
from .scope_stack import ScopeStack


T = TypeVar("T")

# Scope entry of a panel that declares no scope of its own
EMPTY_SCOPE = LocatorDescriptor(LocatorKind.ID, "")


@dataclass(frozen=True)
class CompiledContract:
    """
    Cached compilation result for one contract.

    Attributes:
        contract: The contract class
        plans: Operation name -> CallPlan
        functions: Operation name -> declared function (for signatures)
    """
    contract: type
    plans: Mapping[str, CallPlan]
    functions: Mapping[str, Callable[..., Any]]


# Process-wide caches, populated once per key and read many times. The lock
# is held only while compiling or building a class.
_PLAN_CACHE: Dict[type, CompiledContract] = {}
_IMPLEMENTATION_CACHE: Dict[Tuple[type, type], type] = {}
_CACHE_LOCK = threading.RLock()

_REGISTRY = GeneratorRegistry()


def compile_contract(contract: type) -> CompiledContract:
    """
    Compile ``contract`` into call plans, at most once per process.

    Raises:
        ContractShapeError: When the class is not a contract or declares
            no operations
        UnsupportedOperationShapeError: When an operation matches no rule
        LocatorArityError: When a locator does not fit its operation
        AmbiguousOperationError: When several rules claim one operation
    """
    compiled = _PLAN_CACHE.get(contract)
    if compiled is not None:
        return compiled

    with _CACHE_LOCK:
        compiled = _PLAN_CACHE.get(contract)
        if compiled is None:
            compiled = _compile(contract)
            _PLAN_CACHE[contract] = compiled
    return compiled


def _compile(contract: type) -> CompiledContract:
    operations = declared_operations(contract)
    if not operations:
        raise ContractShapeError(
            f"{contract.__name__} declares no operations",
            contract=contract.__name__,
        )

    plans = {op.name: _REGISTRY.compile(op) for op in operations}
    functions = {name: _declared_function(contract, name) for name in plans}

    logger.debug(f"Compiled contract {contract.__name__}: {len(plans)} operation(s)")
    return CompiledContract(
        contract=contract,
        plans=types.MappingProxyType(plans),
        functions=types.MappingProxyType(functions),
    )


def _declared_function(contract: type, name: str) -> Callable[..., Any]:
    for klass in contract.__mro__:
        if name in vars(klass):
            return vars(klass)[name]
    raise AttributeError(name)


def _dispatcher(plan: CallPlan, func: Callable[..., Any]) -> Callable[..., Any]:
    signature = inspect.signature(func)

    @functools.wraps(func)
    def method(self, *args, **kwargs):
        bound = signature.bind(self, *args, **kwargs)
        bound.apply_defaults()
        return self.run_plan(plan, bound.args[1:])

    return method


def implementation_for(contract: type, panel_base: Type[PanelBase] = PanelBase) -> type:
    """Dispatch subclass of (panel_base, contract), built once per pair."""
    key = (contract, panel_base)
    implementation = _IMPLEMENTATION_CACHE.get(key)
    if implementation is not None:
        return implementation

    with _CACHE_LOCK:
        implementation = _IMPLEMENTATION_CACHE.get(key)
        if implementation is None:
            compiled = compile_contract(contract)
            namespace = {
                "__contract__": contract,
                "__module__": contract.__module__,
                "__qualname__": f"{contract.__qualname__}Impl",
            }
            for name, plan in compiled.plans.items():
                namespace[name] = _dispatcher(plan, compiled.functions[name])

            implementation = types.new_class(
                f"{contract.__name__}Impl",
                (panel_base, contract),
                exec_body=lambda ns: ns.update(namespace),
            )
            _IMPLEMENTATION_CACHE[key] = implementation
    return implementation


def clear_plan_cache() -> None:
    """Forget every compiled contract. Intended for tests."""
    with _CACHE_LOCK:
        _PLAN_CACHE.clear()
        _IMPLEMENTATION_CACHE.clear()


class PanelFactory:
    """
    Creates wired implementations of Page and Panel contracts.

    Args:
        session: Active driver session
        actions: Primitive action surface bound to that session
        logger: Logger handed to every created object (loguru by default)
        panel_base: PanelBase subclass used as implementation base
    """

    def __init__(
        self,
        session: DriverSession,
        actions: PrimitiveActions,
        logger=None,
        panel_base: Type[PanelBase] = PanelBase,
    ):
        if not (isinstance(panel_base, type) and issubclass(panel_base, PanelBase)):
            raise TypeError(f"panel_base must be a PanelBase subclass, got {panel_base!r}")
        self.session = session
        self.actions = actions
        self.logger = logger
        self.panel_base = panel_base

    def create(self, contract: Type[T], scope_stack: Optional[ScopeStack] = None) -> T:
        """
        Create a live implementation of ``contract``.

        Pages always start from an empty scope stack. Panels get
        ``scope_stack`` (empty when omitted) with their own scope pushed on
        top, so their operations resolve relative to themselves.
        """
        implementation = implementation_for(contract, self.panel_base)

        if capability_of(contract) == PAGE_LIKE:
            stack = ScopeStack()
        else:
            stack = scope_stack if scope_stack is not None else ScopeStack()
            stack = stack.push(scope_of(contract) or EMPTY_SCOPE)

        return implementation(
            self.session,
            self.actions,
            self,
            logger=self.logger,
            name=contract.__name__,
            scope_stack=stack,
        )


__all__ = [
    "CompiledContract",
    "PanelFactory",
    "compile_contract",
    "implementation_for",
    "clear_plan_cache",
    "EMPTY_SCOPE",
]
