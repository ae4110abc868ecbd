"""Variable resolution strategies.

A variable resolution strategy turns the template arguments of one call into
the flat replacement map handed to the message composer.

StandardVariableResolution runs a worklist over pending variables:

1. Every template argument that is not None is seeded as pending under its
   placeholder name, dispatched under the narrowest of its declared type and
   its runtime type.
2. The first pending variable is offered to the resolvers registered for its
   type, highest priority first, then to the resolvers of each ancestor type
   in the order the supertype strategy yields them.
3. The first resolver that does not decline consumes the variable. Its
   conclusions go to the replacement map, its continuations back into the
   pending set, and the scan restarts from the top of the pending set.
4. A variable that no resolver accepts at any level aborts the call with
   UnresolvedVariableError.
5. A resolver that returns anything other than a mapping of ConclusionValue
   and ContinuationValue entries aborts the call with
   InvalidResolverOutcomeError before any of its output is applied.

A resolver that keeps re-emitting its own input never terminates. Pass
``max_passes`` to turn that into a ResolutionLoopError.

Example:
    >>> strategy = StandardVariableResolution(StandardSupertypeStrategy())
    >>> builder.variable_resolver(strategy)
"""

from __future__ import annotations

import abc
import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, get_origin

from ..exceptions import InvalidResolverOutcomeError, ResolutionLoopError, UnresolvedVariableError
from ..logging import log_trace, log_warn
from ..types import LogContext
from ..variable import ConclusionValue, ContinuationValue
from .supertype import SupertypeStrategy, iter_dispatch_types

if TYPE_CHECKING:
    from ..contract import ContractMethod, HazzardMethod
    from ..hazzard import Hazzard


class VariableResolutionStrategy(abc.ABC):
    """Resolves the template arguments of one call."""

    @abc.abstractmethod
    def resolve_variables(
        self,
        hazzard: Hazzard,
        viewer: Any,
        template: Any,
        method: HazzardMethod,
        arguments: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Produce the replacement map for a call.

        Args:
            hazzard: The frozen configuration.
            viewer: Viewer of the call.
            template: Template fetched for the viewer and message key.
            method: The bound method being invoked.
            arguments: Bound arguments by parameter name.

        Returns:
            Replacement name to concluded value, in insertion order.

        Raises:
            VariableResolutionError: If the variables cannot be resolved.
        """
        ...


class EmptyVariableResolution(VariableResolutionStrategy):
    """Strategy that never produces replacements."""

    def resolve_variables(
        self,
        hazzard: Hazzard,
        viewer: Any,
        template: Any,
        method: HazzardMethod,
        arguments: Mapping[str, Any],
    ) -> dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        return "EmptyVariableResolution()"


def narrow_type(declared: Any, value: Any) -> Any:
    """Return the type ``value`` is dispatched under.

    The runtime type wins when it is narrower than the declared type. A
    generic declaration (``list[int]``) is kept when the value's type is its
    origin, so the type parameters are not lost. Protocols that are not
    runtime checkable cannot be checked and always yield the runtime type.

    Args:
        declared: Declared parameter type; ``Any`` or unannotated means none.
        value: The argument value.

    Returns:
        The declared type or ``type(value)``.
    """
    runtime = type(value)
    if declared is Any or declared is inspect.Parameter.empty:
        return runtime

    if isinstance(declared, type):
        return runtime if _is_instance(value, declared) else declared

    origin = get_origin(declared)
    if isinstance(origin, type):
        if runtime is origin:
            return declared
        return runtime if _is_instance(value, origin) else declared

    return runtime


def _is_instance(value: Any, cls: type) -> bool:
    try:
        return isinstance(value, cls)
    except TypeError:
        # Protocol without @runtime_checkable
        return True


def _check_outcome(method: ContractMethod, name: str, outcome: Any) -> None:
    if not isinstance(outcome, Mapping):
        raise InvalidResolverOutcomeError(method, name, outcome, f"a {type(outcome).__qualname__}, not a mapping")
    for resolved_name, resolved in outcome.items():
        if not isinstance(resolved, (ConclusionValue, ContinuationValue)):
            raise InvalidResolverOutcomeError(
                method,
                name,
                outcome,
                f"a {type(resolved).__qualname__} for {resolved_name}, "
                "not a ConclusionValue or ContinuationValue",
            )


class StandardVariableResolution(VariableResolutionStrategy):
    """Worklist resolution over the configured resolver registry.

    Args:
        supertype_strategy: Ancestor order tried after a value's own type.
        max_passes: Maximum resolver acceptances per call; one more raises
            ResolutionLoopError. None for no limit.
    """

    def __init__(self, supertype_strategy: SupertypeStrategy, max_passes: int | None = None) -> None:
        if max_passes is not None and max_passes < 1:
            raise ValueError(f"max_passes must be positive, got {max_passes}")
        self._supertype_strategy = supertype_strategy
        self._max_passes = max_passes

    @property
    def supertype_strategy(self) -> SupertypeStrategy:
        return self._supertype_strategy

    @property
    def max_passes(self) -> int | None:
        return self._max_passes

    def resolve_variables(
        self,
        hazzard: Hazzard,
        viewer: Any,
        template: Any,
        method: HazzardMethod,
        arguments: Mapping[str, Any],
    ) -> dict[str, Any]:
        contract_method = method.method
        final: dict[str, Any] = {}
        pending: dict[str, ContinuationValue] = {}

        for binding in contract_method.template_arguments:
            value = arguments.get(binding.parameter)
            if value is None:
                continue
            pending[binding.placeholder] = ContinuationValue(
                value, narrow_type(binding.declared_type, value)
            )

        passes = 0
        while pending:
            name, continuation = next(iter(pending.items()))
            outcome = self._resolve_one(hazzard, viewer, method, arguments, name, continuation)

            passes += 1
            if self._max_passes is not None and passes > self._max_passes:
                log_warn(
                    "Variable resolution exceeded pass limit",
                    LogContext(
                        contract=contract_method.owner.__qualname__,
                        method=contract_method.name,
                        variable=name,
                        operation="resolve",
                    ),
                )
                raise ResolutionLoopError(contract_method, self._max_passes, list(pending))

            _check_outcome(contract_method, name, outcome)
            del pending[name]
            for resolved_name, resolved in outcome.items():
                if isinstance(resolved, ConclusionValue):
                    pending.pop(resolved_name, None)
                    final[resolved_name] = resolved.value
                else:
                    final.pop(resolved_name, None)
                    pending[resolved_name] = resolved

        return final

    def _resolve_one(
        self,
        hazzard: Hazzard,
        viewer: Any,
        method: HazzardMethod,
        arguments: Mapping[str, Any],
        name: str,
        continuation: ContinuationValue,
    ) -> Mapping[str, Any]:
        contract_method = method.method
        for dispatch_type in iter_dispatch_types(continuation.type, self._supertype_strategy):
            for entry in hazzard.variable_resolvers.entries_for(dispatch_type):
                outcome = entry.value(
                    name,
                    continuation.value,
                    viewer,
                    contract_method.owner,
                    contract_method,
                    arguments,
                )
                if outcome is None:
                    continue
                log_trace(
                    f"Resolver accepted {name} at "
                    f"{getattr(dispatch_type, '__qualname__', dispatch_type)} "
                    f"(priority {entry.priority})",
                    LogContext(method=contract_method.name, variable=name, operation="resolve"),
                )
                return outcome

        log_warn(
            "Unresolved template variable",
            LogContext(
                contract=contract_method.owner.__qualname__,
                method=contract_method.name,
                variable=name,
                operation="resolve",
            ),
        )
        raise UnresolvedVariableError(contract_method, name, continuation.value, continuation.type)

    def __repr__(self) -> str:
        return (
            f"StandardVariableResolution(supertype_strategy={self._supertype_strategy!r}, "
            f"max_passes={self._max_passes!r})"
        )


__all__ = [
    "VariableResolutionStrategy",
    "EmptyVariableResolution",
    "StandardVariableResolution",
    "narrow_type",
]
