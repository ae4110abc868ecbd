"""Resolution values and the template variable resolver protocol.

A template variable resolver receives one pending variable and either
declines (returns ``None``) or returns a mapping of names to:

- ConclusionValue: a final replacement handed to the message composer.
- ContinuationValue: a value that still needs resolving, dispatched under
  the given type. This is how a composite value splits into
  sub-variables without the engine knowing its shape.

Example:
    >>> def mail_resolver(name, value, viewer, owner, method, arguments):
    ...     return {
    ...         "author": ContinuationValue(value.author(), str),
    ...         "title": ContinuationValue(value.title(), str),
    ...     }
    >>>
    >>> def str_resolver(name, value, viewer, owner, method, arguments):
    ...     return {name: ConclusionValue(value)}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Union, get_origin

if TYPE_CHECKING:
    from .contract import ContractMethod


@dataclass(frozen=True)
class ConclusionValue:
    """A fully resolved replacement value."""

    value: Any


@dataclass(frozen=True)
class ContinuationValue:
    """A value awaiting resolution under ``type``.

    Raises:
        ValueError: If ``type`` is a class (or generic alias of one) and
            ``value`` is not an instance of it.
    """

    value: Any
    type: Any

    def __post_init__(self) -> None:
        check = self.type if isinstance(self.type, type) else get_origin(self.type)
        if not isinstance(check, type):
            return
        try:
            assignable = isinstance(self.value, check)
        except TypeError:
            # Protocols that are not runtime checkable cannot be verified.
            return
        if not assignable:
            raise ValueError(
                f"value must be an instance of {getattr(self.type, '__qualname__', self.type)!s}; "
                f"found {type(self.value).__qualname__}"
            )


ResolvedValue = Union[ConclusionValue, ContinuationValue]
ResolutionOutcome = Mapping[str, ResolvedValue]


class TemplateVariableResolver(Protocol):
    """Resolves one pending template variable.

    Any callable with this signature can be registered; it must be safe to
    call concurrently.
    """

    def __call__(
        self,
        name: str,
        value: Any,
        viewer: Any,
        owner: type,
        method: ContractMethod,
        arguments: Mapping[str, Any],
    ) -> ResolutionOutcome | None:
        """Resolve ``value`` published under ``name``.

        Args:
            name: Placeholder name the value is pending under.
            value: The value to resolve.
            viewer: Viewer of the current invocation.
            owner: The contract type.
            method: The contract method being invoked.
            arguments: Bound arguments of the invocation, by parameter name.

        Returns:
            Mapping of names to resolved values, or None to decline.
        """
        ...


def identity_resolver(
    name: str,
    value: Any,
    viewer: Any,
    owner: type,
    method: ContractMethod,
    arguments: Mapping[str, Any],
) -> ResolutionOutcome:
    """Conclude ``value`` unchanged under ``name``."""
    return {name: ConclusionValue(value)}


__all__ = [
    "ConclusionValue",
    "ContinuationValue",
    "ResolvedValue",
    "ResolutionOutcome",
    "TemplateVariableResolver",
    "identity_resolver",
]
