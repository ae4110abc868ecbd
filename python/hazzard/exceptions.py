"""Exception hierarchy for hazzard.

Errors fall into three groups:

- Configuration errors are raised while a contract is being frozen by
  ``HazzardBuilder.create()``. No partially usable instance is ever returned.
- Per-call errors (viewer not found, missing template, unresolved variable)
  abort only the current invocation; the instance stays usable.
- Anything raised by a user collaborator (resolver, composer, sender)
  propagates unmodified and is not wrapped.

Example:
    >>> from hazzard import HazzardError, MissingTemplateError
    >>>
    >>> try:
    ...     messages.notify(viewer, mail)
    ... except MissingTemplateError as e:
    ...     print(f"No template for {e.key}")
    ... except HazzardError as e:
    ...     print(e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .contract import ContractMethod


def format_method_name(owner: type, method_name: str) -> str:
    """Format ``owner.method`` the way error messages refer to contract methods."""
    return f"{owner.__module__}.{owner.__qualname__}#{method_name}"


class HazzardError(Exception):
    """Base class for all hazzard errors.

    Attributes:
        message: Human-readable error message.
        metadata: Additional error context.
    """

    def __init__(self, message: str, *, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for diagnostics.

        Returns:
            Dictionary with error details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "metadata": self.metadata,
        }


# Configuration errors


class ConfigurationError(HazzardError):
    """The configuration could not be frozen into a usable instance."""


class DuplicateEntryError(ConfigurationError):
    """The same value was inserted twice at the same priority.

    Example:
        >>> registry.insert(1, resolver)
        >>> registry.insert(1, resolver)  # raises DuplicateEntryError
    """

    def __init__(self, priority: int, value: Any) -> None:
        super().__init__(
            f"Entry {value!r} is already registered with priority {priority}",
            metadata={"priority": priority, "value": repr(value)},
        )
        self.priority = priority
        self.value = value


class RegistryFrozenError(ConfigurationError):
    """A registry was mutated after it had been sealed."""


class IncompleteBuilderError(ConfigurationError):
    """A required builder option was never supplied."""

    def __init__(self, option: str) -> None:
        super().__init__(
            f"Builder option '{option}' must be configured before create()",
            metadata={"option": option},
        )
        self.option = option


class UnscannableMethodError(ConfigurationError):
    """A contract method could not be bound."""

    def __init__(self, owner: type, method_name: str, message: str) -> None:
        super().__init__(
            message,
            metadata={"owner": owner.__qualname__, "method": method_name},
        )
        self.owner = owner
        self.method_name = method_name


class MissingMessageKeyError(UnscannableMethodError):
    """An abstract contract method is missing its ``@message`` key."""

    def __init__(self, owner: type, method_name: str) -> None:
        super().__init__(
            owner,
            method_name,
            "Given method does not have a @message key: "
            + format_method_name(owner, method_name),
        )


class NoViewerLocatorFoundError(UnscannableMethodError):
    """Every viewer lookup service locator declined a contract method."""

    def __init__(self, owner: type, method_name: str) -> None:
        super().__init__(
            owner,
            method_name,
            "No viewer lookup service locator accepted method: "
            + format_method_name(owner, method_name),
        )


class MissingMethodMappingError(HazzardError):
    """A method reached the invocation handler without having been scanned."""

    def __init__(self, owner: type, method_name: str) -> None:
        super().__init__(
            "A method was not mapped by hazzard: " + format_method_name(owner, method_name),
            metadata={"owner": owner.__qualname__, "method": method_name},
        )
        self.owner = owner
        self.method_name = method_name


# Per-call errors


class ViewerNotFoundError(HazzardError):
    """The viewer lookup service could not produce a viewer for a call."""


class MissingTemplateError(HazzardError):
    """No template exists for a message key and viewer.

    Attributes:
        key: The message key that was looked up.
    """

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(message or f"No template found for key '{key}'", metadata={"key": key})
        self.key = key


class VariableResolutionError(HazzardError):
    """Template variables could not be resolved for a call."""


class UnresolvedVariableError(VariableResolutionError):
    """No resolver at any hierarchy level accepted a pending variable.

    Attributes:
        method: The contract method being invoked.
        name: The unresolved placeholder name.
        value: The value that could not be resolved.
        value_type: The type the value was dispatched under.
    """

    def __init__(self, method: ContractMethod, name: str, value: Any, value_type: Any) -> None:
        super().__init__(
            f"The variable {name} was unresolved in method: "
            + format_method_name(method.owner, method.name),
            metadata={
                "method": method.name,
                "name": name,
                "value": repr(value),
                "type": getattr(value_type, "__qualname__", repr(value_type)),
            },
        )
        self.method = method
        self.name = name
        self.value = value
        self.value_type = value_type


class InvalidResolverOutcomeError(VariableResolutionError):
    """A resolver returned something other than a mapping of resolved values.

    Attributes:
        method: The contract method being invoked.
        name: The variable the resolver was offered.
        outcome: What the resolver returned.
    """

    def __init__(self, method: ContractMethod, name: str, outcome: Any, reason: str) -> None:
        super().__init__(
            f"Resolver for variable {name} returned {reason} in method: "
            + format_method_name(method.owner, method.name),
            metadata={"method": method.name, "name": name, "outcome": repr(outcome)},
        )
        self.method = method
        self.name = name
        self.outcome = outcome


class ResolutionLoopError(VariableResolutionError):
    """Resolution exceeded its configured pass limit."""

    def __init__(self, method: ContractMethod, max_passes: int, pending: list[str]) -> None:
        super().__init__(
            f"Variable resolution exceeded {max_passes} passes in method: "
            + format_method_name(method.owner, method.name),
            metadata={"max_passes": max_passes, "pending": pending},
        )
        self.method = method
        self.max_passes = max_passes
        self.pending = pending


__all__ = [
    "HazzardError",
    # Configuration
    "ConfigurationError",
    "DuplicateEntryError",
    "RegistryFrozenError",
    "IncompleteBuilderError",
    "UnscannableMethodError",
    "MissingMessageKeyError",
    "NoViewerLocatorFoundError",
    "MissingMethodMappingError",
    # Per call
    "ViewerNotFoundError",
    "MissingTemplateError",
    "VariableResolutionError",
    "UnresolvedVariableError",
    "InvalidResolverOutcomeError",
    "ResolutionLoopError",
    "format_method_name",
]
