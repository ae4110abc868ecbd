"""Frozen hazzard configuration.

A Hazzard instance holds everything the invocation pipeline reads: the
contract type, the frozen registries, the collaborators and the bound contract
methods. It is created by ``HazzardBuilder.create()`` and never changes
afterwards, so one instance may serve any number of concurrent calls.

Example:
    >>> messages = (
    ...     Hazzard.builder(MailMessages)
    ...     .viewer_lookup_service_locator(ParameterViewerLocatorResolver(), 0)
    ...     .template_locator(templates)
    ...     .composed(StringMessageComposer())
    ...     .sent(lambda viewer, message: viewer.send(message))
    ...     .variable_resolver(StandardVariableResolution(StandardSupertypeStrategy()))
    ...     .weighted_variable_resolver(str, identity_resolver, 0)
    ...     .create()
    ... )
    >>> hazzard_of(messages).scanned_methods.keys()
    dict_keys(['notify'])
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .contract import HazzardMethod, scan_contract
from .exceptions import MissingMethodMappingError
from .logging import log_debug
from .proxy import HazzardInvocationHandler
from .types import LogContext

if TYPE_CHECKING:
    from .builder import HazzardBuilder
    from .event_bridge import EventBridge
    from .messaging import MessageComposer, MessageSender, TemplateLocator
    from .registry import FrozenTypedRegistry, FrozenWeightedRegistry
    from .strategy.resolution import VariableResolutionStrategy
    from .variable import TemplateVariableResolver
    from .viewer import ViewerLookupServiceLocator


class Hazzard:
    """Immutable configuration of one contract.

    The contract is scanned in the constructor; a contract that cannot be
    fully bound raises and no instance is produced.

    Raises:
        UnscannableMethodError: If a contract method cannot be bound.
    """

    def __init__(
        self,
        proxied_type: type,
        variable_resolution: VariableResolutionStrategy,
        template_locator: TemplateLocator,
        message_composer: MessageComposer,
        message_sender: MessageSender,
        viewer_lookup_service_locators: FrozenWeightedRegistry[ViewerLookupServiceLocator],
        variable_resolvers: FrozenTypedRegistry[TemplateVariableResolver],
        events: EventBridge | None = None,
    ) -> None:
        self._proxied_type = proxied_type
        self._variable_resolution = variable_resolution
        self._template_locator = template_locator
        self._message_composer = message_composer
        self._message_sender = message_sender
        self._viewer_lookup_service_locators = viewer_lookup_service_locators
        self._variable_resolvers = variable_resolvers
        self._events = events

        scan = scan_contract(proxied_type, viewer_lookup_service_locators)
        self._scanned_methods = scan.methods
        self._accessors = scan.accessors
        self._defaults = scan.defaults
        self._invocation_handler = HazzardInvocationHandler(self)

        log_debug(
            f"Scanned {len(self._scanned_methods)} contract methods",
            LogContext(contract=proxied_type.__qualname__, operation="scan"),
        )

    @staticmethod
    def builder(proxied_type: type) -> HazzardBuilder:
        """Start configuring ``proxied_type``."""
        from .builder import HazzardBuilder

        return HazzardBuilder(proxied_type)

    @property
    def proxied_type(self) -> type:
        return self._proxied_type

    @property
    def invocation_handler(self) -> HazzardInvocationHandler:
        return self._invocation_handler

    @property
    def variable_resolution(self) -> VariableResolutionStrategy:
        return self._variable_resolution

    @property
    def template_locator(self) -> TemplateLocator:
        return self._template_locator

    @property
    def message_composer(self) -> MessageComposer:
        return self._message_composer

    @property
    def message_sender(self) -> MessageSender:
        return self._message_sender

    @property
    def viewer_lookup_service_locators(self) -> FrozenWeightedRegistry[ViewerLookupServiceLocator]:
        return self._viewer_lookup_service_locators

    @property
    def variable_resolvers(self) -> FrozenTypedRegistry[TemplateVariableResolver]:
        return self._variable_resolvers

    @property
    def events(self) -> EventBridge | None:
        return self._events

    @property
    def scanned_methods(self) -> Mapping[str, HazzardMethod]:
        """Bound pipeline methods by name (read-only)."""
        return self._scanned_methods

    @property
    def accessors(self) -> tuple[str, ...]:
        """Names of contract methods that return this configuration."""
        return self._accessors

    @property
    def defaults(self) -> tuple[str, ...]:
        """Names of default methods inherited unchanged by the proxy."""
        return self._defaults

    def scanned_method(self, name: str) -> HazzardMethod:
        """Return the bound method called ``name``.

        Raises:
            MissingMethodMappingError: If ``name`` was not bound.
        """
        scanned = self._scanned_methods.get(name)
        if scanned is None:
            raise MissingMethodMappingError(self._proxied_type, name)
        return scanned

    def describe(self) -> dict[str, Any]:
        """Get configuration info for debugging."""
        return {
            "contract": f"{self._proxied_type.__module__}.{self._proxied_type.__qualname__}",
            "methods": {name: method.message_key for name, method in self._scanned_methods.items()},
            "accessors": list(self._accessors),
            "defaults": list(self._defaults),
            "viewer_lookup_service_locators": self._viewer_lookup_service_locators.describe(),
            "variable_resolvers": self._variable_resolvers.describe(),
        }

    def __repr__(self) -> str:
        return f"Hazzard({self._proxied_type.__qualname__}, methods={sorted(self._scanned_methods)!r})"


__all__ = ["Hazzard"]
