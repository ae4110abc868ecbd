"""Builder for hazzard configurations.

The builder collects collaborators and registry entries, then ``create()``
freezes them into a Hazzard and returns the generated contract instance.
Every option method returns the builder, so a configuration reads as one
chained expression.

Required options: ``template_locator``, ``composed``, ``sent`` and
``variable_resolver``. Viewer lookup service locators and variable resolvers
are optional, but a contract with tagged methods needs at least one locator
that accepts each of them.

Example:
    >>> messages = (
    ...     HazzardBuilder(MailMessages)
    ...     .viewer_lookup_service_locator(ParameterViewerLocatorResolver(), 0)
    ...     .template_locator(lambda viewer, key: templates[key])
    ...     .composed(StringMessageComposer())
    ...     .sent(lambda viewer, message: viewer.send(message))
    ...     .variable_resolver(StandardVariableResolution(StandardSupertypeStrategy()))
    ...     .weighted_variable_resolver(str, identity_resolver, 0)
    ...     .create()
    ... )
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

from .exceptions import IncompleteBuilderError
from .hazzard import Hazzard
from .logging import log_info
from .proxy import create_proxy
from .registry import TypedWeightedRegistry, WeightedRegistry
from .types import LogContext

if TYPE_CHECKING:
    from .event_bridge import EventBridge
    from .messaging import MessageComposer, MessageSender, TemplateLocator
    from .strategy.resolution import VariableResolutionStrategy
    from .variable import TemplateVariableResolver
    from .viewer import ViewerLookupServiceLocator


class HazzardBuilder:
    """Collects the configuration of one contract.

    Not thread-safe; build on one thread, then share the created instance.

    Args:
        proxied_type: The contract class.
    """

    def __init__(self, proxied_type: type) -> None:
        if not isinstance(proxied_type, type):
            raise TypeError(f"proxied_type must be a class, got {proxied_type!r}")
        self._proxied_type = proxied_type
        self._viewer_lookup_service_locators: WeightedRegistry[ViewerLookupServiceLocator] = WeightedRegistry()
        self._variable_resolvers: TypedWeightedRegistry[TemplateVariableResolver] = TypedWeightedRegistry()
        self._template_locator: TemplateLocator | None = None
        self._message_composer: MessageComposer | None = None
        self._message_sender: MessageSender | None = None
        self._variable_resolution: VariableResolutionStrategy | None = None
        self._events: EventBridge | None = None

    @property
    def proxied_type(self) -> type:
        return self._proxied_type

    def viewer_lookup_service_locator(
        self,
        locator: ViewerLookupServiceLocator,
        priority: int = 0,
    ) -> HazzardBuilder:
        """Register a viewer lookup service locator.

        Args:
            locator: Offered every tagged method while the contract is scanned.
            priority: Higher priorities are offered first.

        Raises:
            DuplicateEntryError: If ``locator`` is already registered at
                ``priority``.
        """
        self._viewer_lookup_service_locators.insert(priority, locator)
        return self

    def template_locator(self, locator: TemplateLocator) -> HazzardBuilder:
        """Set the template locator."""
        self._template_locator = locator
        return self

    def composed(self, composer: MessageComposer) -> HazzardBuilder:
        """Set the message composer."""
        self._message_composer = composer
        return self

    def sent(self, sender: MessageSender) -> HazzardBuilder:
        """Set the message sender."""
        self._message_sender = sender
        return self

    def variable_resolver(self, strategy: VariableResolutionStrategy) -> HazzardBuilder:
        """Set the variable resolution strategy."""
        self._variable_resolution = strategy
        return self

    def weighted_variable_resolver(
        self,
        type_key: Hashable,
        resolver: TemplateVariableResolver,
        priority: int = 0,
    ) -> HazzardBuilder:
        """Register a template variable resolver for values dispatched under ``type_key``.

        Args:
            type_key: A class, a generic alias such as ``list[str]``, or any
                other hashable type marker used in ContinuationValue.
            resolver: The resolver.
            priority: Higher priorities are tried first within ``type_key``.

        Raises:
            DuplicateEntryError: If ``resolver`` is already registered for
                ``type_key`` at ``priority``.
        """
        self._variable_resolvers.insert(type_key, priority, resolver)
        return self

    def events(self, bridge: EventBridge | None) -> HazzardBuilder:
        """Attach an event bridge the pipeline publishes to (None detaches)."""
        self._events = bridge
        return self

    def build(self) -> Hazzard:
        """Freeze the configuration without creating the contract instance.

        Raises:
            IncompleteBuilderError: If a required option is missing.
            UnscannableMethodError: If a contract method cannot be bound.
        """
        if self._template_locator is None:
            raise IncompleteBuilderError("template_locator")
        if self._message_composer is None:
            raise IncompleteBuilderError("composed")
        if self._message_sender is None:
            raise IncompleteBuilderError("sent")
        if self._variable_resolution is None:
            raise IncompleteBuilderError("variable_resolver")

        return Hazzard(
            proxied_type=self._proxied_type,
            variable_resolution=self._variable_resolution,
            template_locator=self._template_locator,
            message_composer=self._message_composer,
            message_sender=self._message_sender,
            viewer_lookup_service_locators=self._viewer_lookup_service_locators.freeze(),
            variable_resolvers=self._variable_resolvers.freeze(),
            events=self._events,
        )

    def create(self) -> Any:
        """Freeze the configuration and return the contract instance.

        Later changes to this builder do not affect the returned instance.

        Raises:
            IncompleteBuilderError: If a required option is missing.
            UnscannableMethodError: If a contract method cannot be bound.
        """
        hazzard = self.build()
        proxy = create_proxy(hazzard)
        log_info(
            f"Created {type(proxy).__qualname__}",
            LogContext(contract=self._proxied_type.__qualname__, operation="create"),
        )
        return proxy

    def __repr__(self) -> str:
        return f"HazzardBuilder({self._proxied_type.__qualname__})"


__all__ = ["HazzardBuilder"]
