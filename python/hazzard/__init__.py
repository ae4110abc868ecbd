"""
Hazzard

Declare the messages of an application as a contract class; hazzard
generates the implementation. Each call locates the viewer, fetches the
template for the message key, resolves the template arguments into
replacements through pluggable resolvers, composes the message and either
sends it or returns it.

Example:
    >>> from typing import Annotated
    >>> from abc import ABC
    >>> import hazzard
    >>>
    >>> class MailMessages(ABC):
    ...     @hazzard.message("notice")
    ...     def notify(
    ...         self,
    ...         viewer: Annotated[Receiver, hazzard.ViewerArgument()],
    ...         mail: Annotated[Mail, hazzard.TemplateArgument()],
    ...     ) -> None: ...
    >>>
    >>> messages = (
    ...     hazzard.Hazzard.builder(MailMessages)
    ...     .viewer_lookup_service_locator(hazzard.ParameterViewerLocatorResolver(), 0)
    ...     .template_locator(lambda viewer, key: "%author% wrote: %title%")
    ...     .composed(hazzard.StringMessageComposer())
    ...     .sent(lambda viewer, message: viewer.receive(message))
    ...     .variable_resolver(
    ...         hazzard.StandardVariableResolution(hazzard.StandardSupertypeStrategy())
    ...     )
    ...     .weighted_variable_resolver(Mail, mail_resolver, 0)
    ...     .weighted_variable_resolver(str, hazzard.identity_resolver, 0)
    ...     .create()
    ... )
    >>> messages.notify(receiver, mail)

    >>> # Use structured logging
    >>> hazzard.configure_logging("debug")
"""

from __future__ import annotations

from hazzard.builder import HazzardBuilder
from hazzard.contract import (
    ContractMethod,
    HazzardMethod,
    TemplateArgument,
    TemplateArgumentBinding,
    ViewerArgument,
    message,
    scan_contract,
)
from hazzard.event_bridge import EventBridge, EventNames, InvocationEvent
from hazzard.exceptions import (
    ConfigurationError,
    DuplicateEntryError,
    HazzardError,
    IncompleteBuilderError,
    InvalidResolverOutcomeError,
    MissingMessageKeyError,
    MissingMethodMappingError,
    MissingTemplateError,
    NoViewerLocatorFoundError,
    RegistryFrozenError,
    ResolutionLoopError,
    UnresolvedVariableError,
    UnscannableMethodError,
    VariableResolutionError,
    ViewerNotFoundError,
)
from hazzard.hazzard import Hazzard
from hazzard.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from hazzard.messaging import MessageComposer, MessageSender, StringMessageComposer, TemplateLocator
from hazzard.proxy import HazzardInvocationHandler, hazzard_of
from hazzard.registry import (
    FrozenTypedRegistry,
    FrozenWeightedRegistry,
    TypedWeightedRegistry,
    WeightedEntry,
    WeightedRegistry,
)
from hazzard.strategy import (
    EmptyVariableResolution,
    ExplicitSupertypeStrategy,
    StandardSupertypeStrategy,
    StandardVariableResolution,
    SupertypeStrategy,
    VariableResolutionStrategy,
)
from hazzard.templates import TemplatePath, YamlTemplateLocator
from hazzard.types import LogContext, TemplateDocument
from hazzard.variable import (
    ConclusionValue,
    ContinuationValue,
    TemplateVariableResolver,
    identity_resolver,
)
from hazzard.viewer import (
    ParameterViewerLocatorResolver,
    ParameterViewerLookupService,
    ViewerLookupService,
    ViewerLookupServiceLocator,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "Hazzard",
    "HazzardBuilder",
    "HazzardInvocationHandler",
    "hazzard_of",
    # Contract
    "message",
    "TemplateArgument",
    "ViewerArgument",
    "ContractMethod",
    "HazzardMethod",
    "TemplateArgumentBinding",
    "scan_contract",
    # Registries
    "WeightedEntry",
    "WeightedRegistry",
    "FrozenWeightedRegistry",
    "TypedWeightedRegistry",
    "FrozenTypedRegistry",
    # Resolution
    "ConclusionValue",
    "ContinuationValue",
    "TemplateVariableResolver",
    "identity_resolver",
    "SupertypeStrategy",
    "StandardSupertypeStrategy",
    "ExplicitSupertypeStrategy",
    "VariableResolutionStrategy",
    "EmptyVariableResolution",
    "StandardVariableResolution",
    # Viewers
    "ViewerLookupService",
    "ViewerLookupServiceLocator",
    "ParameterViewerLookupService",
    "ParameterViewerLocatorResolver",
    # Messages
    "TemplateLocator",
    "MessageComposer",
    "MessageSender",
    "StringMessageComposer",
    "TemplatePath",
    "YamlTemplateLocator",
    # Events
    "EventBridge",
    "EventNames",
    "InvocationEvent",
    # Errors
    "HazzardError",
    "ConfigurationError",
    "DuplicateEntryError",
    "RegistryFrozenError",
    "IncompleteBuilderError",
    "UnscannableMethodError",
    "MissingMessageKeyError",
    "NoViewerLocatorFoundError",
    "MissingMethodMappingError",
    "ViewerNotFoundError",
    "MissingTemplateError",
    "VariableResolutionError",
    "UnresolvedVariableError",
    "InvalidResolverOutcomeError",
    "ResolutionLoopError",
    # Logging
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    # Models
    "LogContext",
    "TemplateDocument",
]
