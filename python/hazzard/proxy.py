"""Invocation pipeline and generated contract implementations.

``create_proxy`` builds a subclass of the contract, named ``<Contract>Proxy``,
in which every bound method forwards to HazzardInvocationHandler.invoke:

1. Bind the call's arguments to the method signature, defaults applied.
2. Look up the viewer with the method's bound ViewerLookupService.
3. Fetch the template for the viewer and message key.
4. Resolve the template variables.
5. Compose the message.
6. Send it when the method is annotated ``-> None`` (or unannotated) and
   return None; otherwise return it unsent.

Default methods are inherited unchanged, and methods annotated to return
``Hazzard`` return the configuration. Equality, hashing and ``repr`` never
enter the pipeline.

The pipeline is synchronous and applies no timeouts: a collaborator that
blocks stalls the calling thread.

Example:
    >>> messages = builder.create()
    >>> messages.notify(receiver, mail)
    >>> hazzard_of(messages).proxied_type
    <class 'MailMessages'>
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .event_bridge import EventNames, InvocationEvent
from .exceptions import ViewerNotFoundError
from .logging import log_warn
from .types import LogContext

if TYPE_CHECKING:
    from .contract import HazzardMethod
    from .hazzard import Hazzard

HAZZARD_ATTRIBUTE = "__hazzard__"


class HazzardInvocationHandler:
    """Runs the invocation pipeline for one configuration."""

    def __init__(self, hazzard: Hazzard) -> None:
        self._hazzard = hazzard

    @property
    def hazzard(self) -> Hazzard:
        return self._hazzard

    def invoke(self, proxy: Any, method_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """Invoke the bound method called ``method_name``.

        Args:
            proxy: The generated contract instance.
            method_name: Name of the contract method.
            args: Positional arguments, excluding ``self``.
            kwargs: Keyword arguments.

        Returns:
            The composed message, or None when it was sent.

        Raises:
            MissingMethodMappingError: If ``method_name`` was not bound.
            HazzardError: Per-call pipeline errors, re-raised unmodified.
        """
        hazzard_method = self._hazzard.scanned_method(method_name)
        try:
            return self._run(proxy, hazzard_method, args, kwargs)
        except Exception as e:
            self._publish(EventNames.INVOCATION_FAILED, InvocationEvent(hazzard_method.method, error=e))
            raise

    def _run(
        self,
        proxy: Any,
        hazzard_method: HazzardMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        hazzard = self._hazzard
        method = hazzard_method.method
        arguments = method.bind(proxy, args, kwargs)

        viewer = self._lookup_viewer(hazzard_method, proxy, arguments)
        template = hazzard.template_locator(viewer, hazzard_method.message_key)
        replacements = hazzard.variable_resolution.resolve_variables(
            hazzard, viewer, template, hazzard_method, arguments
        )
        message = hazzard.message_composer(viewer, template, replacements, method, hazzard.proxied_type)
        self._publish(EventNames.MESSAGE_COMPOSED, InvocationEvent(method, viewer, message))

        if method.returns_message:
            return message

        hazzard.message_sender(viewer, message)
        self._publish(EventNames.MESSAGE_SENT, InvocationEvent(method, viewer, message))
        return None

    def _lookup_viewer(self, hazzard_method: HazzardMethod, proxy: Any, arguments: Any) -> Any:
        method = hazzard_method.method
        try:
            return hazzard_method.viewer_lookup_service(method, proxy, arguments)
        except ViewerNotFoundError:
            log_warn(
                "Viewer not found",
                LogContext(
                    contract=method.owner.__qualname__,
                    method=method.name,
                    message_key=method.message_key,
                    operation="lookup",
                ),
            )
            raise

    def _publish(self, event: str, payload: InvocationEvent) -> None:
        events = self._hazzard.events
        if events is not None:
            events.publish(event, payload)

    def __repr__(self) -> str:
        return f"HazzardInvocationHandler({self._hazzard.proxied_type.__qualname__})"


def _forwarding_method(handler: HazzardInvocationHandler, hazzard_method: HazzardMethod) -> Callable[..., Any]:
    name = hazzard_method.name

    @functools.wraps(hazzard_method.method.function)
    def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
        return handler.invoke(self, name, args, kwargs)

    forward.__isabstractmethod__ = False  # type: ignore[attr-defined]
    return forward


def _accessor_method(hazzard: Hazzard, function: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(function)
    def accessor(self: Any, *args: Any, **kwargs: Any) -> Hazzard:
        return hazzard

    accessor.__isabstractmethod__ = False  # type: ignore[attr-defined]
    return accessor


def create_proxy_class(hazzard: Hazzard) -> type:
    """Build the ``<Contract>Proxy`` subclass for ``hazzard``."""
    contract = hazzard.proxied_type
    handler = hazzard.invocation_handler
    type_name = f"{contract.__module__}.{contract.__qualname__}"

    def __eq__(self: Any, other: object) -> bool:
        return other is self or other is hazzard

    def __hash__(self: Any) -> int:
        return hash(hazzard)

    def __repr__(self: Any) -> str:
        return f"{type_name}@{id(hazzard):x}"

    namespace: dict[str, Any] = {
        "__module__": contract.__module__,
        "__qualname__": f"{contract.__qualname__}Proxy",
        "__doc__": contract.__doc__,
        "__eq__": __eq__,
        "__hash__": __hash__,
        "__repr__": __repr__,
        "__str__": __repr__,
        HAZZARD_ATTRIBUTE: hazzard,
    }
    for name, hazzard_method in hazzard.scanned_methods.items():
        namespace[name] = _forwarding_method(handler, hazzard_method)
    for name in hazzard.accessors:
        namespace[name] = _accessor_method(hazzard, getattr(contract, name))

    return type(contract)(f"{contract.__name__}Proxy", (contract,), namespace)


def create_proxy(hazzard: Hazzard) -> Any:
    """Instantiate the generated implementation of ``hazzard``'s contract.

    The contract's ``__init__`` is not called.
    """
    proxy_class = create_proxy_class(hazzard)
    return proxy_class.__new__(proxy_class)


def hazzard_of(proxy: Any) -> Hazzard:
    """Return the configuration behind a generated contract instance.

    Raises:
        TypeError: If ``proxy`` was not created by hazzard.
    """
    hazzard = getattr(type(proxy), HAZZARD_ATTRIBUTE, None)
    if hazzard is None:
        raise TypeError(f"{type(proxy).__qualname__} is not a hazzard proxy")
    return hazzard


__all__ = [
    "HazzardInvocationHandler",
    "create_proxy_class",
    "create_proxy",
    "hazzard_of",
]
