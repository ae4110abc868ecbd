"""Invocation events.

A bridge attached with ``HazzardBuilder.events()`` lets callers observe the
invocation pipeline without wrapping the sender. Every handler receives one
InvocationEvent. Handlers run synchronously on the calling thread, and an
exception raised by a handler fails the call like any collaborator error.

Example:
    >>> from hazzard import EventBridge, EventNames
    >>>
    >>> bridge = EventBridge()
    >>>
    >>> @bridge.on(EventNames.MESSAGE_SENT)
    ... def audit(event):
    ...     print(f"{event.method.name} sent {event.message!r} to {event.viewer!r}")
    >>>
    >>> messages = Hazzard.builder(MailMessages).events(bridge)...create()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pyee.base import EventEmitter

from .logging import log_trace

if TYPE_CHECKING:
    from .contract import ContractMethod


class EventNames:
    """Names of the events published by the invocation pipeline.

    Attributes:
        MESSAGE_COMPOSED: The message was composed, whether or not it is sent.
        MESSAGE_SENT: The sender returned.
        INVOCATION_FAILED: The call failed; published before the error is
            re-raised.
    """

    MESSAGE_COMPOSED = "message.composed"
    MESSAGE_SENT = "message.sent"
    INVOCATION_FAILED = "invocation.failed"


@dataclass(frozen=True)
class InvocationEvent:
    """What happened during one call of a contract method.

    ``viewer`` and ``message`` are None when the call failed before they were
    known; ``error`` is only set for ``invocation.failed``.
    """

    method: ContractMethod
    viewer: Any = None
    message: Any = None
    error: Exception | None = None


Handler = Callable[[InvocationEvent], Any]


class EventBridge:
    """Delivers invocation events to subscribed handlers."""

    def __init__(self) -> None:
        self._emitter = EventEmitter()

    def on(self, event: str, handler: Handler | None = None) -> Any:
        """Subscribe ``handler`` to ``event``.

        Without ``handler`` this returns a decorator.

        Returns:
            The handler, or the decorator.
        """
        if handler is None:
            return lambda f: self.on(event, f)
        self._emitter.on(event, handler)
        return handler

    def off(self, event: str, handler: Handler) -> None:
        """Unsubscribe ``handler`` from ``event``."""
        self._emitter.remove_listener(event, handler)

    def publish(self, event: str, payload: InvocationEvent) -> None:
        """Deliver ``payload`` to every handler of ``event``."""
        log_trace(f"Publishing {event} for {payload.method.name}")
        self._emitter.emit(event, payload)

    def __repr__(self) -> str:
        return f"EventBridge(events={sorted(self._emitter.event_names())!r})"


__all__ = ["EventBridge", "EventNames", "InvocationEvent"]
