"""Template, composer and sender protocols.

The invocation pipeline calls three collaborators after the viewer is known:

1. TemplateLocator fetches the raw template for the viewer and message key.
2. MessageComposer combines the template with the resolved replacements.
3. MessageSender delivers the message, for methods that do not return it.

All three are protocols, so plain functions and lambdas can be registered.
They must be safe to call concurrently.

Example:
    >>> composer = StringMessageComposer()
    >>> composer(viewer, "Hello %name%!", {"name": "Steve"}, method, MailMessages)
    'Hello Steve!'
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .contract import ContractMethod


class TemplateLocator(Protocol):
    """Fetches the template of a message key for a viewer."""

    def __call__(self, viewer: Any, key: str) -> Any:
        """Return the template.

        Raises:
            MissingTemplateError: If no template exists for ``key``.
        """
        ...


class MessageComposer(Protocol):
    """Combines a template with its resolved replacements."""

    def __call__(
        self,
        viewer: Any,
        template: Any,
        replacements: Mapping[str, Any],
        method: ContractMethod,
        owner: type,
    ) -> Any:
        """Return the composed message."""
        ...


class MessageSender(Protocol):
    """Delivers a composed message to its viewer."""

    def __call__(self, viewer: Any, message: Any) -> None: ...


def _identity(value: str) -> Any:
    return value


class StringMessageComposer:
    """Composer for string templates with delimited placeholders.

    Every replacement ``name`` substitutes each occurrence of
    ``prefix + name + suffix``, in the order the replacements were resolved.
    Placeholders without a replacement are left in place.

    Args:
        prefix: Placeholder opening delimiter.
        suffix: Placeholder closing delimiter.
        template_to_string: Converts the template to the working string.
        string_to_message: Converts the substituted string to the message.
        replacement_to_string: Converts each replacement value to text.
    """

    def __init__(
        self,
        prefix: str = "%",
        suffix: str = "%",
        template_to_string: Callable[[Any], str] = str,
        string_to_message: Callable[[str], Any] = _identity,
        replacement_to_string: Callable[[Any], str] = str,
    ) -> None:
        self.prefix = prefix
        self.suffix = suffix
        self.template_to_string = template_to_string
        self.string_to_message = string_to_message
        self.replacement_to_string = replacement_to_string

    def __call__(
        self,
        viewer: Any,
        template: Any,
        replacements: Mapping[str, Any],
        method: ContractMethod,
        owner: type,
    ) -> Any:
        text = self.template_to_string(template)
        for name, value in replacements.items():
            text = text.replace(self.prefix + name + self.suffix, self.replacement_to_string(value))
        return self.string_to_message(text)

    def __repr__(self) -> str:
        return f"StringMessageComposer(prefix={self.prefix!r}, suffix={self.suffix!r})"


__all__ = [
    "TemplateLocator",
    "MessageComposer",
    "MessageSender",
    "StringMessageComposer",
]
