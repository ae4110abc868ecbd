"""Viewer lookup protocols.

Choosing the viewer of a call is a two-step affair:

1. While the contract is scanned, every registered ViewerLookupServiceLocator
   is offered each tagged method, highest priority first. The first one to
   return a ViewerLookupService is bound to the method for good.
2. On every call, the bound ViewerLookupService produces the viewer from the
   call's arguments.

ParameterViewerLocatorResolver is the standard locator: it binds methods that
mark one parameter with ``ViewerArgument()`` and reads the viewer from that
argument.

Example:
    >>> class Messages(ABC):
    ...     @message("greeting")
    ...     def greet(self, viewer: Annotated[Player, ViewerArgument()]) -> None: ...
    >>>
    >>> builder.viewer_lookup_service_locator(ParameterViewerLocatorResolver(Player), 10)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from .exceptions import ViewerNotFoundError
from .logging import log_debug

if TYPE_CHECKING:
    from .contract import ContractMethod


class ViewerLookupService(Protocol):
    """Produces the viewer for one call of a bound method."""

    def __call__(
        self,
        method: ContractMethod,
        proxy: Any,
        arguments: Mapping[str, Any],
    ) -> Any:
        """Return the viewer.

        Raises:
            ViewerNotFoundError: If no viewer can be produced for this call.
        """
        ...


class ViewerLookupServiceLocator(Protocol):
    """Offers a ViewerLookupService for a contract method, or declines."""

    def __call__(self, method: ContractMethod, owner: type) -> ViewerLookupService | None:
        """Return a lookup service for ``method``, or None to decline."""
        ...


class ParameterViewerLookupService:
    """Reads the viewer from a named argument of the call."""

    def __init__(self, parameter: str) -> None:
        self._parameter = parameter

    @property
    def parameter(self) -> str:
        return self._parameter

    def __call__(
        self,
        method: ContractMethod,
        proxy: Any,
        arguments: Mapping[str, Any],
    ) -> Any:
        viewer = arguments.get(self._parameter)
        if viewer is None:
            raise ViewerNotFoundError(
                f"Viewer argument '{self._parameter}' of {method.name} was None",
                metadata={"method": method.name, "parameter": self._parameter},
            )
        return viewer

    def __repr__(self) -> str:
        return f"ParameterViewerLookupService({self._parameter!r})"


class ParameterViewerLocatorResolver:
    """Binds methods whose viewer is one of their parameters.

    The parameter is the one marked ``ViewerArgument()``. When no parameter
    is marked and ``fallback_parameter`` is set, a parameter of that name is
    used instead.

    Args:
        viewer_type: When given, the parameter's declared type must be this
            type or a subclass of it, otherwise the method is declined. A
            Protocol that is not runtime checkable only matches classes that
            inherit from it explicitly.
        fallback_parameter: Parameter name to use for unmarked methods.
    """

    def __init__(self, viewer_type: type | None = None, *, fallback_parameter: str | None = None) -> None:
        self._viewer_type = viewer_type
        self._fallback_parameter = fallback_parameter

    def __call__(self, method: ContractMethod, owner: type) -> ViewerLookupService | None:
        parameter = method.viewer_parameter
        if parameter is None and self._fallback_parameter is not None:
            if method.parameter(self._fallback_parameter) is not None:
                parameter = self._fallback_parameter
        if parameter is None:
            return None

        if self._viewer_type is not None:
            declared = method.parameter(parameter).declared_type  # type: ignore[union-attr]
            if not _is_subclass(declared, self._viewer_type):
                log_debug(
                    f"ParameterViewerLocatorResolver: declined {method.name}, "
                    f"'{parameter}' is not a {self._viewer_type.__qualname__}"
                )
                return None

        return ParameterViewerLookupService(parameter)

    def __repr__(self) -> str:
        viewer_type = getattr(self._viewer_type, "__qualname__", None)
        return f"ParameterViewerLocatorResolver(viewer_type={viewer_type!r})"


def _is_subclass(declared: Any, viewer_type: type) -> bool:
    if not isinstance(declared, type):
        return False
    try:
        return issubclass(declared, viewer_type)
    except TypeError:
        # Protocol without @runtime_checkable: only explicit subclasses match
        return viewer_type in declared.__mro__


__all__ = [
    "ViewerLookupService",
    "ViewerLookupServiceLocator",
    "ParameterViewerLookupService",
    "ParameterViewerLocatorResolver",
]
