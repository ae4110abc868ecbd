"""Contract declaration and scanning.

A contract is a class whose abstract methods describe messages:

    class MailMessages(ABC):
        @message("notice")
        def notify(
            self,
            viewer: Annotated[Receiver, ViewerArgument()],
            mail: Annotated[Mail, TemplateArgument()],
        ) -> None: ...

        def notify_all(self, viewers, mail) -> None:
            for viewer in viewers:
                self.notify(viewer, mail)

        @abstractmethod
        def hazzard(self) -> Hazzard: ...

- ``@message(key)`` tags a method with its message key and marks it abstract.
- ``TemplateArgument(name)`` marks a parameter for variable resolution; the
  placeholder name defaults to the parameter name.
- ``ViewerArgument()`` marks the parameter holding the viewer (used by
  ParameterViewerLocatorResolver).
- Concrete methods without ``@message`` are default methods: they run as
  written and reach the pipeline only through the tagged methods they call.
- Abstract methods annotated to return ``Hazzard`` return the frozen
  configuration. A concrete one is a default method like any other.

``scan_contract`` turns the class into explicit descriptors once, when the
configuration is created. Nothing is re-scanned per call.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, TypeVar, get_args, get_origin, get_type_hints

from .exceptions import MissingMessageKeyError, NoViewerLocatorFoundError, UnscannableMethodError
from .logging import log_debug
from .types import LogContext

if TYPE_CHECKING:
    from .registry import FrozenWeightedRegistry
    from .viewer import ViewerLookupService, ViewerLookupServiceLocator

F = TypeVar("F", bound=Callable[..., Any])

MESSAGE_KEY_ATTRIBUTE = "__hazzard_message_key__"


@dataclass(frozen=True)
class TemplateArgument:
    """Marks a parameter for template variable resolution.

    Attributes:
        name: Placeholder name; empty means the parameter name.
    """

    name: str = ""


@dataclass(frozen=True)
class ViewerArgument:
    """Marks the parameter that holds the viewer."""


def message(key: str) -> Callable[[F], F]:
    """Tag a contract method with its message key.

    The method becomes abstract; the generated implementation replaces it.

    Args:
        key: Message key passed to the template locator.
    """
    if not isinstance(key, str):
        raise TypeError(f"message key must be a str, got {type(key).__name__}")

    def decorate(function: F) -> F:
        setattr(function, MESSAGE_KEY_ATTRIBUTE, key)
        function.__isabstractmethod__ = True  # type: ignore[attr-defined]
        return function

    return decorate


def message_key_of(function: Callable[..., Any]) -> str | None:
    """Return the ``@message`` key of ``function``, if tagged."""
    return getattr(function, MESSAGE_KEY_ATTRIBUTE, None)


@dataclass(frozen=True)
class ParameterInfo:
    """A contract method parameter, excluding ``self``.

    Attributes:
        name: Parameter name.
        index: Position among the parameters after ``self``.
        declared_type: Annotated type with ``Annotated`` metadata stripped,
            or ``Any`` when unannotated.
        markers: ``Annotated`` metadata attached to the parameter.
    """

    name: str
    index: int
    declared_type: Any
    markers: tuple[Any, ...] = ()

    def marker(self, marker_type: type) -> Any | None:
        """Return the first marker of ``marker_type``, if any."""
        for marker in self.markers:
            if isinstance(marker, marker_type):
                return marker
        return None


@dataclass(frozen=True)
class TemplateArgumentBinding:
    """A parameter bound to a template variable.

    Attributes:
        parameter: Parameter name.
        placeholder: Variable name the argument is published under.
        declared_type: Declared type of the parameter.
        index: Position among the parameters after ``self``.
    """

    parameter: str
    placeholder: str
    declared_type: Any
    index: int


@dataclass(frozen=True, eq=False)
class ContractMethod:
    """Scanned description of one contract method."""

    owner: type
    name: str
    function: Callable[..., Any]
    signature: inspect.Signature
    parameters: tuple[ParameterInfo, ...]
    return_type: Any
    message_key: str | None
    template_arguments: tuple[TemplateArgumentBinding, ...] = field(default=())

    @classmethod
    def from_function(cls, owner: type, name: str, function: Callable[..., Any]) -> ContractMethod:
        """Describe ``function`` as declared on ``owner``.

        Raises:
            UnscannableMethodError: If the type hints cannot be evaluated.
        """
        try:
            hints = get_type_hints(function, include_extras=True)
        except (NameError, TypeError) as e:
            raise UnscannableMethodError(
                owner, name, f"Cannot evaluate type hints of {owner.__qualname__}.{name}: {e}"
            ) from e

        signature = inspect.signature(function)
        parameters: list[ParameterInfo] = []
        bindings: list[TemplateArgumentBinding] = []
        for index, parameter in enumerate(list(signature.parameters.values())[1:]):
            declared, markers = _split_annotated(hints.get(parameter.name, Any))
            info = ParameterInfo(parameter.name, index, declared, markers)
            parameters.append(info)

            argument = info.marker(TemplateArgument)
            if argument is not None:
                bindings.append(
                    TemplateArgumentBinding(
                        parameter=parameter.name,
                        placeholder=argument.name or parameter.name,
                        declared_type=declared,
                        index=index,
                    )
                )

        return_type, _ = _split_annotated(hints.get("return", inspect.Signature.empty))
        return cls(
            owner=owner,
            name=name,
            function=function,
            signature=signature,
            parameters=tuple(parameters),
            return_type=return_type,
            message_key=message_key_of(function),
            template_arguments=tuple(bindings),
        )

    @property
    def returns_message(self) -> bool:
        """Whether the composed message is returned instead of sent.

        Methods annotated ``-> None`` or left unannotated send.
        """
        return self.return_type not in (None, type(None), inspect.Signature.empty)

    @property
    def viewer_parameter(self) -> str | None:
        """Name of the parameter marked ``ViewerArgument()``, if any."""
        for info in self.parameters:
            if info.marker(ViewerArgument) is not None:
                return info.name
        return None

    def parameter(self, name: str) -> ParameterInfo | None:
        """Return the parameter called ``name``, if any."""
        for info in self.parameters:
            if info.name == name:
                return info
        return None

    def bind(self, proxy: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Mapping[str, Any]:
        """Bind a call's arguments to parameter names, defaults applied.

        Returns:
            Read-only mapping of parameter name to value, excluding ``self``.

        Raises:
            TypeError: If the arguments do not match the signature.
        """
        bound = self.signature.bind(proxy, *args, **kwargs)
        bound.apply_defaults()
        arguments = dict(bound.arguments)
        arguments.pop(next(iter(self.signature.parameters)), None)
        return MappingProxyType(arguments)

    def __repr__(self) -> str:
        return f"ContractMethod({self.owner.__qualname__}.{self.name}, key={self.message_key!r})"


@dataclass(frozen=True, eq=False)
class HazzardMethod:
    """A contract method bound to its message key and viewer lookup service."""

    method: ContractMethod
    viewer_lookup_service: ViewerLookupService

    @property
    def message_key(self) -> str:
        return self.method.message_key  # type: ignore[return-value]

    @property
    def name(self) -> str:
        return self.method.name

    @property
    def owner(self) -> type:
        return self.method.owner


@dataclass(frozen=True)
class ContractScan:
    """Result of scanning a contract.

    Attributes:
        methods: Bound pipeline methods by name.
        accessors: Names of methods that return the Hazzard configuration.
        defaults: Names of default (concrete) methods left untouched.
    """

    methods: Mapping[str, HazzardMethod]
    accessors: tuple[str, ...]
    defaults: tuple[str, ...]


def iter_contract_functions(contract: type) -> list[tuple[str, Callable[..., Any]]]:
    """Return the public plain functions of ``contract``, sorted by name.

    Static methods, class methods and properties are not contract methods.
    """
    functions: list[tuple[str, Callable[..., Any]]] = []
    for name in sorted(dir(contract)):
        if name.startswith("_"):
            continue
        attribute = inspect.getattr_static(contract, name)
        if inspect.isfunction(attribute):
            functions.append((name, attribute))
    return functions


def scan_contract(
    contract: type,
    locators: FrozenWeightedRegistry[ViewerLookupServiceLocator],
) -> ContractScan:
    """Bind every pipeline method of ``contract``.

    Args:
        contract: The contract class.
        locators: Frozen registry of viewer lookup service locators.

    Returns:
        ContractScan with bound methods, accessors and defaults.

    Raises:
        MissingMessageKeyError: If an abstract method has no ``@message`` key.
        NoViewerLocatorFoundError: If every locator declines a method.
        UnscannableMethodError: If a method's type hints cannot be evaluated.
    """
    from .hazzard import Hazzard

    methods: dict[str, HazzardMethod] = {}
    accessors: list[str] = []
    defaults: list[str] = []

    for name, function in iter_contract_functions(contract):
        if not getattr(function, "__isabstractmethod__", False):
            defaults.append(name)
            continue

        method = ContractMethod.from_function(contract, name, function)
        if method.return_type is Hazzard:
            accessors.append(name)
            continue

        if method.message_key is None:
            raise MissingMessageKeyError(contract, name)

        lookup_service = _find_viewer_lookup_service(contract, method, locators)
        methods[name] = HazzardMethod(method, lookup_service)
        log_debug(
            "Bound contract method",
            LogContext(
                contract=contract.__qualname__,
                method=name,
                message_key=method.message_key,
                operation="scan",
            ),
        )

    return ContractScan(
        methods=MappingProxyType(methods),
        accessors=tuple(accessors),
        defaults=tuple(defaults),
    )


def _find_viewer_lookup_service(
    contract: type,
    method: ContractMethod,
    locators: FrozenWeightedRegistry[ViewerLookupServiceLocator],
) -> ViewerLookupService:
    for entry in locators.entries_descending():
        lookup_service = entry.value(method, contract)
        if lookup_service is not None:
            return lookup_service
    raise NoViewerLocatorFoundError(contract, method.name)


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, tuple(metadata)
    return hint, ()


__all__ = [
    "TemplateArgument",
    "ViewerArgument",
    "message",
    "message_key_of",
    "ParameterInfo",
    "TemplateArgumentBinding",
    "ContractMethod",
    "HazzardMethod",
    "ContractScan",
    "iter_contract_functions",
    "scan_contract",
]
