"""Small contracts covering scanning edge cases and default methods."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Protocol

from hazzard import TemplateArgument, ViewerArgument, message

MESSAGE_KEY = "test"
DEFAULT_VALUE = "default placeholder value"


class PlainReceiver:
    def send(self, message: object) -> None:
        raise AssertionError("PlainReceiver.send must be mocked")


class StringPlaceholderValue(ABC):
    @abstractmethod
    def value(self) -> str: ...


class SimpleStringPlaceholder(StringPlaceholderValue):
    def __init__(self, value: str) -> None:
        self._value = value

    def value(self) -> str:
        return self._value


class EmptyContract(ABC):
    pass


class SingleEmptyMethod(ABC):
    @message(MESSAGE_KEY)
    def method(self) -> None: ...


class SingleMethodStringPlaceholders(ABC):
    @message(MESSAGE_KEY)
    def method(
        self,
        receiver: PlainReceiver,
        placeholder: Annotated[str, TemplateArgument()],
        placeholder2: Annotated[StringPlaceholderValue, TemplateArgument("cringe")],
    ) -> None: ...


class DefaultMethodContract(ABC):
    @message(MESSAGE_KEY)
    def method(self, placeholder: Annotated[str, TemplateArgument()]) -> None: ...

    def empty(self) -> None:
        self.method(DEFAULT_VALUE)

    def with_parameter(self, placeholder: str) -> None:
        self.method(placeholder)


class DefaultMethodOneParam(ABC):
    @message(MESSAGE_KEY)
    def method(
        self,
        receiver: Annotated[PlainReceiver, ViewerArgument()],
        placeholder: Annotated[str, TemplateArgument()] = "placeholder value",
    ) -> None: ...

    def method_for(self, receiver: PlainReceiver) -> None:
        self.method(receiver, "placeholder value")


class ProtocolContract(Protocol):
    @message(MESSAGE_KEY)
    def method(self, receiver: Annotated[PlainReceiver, ViewerArgument()]) -> str: ...


class UntaggedContract(ABC):
    @message(MESSAGE_KEY)
    def tagged(self, receiver: Annotated[PlainReceiver, ViewerArgument()]) -> None: ...

    @abstractmethod
    def untagged(self, receiver: Annotated[PlainReceiver, ViewerArgument()]) -> None: ...


class ViewerlessContract(ABC):
    @message(MESSAGE_KEY)
    def method(self, placeholder: Annotated[str, TemplateArgument()]) -> None: ...


class UnannotatedContract(ABC):
    @message(MESSAGE_KEY)
    def method(self, receiver, placeholder: Annotated[str, TemplateArgument()]): ...


class ListContract(ABC):
    @message(MESSAGE_KEY)
    def method(
        self,
        receiver: Annotated[PlainReceiver, ViewerArgument()],
        names: Annotated[list[str], TemplateArgument()],
    ) -> str: ...


class Named(Protocol):
    def name(self) -> str: ...


class Player:
    def __init__(self, name: str) -> None:
        self._name = name

    def name(self) -> str:
        return self._name


class NamedContract(ABC):
    @message(MESSAGE_KEY)
    def greet(
        self,
        receiver: Annotated[PlainReceiver, ViewerArgument()],
        who: Annotated[Named, TemplateArgument()],
    ) -> str: ...


class TwoStringsContract(ABC):
    @message(MESSAGE_KEY)
    def method(
        self,
        receiver: Annotated[PlainReceiver, ViewerArgument()],
        a: Annotated[str, TemplateArgument()],
        b: Annotated[str, TemplateArgument()],
    ) -> None: ...
