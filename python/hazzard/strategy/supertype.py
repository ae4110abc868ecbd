"""Supertype strategies.

A supertype strategy decides the order in which a value's ancestor types are
tried when no resolver registered for its own type accepts it. The strategy is
policy: two strategies can produce different but equally valid resolution
outcomes for the same registry.

Built-in strategies:
- StandardSupertypeStrategy: walks the MRO, concrete classes before
  interface-like classes (or the reverse).
- ExplicitSupertypeStrategy: walks a manually registered parent-link graph.

Example:
    >>> class Mail(ABC):
    ...     @abstractmethod
    ...     def author(self) -> str: ...
    >>> class Message: ...
    >>> class Email(Message, Mail): ...
    >>> list(StandardSupertypeStrategy().hierarchy_of(Email))
    [<class 'Message'>, <class 'Mail'>, <class 'abc.ABC'>, <class 'object'>]
"""

from __future__ import annotations

import abc
import inspect
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, get_origin


class SupertypeStrategy(abc.ABC):
    """Produces the ancestor search order for a type.

    Implementations must be finite, must not yield the type itself and must
    be deterministic for a given type.
    """

    @abc.abstractmethod
    def hierarchy_of(self, type_: Any) -> Iterator[Any]:
        """Yield the ancestors of ``type_`` in dispatch order.

        Args:
            type_: Type a value is dispatched under.

        Returns:
            Iterator of ancestor types, excluding ``type_``.
        """
        ...


def iter_dispatch_types(type_: Any, strategy: SupertypeStrategy) -> Iterator[Any]:
    """Yield ``type_`` first, then its ancestors per ``strategy``."""
    yield type_
    yield from strategy.hierarchy_of(type_)


def is_interface(cls: type) -> bool:
    """Whether ``cls`` is a capability type rather than a concrete class.

    Protocols, ``abc.ABC`` itself and classes with abstract methods count as
    interfaces.
    """
    if cls is abc.ABC:
        return True
    if getattr(cls, "_is_protocol", False):
        return True
    return inspect.isabstract(cls)


class StandardSupertypeStrategy(SupertypeStrategy):
    """MRO based strategy.

    Ancestors are split into concrete classes and interfaces (see
    ``is_interface``). By default the concrete chain is yielded before the
    interfaces; ``object`` always comes last.

    Generic aliases such as ``list[int]`` start at their origin class. Types
    that are not classes (unions, ``Any``) have no ancestors.

    Args:
        interfaces_first: Yield interfaces before concrete classes.
        include_object: Yield ``object`` as the final ancestor.
    """

    def __init__(self, *, interfaces_first: bool = False, include_object: bool = True) -> None:
        self._interfaces_first = interfaces_first
        self._include_object = include_object

    @property
    def interfaces_first(self) -> bool:
        return self._interfaces_first

    @property
    def include_object(self) -> bool:
        return self._include_object

    def hierarchy_of(self, type_: Any) -> Iterator[Any]:
        if type_ is Any:
            return iter(())
        if isinstance(type_, type):
            ancestors = list(type_.__mro__[1:])
        else:
            origin = get_origin(type_)
            if not isinstance(origin, type):
                return iter(())
            ancestors = list(origin.__mro__)

        concrete: list[type] = []
        interfaces: list[type] = []
        for ancestor in ancestors:
            if ancestor is object:
                continue
            if is_interface(ancestor):
                interfaces.append(ancestor)
            else:
                concrete.append(ancestor)

        ordered = interfaces + concrete if self._interfaces_first else concrete + interfaces
        if self._include_object and object in ancestors:
            ordered.append(object)
        return iter(ordered)

    def __repr__(self) -> str:
        return (
            f"StandardSupertypeStrategy(interfaces_first={self._interfaces_first!r}, "
            f"include_object={self._include_object!r})"
        )


class ExplicitSupertypeStrategy(SupertypeStrategy):
    """Strategy over a manually registered parent-link graph.

    Walks parents breadth-first in the order they were registered, visiting
    each ancestor once. Types without registered parents have no ancestors,
    whatever their Python bases are.

    Example:
        >>> strategy = ExplicitSupertypeStrategy({Email: [Mail], Mail: [Examinable]})
        >>> list(strategy.hierarchy_of(Email))
        [Mail, Examinable]
    """

    def __init__(self, parents: Mapping[Any, Sequence[Any]] | None = None) -> None:
        self._parents: dict[Any, tuple[Any, ...]] = {
            child: tuple(links) for child, links in (parents or {}).items()
        }

    def with_parents(self, child: Any, *parents: Any) -> ExplicitSupertypeStrategy:
        """Return a copy with ``parents`` appended to ``child``'s links."""
        links = dict(self._parents)
        links[child] = links.get(child, ()) + parents
        return ExplicitSupertypeStrategy(links)

    def hierarchy_of(self, type_: Any) -> Iterator[Any]:
        seen = {type_}
        queue = list(self._parents.get(type_, ()))
        while queue:
            parent = queue.pop(0)
            if parent in seen:
                continue
            seen.add(parent)
            yield parent
            queue.extend(self._parents.get(parent, ()))


__all__ = [
    "SupertypeStrategy",
    "StandardSupertypeStrategy",
    "ExplicitSupertypeStrategy",
    "iter_dispatch_types",
    "is_interface",
]
