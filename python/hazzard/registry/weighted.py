"""Priority-ordered registries.

Entries are ordered by priority, highest first. Ties are broken by insertion
sequence, so two distinct values at the same priority are both kept and come
out in the order they were inserted.

Registries are mutable only while a configuration is being assembled.
``freeze()`` copies the entries into a read-only view; the frozen views are
what the invocation pipeline reads, and they are safe to share between
threads.

Usage:
    registry = WeightedRegistry()
    registry.insert(10, explicit_locator)
    registry.insert(-1, fallback_locator)

    for entry in registry.freeze().entries_descending():
        print(entry.priority, entry.value)

    resolvers = TypedWeightedRegistry()
    resolvers.insert(str, 0, identity_resolver)
    frozen = resolvers.freeze()
    list(frozen.entries_for(int))  # [] - never None
"""

from __future__ import annotations

import itertools
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from ..exceptions import DuplicateEntryError, RegistryFrozenError

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class WeightedEntry(Generic[T]):
    """A value with a priority.

    Attributes:
        priority: Signed priority; higher is tried first.
        value: The registered value.
        sequence: Insertion sequence, the tie-break for equal priorities.
    """

    priority: int
    value: T
    sequence: int = 0

    def sort_key(self) -> tuple[int, int]:
        """Return the total ordering key (priority descending, then sequence)."""
        return (-self.priority, self.sequence)


class FrozenWeightedRegistry(Generic[T]):
    """Read-only view of a WeightedRegistry.

    Holds its entries in a tuple sorted highest priority first.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: tuple[WeightedEntry[T], ...] = ()) -> None:
        self._entries = entries

    def entries_descending(self) -> Iterator[WeightedEntry[T]]:
        """Return a fresh iterator over entries, highest priority first."""
        return iter(self._entries)

    def values(self) -> list[T]:
        """Return the registered values, highest priority first."""
        return [entry.value for entry in self._entries]

    def describe(self) -> list[tuple[int, str]]:
        """Get registry info for debugging.

        Returns:
            List of (priority, repr(value)) in priority order.
        """
        return [(entry.priority, repr(entry.value)) for entry in self._entries]

    def __iter__(self) -> Iterator[T]:
        return (entry.value for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"FrozenWeightedRegistry({self.describe()!r})"


_EMPTY: FrozenWeightedRegistry[Any] = FrozenWeightedRegistry()


class WeightedRegistry(Generic[T]):
    """Mutable priority-ordered collection used during configuration.

    Inserting the same value object twice at the same priority is a
    configuration error: the second entry would be indistinguishable from
    the first.
    """

    def __init__(self, sequence: Iterator[int] | None = None) -> None:
        self._entries: list[WeightedEntry[T]] = []
        self._sequence = sequence if sequence is not None else itertools.count()
        self._sealed = False

    def insert(self, priority: int, value: T) -> WeightedEntry[T]:
        """Add a value.

        Args:
            priority: Signed priority; higher is tried first.
            value: Value to register.

        Returns:
            The created entry.

        Raises:
            RegistryFrozenError: If the registry was sealed by freeze(seal=True).
            DuplicateEntryError: If the same value is already registered at
                the same priority.
        """
        if self._sealed:
            raise RegistryFrozenError("Cannot insert into a sealed registry")
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise TypeError(f"priority must be an int, got {type(priority).__name__}")

        for existing in self._entries:
            if existing.priority == priority and existing.value is value:
                raise DuplicateEntryError(priority, value)

        entry = WeightedEntry(priority, value, next(self._sequence))
        self._entries.append(entry)
        self._entries.sort(key=WeightedEntry.sort_key)
        return entry

    def entries_descending(self) -> Iterator[WeightedEntry[T]]:
        """Return a fresh iterator over a snapshot of the entries, highest first."""
        return iter(tuple(self._entries))

    def freeze(self, *, seal: bool = False) -> FrozenWeightedRegistry[T]:
        """Copy the entries into a read-only view.

        Args:
            seal: Also reject any further insert into this registry.

        Returns:
            A FrozenWeightedRegistry unaffected by later inserts.
        """
        if seal:
            self._sealed = True
        return FrozenWeightedRegistry(tuple(self._entries))

    @property
    def is_sealed(self) -> bool:
        """Whether insert() is rejected."""
        return self._sealed

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return (entry.value for entry in tuple(self._entries))


class FrozenTypedRegistry(Generic[T]):
    """Read-only mapping of type key to FrozenWeightedRegistry."""

    __slots__ = ("_registries",)

    def __init__(self, registries: dict[Hashable, FrozenWeightedRegistry[T]] | None = None) -> None:
        self._registries = MappingProxyType(dict(registries or {}))

    def entries_for(self, type_key: Hashable) -> Iterator[WeightedEntry[T]]:
        """Return entries registered for exactly ``type_key``, highest first.

        Unknown or unhashable keys yield an empty iterator.
        """
        try:
            registry = self._registries.get(type_key, _EMPTY)
        except TypeError:
            registry = _EMPTY
        return registry.entries_descending()

    def registry_for(self, type_key: Hashable) -> FrozenWeightedRegistry[T]:
        """Return the frozen registry for ``type_key`` (empty if none)."""
        return self._registries.get(type_key, _EMPTY)

    def types(self) -> list[Hashable]:
        """Return the registered type keys."""
        return list(self._registries.keys())

    def describe(self) -> dict[str, list[tuple[int, str]]]:
        """Get per-type registry info for debugging."""
        return {
            getattr(type_key, "__qualname__", repr(type_key)): registry.describe()
            for type_key, registry in self._registries.items()
        }

    def __contains__(self, type_key: object) -> bool:
        return type_key in self._registries

    def __len__(self) -> int:
        return len(self._registries)


class TypedWeightedRegistry(Generic[T]):
    """Mutable mapping of type key to WeightedRegistry.

    Keys are the types values are dispatched under: classes, generic aliases
    such as ``list[int]``, or any other hashable type marker.
    """

    def __init__(self) -> None:
        self._registries: dict[Hashable, WeightedRegistry[T]] = {}
        self._sequence = itertools.count()
        self._sealed = False

    def insert(self, type_key: Hashable, priority: int, value: T) -> WeightedEntry[T]:
        """Add a value under ``type_key``.

        Raises:
            RegistryFrozenError: If sealed.
            DuplicateEntryError: If the same value is already registered for
                the type at the same priority.
        """
        if self._sealed:
            raise RegistryFrozenError("Cannot insert into a sealed registry")
        registry = self._registries.get(type_key)
        if registry is None:
            # Share one sequence so insertion order is global across types.
            registry = WeightedRegistry(self._sequence)
            self._registries[type_key] = registry
        return registry.insert(priority, value)

    def entries_for(self, type_key: Hashable) -> Iterator[WeightedEntry[T]]:
        """Return entries for exactly ``type_key``; empty iterator if none."""
        registry = self._registries.get(type_key)
        if registry is None:
            return iter(())
        return registry.entries_descending()

    def freeze(self, *, seal: bool = False) -> FrozenTypedRegistry[T]:
        """Copy every per-type registry into a read-only view."""
        if seal:
            self._sealed = True
        return FrozenTypedRegistry(
            {type_key: registry.freeze(seal=seal) for type_key, registry in self._registries.items()}
        )

    def __len__(self) -> int:
        return sum(len(registry) for registry in self._registries.values())


__all__ = [
    "WeightedEntry",
    "WeightedRegistry",
    "FrozenWeightedRegistry",
    "TypedWeightedRegistry",
    "FrozenTypedRegistry",
]
