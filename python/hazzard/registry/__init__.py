"""Priority-ordered registries.

Two registries back a hazzard configuration:

- The viewer lookup service locators: a single WeightedRegistry walked once
  per contract method while the contract is scanned.
- The template variable resolvers: a TypedWeightedRegistry keyed by the type a
  value is dispatched under, walked on every invocation.

Both are copied into frozen views when the configuration is created.
"""

from __future__ import annotations

from .weighted import (
    FrozenTypedRegistry,
    FrozenWeightedRegistry,
    TypedWeightedRegistry,
    WeightedEntry,
    WeightedRegistry,
)

__all__ = [
    "WeightedEntry",
    "WeightedRegistry",
    "FrozenWeightedRegistry",
    "TypedWeightedRegistry",
    "FrozenTypedRegistry",
]
