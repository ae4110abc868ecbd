"""Resolution strategies.

- supertype: ancestor search order used when a type has no accepting resolver.
- resolution: the variable resolution engine.
"""

from __future__ import annotations

from .resolution import (
    EmptyVariableResolution,
    StandardVariableResolution,
    VariableResolutionStrategy,
    narrow_type,
)
from .supertype import (
    ExplicitSupertypeStrategy,
    StandardSupertypeStrategy,
    SupertypeStrategy,
    is_interface,
    iter_dispatch_types,
)

__all__ = [
    "SupertypeStrategy",
    "StandardSupertypeStrategy",
    "ExplicitSupertypeStrategy",
    "iter_dispatch_types",
    "is_interface",
    "VariableResolutionStrategy",
    "EmptyVariableResolution",
    "StandardVariableResolution",
    "narrow_type",
]
