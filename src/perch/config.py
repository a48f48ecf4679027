"""Routing configuration.

RoutingConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """Which stages ``build_routing_pipeline`` wires in. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RoutingConfig(implicit_options=False)
    """

    # Implicit methods
    implicit_head: bool = True
    implicit_options: bool = True

    # 405 responses for method failures
    method_not_allowed: bool = True

    # Invoke matched route handlers
    dispatch: bool = True

    # Separator between methods in the Allow header
    allow_separator: str = ","
