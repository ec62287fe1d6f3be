"""Domain models and the rate graph engine.

This package contains the in-memory structures behind best-rate queries: the
vertex registry, the timestamped rate graph, identity-edge provisioning and
the maximum-product path solver. Nothing here does I/O, so the engine can be
driven from tests without a feed.
"""

__all__ = [
    "identity_provisioner",
    "path_solver",
    "quotes",
    "rate_engine",
    "rate_graph",
    "vertex_registry",
]
