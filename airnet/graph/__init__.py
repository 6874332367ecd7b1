"""Graph-related utilities for representing the flight network.

This subpackage contains the in-memory directed graph of airports and
the generic walks the query layer is built on.
"""

from .store import Edge, FlightNetwork, Graph, Vertex, normalize_code
from .traversal import (
    TraversalMarkers,
    bfs,
    bfs_levels,
    dfs,
    dfs_destinations,
    dfs_from,
    dfs_visit,
    topsort,
)

__all__ = [
    "Edge",
    "FlightNetwork",
    "Graph",
    "Vertex",
    "normalize_code",
    "TraversalMarkers",
    "bfs",
    "bfs_levels",
    "dfs",
    "dfs_destinations",
    "dfs_from",
    "dfs_visit",
    "topsort",
]
