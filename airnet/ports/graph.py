"""Graph ports - Abstractions for loading the flight network.

The query layer never reads files: it receives an already built
FlightNetwork from a repository implementing this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..graph.store import FlightNetwork


class NetworkRepositoryPort(Protocol):
    """Port for loading the flight network.

    Implementation: adapters/graph/csv_repository.py

    The repository builds the graph and the airline catalog once, with
    degree counters finalized, and caches the result.
    """

    def load(self) -> FlightNetwork:
        """Load the flight network.

        Returns:
            The graph of airports together with the airline catalog.

        Raises:
            DataLoadError: If the source data cannot be read.
        """
        ...
