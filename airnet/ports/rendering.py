"""Rendering ports - Abstractions for reports and map generation.

These protocols let the launcher (or any other front-end) export the
network and draw itineraries without depending on a given library.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import Airport
    from ..graph.store import FlightNetwork


class MapRendererPort(Protocol):
    """Port for map rendering.

    Implementation: adapters/rendering/folium_adapter.py
    """

    def render(
        self,
        airports: Sequence[Airport],
        output_path: Path,
    ) -> Path:
        """Render a path of airports on a map and save to file.

        Args:
            airports: Ordered airports forming the trip.
            output_path: Where to save the rendered map.

        Returns:
            Path to the generated map file.
        """
        ...


class ReportWriterPort(Protocol):
    """Port for exporting the whole network as a report.

    Implementation: adapters/rendering/text_report.py
    """

    def write(self, network: FlightNetwork, output_path: Path) -> Path:
        """Write one entry per airport with its routes.

        Args:
            network: The network to export.
            output_path: Where to save the report.

        Returns:
            Path to the generated report.
        """
        ...
