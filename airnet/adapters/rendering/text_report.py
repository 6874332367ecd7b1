"""Plain-text report of the whole network.

One block per airport, in graph order, with its location, its route
counts and every outgoing route with distance and operating airlines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ...domain.errors import RenderingError
from ...graph.store import FlightNetwork, Vertex


def format_vertex(network: FlightNetwork, vertex: Vertex) -> List[str]:
    airport = vertex.airport
    location = airport.location
    lines = [
        f">> [{airport.code}] {airport.name} <<",
        f"    City       : {airport.city}",
        f"    Country    : {airport.country}",
        f"    Coordinates: ({location.latitude}, {location.longitude})",
        f"    Flight routes from this airport : {vertex.out_degree}",
        f"    Flight routes to this airport   : {vertex.in_degree}",
        "",
    ]
    for edge in vertex.adj:
        target = network.graph.vertex(edge.dest).airport
        lines.append(f"    • {airport.code} -> {target.code} : {edge.distance_km:.2f} km")
        lines.append("        by Airlines:")
        for i, airline in enumerate(sorted(edge.airlines), start=1):
            lines.append(f"            {i}.({airline.code}) {airline.callsign}")
        lines.append("")
    lines.append("")
    return lines


@dataclass
class TextReportWriter:
    """Writes the network report as UTF-8 text.

    This adapter implements ReportWriterPort.
    """

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def write(self, network: FlightNetwork, output_path: Path) -> Path:
        """Write the report to ``output_path``.

        Raises:
            RenderingError: If the file cannot be written.
        """
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open("w", encoding="utf-8") as f:
                for vertex in network.graph.vertices:
                    f.write("\n".join(format_vertex(network, vertex)))
                    f.write("\n")
        except OSError as e:
            raise RenderingError(
                f"Failed to write report: {e}",
                output_path=str(output_path),
                renderer_type="text",
                cause=e,
            )

        self._logger.info(
            "Report exported",
            extra={"output_path": str(output_path), "airports": len(network.graph)},
        )
        return output_path
