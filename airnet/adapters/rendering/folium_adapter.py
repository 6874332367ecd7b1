"""Folium map renderer adapter.

Draws a trip on an interactive HTML map: one marker per airport
(origin in green, destination in red, layovers in blue) and one line per
flown leg, labelled with its great-circle distance. The view is fitted
to the airports of the trip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from ...domain.errors import RenderingError
from ...domain.models import Airport

LatLon = Tuple[float, float]


def _marker_color(index: int, count: int) -> str:
    if index == 0:
        return "green"
    if index == count - 1:
        return "red"
    return "blue"


def _latlon(airport: Airport) -> LatLon:
    return (airport.location.latitude, airport.location.longitude)


@dataclass
class FoliumMapRenderer:
    """Folium-based itinerary map.

    This adapter implements MapRendererPort.

    Attributes:
        zoom_start: Zoom level used when the trip is a single airport
    """

    zoom_start: int = 4
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def render(self, airports: Sequence[Airport], output_path: Path) -> Path:
        """Draw ``airports`` as a trip and save the map as HTML.

        Raises:
            RenderingError: If the trip is empty or the map cannot be saved.
        """
        if not airports:
            raise RenderingError(
                "Cannot render an itinerary without airports",
                output_path=str(output_path),
                renderer_type="folium",
            )

        try:
            import folium
        except ImportError as e:
            raise RenderingError(
                "folium is required to draw itinerary maps",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )

        points: List[LatLon] = [_latlon(airport) for airport in airports]
        trip = folium.Map(location=points[0], zoom_start=self.zoom_start)

        for i, airport in enumerate(airports):
            folium.Marker(
                location=points[i],
                tooltip=airport.code,
                popup=f"{airport.name} ({airport.city}, {airport.country})",
                icon=folium.Icon(color=_marker_color(i, len(airports)), icon="plane"),
            ).add_to(trip)

        for (a, b), (start, end) in zip(zip(airports, airports[1:]), zip(points, points[1:])):
            folium.PolyLine(
                [start, end],
                tooltip=f"{a.code} -> {b.code}: {a.distance_to(b.location):.0f} km",
                weight=3,
                opacity=0.8,
            ).add_to(trip)

        if len(airports) > 1:
            trip.fit_bounds(
                [
                    [min(lat for lat, _ in points), min(lon for _, lon in points)],
                    [max(lat for lat, _ in points), max(lon for _, lon in points)],
                ]
            )

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            trip.save(str(output_path))
        except OSError as e:
            self._logger.error(
                "Map could not be saved",
                extra={"error": str(e), "output_path": str(output_path)},
            )
            raise RenderingError(
                f"Failed to save map: {e}",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )

        self._logger.info(
            "Itinerary map saved",
            extra={"airports": len(airports), "output_path": str(output_path)},
        )
        return output_path
