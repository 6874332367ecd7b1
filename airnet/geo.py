"""Great-circle distance between coordinates.

Distances use a spherical Earth of radius 6371 km, which is the
approximation route distances are computed with at ingestion time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from geopy.distance import great_circle

if TYPE_CHECKING:
    from .domain.models import Coordinates

EARTH_RADIUS_KM = 6371.0


def great_circle_km(origin: Coordinates, destination: Coordinates) -> float:
    """Distance in kilometers between two coordinates."""
    return great_circle(
        (origin.latitude, origin.longitude),
        (destination.latitude, destination.longitude),
        radius=EARTH_RADIUS_KM,
    ).km
