"""Immutable domain models for the airport network analyzer.

All models are frozen dataclasses with slots. Airports and airlines are
identified by their codes alone: two records with the same code compare
and hash equal whatever their other attributes say.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, Tuple

from ..geo import great_circle_km


class SearchAttribute(Enum):
    """Airport attribute matched by the substring search."""

    NAME = auto()
    CITY = auto()
    COUNTRY = auto()


class Projection(Enum):
    """What a reachability query counts for each reached airport."""

    AIRPORT = auto()
    CITY = auto()
    COUNTRY = auto()


class AirlinePolicy(Enum):
    """Carrier constraint applied when composing itineraries."""

    SAME_AIRLINE = auto()
    ANY_AIRLINE = auto()


@dataclass(frozen=True, slots=True)
class Coordinates:
    """GPS coordinates in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True, slots=True)
class Airport:
    """An airport and its location.

    Attributes:
        code: IATA code, the identity of the airport (e.g., 'OPO')
        name: Official airport name
        city: City served by the airport
        country: Country where the airport is located
        location: GPS coordinates of the airport
    """

    code: str
    name: str = field(default="", compare=False)
    city: str = field(default="", compare=False)
    country: str = field(default="", compare=False)
    location: Coordinates = field(
        default=Coordinates(0.0, 0.0), compare=False, repr=False
    )

    def distance_to(self, other: Coordinates) -> float:
        """Great-circle distance in kilometers to ``other``."""
        return great_circle_km(self.location, other)


@dataclass(frozen=True, slots=True, order=True)
class Airline:
    """An airline from the carrier catalog, ordered by code.

    Attributes:
        code: ICAO carrier code (e.g., 'TAP')
        name: Official airline name
        callsign: Radio callsign, '_' when the carrier has none
        country: Country of registry
    """

    code: str
    name: str = field(default="", compare=False)
    callsign: str = field(default="", compare=False)
    country: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class AirportTraffic:
    """An airport with its total number of inbound and outbound flights."""

    airport: Airport
    total_flights: int


@dataclass(frozen=True, slots=True)
class DiameterResult:
    """Longest shortest path length of the network and its witnesses.

    Attributes:
        diameter: Number of hops of the longest shortest path
        paths: Every shortest path achieving that length
    """

    diameter: int
    paths: Tuple[Tuple[Airport, ...], ...] = field(default_factory=tuple)

    @property
    def endpoints(self) -> Tuple[Tuple[Airport, Airport], ...]:
        """The (origin, destination) pair of each witness path."""
        return tuple((path[0], path[-1]) for path in self.paths)


@dataclass(frozen=True, slots=True)
class Itinerary:
    """A multi-leg trip between two airports.

    Attributes:
        airlines: Carriers able to fly every leg; empty when legs may use
            different carriers
        path: Ordered airports from origin to destination
        total_distance_km: Sum of the leg distances
    """

    airlines: FrozenSet[Airline]
    path: Tuple[Airport, ...]
    total_distance_km: float

    @property
    def origin(self) -> Airport:
        return self.path[0]

    @property
    def destination(self) -> Airport:
        return self.path[-1]

    @property
    def num_layovers(self) -> int:
        """Number of intermediate airports."""
        return len(self.path) - 2

    @property
    def is_single_airline(self) -> bool:
        return len(self.airlines) > 0

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(airport.code for airport in self.path)
