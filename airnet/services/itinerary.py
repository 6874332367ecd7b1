"""Itinerary composer - Best multi-leg trips between airport selections.

A trip goes from any of the selected origin airports to any of the
selected destination airports, optionally through an ordered list of
mandatory layovers. Only the itineraries with the fewest layovers are
kept; distance only orders them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from operator import attrgetter
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..domain.models import Airline, AirlinePolicy, Airport, Coordinates, Itinerary
from .query_engine import AirportPath, QueryEngine

logger = logging.getLogger(__name__)


def merge_paths(first: Sequence[Airport], second: Sequence[Airport]) -> AirportPath:
    """Concatenate two paths sharing their junction airport.

    Returns an empty path when either side is empty or when ``first``
    does not end where ``second`` starts.
    """
    if not first or not second:
        logger.warning("Cannot merge an empty path")
        return ()
    if first[-1] != second[0]:
        logger.warning(
            "Paths do not share their junction airport",
            extra={"first_end": first[-1].code, "second_start": second[0].code},
        )
        return ()
    return tuple(first) + tuple(second[1:])


@dataclass
class TravelSelection:
    """What the traveller picked: origins, destinations and layovers.

    Choosing a city, or a point on the map, adds every matching airport
    as a candidate; airports already selected are not added twice.

    Attributes:
        sources: Candidate origin airports
        destinations: Candidate destination airports
        layovers: Airports the trip must go through, in order
    """

    sources: List[Airport] = field(default_factory=list)
    destinations: List[Airport] = field(default_factory=list)
    layovers: List[Airport] = field(default_factory=list)

    def add_sources(self, airports: Iterable[Airport]) -> int:
        """Add candidate origins; returns how many were new."""
        return _extend(self.sources, airports)

    def add_destinations(self, airports: Iterable[Airport]) -> int:
        """Add candidate destinations; returns how many were new."""
        return _extend(self.destinations, airports)

    def add_source_city(self, engine: QueryEngine, city: str, country: str) -> int:
        return self.add_sources(engine.airports_in_city(city, country))

    def add_destination_city(self, engine: QueryEngine, city: str, country: str) -> int:
        return self.add_destinations(engine.airports_in_city(city, country))

    def add_source_near(self, engine: QueryEngine, coordinates: Coordinates) -> int:
        return self.add_sources(engine.closest_airports(coordinates))

    def add_destination_near(self, engine: QueryEngine, coordinates: Coordinates) -> int:
        return self.add_destinations(engine.closest_airports(coordinates))

    def add_layover(self, airport: Airport) -> None:
        self.layovers.append(airport)

    def clear_layovers(self) -> None:
        self.layovers.clear()

    @property
    def has_layovers(self) -> bool:
        return len(self.layovers) > 0

    @property
    def is_complete(self) -> bool:
        return len(self.sources) > 0 and len(self.destinations) > 0


@dataclass
class ItineraryComposer:
    """Builds itineraries from the shortest paths of the query engine."""

    engine: QueryEngine
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def compose(
        self,
        selection: TravelSelection,
        policy: AirlinePolicy = AirlinePolicy.ANY_AIRLINE,
    ) -> List[Itinerary]:
        """Itineraries with the fewest layovers over every origin/destination pair."""
        itineraries: List[Itinerary] = []
        min_layovers: Optional[int] = None

        for source in selection.sources:
            for destination in selection.destinations:
                for path in self._candidate_paths(source, destination, selection.layovers):
                    airlines = self._path_airlines(path, policy)
                    if airlines is None:
                        continue

                    layovers = len(path) - 2
                    if min_layovers is None or layovers < min_layovers:
                        min_layovers = layovers
                        itineraries = []
                    if layovers == min_layovers:
                        itineraries.append(
                            Itinerary(
                                airlines=airlines,
                                path=path,
                                total_distance_km=self._path_distance(path),
                            )
                        )

        self._logger.info(
            "Itineraries composed",
            extra={
                "policy": policy.name,
                "layovers": min_layovers,
                "itineraries": len(itineraries),
            },
        )
        return itineraries

    def best_itineraries(
        self,
        selection: TravelSelection,
        policy: AirlinePolicy = AirlinePolicy.ANY_AIRLINE,
    ) -> List[Itinerary]:
        """Like ``compose``, shortest total distance first."""
        return sorted(self.compose(selection, policy), key=attrgetter("total_distance_km"))

    def leg_airlines(self, itinerary: Itinerary) -> List[FrozenSet[Airline]]:
        """Airlines available on each leg of ``itinerary``."""
        if itinerary.is_single_airline:
            return [itinerary.airlines] * (len(itinerary.path) - 1)
        return [
            self.engine.airlines_between(a.code, b.code)
            for a, b in _legs(itinerary.path)
        ]

    def _candidate_paths(
        self,
        source: Airport,
        destination: Airport,
        layovers: Sequence[Airport],
    ) -> List[AirportPath]:
        if not layovers:
            return self.engine.shortest_paths(source.code, destination.code)

        stops = [source, *layovers, destination]
        paths: List[AirportPath] = self.engine.shortest_paths(stops[0].code, stops[1].code)
        for start, end in _legs(stops[1:]):
            if not paths:
                break
            segment = self.engine.shortest_paths(start.code, end.code)
            paths = [merge_paths(head, tail) for head in paths for tail in segment]
        return [path for path in paths if path]

    def _path_airlines(
        self, path: AirportPath, policy: AirlinePolicy
    ) -> Optional[FrozenSet[Airline]]:
        """Airlines flying the whole path, or None if no single one does.

        Under ``ANY_AIRLINE`` the path is always accepted, with no airlines.
        """
        if policy is AirlinePolicy.ANY_AIRLINE:
            return frozenset()

        common: Optional[FrozenSet[Airline]] = None
        for a, b in _legs(path):
            operators = self.engine.airlines_between(a.code, b.code)
            common = operators if common is None else common & operators
            if not common:
                return None
        return common

    def _path_distance(self, path: AirportPath) -> float:
        return sum(self.engine.distance_between(a.code, b.code) for a, b in _legs(path))


def _legs(path: Sequence[Airport]) -> Iterable[Tuple[Airport, Airport]]:
    return zip(path, path[1:])


def _extend(bucket: List[Airport], airports: Iterable[Airport]) -> int:
    added = 0
    for airport in airports:
        if airport not in bucket:
            bucket.append(airport)
            added += 1
    return added
