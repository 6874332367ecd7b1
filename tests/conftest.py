"""Shared fixtures: small hand-built flight networks."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Sequence, Tuple, Union

import pytest

from airnet.config import reset_config
from airnet.domain.models import Airline, Airport, Coordinates
from airnet.graph.store import FlightNetwork, Graph

DATA_DIR = Path(__file__).resolve().parents[1] / "data"

Route = Tuple[str, str, float, Sequence[str]]


def make_airport(
    code: str,
    city: str = "",
    country: str = "Portugal",
    lat: float = 0.0,
    lon: float = 0.0,
    name: str = "",
) -> Airport:
    return Airport(
        code=code,
        name=name or f"{code} Airport",
        city=city or code,
        country=country,
        location=Coordinates(lat, lon),
    )


def make_airline(code: str) -> Airline:
    return Airline(code=code, name=f"{code} Airways", callsign=code, country="Portugal")


def build_network(
    airports: Iterable[Union[str, Airport]],
    routes: Iterable[Route] = (),
) -> FlightNetwork:
    """Build a network with explicit route distances.

    Each route is ``(source, target, distance_km, airline_codes)``; one
    flight is counted per airline.
    """
    graph = Graph()
    for airport in airports:
        graph.add_vertex(airport if isinstance(airport, Airport) else make_airport(airport))

    carriers: Dict[str, Airline] = {}
    for source, target, distance, airline_codes in routes:
        edge = graph.add_edge(source, target, distance)
        assert edge is not None
        for code in airline_codes:
            edge.add_airline(carriers.setdefault(code, make_airline(code)))
            graph.find_vertex(source).flights_from += 1
            graph.find_vertex(target).flights_to += 1

    graph.setup_degrees()
    return FlightNetwork(graph=graph, airlines=frozenset(carriers.values()))


@pytest.fixture
def network_factory():
    return build_network


@pytest.fixture
def airport_factory():
    return make_airport


@pytest.fixture
def abc_network() -> FlightNetwork:
    """A -> B (P, 500 km), B -> C (P, 600 km), A -> C (Q, 1000 km)."""
    return build_network(
        ["A", "B", "C"],
        [
            ("A", "B", 500.0, ["P"]),
            ("B", "C", 600.0, ["P"]),
            ("A", "C", 1000.0, ["Q"]),
        ],
    )


@pytest.fixture
def sample_data_dir() -> Path:
    return DATA_DIR


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()
