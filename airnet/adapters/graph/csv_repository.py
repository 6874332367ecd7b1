"""CSV network repository adapter.

Builds the flight network from three CSV files:

- airports: ``Code,Name,City,Country,Latitude,Longitude``
- airlines: ``Code,Name,Callsign,Country``
- flights:  ``Source,Target,Airline``

Each flight record adds its airline to the route between its two
airports (creating the route on first sight) and bumps the flight
counters of both ends. Degree counters are finalized once all flights
are in.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from ...config import DataConfig, get_config
from ...domain.errors import DataLoadError
from ...domain.models import Airline, Airport, Coordinates
from ...graph.store import FlightNetwork, Graph


def _rows(path: Path) -> Iterator[Tuple[int, Dict[str, str]]]:
    """Yield ``(line_number, row)`` with every value stripped.

    Raises:
        DataLoadError: If the file cannot be opened, decoded or parsed.
    """
    line = 0
    try:
        with path.open(newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                line = reader.line_num
                yield line, {
                    key.strip(): (value or "").strip()
                    for key, value in row.items()
                    if key is not None
                }
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DataLoadError(
            f"Failed to read {path.name}",
            file_path=str(path),
            line_number=line or None,
            cause=e,
        )


@dataclass
class CSVNetworkRepository:
    """Network repository that loads from CSV files.

    This adapter implements NetworkRepositoryPort.

    Attributes:
        config: Dataset configuration (paths, file names)
    """

    config: DataConfig = field(default_factory=lambda: get_config().data)
    _logger: logging.Logger = field(init=False, repr=False)

    # Cached data
    _network: Optional[FlightNetwork] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> FlightNetwork:
        """Load the flight network from CSV files.

        Raises:
            DataLoadError: If a file cannot be read or holds a bad record.
        """
        if self._network is not None:
            return self._network

        self._logger.debug(
            "Loading network",
            extra={
                "airports_path": str(self.config.airports_path),
                "airlines_path": str(self.config.airlines_path),
                "flights_path": str(self.config.flights_path),
            },
        )

        airlines = self._load_airlines(self.config.airlines_path)
        graph = Graph()
        self._load_airports(self.config.airports_path, graph)
        flights = self._load_flights(self.config.flights_path, graph, airlines)
        graph.setup_degrees()

        network = FlightNetwork(graph=graph, airlines=frozenset(airlines.values()))
        self._network = network
        self._logger.info(
            "Network loaded",
            extra={
                "airports": graph.num_vertices,
                "airlines": len(airlines),
                "flights": flights,
            },
        )
        return network

    def _load_airlines(self, path: Path) -> Dict[str, Airline]:
        airlines: Dict[str, Airline] = {}
        for _, row in _rows(path):
            code = row.get("Code", "")
            if not code:
                continue
            airlines[code.upper()] = Airline(
                code=code,
                name=row.get("Name", ""),
                callsign=row.get("Callsign", ""),
                country=row.get("Country", ""),
            )
        return airlines

    def _load_airports(self, path: Path, graph: Graph) -> None:
        for line, row in _rows(path):
            code = row.get("Code", "")
            if not code:
                continue
            try:
                location = Coordinates(
                    latitude=float(row.get("Latitude", "")),
                    longitude=float(row.get("Longitude", "")),
                )
            except ValueError as e:
                raise DataLoadError(
                    f"Invalid coordinates for airport {code}",
                    file_path=str(path),
                    line_number=line,
                    cause=e,
                )

            airport = Airport(
                code=code,
                name=row.get("Name", ""),
                city=row.get("City", ""),
                country=row.get("Country", ""),
                location=location,
            )
            if not graph.add_vertex(airport):
                self._logger.warning(
                    "Duplicate airport ignored",
                    extra={"code": code, "line": line},
                )

    def _load_flights(
        self, path: Path, graph: Graph, airlines: Dict[str, Airline]
    ) -> int:
        flights = 0
        for line, row in _rows(path):
            source = row.get("Source", "")
            target = row.get("Target", "")
            airline_code = row.get("Airline", "")

            airline = airlines.get(airline_code.upper())
            if airline is None:
                self._logger.warning(
                    "Flight with unknown airline skipped",
                    extra={"airline": airline_code, "line": line},
                )
                continue

            if not graph.add_flight(source, target, airline):
                raise DataLoadError(
                    f"Flight {source} -> {target} references an unknown airport",
                    file_path=str(path),
                    line_number=line,
                )
            flights += 1
        return flights

    def clear_cache(self) -> None:
        """Forget the cached network so the next load re-reads the files."""
        self._network = None
        self._logger.debug("Network cache cleared")
