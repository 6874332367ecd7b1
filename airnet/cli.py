"""Command-line launcher printing statistics about the configured dataset.

    python -m airnet                 # global statistics
    python -m airnet --top 10        # ten busiest airports (ties included)
    python -m airnet --essential --diameter
    python -m airnet --trip OPO JFK --same-airline
    python -m airnet --trip FAO LHR --via MAD --map
    python -m airnet --from-city paris france --to-city porto portugal
    python -m airnet --from-near 48.85 2.35 --to-city lisbon portugal
    python -m airnet --export-report
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .config import AppConfig, get_config
from .container import Container
from .domain.errors import AirNetError, ConfigurationError, InvalidQueryError
from .domain.models import AirlinePolicy, Coordinates, Itinerary
from .ports.graph import NetworkRepositoryPort
from .ports.rendering import MapRendererPort, ReportWriterPort
from .services import ItineraryComposer, QueryEngine, TravelSelection

logger = logging.getLogger(__name__)


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.observability.level.upper(),
        format=config.observability.format,
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="airnet", description=__doc__.splitlines()[0])
    parser.add_argument("--top", type=int, metavar="K", help="list the K busiest airports")
    parser.add_argument("--essential", action="store_true", help="list essential airports")
    parser.add_argument("--diameter", action="store_true", help="show the longest trips")
    parser.add_argument(
        "--trip",
        nargs=2,
        metavar=("FROM", "TO"),
        help="best itineraries between two airport codes",
    )
    parser.add_argument(
        "--via",
        nargs="+",
        default=[],
        metavar="CODE",
        help="mandatory layovers of the trip, in order",
    )
    parser.add_argument(
        "--from-city",
        nargs=2,
        metavar=("CITY", "COUNTRY"),
        help="every airport of a city as a trip origin",
    )
    parser.add_argument(
        "--to-city",
        nargs=2,
        metavar=("CITY", "COUNTRY"),
        help="every airport of a city as a trip destination",
    )
    parser.add_argument(
        "--from-near",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        help="the airports closest to a point as trip origins",
    )
    parser.add_argument(
        "--to-near",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        help="the airports closest to a point as trip destinations",
    )
    parser.add_argument(
        "--same-airline",
        action="store_true",
        help="only itineraries flown by a single airline",
    )
    parser.add_argument(
        "--map",
        action="store_true",
        help="draw the best trip itinerary on an HTML map",
    )
    parser.add_argument(
        "--export-report",
        action="store_true",
        help="write the text report of the whole network",
    )
    return parser


def _format_itinerary(index: int, itinerary: Itinerary) -> str:
    codes = " ▶ ".join(itinerary.codes)
    line = f"{index}. {codes}   ({itinerary.total_distance_km:.2f} km)"
    if itinerary.is_single_airline:
        carriers = ", ".join(a.code for a in sorted(itinerary.airlines))
        line += f"   [{carriers}]"
    return line


def _coordinates(values: Sequence[float], option: str) -> Coordinates:
    try:
        return Coordinates(latitude=values[0], longitude=values[1])
    except ValueError as e:
        raise InvalidQueryError(str(e), parameter=option, value=tuple(values), cause=e)


def _selection(engine: QueryEngine, args: argparse.Namespace) -> Optional[TravelSelection]:
    """Build the trip selection from the command line, None on unknown input."""
    selection = TravelSelection()
    if args.trip:
        for code, add in zip(args.trip, (selection.add_sources, selection.add_destinations)):
            airport = engine.find_airport(code)
            if airport is None:
                print(f"Unknown airport: {code}")
                return None
            add([airport])

    if args.from_city:
        selection.add_source_city(engine, *args.from_city)
    if args.to_city:
        selection.add_destination_city(engine, *args.to_city)
    if args.from_near:
        selection.add_source_near(engine, _coordinates(args.from_near, "from_near"))
    if args.to_near:
        selection.add_destination_near(engine, _coordinates(args.to_near, "to_near"))

    for code in args.via:
        airport = engine.find_airport(code)
        if airport is None:
            print(f"Unknown airport: {code}")
            return None
        selection.add_layover(airport)

    if not selection.is_complete:
        print("Select at least one source and one destination.")
        return None
    return selection


def _print_trip(
    composer: ItineraryComposer,
    selection: TravelSelection,
    same_airline: bool,
) -> List[Itinerary]:
    policy = AirlinePolicy.SAME_AIRLINE if same_airline else AirlinePolicy.ANY_AIRLINE
    itineraries = composer.best_itineraries(selection, policy)
    if not itineraries:
        print("No flights found between the selected source and destination.")
        return []

    print(f"Best flight is with {itineraries[0].num_layovers} lay-over(s)")
    for i, itinerary in enumerate(itineraries, start=1):
        print(_format_itinerary(i, itinerary))
    return itineraries


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    config = get_config()
    configure_logging(config)

    try:
        if not config.data.data_dir.is_dir():
            raise ConfigurationError(
                f"Data directory not found: {config.data.data_dir}",
                setting_name="AIRNET_DATA_DATA_DIR",
            )

        container = Container.create_default(config)
        engine: QueryEngine = container.resolve(QueryEngine)

        print(f"Airports: {engine.number_of_airports()}")
        print(f"Flights: {engine.number_of_flights()}")
        print(f"Flight routes: {engine.number_of_flight_routes()}")

        if args.top is not None:
            print(f"\nTop {args.top} airports by air traffic:")
            for entry in engine.top_k_airports(args.top):
                print(f"  {entry.airport.code}  {entry.airport.name}  {entry.total_flights}")

        if args.essential:
            essential = sorted(engine.essential_airports())
            print(f"\nEssential airports ({len(essential)}): {', '.join(essential)}")

        if args.diameter:
            result = engine.diameter()
            print(f"\nMaximum trip: {result.diameter} stop(s)")
            for path in result.paths:
                print("  " + " -> ".join(a.code for a in path))

        if args.trip or args.from_city or args.to_city or args.from_near or args.to_near:
            print()
            selection = _selection(engine, args)
            if selection is not None:
                composer = container.resolve(ItineraryComposer)
                itineraries = _print_trip(composer, selection, args.same_airline)
                if args.map and itineraries:
                    renderer = container.resolve(MapRendererPort)
                    path = renderer.render(itineraries[0].path, config.report.map_path)
                    print(f'Map saved to "{path}"')

        if args.export_report:
            network = container.resolve(NetworkRepositoryPort).load()
            writer = container.resolve(ReportWriterPort)
            path = writer.write(network, config.report.report_path)
            print(f'\nData exported successfully to "{path}"')
    except AirNetError as e:
        logger.error("airnet failed", extra={"error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0
