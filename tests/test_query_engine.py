import pytest

from airnet.domain.errors import InvalidQueryError
from airnet.domain.models import Coordinates, Projection, SearchAttribute
from airnet.services.query_engine import QueryEngine, squash


def path_codes(paths):
    return [tuple(a.code for a in path) for path in paths]


@pytest.fixture
def chain_engine(network_factory, airport_factory):
    """A -> B -> C -> D across three countries."""
    airports = [
        ("A", "Portugal"),
        ("B", "Spain"),
        ("C", "France"),
        ("D", "Spain"),
    ]
    network = network_factory(
        [airport_factory(code, country=country) for code, country in airports],
        [
            ("A", "B", 1.0, ["P"]),
            ("B", "C", 1.0, ["P"]),
            ("C", "D", 1.0, ["P"]),
        ],
    )
    return QueryEngine(network)


def test_squash_drops_case_and_whitespace():
    assert squash("  New York\tCity ") == "newyorkcity"


class TestStatistics:
    @pytest.fixture
    def engine(self, network_factory, airport_factory):
        network = network_factory(
            [
                airport_factory("A", city="Porto", country="Portugal"),
                airport_factory("B", city="Porto", country="Portugal"),
                airport_factory("C", city="Porto", country="Brazil"),
            ],
            [
                ("A", "B", 500.0, ["P"]),
                ("B", "C", 600.0, ["P"]),
                ("A", "C", 1000.0, ["Q"]),
                ("C", "A", 1000.0, ["P", "Q"]),
            ],
        )
        return QueryEngine(network)

    def test_global_counts(self, engine):
        assert engine.number_of_airports() == 3
        assert engine.number_of_flights() == 5
        assert engine.number_of_flight_routes() == 4

    def test_flights_per_city_keeps_countries_apart(self, engine):
        assert engine.flights_per_city() == {
            ("Porto", "Brazil"): 2,
            ("Porto", "Portugal"): 3,
        }

    def test_flights_per_airline_counts_routes(self, engine):
        totals = {airline.code: count for airline, count in engine.flights_per_airline().items()}
        assert totals == {"P": 3, "Q": 2}
        assert [a.code for a in engine.flights_per_airline()] == ["P", "Q"]

    def test_per_airport_counts(self, engine):
        assert engine.flights_out_of_airport("a") == 2
        assert engine.flights_to_airport("C") == 2
        assert engine.airlines_out_of_airport("A") == 2
        assert engine.airlines_out_of_airport("B") == 1
        assert engine.countries_flown_to_from_airport("A") == 2
        assert engine.countries_flown_to_from_city("porto", "portugal") == 2

    def test_unknown_airport_yields_zero(self, engine):
        assert engine.flights_out_of_airport("ZZZ") == 0
        assert engine.flights_to_airport("ZZZ") == 0
        assert engine.airlines_out_of_airport("ZZZ") == 0
        assert engine.countries_flown_to_from_airport("ZZZ") == 0
        assert engine.count_reachable_within("ZZZ", 3) == 0
        assert engine.reachable_airports("ZZZ") == []


class TestLookups:
    @pytest.fixture
    def engine(self, network_factory, airport_factory):
        network = network_factory(
            [
                airport_factory(
                    "OPO",
                    name="Francisco Sa Carneiro Airport",
                    city="Porto",
                    lat=41.248055,
                    lon=-8.681389,
                ),
                airport_factory(
                    "LIS",
                    name="Humberto Delgado Airport",
                    city="Lisbon",
                    lat=38.781311,
                    lon=-9.135919,
                ),
                airport_factory(
                    "JFK",
                    name="John F Kennedy International Airport",
                    city="New York",
                    country="United States",
                    lat=40.639751,
                    lon=-73.778925,
                ),
                airport_factory(
                    "LGA",
                    name="La Guardia Airport",
                    city="New York",
                    country="United States",
                    lat=40.777245,
                    lon=-73.872608,
                ),
            ],
            [("OPO", "LIS", 274.0, ["TAP", "RYR"]), ("LIS", "JFK", 5400.0, ["TAP"])],
        )
        return QueryEngine(network)

    def test_find_airport_and_airline_ignore_case(self, engine):
        assert engine.find_airport("opo").name == "Francisco Sa Carneiro Airport"
        assert engine.find_airport("XXX") is None
        assert engine.find_airline(" tap ").code == "TAP"
        assert engine.find_airline("ZZZ") is None

    def test_search_ignores_case_and_whitespace(self, engine):
        found = engine.search_airports("  sa CARNEIRO", SearchAttribute.NAME)
        assert [a.code for a in found] == ["OPO"]

        found = engine.search_airports("NEWYORK", SearchAttribute.CITY)
        assert [a.code for a in found] == ["JFK", "LGA"]

        found = engine.search_airports("portugal", SearchAttribute.COUNTRY)
        assert [a.code for a in found] == ["OPO", "LIS"]

    def test_closest_airports(self, engine):
        closest = engine.closest_airports(Coordinates(41.2, -8.6))
        assert [a.code for a in closest] == ["OPO"]

    def test_closest_airports_keeps_ties(self, network_factory, airport_factory):
        engine = QueryEngine(
            network_factory(
                [
                    airport_factory("B", name="Beta", lat=10.0, lon=10.0),
                    airport_factory("A", name="Alpha", lat=10.0, lon=10.0),
                    airport_factory("C", name="Gamma", lat=50.0, lon=50.0),
                ]
            )
        )

        closest = engine.closest_airports(Coordinates(10.0, 10.0))

        assert [a.code for a in closest] == ["A", "B"]

    def test_airports_in_city(self, engine):
        found = engine.airports_in_city(" new york ", "UNITED STATES")
        assert {a.code for a in found} == {"JFK", "LGA"}
        assert engine.airports_in_city("New York", "Portugal") == []

    def test_airlines_and_distance_between(self, engine):
        assert {a.code for a in engine.airlines_between("OPO", "LIS")} == {"RYR", "TAP"}
        assert engine.distance_between("OPO", "LIS") == 274.0

    def test_no_direct_route(self, engine):
        assert engine.airlines_between("LIS", "OPO") == frozenset()
        assert engine.distance_between("LIS", "OPO") == 0.0
        assert engine.distance_between("OPO", "ZZZ") == 0.0


class TestReachability:
    def test_bounded_reachability_is_monotonic(self, chain_engine):
        counts = [chain_engine.count_reachable_within("A", n) for n in range(5)]

        assert counts == [1, 2, 3, 3, 3]
        for n in range(4):
            smaller = chain_engine.reachable_within("A", n)
            larger = chain_engine.reachable_within("A", n + 1)
            assert smaller <= larger

    def test_zero_layovers_means_direct_destinations(self, chain_engine):
        assert chain_engine.reachable_within("A", 0) == frozenset({"B"})

    def test_projections(self, chain_engine):
        assert chain_engine.reachable_within("A", 2, Projection.COUNTRY) == frozenset(
            {"Spain", "France"}
        )
        assert chain_engine.reachable_within("A", 2, Projection.CITY) == frozenset(
            {("B", "Spain"), ("C", "France"), ("D", "Spain")}
        )
        assert chain_engine.count_reachable_within(
            "A", 2, lambda airport: airport.code.lower()
        ) == 3

    def test_city_projection_keeps_homonymous_cities_apart(
        self, network_factory, airport_factory
    ):
        network = network_factory(
            [
                airport_factory("LIS", city="Lisbon"),
                airport_factory("OPO", city="Porto", country="Portugal"),
                airport_factory("PXX", city="Porto", country="Brazil"),
            ],
            [("LIS", "OPO", 1.0, ["P"]), ("LIS", "PXX", 1.0, ["P"])],
        )
        engine = QueryEngine(network)

        assert engine.count_reachable_within("LIS", 0, Projection.CITY) == 2
        assert engine.count_reachable_within("LIS", 0, lambda airport: airport.city) == 1

    def test_negative_layovers_rejected(self, chain_engine):
        with pytest.raises(InvalidQueryError) as exc_info:
            chain_engine.reachable_within("A", -1)

        assert exc_info.value.parameter == "max_layovers"
        assert exc_info.value.value == -1

    def test_unrestricted_reachability(self, chain_engine):
        assert [a.code for a in chain_engine.reachable_airports("A")] == ["B", "C", "D"]
        assert chain_engine.reachable_countries("A") == {"Spain", "France"}
        assert chain_engine.reachable_cities("B") == {("C", "France"), ("D", "Spain")}
        assert chain_engine.reachable_airports("D") == []


class TestTopK:
    @pytest.fixture
    def engine(self, network_factory):
        network = network_factory(["A", "B", "C", "D", "E"])
        for code, total in zip("ABCDE", [40, 50, 30, 50, 40]):
            network.graph.find_vertex(code).flights_to = total
        return QueryEngine(network)

    def test_ranking_is_descending_and_stable(self, engine):
        ranking = engine.traffic_ranking()
        assert [(t.airport.code, t.total_flights) for t in ranking] == [
            ("B", 50),
            ("D", 50),
            ("A", 40),
            ("E", 40),
            ("C", 30),
        ]

    def test_ties_with_the_last_entry_are_included(self, engine):
        assert [t.airport.code for t in engine.top_k_airports(1)] == ["B", "D"]
        assert [t.airport.code for t in engine.top_k_airports(2)] == ["B", "D"]
        assert [t.airport.code for t in engine.top_k_airports(3)] == ["B", "D", "A", "E"]

    def test_both_leaders_tied_at_the_cutoff(self, network_factory):
        network = network_factory(["A", "B", "C", "D"])
        for code, total in zip("ABCD", [50, 50, 40, 30]):
            network.graph.find_vertex(code).flights_from = total

        top = QueryEngine(network).top_k_airports(2)

        assert [(t.airport.code, t.total_flights) for t in top] == [("A", 50), ("B", 50)]

    def test_k_larger_than_network(self, engine):
        assert len(engine.top_k_airports(10)) == 5

    @pytest.mark.parametrize("k", [0, -3])
    def test_invalid_k(self, engine, k):
        with pytest.raises(InvalidQueryError):
            engine.top_k_airports(k)


class TestEssentialAirports:
    @staticmethod
    def both_ways(pairs):
        routes = []
        for a, b in pairs:
            routes.append((a, b, 1.0, ["P"]))
            routes.append((b, a, 1.0, ["P"]))
        return routes

    def test_hub_between_two_clusters(self, network_factory):
        network = network_factory(
            ["A", "B", "X", "H", "Y", "C", "D"],
            self.both_ways(
                [
                    ("A", "B"),
                    ("A", "X"),
                    ("B", "X"),
                    ("X", "H"),
                    ("H", "Y"),
                    ("Y", "C"),
                    ("Y", "D"),
                    ("C", "D"),
                ]
            ),
        )

        assert QueryEngine(network).essential_airports() == {"X", "H", "Y"}

    def test_directed_cycle_has_none(self, network_factory):
        network = network_factory(
            ["A", "B", "C"],
            [("A", "B", 1.0, ["P"]), ("B", "C", 1.0, ["P"]), ("C", "A", 1.0, ["P"])],
        )

        assert QueryEngine(network).essential_airports() == set()

    def test_triangle_has_none(self, network_factory):
        network = network_factory(
            ["A", "B", "C"], self.both_ways([("A", "B"), ("B", "C"), ("C", "A")])
        )

        assert QueryEngine(network).essential_airports() == set()

    def test_each_component_has_its_own_root(self, network_factory):
        network = network_factory(
            ["A", "B", "C", "D", "E", "F"],
            [
                ("A", "B", 1.0, ["P"]),
                ("B", "C", 1.0, ["P"]),
                ("C", "A", 1.0, ["P"]),
                ("D", "E", 1.0, ["P"]),
                ("E", "F", 1.0, ["P"]),
                ("F", "D", 1.0, ["P"]),
            ],
        )

        assert QueryEngine(network).essential_airports() == set()

    def test_repeated_calls_agree(self, network_factory):
        network = network_factory(
            ["A", "B", "C"], self.both_ways([("A", "B"), ("B", "C")])
        )
        engine = QueryEngine(network)

        assert engine.essential_airports() == {"B"}
        assert engine.essential_airports() == {"B"}


class TestDiameter:
    def test_disconnected_network(self, network_factory):
        network = network_factory(
            ["A", "B", "C", "D", "E", "F"],
            [("A", "B", 1.0, ["P"]), ("B", "C", 1.0, ["P"]), ("D", "E", 1.0, ["P"])],
        )

        result = QueryEngine(network).diameter()

        assert result.diameter == 2
        assert path_codes(result.paths) == [("A", "B", "C")]
        assert [(a.code, b.code) for a, b in result.endpoints] == [("A", "C")]

    def test_every_witness_path_is_kept(self, network_factory):
        network = network_factory(
            ["A", "B", "C"],
            [("A", "B", 1.0, ["P"]), ("B", "C", 1.0, ["P"]), ("C", "A", 1.0, ["P"])],
        )

        result = QueryEngine(network).diameter()

        assert result.diameter == 2
        assert path_codes(result.paths) == [
            ("A", "B", "C"),
            ("B", "C", "A"),
            ("C", "A", "B"),
        ]

    def test_network_without_routes(self, network_factory):
        result = QueryEngine(network_factory(["A", "B"])).diameter()

        assert result.diameter == 0
        assert result.paths == ()


class TestShortestPaths:
    def test_all_minimum_hop_paths(self, network_factory):
        network = network_factory(
            ["A", "B", "C", "D", "E", "F"],
            [
                ("A", "B", 1.0, ["P"]),
                ("A", "C", 1.0, ["P"]),
                ("A", "E", 1.0, ["P"]),
                ("B", "D", 1.0, ["P"]),
                ("C", "D", 1.0, ["P"]),
                ("E", "F", 1.0, ["P"]),
                ("F", "D", 1.0, ["P"]),
            ],
        )

        paths = QueryEngine(network).shortest_paths("A", "D")

        assert path_codes(paths) == [("A", "B", "D"), ("A", "C", "D")]

    def test_direct_route_wins(self, abc_network):
        assert path_codes(QueryEngine(abc_network).shortest_paths("A", "C")) == [("A", "C")]

    def test_unreachable_or_unknown(self, abc_network):
        engine = QueryEngine(abc_network)

        assert engine.shortest_paths("C", "A") == []
        assert engine.shortest_paths("A", "ZZZ") == []
        assert engine.shortest_paths("ZZZ", "A") == []
