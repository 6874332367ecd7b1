"""Services layer - Queries and itineraries over the flight network.

Available services:
- QueryEngine: statistics, reachability, criticality and shortest paths
- ItineraryComposer: best multi-leg trips between airport selections
"""

from .itinerary import ItineraryComposer, TravelSelection, merge_paths
from .query_engine import QueryEngine

__all__ = ["QueryEngine", "ItineraryComposer", "TravelSelection", "merge_paths"]
