"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application.
"""

from .errors import (
    AirNetError,
    ConfigurationError,
    DataLoadError,
    InvalidQueryError,
    RenderingError,
)
from .models import (
    Airline,
    AirlinePolicy,
    Airport,
    AirportTraffic,
    Coordinates,
    DiameterResult,
    Itinerary,
    Projection,
    SearchAttribute,
)

__all__ = [
    # Models
    "Coordinates",
    "Airport",
    "Airline",
    "AirportTraffic",
    "DiameterResult",
    "Itinerary",
    "SearchAttribute",
    "Projection",
    "AirlinePolicy",
    # Errors
    "AirNetError",
    "InvalidQueryError",
    "DataLoadError",
    "ConfigurationError",
    "RenderingError",
]
