"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the query core and the adapters
that feed it data or render its results.
"""

from .graph import NetworkRepositoryPort
from .rendering import MapRendererPort, ReportWriterPort

__all__ = [
    "NetworkRepositoryPort",
    "MapRendererPort",
    "ReportWriterPort",
]
