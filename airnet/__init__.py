"""Top-level package for the airport network analyzer.

The package models airports and flight routes as a directed,
airline-labeled graph and answers statistics, reachability,
criticality and routing queries over it.
"""

__version__ = "0.1.0"
