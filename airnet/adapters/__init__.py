"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the query core to:
- Network storage (CSV files)
- Rendering (plain-text reports, Folium maps)
"""
