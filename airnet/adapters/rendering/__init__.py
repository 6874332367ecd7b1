"""Rendering adapters - Implementations of the rendering ports.

Available implementations:
- FoliumMapRenderer: Folium-based interactive map rendering
- TextReportWriter: Plain-text export of the whole network
"""

from .folium_adapter import FoliumMapRenderer
from .text_report import TextReportWriter

__all__ = ["FoliumMapRenderer", "TextReportWriter"]
