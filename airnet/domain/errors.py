"""Typed domain errors for the airport network analyzer.

Absence is never an error in the query layer: a missing airport, a missing
route or an unreachable destination is reported through empty results.
The types below cover the remaining failure modes (bad query arguments,
unreadable input data, rendering failures).

All errors inherit from AirNetError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class AirNetError(Exception):
    """Base error for the airport network domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class InvalidQueryError(AirNetError):
    """A query argument is outside its valid range.

    Attributes:
        parameter: Name of the offending argument
        value: The rejected value
    """

    parameter: str = ""
    value: Optional[object] = None


@dataclass
class DataLoadError(AirNetError):
    """Input data could not be read or is malformed.

    Attributes:
        file_path: Path to the data file if relevant
        line_number: Line of the offending record, if known
    """

    file_path: Optional[str] = None
    line_number: Optional[int] = None


@dataclass
class ConfigurationError(AirNetError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""


@dataclass
class RenderingError(AirNetError):
    """Report or map rendering failed.

    Attributes:
        output_path: Path where rendering was attempted
        renderer_type: Type of renderer that failed
    """

    output_path: Optional[str] = None
    renderer_type: str = ""
