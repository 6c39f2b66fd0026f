"""
Adapters for TraffiScan.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .weather.client import OpenMeteoClient, WeatherUnavailableError
from .incidents.sources import SimulatedIncidentSource, FileIncidentSource

__all__ = ["OpenMeteoClient", "WeatherUnavailableError", "SimulatedIncidentSource", "FileIncidentSource"]
