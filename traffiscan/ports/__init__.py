"""
Port interfaces for TraffiScan.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external adapters.
"""

from .weather import WeatherPort
from .incidents import IncidentSourcePort

__all__ = ["WeatherPort", "IncidentSourcePort"]
