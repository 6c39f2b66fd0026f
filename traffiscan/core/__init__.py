"""
Core domain models and pure functions for TraffiScan.

This module contains the domain models and pure business logic
that are independent of external I/O and infrastructure concerns.
"""

from .models import Coordinate, Incident, Ranked, WeatherImpact, WeatherSnapshot, PredictiveAlert
from .ranking import rank_by_distance, filter_nearby, take_nearest, nearby
from .classify import classify_weather, severity_probability

__all__ = [
    "Coordinate", "Incident", "Ranked", "WeatherImpact", "WeatherSnapshot", "PredictiveAlert",
    "rank_by_distance", "filter_nearby", "take_nearest", "nearby",
    "classify_weather", "severity_probability",
]
