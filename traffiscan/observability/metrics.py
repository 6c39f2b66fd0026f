"""
Metrics definitions for TraffiScan.

This module defines Prometheus metrics for monitoring
ranking, classification and upstream weather calls.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
incidents_ranked = Counter(
    "incidents_ranked_total",
    "Number of records ranked by distance"
)

incidents_unlocated = Counter(
    "incidents_unlocated_total",
    "Number of records ranked without a readable coordinate"
)

weather_fetches = Counter(
    "weather_fetches_total",
    "Weather lookups against the upstream API",
    ["outcome"]
)

weather_impact = Counter(
    "weather_impact_total",
    "Weather classifications by impact level",
    ["level"]
)

stale_refreshes = Counter(
    "stale_refreshes_total",
    "Board refreshes discarded because a newer one started"
)

# 히스토그램 메트릭
rank_seconds = Histogram(
    "rank_duration_seconds",
    "Time spent ranking records",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1]
)

refresh_seconds = Histogram(
    "refresh_duration_seconds",
    "Total alerts board refresh latency",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0]
)

# 게이지 메트릭
nearby_incidents = Gauge(
    "nearby_incidents",
    "Incidents within the configured radius at the last refresh"
)

uptime_seconds = Gauge(
    "uptime_seconds",
    "Service uptime in seconds"
)
