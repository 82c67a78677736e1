# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for database startup."""
from prometheus_client import Counter, Histogram

DB_CONNECT_ATTEMPTS = Counter(
    "db_connect_attempts_total", "Database pool establishment attempts", ["outcome"]
)
DB_CONNECT_DURATION = Histogram(
    "db_connect_duration_seconds",
    "Time spent establishing the database pool (seconds)",
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30],
)
