from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
)

# outcome: created, updated, removed, committed, rejected, conflict, failed
PROFILE_SYNC_TOTAL = Counter(
    "profile_sync_total",
    "Service profile write operations by outcome",
    ["operation", "outcome"],
)

PROFILE_SYNC_DURATION = Histogram(
    "profile_sync_duration_seconds",
    "Time spent inside one service profile transaction",
    ["operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
