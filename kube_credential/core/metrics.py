"""Application metrics using the Prometheus client library.

Every metric the services expose is defined here, in one inventory.
Other modules import the specific metric and increment/observe it at the
point of action.  Prometheus scrapes them from GET /metrics.

Both services share this module.  Each runs in its own process with its
own default registry, so an issuance replica simply reports zero
verifications and vice versa.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Domain metrics
# ---------------------------------------------------------------------------

CREDENTIALS_ISSUED = Counter(
    "credentials_issued_total",
    "Issuance requests by outcome",
    ["outcome"],  # "new" or "existing"
)

VERIFICATIONS = Counter(
    "verifications_total",
    "Verification attempts by outcome",
    ["outcome"],  # "valid", "mismatch", "not_found", "error"
)

ISSUANCE_LOOKUP_DURATION = Histogram(
    "issuance_lookup_duration_seconds",
    "Time spent fetching the authoritative credential from issuance",
    # Upper buckets straddle the default 5s lookup deadline
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
