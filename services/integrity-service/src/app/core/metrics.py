from prometheus_client import Counter, Histogram

from integrity_shared.utils.logging_config import MetricsLogger

metrics = MetricsLogger("integrity-service")

REQUEST_COUNT = Counter(
    "integrity_requests_total",
    "Total number of requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "integrity_request_latency_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)

SEALS_CREATED = Counter(
    "integrity_seals_created_total",
    "Total number of time-lock seals created",
)

SEAL_VERIFICATIONS = Counter(
    "integrity_seal_verifications_total",
    "Seal verifications by outcome",
    ["result"],  # valid, content_modified, seal_tampered, future_timestamp, error
)

FINGERPRINTS_GENERATED = Counter(
    "integrity_fingerprints_generated_total",
    "Total number of SimHash fingerprints generated",
)
