from time import perf_counter
from typing import Optional

from prometheus_client import Counter, Histogram

# ---- METRICS (names are Prometheus-safe; units are in names) ----

PARSE_REQUESTS = Counter(
    "chief_complaint_parse_total",
    "Chief-complaint parse requests by outcome",
    labelnames=("outcome",),
)

DURATION_UNITS = Counter(
    "chief_complaint_duration_unit_total",
    "Recognized duration units",
    labelnames=("unit",),
)

PARSE_LATENCY_MS = Histogram(
    "chief_complaint_parse_latency_ms",
    "Latency of /api/chief-complaint/parse in milliseconds",
    # the parser is pure CPU; most requests finish well under 5 ms
    buckets=(0.5, 1, 2, 5, 10, 25, 50, 100, 250),
)

PARSE_CONFIDENCE = Histogram(
    "chief_complaint_confidence",
    "Confidence of returned parse results",
    buckets=(0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0),
)

ERRORS_TOTAL = Counter(
    "errors_total",
    "Count of errors by type",
    labelnames=("type",),
)

# ---- HELPERS ----

def timer_start() -> float:
    return perf_counter()

def timer_observe_ms(start: float) -> float:
    elapsed_ms = (perf_counter() - start) * 1000.0
    PARSE_LATENCY_MS.observe(elapsed_ms)
    return elapsed_ms

def record_outcome(outcome: str) -> None:
    PARSE_REQUESTS.labels(outcome=outcome).inc()

def record_result(confidence: float, unit: Optional[str]) -> None:
    PARSE_CONFIDENCE.observe(confidence)
    if unit:
        DURATION_UNITS.labels(unit=unit).inc()

def record_error(err_type: str) -> None:
    ERRORS_TOTAL.labels(type=err_type).inc()
