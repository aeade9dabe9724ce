from shared.metrics import get_counter, get_gauge, get_histogram

_SERVICE = "dashboard"

REFRESH_CYCLES_TOTAL = get_counter(
    "refresh_cycles_total", "Refresh cycles that replaced the payload.", _SERVICE
)
REFRESH_FAILURES_TOTAL = get_counter(
    "refresh_failures_total",
    "Refresh cycles abandoned, by failing source.",
    _SERVICE,
    labelnames=("source",),
)
REFRESH_SKIPPED_TOTAL = get_counter(
    "refresh_skipped_total",
    "Ticks skipped because the previous cycle was still in flight.",
    _SERVICE,
)
REFRESH_CYCLE_SECONDS = get_histogram(
    "refresh_cycle_seconds",
    "Wall time of a refresh cycle (fetch + transform).",
    _SERVICE,
)
LAST_SUCCESS_TIMESTAMP = get_gauge(
    "last_success_timestamp_seconds",
    "Unix time of the last successful refresh cycle.",
    _SERVICE,
)
OVERALL_SEVERITY = get_gauge(
    "overall_severity",
    "Severity rank of the overall status (0 unknown .. 3 unsafe).",
    _SERVICE,
)
