"""Prometheus metrics for the users API."""

from prometheus_client import Counter, Histogram, Info

NAMESPACE = "users_api"

SERVICE_INFO = Info("service", "Build and deployment of the running service", namespace=NAMESPACE)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "HTTP requests by route template and status",
    ["method", "endpoint", "status_code"],
    namespace=NAMESPACE,
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    namespace=NAMESPACE,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

USER_OPERATIONS_TOTAL = Counter(
    "user_operations_total",
    "Committed user mutations",
    ["operation"],  # create | update | delete
    namespace=NAMESPACE,
)

APP_ERRORS_TOTAL = Counter(
    "errors_total",
    "Application errors rendered to clients, by error code",
    ["code"],
    namespace=NAMESPACE,
)


def set_service_info(version: str, environment: str) -> None:
    SERVICE_INFO.info({"version": version, "environment": environment})


def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Count a finished request and observe its latency.

    ``endpoint`` should be the route template so label cardinality stays
    bounded by the number of routes.
    """
    HTTP_REQUESTS_TOTAL.labels(method, endpoint, str(status_code)).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(method, endpoint).observe(duration_seconds)


def record_user_operation(operation: str) -> None:
    USER_OPERATIONS_TOTAL.labels(operation=operation).inc()


def record_app_error(code: str) -> None:
    APP_ERRORS_TOTAL.labels(code=code).inc()
