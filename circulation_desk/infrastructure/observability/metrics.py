"""Prometheus metrics for loan operations, notification polling and API latency"""

from prometheus_client import Counter, Histogram

# Loan lifecycle metrics
loan_operation_counter = Counter(
    "circulation_loan_operations_total",
    "Loan operations attempted",
    ["operation", "outcome"],  # checkout | checkin | renew ; success | failure
)

duplicate_request_counter = Counter(
    "circulation_duplicate_requests_total",
    "Requests rejected because the same item already had one in flight",
    ["operation"],
)

# Notification metrics
notification_poll_counter = Counter(
    "circulation_notification_polls_total",
    "Notification refreshes",
    ["outcome"],  # success | failure | no_session
)

# Catalog API metrics
api_request_histogram = Histogram(
    "circulation_api_request_seconds",
    "Catalog API response time",
    ["endpoint"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


def record_loan_operation(operation: str, succeeded: bool) -> None:
    """Record loan operation outcome"""
    outcome = "success" if succeeded else "failure"
    loan_operation_counter.labels(operation=operation, outcome=outcome).inc()
