"""
Prometheus metrics for the configuration controller.
"""
from prometheus_client import Counter, Gauge


# Store operations, counted on the owning (local) side
store_metrics = {
    "operations": Counter(
        "confctl_store_operations_total",
        "Store operations executed",
        ["operation"]
    ),
    "entries": Gauge(
        "confctl_store_entries",
        "Top-level entries by shape",
        ["shape"]
    )
}


# Remote controller requests
remote_metrics = {
    "requests": Counter(
        "confctl_remote_requests_total",
        "Requests sent by remote controllers",
        ["operation", "result"]
    )
}
