from prometheus_client import Counter, Histogram, Gauge, REGISTRY, push_to_gateway


# tests import this module repeatedly, so reuse collectors already registered
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


PLACEHOLDERS_CREATED_TOTAL = get_or_create_metric(
    "blocker_placeholders_created_total",
    "Blocked events created on the primary calendar",
    Counter,
    labelnames=["source"],
)

PLACEHOLDERS_DELETED_TOTAL = get_or_create_metric(
    "blocker_placeholders_deleted_total",
    "Blocked events deleted from the primary calendar",
    Counter,
    labelnames=["source", "reason"],
)

EVENTS_REJECTED_TOTAL = get_or_create_metric(
    "blocker_events_rejected_total",
    "Source events not blocked, by filter",
    Counter,
    labelnames=["reason"],
)

RUN_DURATION_SECONDS = get_or_create_metric(
    "blocker_run_duration_seconds",
    "Duration of a reconcile or cleanup run",
    Histogram,
    labelnames=["operation"],
)

LAST_SUCCESS_UNIXTIME = get_or_create_metric(
    "blocker_last_success_unixtime",
    "Time of the last successful run",
    Gauge,
    labelnames=["operation"],
)


def push_metrics(gateway_url: str, job: str = "busy_blocker") -> None:
    push_to_gateway(gateway_url, job=job, registry=REGISTRY)
