from __future__ import annotations

import pytest

from geolookup import NoOpLookupMetrics, PrometheusLookupMetrics


def test_noop_metrics_accepts_any_counter():
    NoOpLookupMetrics().incr("dispatch_failed", tags={"kind": "immediate"})


def test_prometheus_metrics_increment_labelled_counters():
    prometheus_client = pytest.importorskip("prometheus_client")
    registry = prometheus_client.CollectorRegistry()
    metrics = PrometheusLookupMetrics(namespace="geotest", registry=registry)

    metrics.incr("dispatch_failed", tags={"kind": "immediate"})
    metrics.incr("dispatch_failed", tags={"kind": "immediate"})
    metrics.incr("dispatch_failed", tags={"kind": "deferred"})
    metrics.incr("waiters_resolved", 3)

    assert registry.get_sample_value(
        "geotest_dispatch_failed_total", {"kind": "immediate"}
    ) == 2.0
    assert registry.get_sample_value(
        "geotest_dispatch_failed_total", {"kind": "deferred"}
    ) == 1.0
    assert registry.get_sample_value("geotest_waiters_resolved_total") == 3.0


def test_prometheus_metrics_reject_changed_label_set():
    prometheus_client = pytest.importorskip("prometheus_client")
    metrics = PrometheusLookupMetrics(
        namespace="geotest", registry=prometheus_client.CollectorRegistry()
    )

    metrics.incr("dispatch_deferred", tags={"trigger": "trailing"})
    with pytest.raises(ValueError):
        metrics.incr("dispatch_deferred")
