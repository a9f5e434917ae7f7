"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for lookup coalescing observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class LookupMetrics(Protocol):
    """Minimal metrics interface for coalescer instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpLookupMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class PrometheusLookupMetrics:
    """
    Prometheus counters for coalescer events, one `<namespace>_<name>_total`
    series per event name.

    Label names are fixed by the first increment of each name; tags are
    passed as Prometheus label keywords. Requires `prometheus_client`.
    """

    def __init__(self, *, namespace: str = "geolookup", registry=None) -> None:
        try:
            import prometheus_client
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusLookupMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._prometheus = prometheus_client
        self._namespace = namespace
        self._registry = registry or prometheus_client.REGISTRY
        self._counters: dict[str, tuple[object, tuple[str, ...]]] = {}

    def _counter(self, name: str, label_names: tuple[str, ...]):
        known = self._counters.get(name)
        if known is None:
            counter = self._prometheus.Counter(
                name,
                f"Coalescer event count: {name.replace('_', ' ')}",
                label_names,
                namespace=self._namespace,
                registry=self._registry,
            )
            self._counters[name] = (counter, label_names)
            return counter
        counter, expected = known
        if expected != label_names:
            raise ValueError(
                f"Metric '{name}' uses labels {expected}, got {label_names}"
            )
        return counter

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        labels = {key: str(val) for key, val in (tags or {}).items()}
        counter = self._counter(name, tuple(sorted(labels)))
        (counter.labels(**labels) if labels else counter).inc(value)
