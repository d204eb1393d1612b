"""Prometheus-backed metrics sink.

Each sink owns a ``CollectorRegistry`` so several applications (or tests)
can live in one process without clashing over metric names. Dotted names
such as ``requests.duration_ms`` become ``storefront_requests_duration_ms``.
"""

from __future__ import annotations

import logging
from typing import Mapping

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from storefront.application.ports import MetricsSink

logger = logging.getLogger(__name__)

NAMESPACE = "storefront"

# Request durations are reported in milliseconds.
DURATION_BUCKETS_MS = (1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000)


def metric_name(name: str) -> str:
    return f"{NAMESPACE}_{name.replace('.', '_').replace('-', '_')}"


class PrometheusMetricsSink(MetricsSink):

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}

    def increment(self, name: str, value: int = 1, tags: Mapping[str, str] | None = None) -> None:
        counter = self._counters.get(name)
        if counter is None:
            counter = Counter(
                metric_name(name),
                f"Count of {name}",
                sorted(tags or {}),
                registry=self.registry,
            )
            self._counters[name] = counter
        _labelled(counter, tags).inc(value)
        logger.debug("metric %s += %d %s", name, value, dict(tags or {}))

    def observe(self, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        histogram = self._histograms.get(name)
        if histogram is None:
            histogram = Histogram(
                metric_name(name),
                f"Distribution of {name}",
                sorted(tags or {}),
                buckets=DURATION_BUCKETS_MS,
                registry=self.registry,
            )
            self._histograms[name] = histogram
        _labelled(histogram, tags).observe(value)
        logger.debug("metric %s observed %.3f %s", name, value, dict(tags or {}))

    def exposition(self) -> str:
        """The registry in the Prometheus text format."""
        return generate_latest(self.registry).decode("utf-8")


def _labelled(metric, tags: Mapping[str, str] | None):
    return metric.labels(**tags) if tags else metric
