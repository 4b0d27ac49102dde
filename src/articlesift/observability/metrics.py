"""
Defines Prometheus metrics for the extraction pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

import prometheus_client
from prometheus_client import REGISTRY


def _registered(metric_cls):
    """Wrap a metric class so re-creating a name returns the collector already in the registry."""

    def _create(name: str, documentation: str, *args, **kwargs):  # type: ignore[no-untyped-def]
        collector = REGISTRY._names_to_collectors.get(name)
        if collector is None:
            try:
                collector = metric_cls(name, documentation, *args, **kwargs)
            except ValueError:
                # Another import registered it first
                collector = REGISTRY._names_to_collectors[name]
        return collector

    return _create


Counter = _registered(prometheus_client.Counter)
Histogram = _registered(prometheus_client.Histogram)


def _create_metrics() -> Dict[str, Any]:
    return {
        "parses_total": Counter(
            "articlesift_parses_total",
            "Completed hybrid parses by chosen parsing method",
            ["parsing_method"],
        ),
        "parse_failures_total": Counter(
            "articlesift_parse_failures_total",
            "Hybrid parses that failed entirely",
        ),
        "parse_duration_seconds": Histogram(
            "articlesift_parse_duration_seconds",
            "Wall-clock duration of a hybrid parse",
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
        ),
        "stage_failures_total": Counter(
            "articlesift_stage_failures_total",
            "Recoverable failures of individual extraction stages",
            ["stage", "error_type"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
