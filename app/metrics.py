"""Metrics facade.

Service code should ONLY call the semantic helpers here so the Prometheus
metric names live in one place.

Metrics:
- catalog_reports_generated_total{report}     Reports served
- catalog_report_duration_seconds{report}     Time spent building a report
- catalog_low_stock_items                     Item count of the latest low-stock scan
- catalog_product_mutations_total{action}     Product create/update/delete operations
- catalog_category_mutations_total{action}    Category create/update/delete operations
- catalog_inventory_updates_total             Variant stock updates
- catalog_rate_limited_total{path}           Requests rejected by the rate limiter
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger("metrics")

_REPORTS_GENERATED = Counter(
    "catalog_reports_generated_total", "Inventory reports served", ["report"]
)
_REPORT_DURATION = Histogram(
    "catalog_report_duration_seconds",
    "Time spent building an inventory report",
    ["report"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
)
_LOW_STOCK_ITEMS = Gauge(
    "catalog_low_stock_items", "Number of items returned by the most recent low-stock scan"
)
_PRODUCT_MUTATIONS = Counter(
    "catalog_product_mutations_total", "Product create/update/delete operations", ["action"]
)
_CATEGORY_MUTATIONS = Counter(
    "catalog_category_mutations_total", "Category create/update/delete operations", ["action"]
)
_INVENTORY_UPDATES = Counter(
    "catalog_inventory_updates_total", "Variant stock updates"
)
_RATE_LIMITED = Counter(
    "catalog_rate_limited_total", "Requests rejected by the rate limiter", ["path"]
)


@contextmanager
def report_timer(report: str) -> Iterator[None]:
    """Time a report build and count it once it completes."""
    start = time.perf_counter()
    yield
    elapsed = time.perf_counter() - start
    _REPORT_DURATION.labels(report=report).observe(elapsed)
    _REPORTS_GENERATED.labels(report=report).inc()
    logger.debug("report=%s built in %.4fs", report, elapsed)


def low_stock_items(count: int) -> None:
    _LOW_STOCK_ITEMS.set(count)


def product_mutation(action: str) -> None:
    _PRODUCT_MUTATIONS.labels(action=action).inc()


def category_mutation(action: str) -> None:
    _CATEGORY_MUTATIONS.labels(action=action).inc()


def inventory_updated() -> None:
    _INVENTORY_UPDATES.inc()


def rate_limited(path: str) -> None:
    _RATE_LIMITED.labels(path=path).inc()


__all__ = [
    "report_timer",
    "low_stock_items",
    "product_mutation",
    "category_mutation",
    "inventory_updated",
    "rate_limited",
]
