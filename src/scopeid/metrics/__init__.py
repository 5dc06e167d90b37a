"""Prometheus metrics for scopeid."""

from __future__ import annotations

from prometheus_client import Counter

# Allocation
IDS_ISSUED_TOTAL = Counter("scopeid_ids_issued_total", "Total ids issued", ["scope"])
REFILLS_TOTAL = Counter("scopeid_refills_total", "Batches reserved from the store", ["scope"])

# Store contention
WRITE_CONFLICTS_TOTAL = Counter(
    "scopeid_write_conflicts_total",
    "Optimistic writes rejected by the store",
    ["scope"],
)
CONTENTION_EXCEEDED_TOTAL = Counter(
    "scopeid_contention_exceeded_total",
    "Operations that ran out of write attempts",
    ["scope"],
)

# Administration
SEEDS_TOTAL = Counter("scopeid_seeds_total", "Seeds applied to a scope", ["scope"])

__all__ = [
    "IDS_ISSUED_TOTAL",
    "REFILLS_TOTAL",
    "WRITE_CONFLICTS_TOTAL",
    "CONTENTION_EXCEEDED_TOTAL",
    "SEEDS_TOTAL",
]
