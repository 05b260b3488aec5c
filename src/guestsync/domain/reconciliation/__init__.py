"""Reconciliation core: decide what each downstream system needs, then apply it.

Flow for one run:
1) render each source record into the downstream projection
2) match it against the current downstream listing
3) compare fingerprints and lifecycle status into a plan
4) apply the plan (calendar) or provision entries one by one (access codes)
"""

from __future__ import annotations

from .executor import OperationFailure, SyncReport, apply_plan
from .plan import PlanEntry, ReconciliationPlan, SyncAction, build_plan

__all__ = [
    "OperationFailure",
    "PlanEntry",
    "ReconciliationPlan",
    "SyncAction",
    "SyncReport",
    "apply_plan",
    "build_plan",
]
