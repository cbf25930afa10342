"""
Usage statistics derived from request history.

Statistics are recomputed from the owner's full history on every call;
nothing is cached or stored, so they always match the current history.
"""

from collections import Counter
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.history import History
from ..schemas.statistics import StatisticsSnapshot


def build_snapshot(rows: Iterable[tuple[str, int]]) -> StatisticsSnapshot:
    """
    Fold (method, status) pairs into a statistics snapshot.

    A status in [200, 300) counts as successful. The success rate is a
    percentage rounded to two decimals, and 0 for an empty history.
    """
    methods: Counter[str] = Counter()
    statuses: Counter[str] = Counter()
    successful = 0

    for method, status in rows:
        methods[method] += 1
        statuses[str(status)] += 1
        if 200 <= status < 300:
            successful += 1

    total = sum(methods.values())
    success_rate = round(successful / total * 100, 2) if total else 0

    return StatisticsSnapshot(
        total_requests=total,
        successful_requests=successful,
        failed_requests=total - successful,
        success_rate=success_rate,
        method_breakdown=dict(methods),
        status_breakdown=dict(statuses)
    )


def summarize(db: Session, owner_id: str) -> StatisticsSnapshot:
    """Compute statistics over every history record of the owner."""
    rows = db.execute(
        select(History.method, History.status).where(History.owner_id == owner_id)
    )
    return build_snapshot((method, status) for method, status in rows)
