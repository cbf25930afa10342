"""
Pydantic schema for usage statistics derived from history.
"""

from .base import CamelModel


class StatisticsSnapshot(CamelModel):
    """
    Aggregate counters over an owner's full history.

    method_breakdown and status_breakdown both sum to total_requests.
    Key order inside the breakdowns carries no meaning.
    """
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    success_rate: float = 0
    method_breakdown: dict[str, int] = {}
    status_breakdown: dict[str, int] = {}
