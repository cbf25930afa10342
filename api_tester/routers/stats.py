"""
Statistics API route.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_owner
from ..database import get_db
from ..schemas.statistics import StatisticsSnapshot
from ..services.statistics import summarize


router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=StatisticsSnapshot)
def get_statistics(
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """Get request statistics computed from the caller's full history."""
    return summarize(db, owner_id)
