"""
History record API routes.

Provides endpoints for viewing and managing the caller's execution
history. Records are created by POST /api/request; records owned by
other users are reported as not found.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import config
from ..auth import get_current_owner
from ..database import get_db
from ..schemas.execute import HeaderPair
from ..schemas.history import (
    ClearHistoryResponse,
    HistoryListResponse,
    HistoryRecordResponse,
    SnippetResponse,
)
from ..services import history_service
from ..services.snippet import build_curl_snippet, build_fetch_snippet


router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=HistoryListResponse)
def list_history(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1),
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Get one page of history records, most recent first.

    limit is capped server-side to MAX_PAGE_SIZE.
    """
    records, pagination = history_service.list_history(db, owner_id, page=page, limit=limit)
    return HistoryListResponse(
        history=[HistoryRecordResponse.from_model(record) for record in records],
        pagination=pagination
    )


@router.get("/{history_id}", response_model=HistoryRecordResponse)
def get_history(
    history_id: str,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """Get a single history record by ID."""
    record = history_service.get_history(db, owner_id, history_id)
    return HistoryRecordResponse.from_model(record)


@router.get("/{history_id}/snippet", response_model=SnippetResponse)
def get_history_snippet(
    history_id: str,
    language: Literal["fetch", "curl"] = "fetch",
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """Generate client code that repeats a recorded request."""
    record = history_service.get_history(db, owner_id, history_id)
    headers = [HeaderPair(**pair) for pair in record.request_headers or []]
    builder = build_curl_snippet if language == "curl" else build_fetch_snippet
    code = builder(record.method, record.endpoint, headers, record.request_body)
    return SnippetResponse(language=language, code=code)


@router.delete("/{history_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_history(
    history_id: str,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Delete a single history record by ID.

    Raises:
        ResourceNotFoundError: 404 if the record is missing or not the caller's
    """
    history_service.delete_history(db, owner_id, history_id)
    return None


@router.delete("", response_model=ClearHistoryResponse)
def clear_all_history(
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """Clear all of the caller's history records."""
    count = history_service.clear_history(db, owner_id)
    return ClearHistoryResponse(count=count)
