"""
History service for saving and managing request execution records.

Every operation is scoped to an owner id. Records belonging to another
owner behave exactly like records that do not exist.
"""

import logging
import math

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import config
from ..exceptions import PersistenceError, ResourceNotFoundError
from ..models.history import History
from ..schemas.execute import ExecutionResult, PreparedRequest, body_to_wire
from ..schemas.history import Pagination


logger = logging.getLogger(__name__)


def record_execution(
    db: Session,
    owner_id: str,
    request: PreparedRequest,
    result: ExecutionResult
) -> History:
    """
    Save a completed execution to the owner's history.

    The record is written in a single commit, so either the whole snapshot
    is stored or nothing is.

    Args:
        db: Database session
        owner_id: Authenticated owner of the record
        request: The request as transmitted
        result: The complete execution result

    Returns:
        The created history record

    Raises:
        PersistenceError: If the write fails
    """
    body_value, body_type = body_to_wire(result.body)
    history = History(
        owner_id=owner_id,
        endpoint=request.url,
        method=request.method,
        request_headers=[pair.model_dump() for pair in request.headers],
        request_body=request.body,
        status=result.status,
        status_text=result.status_text,
        response_headers=result.headers,
        response_body=body_value,
        response_body_type=body_type,
        timing_ms=result.timing_ms,
        size_bytes=result.size_bytes
    )
    try:
        db.add(history)
        db.commit()
        db.refresh(history)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to save history for owner %s", owner_id)
        raise PersistenceError("Failed to save request to history") from e
    return history


def list_history(
    db: Session,
    owner_id: str,
    page: int = 1,
    limit: int | None = None
) -> tuple[list[History], Pagination]:
    """
    Return one page of the owner's history, most recent first.

    Args:
        db: Database session
        owner_id: Owner whose records are listed
        page: 1-based page number; values below 1 are treated as 1
        limit: Page size; capped to MAX_PAGE_SIZE

    Returns:
        Tuple of (records on the page, pagination metadata)
    """
    if limit is None:
        limit = config.DEFAULT_PAGE_SIZE
    limit = max(1, min(limit, config.MAX_PAGE_SIZE))
    page = max(1, page)

    total = db.scalar(
        select(func.count()).select_from(History).where(History.owner_id == owner_id)
    ) or 0
    records = list(
        db.scalars(
            select(History)
            .where(History.owner_id == owner_id)
            .order_by(History.timestamp.desc(), History.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
    )
    pagination = Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit),
        total_requests=total,
        limit=limit
    )
    return records, pagination


def get_history(db: Session, owner_id: str, history_id: str) -> History:
    """
    Fetch one of the owner's records.

    Raises:
        ResourceNotFoundError: If the record does not exist or has another owner
    """
    history = db.scalar(
        select(History).where(History.id == history_id, History.owner_id == owner_id)
    )
    if history is None:
        raise ResourceNotFoundError("History record", history_id)
    return history


def delete_history(db: Session, owner_id: str, history_id: str) -> None:
    """
    Delete one of the owner's records.

    Raises:
        ResourceNotFoundError: If the record does not exist or has another owner
    """
    result = db.execute(
        delete(History).where(History.id == history_id, History.owner_id == owner_id)
    )
    db.commit()
    if result.rowcount == 0:
        raise ResourceNotFoundError("History record", history_id)


def clear_history(db: Session, owner_id: str) -> int:
    """
    Delete every record of the owner.

    Returns:
        Number of records removed; 0 when the history was already empty
    """
    result = db.execute(delete(History).where(History.owner_id == owner_id))
    db.commit()
    logger.info("Cleared %d history records for owner %s", result.rowcount, owner_id)
    return result.rowcount
