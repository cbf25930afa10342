"""
Request execution API routes.

POST /api/request normalizes the submitted request, executes it against
the target API and records the result in the caller's history. Recording
is a separate step: if it fails the result is still returned, flagged
with savedToHistory = false.
"""

import logging

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_owner
from ..database import get_db
from ..exceptions import ErrorResponse, PersistenceError
from ..schemas.execute import (
    ExecuteResponse,
    RequestDescriptor,
    RequestSnapshot,
    ResponseSnapshot,
)
from ..services.history_service import record_execution
from ..services.http_executor import execute_request, get_http_transport
from ..services.normalizer import normalize_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/request", tags=["execute"])


@router.post(
    "",
    response_model=ExecuteResponse,
    responses={
        200: {"model": ExecuteResponse, "description": "Completed execution, any upstream status"},
        401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
        422: {"model": ErrorResponse, "description": "Invalid URL or request data"},
        502: {"model": ErrorResponse, "description": "Target API unreachable"},
        504: {"model": ErrorResponse, "description": "Target API timed out"},
    }
)
async def run_request(
    descriptor: RequestDescriptor,
    owner_id: str = Depends(get_current_owner),
    db: Session = Depends(get_db),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport)
):
    """
    Execute an HTTP request on behalf of the caller.

    Validation errors (422) and transport failures (502/504) are raised
    before anything is recorded. Upstream 4xx/5xx responses are normal
    results and are recorded like any other.
    """
    prepared = normalize_request(descriptor)
    result = await execute_request(prepared, transport=transport)

    saved = False
    history_id = None
    try:
        history = record_execution(db, owner_id, prepared, result)
    except PersistenceError:
        logger.warning("Returning result of %s %s without history record", prepared.method, prepared.url)
    else:
        saved = True
        history_id = history.id

    return ExecuteResponse(
        request=RequestSnapshot.from_prepared(prepared),
        response=ResponseSnapshot.from_result(result),
        saved_to_history=saved,
        history_id=history_id
    )
