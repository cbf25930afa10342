"""
Pydantic schemas for request execution history.

Defines schemas for returning history records, paginated lists,
clear-all results and code snippets.
"""

from datetime import datetime
from typing import Any, Literal

from .base import CamelModel
from .execute import HeaderPair, HttpMethod


class HistoryRequestPart(CamelModel):
    """Request half of a history snapshot."""
    headers: list[HeaderPair]
    body: str | None = None


class HistoryResponsePart(CamelModel):
    """Response half of a history snapshot."""
    status: int
    status_text: str
    headers: dict[str, str]
    body: Any = None
    body_type: Literal["json", "raw"]


class HistoryRecordResponse(CamelModel):
    """Schema for a single history record."""
    id: str
    owner_id: str
    endpoint: str
    method: HttpMethod
    timestamp: datetime
    request: HistoryRequestPart
    response: HistoryResponsePart
    timing: int
    size: int

    @classmethod
    def from_model(cls, history) -> "HistoryRecordResponse":
        """Build the wire shape from a History ORM row."""
        return cls(
            id=history.id,
            owner_id=history.owner_id,
            endpoint=history.endpoint,
            method=history.method,
            timestamp=history.timestamp,
            request=HistoryRequestPart(
                headers=[HeaderPair(**pair) for pair in history.request_headers or []],
                body=history.request_body
            ),
            response=HistoryResponsePart(
                status=history.status,
                status_text=history.status_text,
                headers=history.response_headers or {},
                body=history.response_body,
                body_type=history.response_body_type
            ),
            timing=history.timing_ms,
            size=history.size_bytes
        )


class Pagination(CamelModel):
    """Pagination metadata for history listings."""
    current_page: int
    total_pages: int
    total_requests: int
    limit: int


class HistoryListResponse(CamelModel):
    """Schema for paginated history list response."""
    history: list[HistoryRecordResponse]
    pagination: Pagination


class ClearHistoryResponse(CamelModel):
    """Number of records removed by a clear-all."""
    count: int


class SnippetResponse(CamelModel):
    """Generated client code for a history record."""
    language: Literal["fetch", "curl"]
    code: str
