"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .base import CamelModel

from .execute import (
    HttpMethod,
    HeaderPair,
    RequestDescriptor,
    PreparedRequest,
    JsonBody,
    RawBody,
    ResponseBody,
    ExecutionResult,
    RequestSnapshot,
    ResponseSnapshot,
    ExecuteResponse,
)

from .history import (
    HistoryRecordResponse,
    HistoryListResponse,
    Pagination,
    ClearHistoryResponse,
    SnippetResponse,
)

from .statistics import StatisticsSnapshot

__all__ = [
    "CamelModel",
    # Execute schemas
    "HttpMethod",
    "HeaderPair",
    "RequestDescriptor",
    "PreparedRequest",
    "JsonBody",
    "RawBody",
    "ResponseBody",
    "ExecutionResult",
    "RequestSnapshot",
    "ResponseSnapshot",
    "ExecuteResponse",
    # History schemas
    "HistoryRecordResponse",
    "HistoryListResponse",
    "Pagination",
    "ClearHistoryResponse",
    "SnippetResponse",
    # Statistics schemas
    "StatisticsSnapshot",
]
