"""
History model for storing executed request records.

Each completed execution creates one history entry holding a snapshot of
the request as transmitted and the response as received. Entries are
never updated after creation.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import String, Text, JSON, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class History(Base):
    """
    SQLAlchemy model for request execution history.

    Attributes:
        id: System generated unique identifier (uuid4 hex)
        owner_id: Id of the authenticated user who ran the request
        endpoint: Requested URL
        method: HTTP method used
        timestamp: Creation time of the record
        request_headers: Ordered list of {"key", "value"} pairs as transmitted
        request_body: Body sent with the request, None for GET
        status: HTTP response status code
        status_text: HTTP reason phrase
        response_headers: Headers received in the response
        response_body: Parsed JSON value or raw text, see response_body_type
        response_body_type: "json" or "raw"
        timing_ms: Request execution time in milliseconds
        size_bytes: Response body size in bytes
    """
    __tablename__ = "history"
    __table_args__ = (
        Index("ix_history_owner_timestamp", "owner_id", "timestamp"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    owner_id: Mapped[str] = mapped_column(String(64))
    endpoint: Mapped[str] = mapped_column(Text)
    method: Mapped[str] = mapped_column(String(10))
    timestamp: Mapped[datetime] = mapped_column(default=_utcnow)
    request_headers: Mapped[list] = mapped_column(JSON, default=list)
    request_body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[int] = mapped_column(Integer)
    status_text: Mapped[str] = mapped_column(String(100))
    response_headers: Mapped[dict] = mapped_column(JSON, default=dict)
    response_body: Mapped[Any] = mapped_column(JSON, nullable=True)
    response_body_type: Mapped[str] = mapped_column(String(10), default="raw")
    timing_ms: Mapped[int] = mapped_column(Integer, default=0)
    size_bytes: Mapped[int] = mapped_column(Integer, default=0)
