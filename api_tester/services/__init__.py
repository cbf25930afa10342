# Services package

from .normalizer import normalize_request, to_header_pairs, validate_url
from .http_executor import execute_request
from .history_service import record_execution, list_history, delete_history, clear_history
from .statistics import summarize

__all__ = [
    "normalize_request",
    "to_header_pairs",
    "validate_url",
    "execute_request",
    "record_execution",
    "list_history",
    "delete_history",
    "clear_history",
    "summarize",
]
