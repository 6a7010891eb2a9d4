"""Per-request correlation id shared by middleware and log records."""

import logging
import uuid
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Create a request id and make it current for this context."""
    request_id = uuid.uuid4().hex
    _request_id.set(request_id)
    return request_id


def get_request_id() -> str:
    """Get current request ID from context."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Stamp every log record with the current request id (if any)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            request_id = _request_id.get()
            if request_id:
                record.request_id = request_id
        return True
