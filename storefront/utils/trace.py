from contextvars import ContextVar
from typing import Optional
import uuid

TRACE_ID_HEADER = "X-Trace-Id"

_trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def new_trace_id() -> str:
    return str(uuid.uuid4())


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Bind a trace id to the current request context and return it."""
    value = trace_id or new_trace_id()
    _trace_id.set(value)
    return value


def get_trace_id() -> str:
    """Trace id of the current request, or a fresh one outside a request."""
    value = _trace_id.get()
    if value is None:
        value = set_trace_id()
    return value
