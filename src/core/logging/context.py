"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_tool_name: ContextVar[str] = ContextVar("tool_name", default="")
_request_id: ContextVar[str] = ContextVar("request_id", default="")
_coverage: ContextVar[str] = ContextVar("coverage", default="")


def set_log_context(
    tool_name: Optional[str] = None,
    request_id: Optional[str] = None,
    coverage: Optional[str] = None,
) -> None:
    if tool_name is not None:
        _tool_name.set(tool_name)
    if request_id is not None:
        _request_id.set(request_id)
    if coverage is not None:
        _coverage.set(coverage)


def get_log_context() -> Dict[str, str]:
    return {
        "tool_name": _tool_name.get(),
        "request_id": _request_id.get(),
        "coverage": _coverage.get(),
    }


def clear_log_context() -> None:
    _tool_name.set("")
    _request_id.set("")
    _coverage.set("")
