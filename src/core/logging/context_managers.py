"""Context managers for structured logging."""

from typing import Dict, Optional

from core.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(tool_name="Sim_getSim", request_id=request_id):
            # All logs in this block will carry tool_name and request_id
            await command.execute(args, context)
    """

    def __init__(
        self,
        tool_name: Optional[str] = None,
        request_id: Optional[str] = None,
        coverage: Optional[str] = None,
    ):
        self.new_context = {
            "tool_name": tool_name,
            "request_id": request_id,
            "coverage": coverage,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        for key, value in self.new_context.items():
            if value is not None:
                set_log_context(**{key: value})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Restore old context
        set_log_context(
            tool_name=self.old_context.get("tool_name", ""),
            request_id=self.old_context.get("request_id", ""),
            coverage=self.old_context.get("coverage", ""),
        )
        return False
