"""
Base class for SORACOM tool commands.

A command validates its arguments against a pydantic model, obtains an
authenticated client from the registry, performs one resource call and
formats the result as a text envelope. Every failure becomes an error
envelope; nothing escapes execute().
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from config.config import ServerConfig
from core.errors.exceptions import MissingCredentialsError
from core.utils.json_serializers import json_serializer
from soracom_mcp.client.client import SoracomClient
from soracom_mcp.client.models import Coverage
from soracom_mcp.client.registry import ClientRegistry
from soracom_mcp.commands.schemas import NoArgs

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Text envelope returned by a command."""

    text: str
    is_error: bool = False


@dataclass
class CommandContext:
    """Per-invocation collaborators handed to a command."""

    config: ServerConfig
    registry: ClientRegistry
    coverage: Coverage | None = None

    @property
    def effective_coverage(self) -> Coverage:
        return self.coverage or self.config.coverage


def _timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into ``field: message`` pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "Invalid arguments: " + "; ".join(parts)


class BaseCommand(ABC):
    """
    Base for all tool commands.

    Subclasses set ``name``, ``description`` and ``args_model`` and
    implement ``run``.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    args_model: ClassVar[type[BaseModel]] = NoArgs

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self.args_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    async def execute(self, args: dict[str, Any] | None, context: CommandContext) -> ToolResult:
        """Validate arguments and run the command, converting failures to error envelopes."""
        try:
            validated = self.args_model.model_validate(args or {})
        except ValidationError as e:
            return self.format_error(format_validation_error(e))

        try:
            return await self.run(validated, context)
        except Exception as e:
            logger.warning(
                "Command failed",
                extra={
                    "tool_name": self.name,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return self.format_error(str(e))

    @abstractmethod
    async def run(self, args: Any, context: CommandContext) -> ToolResult:
        """Command implementation; may raise."""

    async def get_authenticated_client(self, context: CommandContext) -> SoracomClient:
        """
        Acquire the registry client for the configured credentials.

        Raises:
            MissingCredentialsError: Key id or secret empty (checked before
                the registry is touched)
        """
        if not context.config.has_credentials:
            raise MissingCredentialsError()
        return await context.registry.acquire(
            context.config.credentials, context.effective_coverage
        )

    @staticmethod
    def format_success(data: Any, metadata: dict[str, Any] | None = None) -> ToolResult:
        response = {
            "data": data,
            "metadata": {"timestamp": _timestamp(), **(metadata or {})},
        }
        return ToolResult(
            json.dumps(response, indent=2, ensure_ascii=False, default=json_serializer)
        )

    @classmethod
    def format_list_response(
        cls, items: list[Any] | None, metadata: dict[str, Any] | None = None
    ) -> ToolResult:
        items = list(items or [])
        return cls.format_success({"items": items, "count": len(items)}, metadata)

    @staticmethod
    def format_error(message: str) -> ToolResult:
        return ToolResult(f"Error: {message}", is_error=True)


__all__ = [
    "BaseCommand",
    "CommandContext",
    "ToolResult",
    "format_validation_error",
]
