"""Shared JSON serialization utilities for type-safe JSON encoding."""

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Enum):
        return True, obj.value
    if isinstance(obj, Decimal):
        return True, float(obj)
    if isinstance(obj, Path):
        return True, str(obj)
    if isinstance(obj, BaseModel):
        return True, obj.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return True, dataclasses.asdict(obj)
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    Type-safe JSON serializer used as ``json.dumps(default=...)``.

    Keeps numbers numeric instead of converting everything to strings:
    - datetime/date → ISO 8601 string
    - Enum → value
    - Decimal → float
    - Path → string
    - pydantic models and dataclasses → dict
    - Everything else → string (fallback)
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    return str(obj)


__all__ = ["json_serializer"]
