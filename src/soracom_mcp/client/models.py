"""Credential and region models shared by the client registry and config."""

from dataclasses import dataclass, field
from enum import Enum

from core.auth.token_cache import credential_identity


class Coverage(str, Enum):
    """SORACOM coverage type; selects the API endpoint."""

    JP = "jp"
    GLOBAL = "g"

    @classmethod
    def parse(cls, value: "str | Coverage | None", default: "Coverage | None" = None) -> "Coverage":
        """Parse a coverage string ("jp" / "g"), falling back to default when empty."""
        if value is None or value == "":
            if default is None:
                raise ValueError("Coverage type is required")
            return default
        if isinstance(value, Coverage):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid coverage type: {value!r}. Expected one of {[c.value for c in cls]}"
            ) from None


DEFAULT_COVERAGE = Coverage.JP

DEFAULT_ENDPOINTS: dict[Coverage, str] = {
    Coverage.JP: "https://api.soracom.io/v1",
    Coverage.GLOBAL: "https://g.api.soracom.io/v1",
}


@dataclass(frozen=True)
class AuthCredentials:
    """
    Long-lived SORACOM credentials (auth key id + secret).

    The secret is excluded from repr so credentials can be logged safely.
    """

    auth_key_id: str
    auth_key: str = field(repr=False)

    @property
    def identity(self) -> str:
        """Cache identity; derived from the key id only."""
        return credential_identity(self.auth_key_id)

    @property
    def is_complete(self) -> bool:
        return bool(self.auth_key_id and self.auth_key)

    @property
    def masked_key_id(self) -> str:
        """Key id with all but the first 8 characters hidden, for log output."""
        if len(self.auth_key_id) <= 8:
            return "***"
        return f"{self.auth_key_id[:8]}...({len(self.auth_key_id)} chars)"


__all__ = [
    "AuthCredentials",
    "Coverage",
    "DEFAULT_COVERAGE",
    "DEFAULT_ENDPOINTS",
]
