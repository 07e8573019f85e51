"""SORACOM MCP server configuration.

Settings come from (highest priority first):
1. SORACOM CLI profile (~/.soracom/<profile>.json) for credentials
2. Environment variables (a .env file is loaded by the entry point)
3. Optional YAML file with a ``soracom:`` section
4. Dataclass defaults

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.errors.exceptions import ConfigurationError, MissingCredentialsError
from core.logging.setup import parse_log_level
from soracom_mcp.client.models import (
    DEFAULT_COVERAGE,
    DEFAULT_ENDPOINTS,
    AuthCredentials,
    Coverage,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config") / "config.yaml"
DEFAULT_PROFILE_DIR = Path.home() / ".soracom"
DEFAULT_TIMEOUT_SECONDS = 10.0

ENV_AUTH_KEY_ID = "SORACOM_AUTH_KEY_ID"
ENV_AUTH_KEY = "SORACOM_AUTH_KEY"
ENV_PROFILE = "SORACOM_PROFILE"
ENV_COVERAGE = "SORACOM_COVERAGE_TYPE"
ENV_LOG_LEVEL = "SORACOM_LOG_LEVEL"
ENV_TIMEOUT = "SORACOM_REQUEST_TIMEOUT_SECONDS"
ENV_ENDPOINT_JP = "SORACOM_API_ENDPOINT_JP"
ENV_ENDPOINT_G = "SORACOM_API_ENDPOINT_G"
ENV_LOG_DIR = "SORACOM_LOG_DIR"
ENV_LOG_JSON = "SORACOM_LOG_JSON"
ENV_CONFIG_FILE = "SORACOM_MCP_CONFIG"


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _parse_bool(value: Any, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass
class ServerConfig:
    """Runtime configuration for the MCP server process.

    The auth key secret is kept out of repr so the config can be logged.
    """

    auth_key_id: str = ""
    auth_key: str = field(default="", repr=False)
    coverage: Coverage = DEFAULT_COVERAGE
    profile: Optional[str] = None
    log_level: str = "INFO"
    request_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    endpoints: Dict[Coverage, str] = field(default_factory=lambda: dict(DEFAULT_ENDPOINTS))
    log_dir: Optional[Path] = None
    log_json: bool = True

    @property
    def credentials(self) -> AuthCredentials:
        return AuthCredentials(self.auth_key_id, self.auth_key)

    @property
    def has_credentials(self) -> bool:
        return bool(self.auth_key_id and self.auth_key)

    def validate(self, require_credentials: bool = True) -> None:
        """Validate configuration values.

        Raises:
            MissingCredentialsError: No credential pair configured
            ConfigurationError: Invalid log level, timeout or endpoint
        """
        if require_credentials and not self.has_credentials:
            raise MissingCredentialsError(
                f"SORACOM credentials not configured. Set {ENV_AUTH_KEY_ID} and "
                f"{ENV_AUTH_KEY}, or {ENV_PROFILE}"
            )

        try:
            parse_log_level(self.log_level)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        if self.request_timeout_seconds <= 0:
            raise ConfigurationError(
                f"request_timeout_seconds must be > 0, got {self.request_timeout_seconds}"
            )

        for coverage, url in self.endpoints.items():
            if not str(url).startswith(("http://", "https://")):
                raise ConfigurationError(
                    f"API endpoint for coverage '{coverage.value}' must start with "
                    f"http:// or https://, got '{url}'"
                )


def load_profile(profile: str, profile_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Read a SORACOM CLI profile (authKeyId, authKey, optional coverageType).

    Raises:
        ConfigurationError: Profile missing, unreadable, not JSON, or incomplete
    """
    path = (profile_dir or DEFAULT_PROFILE_DIR) / f"{profile}.json"
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Failed to read SORACOM profile '{profile}': {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"SORACOM profile '{profile}' is not valid JSON: {path}") from e

    if not isinstance(data, dict) or not data.get("authKeyId") or not data.get("authKey"):
        raise ConfigurationError(
            f"SORACOM profile '{profile}' must contain authKeyId and authKey: {path}"
        )

    logger.debug("Loaded SORACOM profile", extra={"count": len(data)})
    return data


def _parse_coverage(value: Any, source: str) -> Coverage:
    try:
        return Coverage.parse(value, default=DEFAULT_COVERAGE)
    except ValueError as e:
        raise ConfigurationError(f"{source}: {e}") from e


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    profile_dir: Optional[Path] = None,
    require_credentials: bool = True,
) -> ServerConfig:
    """Load server configuration from YAML, environment and profile.

    Args:
        config_path: YAML file (default: $SORACOM_MCP_CONFIG or config/config.yaml).
            A missing file is not an error.
        overrides: Values applied over the YAML ``soracom:`` section
        profile_dir: Directory holding SORACOM CLI profiles (default: ~/.soracom)
        require_credentials: Fail when no credential pair is found

    Raises:
        MissingCredentialsError: No credentials configured
        ConfigurationError: Invalid values or unreadable profile
    """
    if config_path is None:
        config_path = Path(os.getenv(ENV_CONFIG_FILE) or DEFAULT_CONFIG_FILE)

    yaml_data = _expand_env_vars(load_yaml(config_path))
    if yaml_data:
        logger.info("Loading configuration from file", extra={"count": len(yaml_data)})

    soracom = yaml_data.get("soracom", {}) or {}
    if not isinstance(soracom, dict):
        raise ConfigurationError(f"Invalid config file: 'soracom:' must be a mapping ({config_path})")
    if overrides:
        soracom = {**soracom, **overrides}

    yaml_endpoints = soracom.get("endpoints", {}) or {}

    auth_key_id = os.getenv(ENV_AUTH_KEY_ID) or soracom.get("auth_key_id", "")
    auth_key = os.getenv(ENV_AUTH_KEY) or soracom.get("auth_key", "")

    profile_name = os.getenv(ENV_PROFILE) or soracom.get("profile")
    profile_data: Dict[str, Any] = {}
    if profile_name:
        profile_data = load_profile(profile_name, profile_dir)
        auth_key_id = profile_data["authKeyId"]
        auth_key = profile_data["authKey"]

    coverage_value = (
        os.getenv(ENV_COVERAGE)
        or profile_data.get("coverageType")
        or soracom.get("coverage_type")
    )
    coverage = _parse_coverage(coverage_value, "coverage_type")

    timeout_value = os.getenv(ENV_TIMEOUT) or soracom.get(
        "request_timeout_seconds", DEFAULT_TIMEOUT_SECONDS
    )
    try:
        timeout_seconds = float(timeout_value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"request_timeout_seconds must be a number, got '{timeout_value}'"
        ) from e

    log_dir_value = os.getenv(ENV_LOG_DIR) or soracom.get("log_dir")

    config = ServerConfig(
        auth_key_id=auth_key_id or "",
        auth_key=auth_key or "",
        coverage=coverage,
        profile=profile_name,
        log_level=(os.getenv(ENV_LOG_LEVEL) or soracom.get("log_level") or "INFO").upper(),
        request_timeout_seconds=timeout_seconds,
        endpoints={
            Coverage.JP: os.getenv(ENV_ENDPOINT_JP)
            or yaml_endpoints.get("jp")
            or DEFAULT_ENDPOINTS[Coverage.JP],
            Coverage.GLOBAL: os.getenv(ENV_ENDPOINT_G)
            or yaml_endpoints.get("g")
            or DEFAULT_ENDPOINTS[Coverage.GLOBAL],
        },
        log_dir=Path(log_dir_value) if log_dir_value else None,
        log_json=_parse_bool(os.getenv(ENV_LOG_JSON) or soracom.get("log_json"), default=True),
    )

    config.validate(require_credentials=require_credentials)

    logger.debug(
        "Configuration loaded",
        extra={
            "coverage": config.coverage.value,
            "timeout_seconds": config.request_timeout_seconds,
            "auth_key_id": config.credentials.masked_key_id if config.auth_key_id else None,
        },
    )
    return config


_server_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get or load the singleton server config instance."""
    global _server_config
    if _server_config is None:
        _server_config = load_config()
    return _server_config


def set_config(config: ServerConfig) -> None:
    """Set the singleton server config instance (useful for testing)."""
    global _server_config
    _server_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _server_config
    _server_config = None
