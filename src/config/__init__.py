"""Configuration loading for the SORACOM MCP server.

Main Functions
--------------

    - load_config(): Build a ServerConfig from YAML, environment and profile
    - get_config(): Get or load the singleton config instance
    - set_config(): Replace the singleton (tests)
    - reset_config(): Reset the singleton config instance
    - load_profile(): Read a SORACOM CLI profile

Usage Examples
--------------

    >>> from config import load_config
    >>> config = load_config()
    >>> config.coverage
    <Coverage.JP: 'jp'>

Configuration Priority
---------------------

1. SORACOM CLI profile (credentials and coverageType)
2. Environment variables (SORACOM_*)
3. YAML configuration file (``soracom:`` section)
4. Dataclass defaults
"""

from config.config import (
    ServerConfig,
    get_config,
    load_config,
    load_profile,
    reset_config,
    set_config,
)

__all__ = [
    "load_config",
    "load_profile",
    "get_config",
    "set_config",
    "reset_config",
    "ServerConfig",
]
