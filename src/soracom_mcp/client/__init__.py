"""
SORACOM API client layer.

Submodules:
    models     - Coverage, endpoints and long-lived credentials
    transport  - aiohttp transport with one-shot 401 re-authentication
    auth       - Credential exchange backed by the token cache
    client     - Authenticated client (registry entry)
    registry   - Client registry keyed by (credential identity, coverage)

Import SoracomClient and ClientRegistry from their submodules; this package
only re-exports the leaf types so resource modules can import the transport
without pulling in the client itself.
"""

from soracom_mcp.client.models import (
    DEFAULT_COVERAGE,
    DEFAULT_ENDPOINTS,
    AuthCredentials,
    Coverage,
)
from soracom_mcp.client.transport import SoracomApiError, SoracomTransport

__all__ = [
    "AuthCredentials",
    "Coverage",
    "DEFAULT_COVERAGE",
    "DEFAULT_ENDPOINTS",
    "SoracomApiError",
    "SoracomTransport",
]
