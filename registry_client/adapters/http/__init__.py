"""HTTP adapter layer - rate-gated access to the registry API."""

from registry_client.adapters.http.base import AbstractTransport
from registry_client.adapters.http.factory import create_transport
from registry_client.adapters.http.rate_gated import RateGatedTransport

__all__ = [
    "AbstractTransport",
    "RateGatedTransport",
    "create_transport",
]
