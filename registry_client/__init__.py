"""Rate-gated asynchronous client for the crates.io registry API."""

from registry_client.client import AsyncClient, create_client
from registry_client.core.errors import (
    ApiError,
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    RegistryError,
    TransportError,
)
from registry_client.schemas.query import CratesQuery, Sort
from registry_client.services.crate_stream import CrateStream, SequenceState

__all__ = [
    "ApiError",
    "AsyncClient",
    "ConfigurationError",
    "CrateStream",
    "CratesQuery",
    "NotFoundError",
    "PermissionDeniedError",
    "RegistryError",
    "SequenceState",
    "Sort",
    "TransportError",
    "create_client",
]
