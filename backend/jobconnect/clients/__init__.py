"""Clients for external HTTP services."""

from jobconnect.clients.identity import (
    IdentityClient,
    IdentitySession,
    IdentityUser,
    build_identity_client,
)
from jobconnect.clients.storage import StorageClient
from jobconnect.clients.transport import MonitoredTransport, build_http_client

__all__ = [
    "IdentityClient",
    "IdentitySession",
    "IdentityUser",
    "MonitoredTransport",
    "StorageClient",
    "build_http_client",
    "build_identity_client",
]
