"""Integração com Google (OAuth de service account + Directory API)."""

from app.infra.google.directory_client import GoogleDirectoryClient
from app.infra.google.token_issuer import ServiceAccountTokenIssuer

__all__ = [
    "GoogleDirectoryClient",
    "ServiceAccountTokenIssuer",
]
