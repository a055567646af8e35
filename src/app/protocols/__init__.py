"""Protocolos e contratos do core da aplicação."""

from .directory import DirectoryClientProtocol
from .followup import FollowupSenderProtocol
from .token_issuer import TokenIssuerProtocol

__all__ = [
    "DirectoryClientProtocol",
    "FollowupSenderProtocol",
    "TokenIssuerProtocol",
]
