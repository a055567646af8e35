"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    CommandValidationError,
    FollowupDeliveryError,
    InfrastructureError,
    TokenIssuanceError,
    UnsupportedInteractionError,
    UpstreamApiError,
)

__all__ = [
    "CommandValidationError",
    "FollowupDeliveryError",
    "InfrastructureError",
    "TokenIssuanceError",
    "UnsupportedInteractionError",
    "UpstreamApiError",
]
