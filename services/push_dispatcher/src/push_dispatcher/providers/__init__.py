"""Push gateway providers."""

from push_dispatcher.providers.base import (
    AndroidHints,
    ApnsHints,
    BatchResult,
    GatewayError,
    PushGateway,
    PushMessage,
    SendResult,
)
from push_dispatcher.providers.fcm import FCMGateway, error_code_for

__all__ = [
    "AndroidHints",
    "ApnsHints",
    "BatchResult",
    "FCMGateway",
    "GatewayError",
    "PushGateway",
    "PushMessage",
    "SendResult",
    "error_code_for",
]
