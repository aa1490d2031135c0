from enum import StrEnum


class NotificationType(StrEnum):
    BLOOD_REQUEST_RESPONSE = "blood_request_response"


class DeliveryStatus(StrEnum):
    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"


TERMINAL_SEND_STATUSES: frozenset[str] = frozenset(
    {DeliveryStatus.DELIVERED, DeliveryStatus.FAILED}
)


class FailureKind(StrEnum):
    PRECONDITION = "precondition"
    TARGET = "target"
    TRANSPORT = "transport"
    UNEXPECTED = "unexpected"


class GatewayErrorCode(StrEnum):
    INVALID_REGISTRATION_TOKEN = "invalid-registration-token"
    TOKEN_NOT_REGISTERED = "registration-token-not-registered"
    UNKNOWN = "unknown"


# Per-token codes that mean the token will never work again.
PRUNABLE_ERROR_CODES: frozenset[str] = frozenset(
    {
        GatewayErrorCode.INVALID_REGISTRATION_TOKEN,
        GatewayErrorCode.TOKEN_NOT_REGISTERED,
    }
)
