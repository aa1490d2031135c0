"""Pydantic models for the Firestore documents used by the dispatcher."""

import datetime
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.enums import DeliveryStatus, FailureKind

logger = logging.getLogger(__name__)

_DOCUMENT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
    extra="ignore",
)


class NotificationRecord(BaseModel):
    """A document in the ``notifications`` collection."""

    model_config = _DOCUMENT_CONFIG

    type: str
    user_id: str = Field(min_length=1)
    title: str | None = None
    body: str | None = None
    responder_name: str | None = None
    responder_phone: str | None = None
    blood_type: str | None = None
    responder_id: str | None = None
    request_id: str | None = None


class UserRecord(BaseModel):
    """A document in the ``users`` collection (only the fields we read)."""

    model_config = _DOCUMENT_CONFIG

    id: str
    # Kept as stored: only the boolean False opts out, so no coercion.
    notifications_enabled: Any = None
    device_tokens: list[str] = Field(default_factory=list)
    last_token_update: datetime.datetime | None = None

    @field_validator("device_tokens", mode="before")
    @classmethod
    def _usable_tokens(cls, value: Any) -> Any:
        """Treat a missing list as empty and drop entries that are not tokens."""
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        tokens = [t for t in value if isinstance(t, str) and t]
        if len(tokens) != len(value):
            logger.warning(
                "Ignoring malformed device tokens",
                extra={"dropped": len(value) - len(tokens)},
            )
        return tokens

    @property
    def wants_notifications(self) -> bool:
        return self.notifications_enabled is not False


def truncate_token(token: str) -> str:
    """Shorten a device token for logs and stored error details."""
    return f"{token[:10]}..."


class ErrorDetail(BaseModel):
    """One failed send, as stored in ``deliveryStatus.errorDetails``.

    Exactly one of ``token``, ``batch`` or ``method`` identifies what failed.
    ``kind`` is kept in memory for callers and is not persisted.
    """

    token: str | None = None
    batch: str | None = None
    method: str | None = None
    code: str
    message: str
    kind: FailureKind = Field(exclude=True)

    def to_document(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class DeliveryStatusUpdate(BaseModel):
    """Terminal delivery status written back onto a notification."""

    status: DeliveryStatus
    success_count: int = Field(default=0, ge=0)
    failure_count: int = Field(default=0, ge=0)
    error: str | None = None
    error_details: list[ErrorDetail] = Field(default_factory=list)
