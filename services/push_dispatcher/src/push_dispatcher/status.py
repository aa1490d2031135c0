"""Writes the terminal delivery status back onto a notification."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from shared.db.models import DeliveryStatusUpdate, ErrorDetail
from shared.db.repositories import NotificationRepository
from shared.enums import DeliveryStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordResult:
    """Outcome of a status write."""

    success: bool
    error: str | None = None


class StatusRecorder:
    """Performs the single ``deliveryStatus`` update for a notification."""

    def __init__(self, repository: NotificationRepository) -> None:
        self._repository = repository

    def record(
        self,
        notification_id: str,
        status: DeliveryStatus,
        *,
        error: str | None = None,
        success_count: int = 0,
        failure_count: int = 0,
        error_details: Sequence[ErrorDetail] = (),
    ) -> RecordResult:
        """Write the status once. Never raises and never retries."""
        update = DeliveryStatusUpdate(
            status=status,
            success_count=success_count,
            failure_count=failure_count,
            error=error,
            error_details=list(error_details),
        )
        try:
            self._repository.update_delivery_status(notification_id, update)
        except Exception as exc:
            logger.exception(
                "Failed to update notification status",
                extra={"notification_id": notification_id, "status": str(status)},
            )
            return RecordResult(success=False, error=str(exc))
        return RecordResult(success=True)
