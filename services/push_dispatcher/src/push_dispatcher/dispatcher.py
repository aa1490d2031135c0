"""Notification dispatcher: orchestrates delivery of one notification record."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from shared.db.models import ErrorDetail, NotificationRecord, UserRecord, truncate_token
from shared.db.repositories import UserRepository
from shared.enums import (
    PRUNABLE_ERROR_CODES,
    DeliveryStatus,
    FailureKind,
    GatewayErrorCode,
)

from push_dispatcher.config import DispatcherConfig
from push_dispatcher.dedupe import DispatchGuard
from push_dispatcher.messages import MessageBuilder
from push_dispatcher.providers.base import PushGateway
from push_dispatcher.status import StatusRecorder

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User document not found"
NOTIFICATIONS_DISABLED = "User has disabled notifications"


class PruneQueue(Protocol):
    def enqueue(self, user_id: str, token: str) -> bool: ...


@dataclass(slots=True)
class DeliveryOutcome:
    """Counts and failures accumulated over one processing pass."""

    success_count: int = 0
    failure_count: int = 0
    error_details: list[ErrorDetail] = field(default_factory=list)

    @property
    def status(self) -> DeliveryStatus:
        if self.success_count > 0:
            return DeliveryStatus.DELIVERED
        return DeliveryStatus.FAILED


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Terminal result of dispatching one notification."""

    status: DeliveryStatus
    success_count: int = 0
    failure_count: int = 0
    error: str | None = None
    failure_kind: FailureKind | None = None
    error_details: tuple[ErrorDetail, ...] = ()
    status_recorded: bool = True

    @property
    def success(self) -> bool:
        return self.status == DeliveryStatus.DELIVERED


class NotificationDispatcher:
    """Sends the push notification for a newly created notification record.

    One call to :meth:`dispatch` handles one record: it resolves the target
    user, sends to their device tokens in batches (or to the per-user topic
    when they have none), queues removal of dead tokens, and writes exactly
    one ``deliveryStatus`` update.
    """

    def __init__(
        self,
        users: UserRepository,
        gateway: PushGateway,
        status_recorder: StatusRecorder,
        prune_queue: PruneQueue,
        message_builder: MessageBuilder,
        config: DispatcherConfig,
        guard: DispatchGuard | None = None,
    ) -> None:
        self._users = users
        self._gateway = gateway
        self._status = status_recorder
        self._prune_queue = prune_queue
        self._messages = message_builder
        self._config = config
        self._guard = guard

    def dispatch(
        self, notification_id: str, data: Mapping[str, Any]
    ) -> DispatchResult | None:
        """Process a single created notification.

        Returns None when the record is not ours to handle (other type, or
        already claimed by an earlier delivery of the same event). Never
        raises: unexpected errors end in an ``error`` status.
        """
        notification_type = data.get("type")
        log_ctx: dict[str, Any] = {
            "notification_id": notification_id,
            "type": notification_type,
        }

        if notification_type != self._config.notification_type:
            logger.info("Skipping notification of unhandled type", extra=log_ctx)
            return None

        if self._guard is not None and not self._guard.claim(notification_id):
            logger.info("Notification already dispatched, skipping", extra=log_ctx)
            return None

        logger.info("Processing notification", extra=log_ctx)
        try:
            return self._process(notification_id, data, log_ctx)
        except Exception as exc:
            logger.exception("Unhandled error processing notification", extra=log_ctx)
            return self._finish(
                notification_id,
                DeliveryStatus.ERROR,
                error=str(exc),
                failure_kind=FailureKind.UNEXPECTED,
            )

    def _process(
        self,
        notification_id: str,
        data: Mapping[str, Any],
        log_ctx: dict[str, Any],
    ) -> DispatchResult:
        record = NotificationRecord.model_validate(dict(data))
        user_id = record.user_id
        log_ctx["user_id"] = user_id

        user = self._users.get_by_id(user_id)
        if user is None:
            logger.error(USER_NOT_FOUND, extra=log_ctx)
            return self._finish(
                notification_id,
                DeliveryStatus.ERROR,
                error=USER_NOT_FOUND,
                failure_kind=FailureKind.PRECONDITION,
            )

        if not user.wants_notifications:
            logger.info(NOTIFICATIONS_DISABLED, extra=log_ctx)
            return self._finish(
                notification_id,
                DeliveryStatus.SKIPPED,
                error=NOTIFICATIONS_DISABLED,
                failure_kind=FailureKind.PRECONDITION,
            )

        if user.device_tokens:
            outcome = self._send_to_tokens(notification_id, record, user, log_ctx)
        else:
            outcome = self._send_to_topic(notification_id, record, log_ctx)

        result = self._finish(
            notification_id,
            outcome.status,
            success_count=outcome.success_count,
            failure_count=outcome.failure_count,
            error_details=outcome.error_details,
        )
        logger.info(
            "Notification processed",
            extra={
                **log_ctx,
                "status": str(result.status),
                "success_count": result.success_count,
                "failure_count": result.failure_count,
            },
        )
        return result

    def _send_to_tokens(
        self,
        notification_id: str,
        record: NotificationRecord,
        user: UserRecord,
        log_ctx: dict[str, Any],
    ) -> DeliveryOutcome:
        tokens = user.device_tokens
        logger.info(
            "Sending to device tokens",
            extra={**log_ctx, "token_count": len(tokens)},
        )
        message = self._messages.for_tokens(notification_id, record)
        outcome = DeliveryOutcome()

        for index, batch in enumerate(_chunks(tokens, self._config.batch_size), 1):
            try:
                result = self._gateway.send_to_tokens(batch, message)
            except Exception as exc:
                logger.exception(
                    "Error sending batch", extra={**log_ctx, "batch": index}
                )
                outcome.error_details.append(
                    ErrorDetail(
                        batch=f"Batch {index}",
                        code=_error_code(exc),
                        message=str(exc),
                        kind=FailureKind.TRANSPORT,
                    )
                )
                continue

            outcome.success_count += result.success_count
            outcome.failure_count += result.failure_count

            for failure in result.failures:
                code = failure.error_code or GatewayErrorCode.UNKNOWN
                short_token = truncate_token(failure.token)
                logger.error(
                    "Error sending to token",
                    extra={**log_ctx, "token": short_token, "code": code},
                )
                outcome.error_details.append(
                    ErrorDetail(
                        token=short_token,
                        code=code,
                        message=failure.error_message or "",
                        kind=FailureKind.TARGET,
                    )
                )
                if code in PRUNABLE_ERROR_CODES:
                    self._prune_queue.enqueue(record.user_id, failure.token)

        return outcome

    def _send_to_topic(
        self,
        notification_id: str,
        record: NotificationRecord,
        log_ctx: dict[str, Any],
    ) -> DeliveryOutcome:
        topic = f"{self._config.topic_prefix}{record.user_id}"
        logger.info(
            "No device tokens, falling back to topic",
            extra={**log_ctx, "topic": topic},
        )
        message = self._messages.for_topic(notification_id, record)
        try:
            message_id = self._gateway.send_to_topic(topic, message)
        except Exception as exc:
            logger.exception(
                "Error sending topic notification", extra={**log_ctx, "topic": topic}
            )
            return DeliveryOutcome(
                failure_count=1,
                error_details=[
                    ErrorDetail(
                        method="topic",
                        code=_error_code(exc),
                        message=str(exc),
                        kind=FailureKind.TRANSPORT,
                    )
                ],
            )

        logger.info(
            "Sent topic message",
            extra={**log_ctx, "topic": topic, "message_id": message_id},
        )
        return DeliveryOutcome(success_count=1)

    def _finish(
        self,
        notification_id: str,
        status: DeliveryStatus,
        *,
        error: str | None = None,
        failure_kind: FailureKind | None = None,
        success_count: int = 0,
        failure_count: int = 0,
        error_details: Sequence[ErrorDetail] = (),
    ) -> DispatchResult:
        recorded = self._status.record(
            notification_id,
            status,
            error=error,
            success_count=success_count,
            failure_count=failure_count,
            error_details=error_details,
        )
        return DispatchResult(
            status=status,
            success_count=success_count,
            failure_count=failure_count,
            error=error,
            failure_kind=failure_kind,
            error_details=tuple(error_details),
            status_recorded=recorded.success,
        )


def _chunks(items: Sequence[str], size: int) -> list[Sequence[str]]:
    """Split *items* into consecutive slices of at most *size*."""
    return [items[i : i + size] for i in range(0, len(items), size)]


def _error_code(exc: BaseException) -> str:
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code:
        return code
    return GatewayErrorCode.UNKNOWN
