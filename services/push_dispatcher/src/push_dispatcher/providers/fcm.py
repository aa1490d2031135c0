"""Firebase Cloud Messaging gateway."""

import logging
from collections.abc import Sequence

import firebase_admin
from firebase_admin import exceptions, messaging

from shared.enums import GatewayErrorCode

from push_dispatcher.providers.base import (
    BatchResult,
    GatewayError,
    PushGateway,
    PushMessage,
    SendResult,
)

logger = logging.getLogger(__name__)


def error_code_for(exc: BaseException | None) -> str:
    """Map a firebase_admin exception to a stable kebab-case error code.

    Dead-token errors get the two codes that trigger token pruning; every
    other FirebaseError keeps its platform code (``QUOTA_EXCEEDED`` becomes
    ``quota-exceeded``).
    """
    if isinstance(exc, messaging.UnregisteredError):
        return GatewayErrorCode.TOKEN_NOT_REGISTERED
    if isinstance(exc, exceptions.InvalidArgumentError) and (
        "registration token" in str(exc).lower()
    ):
        return GatewayErrorCode.INVALID_REGISTRATION_TOKEN
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code:
        return code.lower().replace("_", "-")
    return GatewayErrorCode.UNKNOWN


class FCMGateway(PushGateway):
    """Sends push messages through firebase_admin.messaging."""

    def __init__(
        self, app: firebase_admin.App | None = None, dry_run: bool = False
    ) -> None:
        self._app = app
        self._dry_run = dry_run

    def send_to_tokens(
        self, tokens: Sequence[str], message: PushMessage
    ) -> BatchResult:
        tokens = list(tokens)
        multicast = messaging.MulticastMessage(
            tokens=tokens,
            notification=messaging.Notification(
                title=message.title, body=message.body
            ),
            data=message.data,
            android=self._android_config(message),
            apns=self._apns_config(message),
        )
        try:
            response = messaging.send_each_for_multicast(
                multicast, dry_run=self._dry_run, app=self._app
            )
        except exceptions.FirebaseError as exc:
            raise GatewayError(error_code_for(exc), str(exc)) from exc

        results = []
        for token, resp in zip(tokens, response.responses):
            if resp.success:
                results.append(
                    SendResult(token=token, success=True, message_id=resp.message_id)
                )
            else:
                results.append(
                    SendResult(
                        token=token,
                        success=False,
                        error_code=error_code_for(resp.exception),
                        error_message=str(resp.exception),
                    )
                )
        batch = BatchResult(results=results)
        logger.debug(
            "Multicast sent",
            extra={
                "tokens": len(tokens),
                "success_count": batch.success_count,
                "failure_count": batch.failure_count,
            },
        )
        return batch

    def send_to_topic(self, topic: str, message: PushMessage) -> str:
        msg = messaging.Message(
            topic=topic,
            notification=messaging.Notification(
                title=message.title, body=message.body
            ),
            data=message.data,
            android=self._android_config(message),
            apns=self._apns_config(message),
        )
        try:
            return messaging.send(msg, dry_run=self._dry_run, app=self._app)
        except exceptions.FirebaseError as exc:
            raise GatewayError(error_code_for(exc), str(exc)) from exc

    @staticmethod
    def _android_config(message: PushMessage) -> messaging.AndroidConfig:
        hints = message.android
        return messaging.AndroidConfig(
            priority=hints.priority,
            notification=messaging.AndroidNotification(
                channel_id=hints.channel_id,
                icon=hints.icon,
                color=hints.color,
                sound=hints.sound,
                priority=hints.notification_priority,
                default_vibrate_timings=hints.default_vibrate_timings or None,
                default_sound=hints.default_sound or None,
            ),
        )

    @staticmethod
    def _apns_config(message: PushMessage) -> messaging.APNSConfig:
        hints = message.apns
        return messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    sound=hints.sound,
                    badge=hints.badge,
                    content_available=hints.content_available or None,
                )
            )
        )
