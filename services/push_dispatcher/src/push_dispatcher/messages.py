"""Push payload construction for blood request responses."""

import time

from shared.db.models import NotificationRecord

from push_dispatcher.config import PayloadConfig
from push_dispatcher.providers.base import AndroidHints, ApnsHints, PushMessage
from push_dispatcher.renderer import render_body


class MessageBuilder:
    """Builds provider-neutral messages from a notification record."""

    def __init__(self, config: PayloadConfig) -> None:
        self._config = config

    def for_tokens(
        self,
        notification_id: str,
        record: NotificationRecord,
        now_ms: int | None = None,
    ) -> PushMessage:
        """Message for direct device delivery.

        Carries the full Android channel styling and asks iOS for a
        background wake-up (content-available).
        """
        cfg = self._config
        return PushMessage(
            title=self._title(record),
            body=self._body(record),
            data=self._data(notification_id, record, now_ms),
            android=AndroidHints(
                priority="high",
                notification_priority="max",
                channel_id=cfg.android_channel_id,
                icon=cfg.android_icon,
                color=cfg.android_color,
                default_vibrate_timings=True,
                default_sound=True,
            ),
            apns=ApnsHints(
                sound="default", badge=cfg.apns_badge, content_available=True
            ),
        )

    def for_topic(
        self,
        notification_id: str,
        record: NotificationRecord,
        now_ms: int | None = None,
    ) -> PushMessage:
        """Message for the per-user fallback topic."""
        return PushMessage(
            title=self._title(record),
            body=self._body(record),
            data=self._data(notification_id, record, now_ms),
            android=AndroidHints(
                priority="high", notification_priority="max", sound="default"
            ),
            apns=ApnsHints(sound="default", badge=self._config.apns_badge),
        )

    def _title(self, record: NotificationRecord) -> str:
        return record.title or self._config.default_title

    def _body(self, record: NotificationRecord) -> str:
        if record.body:
            return record.body
        responder = record.responder_name or self._config.fallback_responder_name
        return render_body(self._config.default_body_template, responder)

    def _data(
        self,
        notification_id: str,
        record: NotificationRecord,
        now_ms: int | None,
    ) -> dict[str, str]:
        # FCM data values must all be strings.
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return {
            "type": record.type,
            "requestId": record.request_id or "",
            "responderName": record.responder_name or "",
            "responderPhone": record.responder_phone or "",
            "bloodType": record.blood_type or "",
            "responderId": record.responder_id or "",
            "timestamp": str(now_ms),
            "notification_id": notification_id,
            "click_action": self._config.click_action,
        }
