"""Firestore snapshot listener for newly created notifications."""

import logging
import queue
from dataclasses import dataclass
from typing import Any

from google.cloud.firestore_v1.watch import ChangeType

from shared.db.repositories import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NotificationCreated:
    """A notification document seen for the first time."""

    notification_id: str
    data: dict[str, Any]


class NotificationListener:
    """Turns Firestore watch callbacks into a pollable stream of creations.

    The watch runs on a thread owned by the Firestore client; events are
    handed to the main loop through a queue so that dispatching stays
    sequential. Only records of one notification type are watched.
    Documents that already carry ``deliveryStatus`` were
    handled earlier and are ignored, which also covers the full snapshot
    Firestore replays when the listener (re)starts.
    """

    def __init__(
        self, repository: NotificationRepository, notification_type: str
    ) -> None:
        self._events: queue.Queue[NotificationCreated] = queue.Queue()
        self._watch = repository.watch(notification_type, self._on_snapshot)
        logger.info(
            "Listening for notifications",
            extra={"type": notification_type},
        )

    def _on_snapshot(self, _snapshots: Any, changes: Any, _read_time: Any) -> None:
        for change in changes:
            if change.type != ChangeType.ADDED:
                continue
            document = change.document
            data = document.to_dict() or {}
            if "deliveryStatus" in data:
                continue
            self._events.put(NotificationCreated(document.id, data))

    def poll(self, timeout: float = 1.0) -> NotificationCreated | None:
        """Wait for the next creation. Returns None on timeout."""
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def pending(self) -> int:
        return self._events.qsize()

    def close(self) -> None:
        """Stop the watch. Already queued events are dropped."""
        self._watch.unsubscribe()
        logger.info("Listener closed", extra={"dropped": self.pending()})
