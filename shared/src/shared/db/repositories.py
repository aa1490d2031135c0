"""Data access repositories with constructor-injected Firestore clients."""

from collections.abc import Callable
from typing import Any

from google.cloud import firestore
from google.cloud.firestore import Client, DocumentReference
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.watch import Watch

from shared.db.models import DeliveryStatusUpdate, UserRecord
from shared.enums import TERMINAL_SEND_STATUSES


class NotificationRepository:
    """Data access for the notifications collection."""

    def __init__(self, client: Client, collection: str = "notifications") -> None:
        self._collection = client.collection(collection)

    def document(self, notification_id: str) -> DocumentReference:
        return self._collection.document(notification_id)

    def update_delivery_status(
        self, notification_id: str, update: DeliveryStatusUpdate
    ) -> None:
        """Replace the ``deliveryStatus`` map of a notification.

        Only ``deliveryStatus`` is written; every other field of the
        document is left untouched.
        """
        fields: dict[str, Any] = {
            "status": str(update.status),
            "updatedAt": firestore.SERVER_TIMESTAMP,
            "successCount": update.success_count,
            "failureCount": update.failure_count,
        }
        if update.status in TERMINAL_SEND_STATUSES:
            fields["sentAt"] = firestore.SERVER_TIMESTAMP
        if update.error:
            fields["error"] = update.error
        if update.error_details:
            fields["errorDetails"] = [d.to_document() for d in update.error_details]

        self.document(notification_id).update({"deliveryStatus": fields})

    def watch(self, notification_type: str, callback: Callable[..., None]) -> Watch:
        """Start a snapshot listener on notifications of one type.

        *callback* runs on a background thread owned by the Firestore
        client with ``(snapshots, changes, read_time)``.
        """
        query = self._collection.where(
            filter=FieldFilter("type", "==", notification_type)
        )
        return query.on_snapshot(callback)


class UserRepository:
    """Data access for user documents (preferences and device tokens)."""

    def __init__(self, client: Client, collection: str = "users") -> None:
        self._collection = client.collection(collection)

    def get_by_id(self, user_id: str) -> UserRecord | None:
        """Fetch a user, or None if the document does not exist."""
        snapshot = self._collection.document(user_id).get()
        if not snapshot.exists:
            return None
        return UserRecord.model_validate({**(snapshot.to_dict() or {}), "id": snapshot.id})

    def remove_device_token(self, user_id: str, token: str) -> None:
        """Remove *token* from ``deviceTokens`` and stamp ``lastTokenUpdate``.

        Uses an array-remove transform, so removing a token that is no
        longer present is a no-op rather than an error.
        """
        self._collection.document(user_id).update(
            {
                "deviceTokens": firestore.ArrayRemove([token]),
                "lastTokenUpdate": firestore.SERVER_TIMESTAMP,
            }
        )
