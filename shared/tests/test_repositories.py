"""Tests for the Firestore repositories."""

from collections.abc import Callable
from unittest.mock import MagicMock

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from shared.db.models import DeliveryStatusUpdate, ErrorDetail
from shared.db.repositories import NotificationRepository, UserRepository
from shared.enums import DeliveryStatus, FailureKind


class TestNotificationRepository:
    def test_uses_configured_collection(self, firestore_client: MagicMock) -> None:
        repo = NotificationRepository(firestore_client, "alerts")
        repo.document("n1")

        firestore_client.collection.assert_called_once_with("alerts")
        firestore_client.collection.return_value.document.assert_called_once_with("n1")

    def test_delivered_status_written(
        self, firestore_client: MagicMock, document_ref: MagicMock
    ) -> None:
        repo = NotificationRepository(firestore_client)
        detail = ErrorDetail(
            token="abcdefghij...", code="registration-token-not-registered",
            message="gone", kind=FailureKind.TARGET,
        )

        repo.update_delivery_status(
            "n1",
            DeliveryStatusUpdate(
                status=DeliveryStatus.DELIVERED,
                success_count=2,
                failure_count=1,
                error_details=[detail],
            ),
        )

        document_ref.update.assert_called_once_with(
            {
                "deliveryStatus": {
                    "status": "delivered",
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                    "successCount": 2,
                    "failureCount": 1,
                    "sentAt": firestore.SERVER_TIMESTAMP,
                    "errorDetails": [
                        {
                            "token": "abcdefghij...",
                            "code": "registration-token-not-registered",
                            "message": "gone",
                        }
                    ],
                }
            }
        )

    def test_error_status_has_no_sent_at(
        self, firestore_client: MagicMock, document_ref: MagicMock
    ) -> None:
        repo = NotificationRepository(firestore_client)

        repo.update_delivery_status(
            "n1",
            DeliveryStatusUpdate(
                status=DeliveryStatus.ERROR, error="User document not found"
            ),
        )

        fields = document_ref.update.call_args.args[0]["deliveryStatus"]
        assert fields["status"] == "error"
        assert fields["error"] == "User document not found"
        assert fields["successCount"] == 0
        assert fields["failureCount"] == 0
        assert "sentAt" not in fields
        assert "errorDetails" not in fields

    def test_only_delivery_status_touched(
        self, firestore_client: MagicMock, document_ref: MagicMock
    ) -> None:
        repo = NotificationRepository(firestore_client)
        repo.update_delivery_status(
            "n1", DeliveryStatusUpdate(status=DeliveryStatus.SKIPPED)
        )

        assert list(document_ref.update.call_args.args[0]) == ["deliveryStatus"]

    def test_watch_filters_by_type(self, firestore_client: MagicMock) -> None:
        repo = NotificationRepository(firestore_client)
        callback = MagicMock()

        watch = repo.watch("blood_request_response", callback)

        collection = firestore_client.collection.return_value
        collection.on_snapshot.assert_not_called()
        collection.where.assert_called_once()
        field_filter = collection.where.call_args.kwargs["filter"]
        assert isinstance(field_filter, FieldFilter)
        assert field_filter.field_path == "type"
        assert field_filter.op_string == "=="
        assert field_filter.value == "blood_request_response"
        query = collection.where.return_value
        query.on_snapshot.assert_called_once_with(callback)
        assert watch is query.on_snapshot.return_value


class TestUserRepository:
    def test_get_by_id_returns_user(
        self,
        firestore_client: MagicMock,
        document_ref: MagicMock,
        make_snapshot: Callable[[str, dict | None], MagicMock],
    ) -> None:
        document_ref.get.return_value = make_snapshot(
            "u1", {"deviceTokens": ["t1"], "notificationsEnabled": True}
        )
        repo = UserRepository(firestore_client)

        user = repo.get_by_id("u1")

        assert user is not None
        assert user.id == "u1"
        assert user.device_tokens == ["t1"]
        firestore_client.collection.assert_called_once_with("users")

    def test_get_by_id_missing_returns_none(
        self,
        firestore_client: MagicMock,
        document_ref: MagicMock,
        make_snapshot: Callable[[str, dict | None], MagicMock],
    ) -> None:
        document_ref.get.return_value = make_snapshot("u1", None)
        repo = UserRepository(firestore_client)

        assert repo.get_by_id("u1") is None

    def test_get_by_id_empty_document(
        self,
        firestore_client: MagicMock,
        document_ref: MagicMock,
        make_snapshot: Callable[[str, dict | None], MagicMock],
    ) -> None:
        document_ref.get.return_value = make_snapshot("u1", {})
        repo = UserRepository(firestore_client)

        user = repo.get_by_id("u1")

        assert user is not None
        assert user.wants_notifications is True
        assert user.device_tokens == []

    def test_get_by_id_tolerates_malformed_fields(
        self,
        firestore_client: MagicMock,
        document_ref: MagicMock,
        make_snapshot: Callable[[str, dict | None], MagicMock],
    ) -> None:
        document_ref.get.return_value = make_snapshot(
            "u1", {"notificationsEnabled": "maybe", "deviceTokens": ["t1", None]}
        )
        repo = UserRepository(firestore_client)

        user = repo.get_by_id("u1")

        assert user is not None
        assert user.wants_notifications is True
        assert user.device_tokens == ["t1"]

    def test_remove_device_token(
        self, firestore_client: MagicMock, document_ref: MagicMock
    ) -> None:
        repo = UserRepository(firestore_client)

        repo.remove_device_token("u1", "dead-token")

        firestore_client.collection.return_value.document.assert_called_once_with("u1")
        document_ref.update.assert_called_once_with(
            {
                "deviceTokens": firestore.ArrayRemove(["dead-token"]),
                "lastTokenUpdate": firestore.SERVER_TIMESTAMP,
            }
        )
