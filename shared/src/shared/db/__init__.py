"""Database layer: document models, repositories, client factories."""

from shared.db.base import (
    close_firebase_app,
    create_firebase_app,
    create_firestore_client,
)
from shared.db.models import (
    DeliveryStatusUpdate,
    ErrorDetail,
    NotificationRecord,
    UserRecord,
    truncate_token,
)
from shared.db.repositories import NotificationRepository, UserRepository

__all__ = [
    "close_firebase_app",
    "create_firebase_app",
    "create_firestore_client",
    "DeliveryStatusUpdate",
    "ErrorDetail",
    "NotificationRecord",
    "UserRecord",
    "truncate_token",
    "NotificationRepository",
    "UserRepository",
]
