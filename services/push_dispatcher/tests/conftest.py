"""Test fixtures for push_dispatcher tests."""

from collections.abc import Sequence
from unittest.mock import MagicMock

import pytest

from shared.db.models import UserRecord
from shared.db.repositories import NotificationRepository, UserRepository

from push_dispatcher.config import DispatcherConfig, PayloadConfig
from push_dispatcher.dispatcher import NotificationDispatcher
from push_dispatcher.messages import MessageBuilder
from push_dispatcher.providers.base import (
    BatchResult,
    PushGateway,
    PushMessage,
    SendResult,
)
from push_dispatcher.pruning import CeleryPruneQueue
from push_dispatcher.status import StatusRecorder

USER_ID = "user-123"
NOTIFICATION_ID = "notif-abc"


def all_succeed(tokens: Sequence[str], _message: PushMessage) -> BatchResult:
    return BatchResult(
        results=[SendResult(token=t, success=True, message_id=f"m-{t}") for t in tokens]
    )


@pytest.fixture()
def notification_data() -> dict:
    """A blood request response as written by the mobile app."""
    return {
        "type": "blood_request_response",
        "userId": USER_ID,
        "responderName": "Kofi",
        "responderPhone": "+233201234567",
        "bloodType": "A+",
        "responderId": "resp-1",
        "requestId": "req-1",
    }


@pytest.fixture()
def mock_users() -> MagicMock:
    """User repository returning an opted-in user with no tokens."""
    users = MagicMock(spec=UserRepository)
    users.get_by_id.return_value = UserRecord(id=USER_ID)
    return users


@pytest.fixture()
def mock_notifications() -> MagicMock:
    return MagicMock(spec=NotificationRepository)


@pytest.fixture()
def mock_gateway() -> MagicMock:
    """Gateway where every token and topic send succeeds."""
    gateway = MagicMock(spec=PushGateway)
    gateway.send_to_tokens.side_effect = all_succeed
    gateway.send_to_topic.return_value = "projects/p/messages/1"
    return gateway


@pytest.fixture()
def mock_prune_queue() -> MagicMock:
    queue = MagicMock(spec=CeleryPruneQueue)
    queue.enqueue.return_value = True
    return queue


@pytest.fixture()
def dispatcher_config() -> DispatcherConfig:
    return DispatcherConfig()


@pytest.fixture()
def message_builder() -> MessageBuilder:
    return MessageBuilder(PayloadConfig())


@pytest.fixture()
def dispatcher(
    mock_users: MagicMock,
    mock_notifications: MagicMock,
    mock_gateway: MagicMock,
    mock_prune_queue: MagicMock,
    message_builder: MessageBuilder,
    dispatcher_config: DispatcherConfig,
) -> NotificationDispatcher:
    return NotificationDispatcher(
        users=mock_users,
        gateway=mock_gateway,
        status_recorder=StatusRecorder(mock_notifications),
        prune_queue=mock_prune_queue,
        message_builder=message_builder,
        config=dispatcher_config,
    )
