"""Entry point for the push dispatcher.

Watches the notifications collection and dispatches a push notification
for every newly created record, one record at a time.
"""

import logging
import signal

from celery import Celery
from redis import Redis

from shared.config import FirebaseConfig, RedisConfig
from shared.db.base import (
    close_firebase_app,
    create_firebase_app,
    create_firestore_client,
)
from shared.db.repositories import NotificationRepository, UserRepository

from push_dispatcher.config import CeleryConfig, DispatcherConfig, PayloadConfig
from push_dispatcher.dedupe import DispatchGuard
from push_dispatcher.dispatcher import NotificationDispatcher
from push_dispatcher.listener import NotificationListener
from push_dispatcher.log import setup_logging
from push_dispatcher.messages import MessageBuilder
from push_dispatcher.providers.fcm import FCMGateway
from push_dispatcher.pruning import CeleryPruneQueue
from push_dispatcher.status import StatusRecorder

logger = logging.getLogger(__name__)


def main() -> None:
    config = DispatcherConfig()
    setup_logging(config.log_level)

    firebase_config = FirebaseConfig()
    celery_config = CeleryConfig()

    # Firebase
    firebase_app = create_firebase_app(firebase_config)
    client = create_firestore_client(firebase_app)
    notifications = NotificationRepository(
        client, firebase_config.notifications_collection
    )
    users = UserRepository(client, firebase_config.users_collection)

    # Celery (used only for send_task, no worker here)
    celery_app = Celery(broker=celery_config.broker_url)

    # Redis (only when the redelivery guard is on)
    redis_client: Redis | None = None
    guard: DispatchGuard | None = None
    if config.dedupe_enabled:
        redis_config = RedisConfig()
        redis_client = Redis(
            host=redis_config.host, port=redis_config.port, db=redis_config.db
        )
        guard = DispatchGuard(redis_client, config.dedupe_ttl_seconds)

    dispatcher = NotificationDispatcher(
        users=users,
        gateway=FCMGateway(firebase_app, dry_run=config.dry_run),
        status_recorder=StatusRecorder(notifications),
        prune_queue=CeleryPruneQueue(celery_app, celery_config.prune_queue),
        message_builder=MessageBuilder(PayloadConfig()),
        config=config,
        guard=guard,
    )
    listener = NotificationListener(notifications, config.notification_type)

    # Graceful shutdown
    running = True

    def _shutdown(signum: int, _frame: object) -> None:
        nonlocal running
        sig_name = signal.Signals(signum).name
        logger.info("Received %s, shutting down...", sig_name)
        running = False

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)

    logger.info(
        "Push dispatcher started",
        extra={"dry_run": config.dry_run, "dedupe_enabled": config.dedupe_enabled},
    )

    try:
        while running:
            event = listener.poll(timeout=1.0)
            if event is None:
                continue
            dispatcher.dispatch(event.notification_id, event.data)
    finally:
        listener.close()
        celery_app.close()
        if redis_client is not None:
            redis_client.close()
        close_firebase_app(firebase_app)
        logger.info("Push dispatcher stopped")


if __name__ == "__main__":
    main()
