"""Celery application setup and worker initialization."""

import logging

from celery import Celery, signals
from kombu import Queue

from shared.config import FirebaseConfig
from shared.db.base import (
    close_firebase_app,
    create_firebase_app,
    create_firestore_client,
)
from shared.db.repositories import UserRepository

from push_dispatcher.config import CeleryConfig, DispatcherConfig
from push_dispatcher.log import setup_logging
from push_dispatcher.pruning import TokenPruner

logger = logging.getLogger(__name__)

celery_config = CeleryConfig()

app = Celery("push_dispatcher", broker=celery_config.broker_url)

app.conf.update(
    task_acks_late=True,
    task_ignore_result=True,
    worker_prefetch_multiplier=1,
    task_queues=[Queue(celery_config.prune_queue)],
    task_default_queue=celery_config.prune_queue,
)

app.autodiscover_tasks(["push_dispatcher"])


@signals.worker_init.connect
def _init_worker(**_kwargs: object) -> None:
    """Configure logging in the main worker process."""
    dispatcher_config = DispatcherConfig()
    setup_logging(dispatcher_config.log_level, service="push_dispatcher.worker")


# gRPC channels do not survive fork, so clients are built in each pool child.
@signals.worker_process_init.connect
def _init_worker_process(**_kwargs: object) -> None:
    """Initialize Firebase resources once per pool process."""
    firebase_config = FirebaseConfig()
    firebase_app = create_firebase_app(firebase_config)
    client = create_firestore_client(firebase_app)
    users = UserRepository(client, firebase_config.users_collection)

    app.conf.update(
        _firebase_app=firebase_app,
        _token_pruner=TokenPruner(users),
    )
    logger.info("Worker process initialized")


@signals.worker_process_shutdown.connect
def _shutdown_worker_process(**_kwargs: object) -> None:
    """Release Firebase resources when a pool process exits."""
    firebase_app = getattr(app.conf, "_firebase_app", None)
    if firebase_app is not None:
        close_firebase_app(firebase_app)
    logger.info("Worker process shut down")
