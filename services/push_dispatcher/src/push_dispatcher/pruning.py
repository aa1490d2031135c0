"""Removal of dead device tokens from user documents."""

import logging
from dataclasses import dataclass

from celery import Celery

from shared.db.models import truncate_token
from shared.db.repositories import UserRepository

logger = logging.getLogger(__name__)

PRUNE_TASK_NAME = "push_dispatcher.tasks.prune_device_token"


@dataclass(frozen=True, slots=True)
class PruneResult:
    """Outcome of a single token removal."""

    success: bool
    error: str | None = None


class TokenPruner:
    """Removes one token from a user's ``deviceTokens``."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def prune(self, user_id: str, token: str) -> PruneResult:
        """Remove *token*; failures are logged and returned, never raised."""
        log_ctx = {"user_id": user_id, "token": truncate_token(token)}
        try:
            self._repository.remove_device_token(user_id, token)
        except Exception as exc:
            logger.exception("Error removing invalid token", extra=log_ctx)
            return PruneResult(success=False, error=str(exc))
        logger.info("Removed invalid token", extra=log_ctx)
        return PruneResult(success=True)


class CeleryPruneQueue:
    """Hands token removals to Celery workers.

    The dispatcher does not wait for the removal; the worker acknowledges
    the task only after it ran, so a removal survives a worker crash.
    """

    def __init__(self, celery_app: Celery, queue: str = "maintenance") -> None:
        self._celery = celery_app
        self._queue = queue

    def enqueue(self, user_id: str, token: str) -> bool:
        """Schedule a removal. Returns False if the broker rejected it."""
        try:
            self._celery.send_task(
                PRUNE_TASK_NAME,
                kwargs={"user_id": user_id, "token": token},
                queue=self._queue,
            )
        except Exception:
            logger.exception(
                "Failed to enqueue token removal",
                extra={"user_id": user_id, "token": truncate_token(token)},
            )
            return False
        return True
