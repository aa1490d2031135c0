"""Redis claim that stops a redelivered event from being sent twice."""

import logging

from redis import Redis, RedisError

logger = logging.getLogger(__name__)


class DispatchGuard:
    """First-writer-wins claim per notification id.

    ``SET key 1 NX EX ttl`` succeeds for exactly one caller within the TTL,
    across any number of listener processes sharing the Redis instance.
    """

    KEY_PREFIX = "dispatch"

    def __init__(self, redis_client: Redis, ttl_seconds: int) -> None:
        self._redis = redis_client
        self._ttl = ttl_seconds

    def claim(self, notification_id: str) -> bool:
        """Return True if this caller should dispatch *notification_id*.

        The claim is granted when Redis is unavailable.
        """
        key = f"{self.KEY_PREFIX}:{notification_id}"
        try:
            return bool(self._redis.set(key, "1", nx=True, ex=self._ttl))
        except RedisError:
            logger.warning(
                "Dispatch claim unavailable, proceeding",
                exc_info=True,
                extra={"notification_id": notification_id},
            )
            return True
